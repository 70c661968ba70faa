"""Address and amount types shared by the engine and its API models.

Addresses are compared in one canonical form (lowercase, 0x-prefixed)
everywhere: registry keys, ledger holders, admin checks. Amounts travel
over HTTP as uint256 decimal strings.
"""

import re
from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from fee_engine.constants import UINT256_MAX

ADDRESS_PATTERN = r"^0x[a-fA-F0-9]{40}$"
_ADDRESS_RE = re.compile(ADDRESS_PATTERN)


def validate_uint256(value: Any) -> str:
    """Coerce an int or decimal string into a canonical uint256 string.

    Raises:
        ValueError: If value is a bool, not an integer, negative or above 2^256-1
    """
    if isinstance(value, bool) or not isinstance(value, int | str):
        raise ValueError(f"Uint256 must be string or int, got {type(value).__name__}")
    try:
        amount = int(value)
    except ValueError as err:
        raise ValueError(f"Uint256 must be a decimal integer string: '{value}'") from err

    if not 0 <= amount <= UINT256_MAX:
        raise ValueError(f"Uint256 out of range [0, 2^256-1]: {value}")
    return str(amount)


# Ethereum address (40 hex chars after 0x prefix)
Address = Annotated[str, Field(pattern=ADDRESS_PATTERN)]

# Token or share amount as a decimal string
Uint256 = Annotated[
    str,
    BeforeValidator(validate_uint256),
    Field(description="256-bit unsigned integer as decimal string"),
]


def is_valid_address(address: object) -> bool:
    """True for a 0x-prefixed, 40-hex-digit string (any case)."""
    return isinstance(address, str) and _ADDRESS_RE.match(address) is not None


def normalize_address(address: str, *, validate: bool = False) -> str:
    """Lowercase an address and make sure it carries the 0x prefix.

    Args:
        address: Address with or without 0x prefix
        validate: Also check the result is a well-formed address

    Raises:
        ValueError: If validate=True and the address is malformed
    """
    addr = address.lower()
    if not addr.startswith("0x"):
        addr = "0x" + addr
    if validate and not is_valid_address(addr):
        raise ValueError(f"Invalid address: {address}")
    return addr


def checked_address(role: str, address: str) -> str:
    """Normalize an address that fills a named role (admin, recipient, ...).

    Raises:
        ValueError: If the address is malformed; the message names the role
    """
    if not is_valid_address(address):
        raise ValueError(f"Invalid {role} address: {address}")
    return address.lower()
