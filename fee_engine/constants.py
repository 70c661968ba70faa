"""Protocol constants for the fee engine.

Centralizes basis-point scales, router parameters and well-known addresses.
"""

# Basis points denominator (10000 bps = 100%)
BPS_DENOMINATOR = 10_000

# Router swap fee in basis points (20 = 0.2%)
# The fee-retained multiplier used in the constant product formula is
# BPS_DENOMINATOR - DEFAULT_ROUTER_FEE_BPS = 9980.
DEFAULT_ROUTER_FEE_BPS = 20

# Seconds added to the host timestamp to form router deadlines
DEADLINE_WINDOW = 20 * 60

# Shares permanently locked by a pair on its first mint
MINIMUM_LIQUIDITY = 1000

# Maximum uint256 value
UINT256_MAX = 2**256 - 1

# Holder of the locked minimum liquidity
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
