"""Error classes for the fee engine.

Every failure the engine surfaces derives from FeeEngineError. All of them
are hard failures that void the enclosing processing cycle; a per-pool
threshold shortfall is not an error and never appears here (see
fee_engine.fees.result.Skipped).
"""


class FeeEngineError(Exception):
    """Base error for fee engine operations."""

    pass


class Unauthorized(FeeEngineError):
    """Caller is not the engine administrator."""

    pass


class DuplicatePool(FeeEngineError):
    """Pool is already registered."""

    pass


class UnknownPool(FeeEngineError):
    """Pool address is not registered."""

    pass


class IndexOutOfRange(FeeEngineError, IndexError):
    """Registry index outside [0, count)."""

    pass


class InvalidPool(FeeEngineError):
    """Pool cannot be processed (it does not hold the target asset)."""

    pass


class InvalidInput(FeeEngineError, ValueError):
    """Parameter outside the range a calculation accepts."""

    pass


class InvalidAmount(FeeEngineError):
    """Processing cycle burned nothing; the whole cycle is void."""

    pass


class ThresholdShortfall(InvalidAmount):
    """A pool fell short of the target threshold in strict mode."""

    def __init__(self, pool: str, target_floor: int, threshold: int) -> None:
        super().__init__(
            f"Pool {pool} target floor {target_floor} is below threshold {threshold}"
        )
        self.pool = pool
        self.target_floor = target_floor
        self.threshold = threshold


class ExternalCallFailure(FeeEngineError):
    """A router, pool or ledger call reverted."""

    pass


class ReentrantCall(FeeEngineError):
    """A cycle, or a pool within a cycle, was entered twice."""

    pass


class SafeIntError(FeeEngineError, ArithmeticError):
    """Base class for SafeInt arithmetic errors."""

    pass


class DivisionByZero(SafeIntError):
    """Division or modulo by zero."""

    pass


class Underflow(SafeIntError):
    """Subtraction would produce negative result."""

    pass


class ArithmeticOverflow(SafeIntError):
    """Intermediate value exceeds the uint256 domain."""

    pass
