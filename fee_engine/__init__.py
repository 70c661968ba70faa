"""Protocol-fee processing engine for constant product AMM exchanges."""

__version__ = "0.1.0"

from fee_engine.engine import FeeEngine  # noqa: E402
from fee_engine.fees.config import SplitConfig  # noqa: E402
from fee_engine.fees.result import CycleReport, ShortfallMode  # noqa: E402

__all__ = ["FeeEngine", "SplitConfig", "CycleReport", "ShortfallMode", "__version__"]
