from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

# Version
try:
    __version__ = _pkg_version("nthprime")
except PackageNotFoundError:
    __version__ = "0+unknown"

# Public API re-exports
from .bounds import upper_bound
from .config import has_profile, load_settings, read_current_profile
from .engine import NthPrimeEngine, nth_prime
from .registry import discover, make_sieve
from .runtime import APPLY, CFG
from .sieves import OddsOnlySieve, PlainSieve, Wheel, WheelSieve
from .utility import (
    MAX_RANK,
    BasisError,
    BoundOverflowError,
    RankError,
    SieveConsistencyError,
    UserInputError,
)
from .workspace import workspace_dir

__all__ = [
    "APPLY",
    "CFG",
    "MAX_RANK",
    "BasisError",
    "BoundOverflowError",
    "NthPrimeEngine",
    "OddsOnlySieve",
    "PlainSieve",
    "RankError",
    "SieveConsistencyError",
    "UserInputError",
    "Wheel",
    "WheelSieve",
    "__version__",
    "discover",
    "has_profile",
    "load_settings",
    "make_sieve",
    "nth_prime",
    "read_current_profile",
    "upper_bound",
    "workspace_dir",
]
