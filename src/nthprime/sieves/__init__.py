from nthprime.sieves.base import PrimeCache, Sieve
from nthprime.sieves.plain import PlainSieve, flag_composites
from nthprime.sieves.odds import OddsOnlySieve, flag_odd_composites
from nthprime.sieves.wheel import DEFAULT_BASIS, Wheel, WheelSieve, validate_basis

__all__ = [
    "DEFAULT_BASIS",
    "OddsOnlySieve",
    "PlainSieve",
    "PrimeCache",
    "Sieve",
    "Wheel",
    "WheelSieve",
    "flag_composites",
    "flag_odd_composites",
    "validate_basis",
]
