# src/nthprime/registry.py
from __future__ import annotations

from collections import OrderedDict
from importlib import import_module
from typing import TYPE_CHECKING

from nthprime.utility import UserInputError

if TYPE_CHECKING:
    from nthprime.sieves.base import Sieve

_STRATEGIES: OrderedDict[str, type[Sieve]] = OrderedDict()

# Modules whose @strategy classes make up the built-in set
_BUILTIN_MODULES = (
    "nthprime.sieves.plain",
    "nthprime.sieves.odds",
    "nthprime.sieves.wheel",
)


def strategy(name: str, description: str | None = None, *, takes_basis: bool = False):
    """
    Class decorator registering a Sieve subclass under `name`.
    """
    def wrapper(cls):
        cls.name = name
        cls.description = description or ""
        cls.takes_basis = takes_basis
        _STRATEGIES[name] = cls
        return cls
    return wrapper


def discover() -> OrderedDict[str, type[Sieve]]:
    """Built-in strategies in _BUILTIN_MODULES order, then any others by registration."""
    for mod in _BUILTIN_MODULES:
        import_module(mod)
    rank = {mod: i for i, mod in enumerate(_BUILTIN_MODULES)}
    ordered = sorted(_STRATEGIES.items(), key=lambda kv: rank.get(kv[1].__module__, len(rank)))
    return OrderedDict(ordered)


def get_strategy(name: str) -> type[Sieve]:
    known = discover()
    key = (name or "").strip().lower()
    if key not in known:
        raise UserInputError(
            f"Unknown sieve strategy '{name}'. Available: {', '.join(known)}"
        )
    return known[key]


def make_sieve(name: str, *, max_rank: int | None = None, basis=None) -> Sieve:
    cls = get_strategy(name)
    if basis is None:
        return cls(max_rank=max_rank)
    if not cls.takes_basis:
        raise UserInputError(f"Strategy '{cls.name}' does not take a wheel basis.")
    return cls(basis=basis, max_rank=max_rank)
