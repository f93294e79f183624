# src/nthprime/cli.py

"""
nthprime - the n-th prime number from a growable sieve

Description:
    Prints the prime of 0-based rank n (n=0 gives 2) for every rank given on
    the command line, or starts an interactive prompt when none is given.
    The sieve strategy (plain, odds, wheel) comes from --strategy, the active
    profile, or defaults to the wheel.

usage: see nthprime -h
"""

from __future__ import annotations

import argparse
import faulthandler
import sys
import textwrap
import time
import traceback
from importlib.resources import files as pkg_files
from typing import NamedTuple

import gmpy2
from colorama import Fore, Style
from colorama import init as colorama_init
from sympy import primepi

from nthprime import __version__ as _ver
from nthprime import config as CONFIG
from nthprime.bounds import slack
from nthprime.engine import NthPrimeEngine
from nthprime.registry import discover
from nthprime.runtime import APPLY, CFG, ensure_runtime_deps
from nthprime.runtime import current as _rt_current
from nthprime.utility import (
    UserInputError,
    flatten_dotted,
    parse_basis,
    parse_rank,
    typename,
)
from nthprime.workspace import ensure_workspace_seeded, seed_workspace, workspace_dir


# In memory session history
class HistoryItem(NamedTuple):
    n: int
    prime: int
    strategy: str
    timestamp: float


_HISTORY: list[HistoryItem] = []


def add_to_history(n: int, prime: int, strategy: str) -> None:
    _HISTORY.append(HistoryItem(n=n, prime=prime, strategy=strategy, timestamp=time.time()))


def get_history() -> list[HistoryItem]:
    return list(_HISTORY)


def _install_loud_error_handlers(debug: bool) -> None:
    if not debug:
        return
    faulthandler.enable()

    def _excepthook(exc_type, exc, tb):
        sys.stderr.write("\n[UNCAUGHT EXCEPTION]\n")
        traceback.print_exception(exc_type, exc, tb, file=sys.stderr)
        sys.stderr.flush()
    sys.excepthook = _excepthook


def _print_user_error(msg: str) -> None:
    """Uniform, one-line friendly error."""
    prefix = f"{Fore.RED}Error:{Style.RESET_ALL}"
    if not (msg.startswith("Invalid input:") or msg.startswith("Error:")):
        msg = f"{prefix} {msg}"
    print(msg, file=sys.stderr)


def verify(n: int, p: int) -> tuple[bool, str]:
    """Cross-check a result: p must be prime and exactly n primes must lie below it."""
    if not gmpy2.is_prime(p):
        return False, f"{p} is not prime"
    count = int(primepi(p))
    if count != n + 1:
        return False, f"pi({p}) = {count}, expected {n + 1}"
    return True, f"pi({p}) = {count}"


def _report(engine: NthPrimeEngine, n: int, *, check: bool) -> int:
    """Answer one rank; returns 0 on success, 1 if verification failed."""
    t0 = time.perf_counter()
    p = engine.nth_prime(n)
    dt_ms = (time.perf_counter() - t0) * 1000.0
    add_to_history(n, p, engine.strategy)

    line = f"{n} -> {Fore.GREEN}{Style.BRIGHT}{p}{Style.RESET_ALL}"
    if _rt_current().debug:
        line += f"  {Style.DIM}[{engine.strategy}, {dt_ms:.2f} ms, bound slack {slack(n + 1, p):.2%}]{Style.RESET_ALL}"
    if not check:
        print(line)
        return 0

    ok, detail = verify(n, p)
    tag = f"{Fore.GREEN}OK{Style.RESET_ALL}" if ok else f"{Fore.RED}{Style.BRIGHT}FAIL{Style.RESET_ALL}"
    print(f"{line}  {tag} {detail}")
    return 0 if ok else 1


def _show_strategies() -> None:
    for name, cls in discover().items():
        extra = " (takes --basis)" if cls.takes_basis else ""
        print(f"  {Fore.CYAN}{name:<6}{Style.RESET_ALL} {cls.description}{extra}")


def _print_profiles_with_descriptions() -> None:
    for name, desc in CONFIG.list_profiles_with_descriptions():
        print(f"  {Fore.CYAN}{name:<12}{Style.RESET_ALL} {desc}")


def _select_profile_name(explicit: str | None) -> str:
    """
    Precedence:
      1) explicit --profile
      2) last used (from workspace)
      3) 'default'
    """
    if explicit:
        return explicit
    last = CONFIG.read_current_profile()
    if last and CONFIG.has_profile(last):
        return last
    return "default"


def _apply_profile(name: str, *, debug: bool) -> None:
    selected = CONFIG.load_settings(name)
    APPLY(selected)

    if debug:
        _rt_current().debug = True
        print(f"[debug] active profile: {selected.name}", file=sys.stderr)
        if selected._source:
            print(f"[debug] profile file: {selected._source}", file=sys.stderr)
        flat = flatten_dotted(_rt_current().settings)
        for k in sorted(flat.keys(), key=str.lower):
            v = CFG(k, None)
            print(f"        {k:.<40} {v!r} ({typename(v)})", file=sys.stderr)
        print(file=sys.stderr)


# ---- argparse ----
def _build_parser() -> argparse.ArgumentParser:

    epilog = textwrap.dedent("""\
    commands:
      init       Create the workspace and copy packaged profiles if missing.
      list       List the available sieve strategies.
      profiles   List the profiles in the workspace.
      where      Show the workspace and package paths.

    examples:
      nthprime 0 19 1_000_000
      nthprime --strategy odds --verify 2000
      nthprime --basis 2,3,5,7 10000000
    """)

    p = argparse.ArgumentParser(
        prog="nthprime",
        description="The n-th prime (0-based: 0 -> 2) from an incrementally growing sieve",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=epilog,
    )
    p.add_argument("items", nargs="*", metavar="rank|command",
                   help="0-based ranks to look up, or a command")
    p.add_argument("--strategy", default=None, help="plain, odds or wheel (default: from profile, else wheel)")
    p.add_argument("--basis", default=None, help="wheel basis, e.g. 2,3,5,7 (wheel strategy only)")
    p.add_argument("--profile", default=None, help="profile name from the workspace")
    p.add_argument("--preload", type=int, default=None, metavar="MAX_RANK",
                   help="populate the sieve up front for ranks up to MAX_RANK")
    p.add_argument("--verify", action="store_true", help="cross-check every result with gmpy2 and sympy")
    p.add_argument("--debug", action="store_true", help="Show sieve regenerations, timings and tracebacks")

    return p


def main(argv=None) -> int:
    """Thin wrapper: catch friendly errors, hide tracebacks unless debug."""
    try:
        return _main_impl(argv)
    except UserInputError as e:
        _print_user_error(str(e))
        return 2
    except KeyboardInterrupt:
        print("Aborted by user.", file=sys.stderr)
        return 130
    except Exception as e:
        debug = "--debug" in (argv if argv is not None else sys.argv)
        if debug:
            raise
        print(f"Unexpected error: {e.__class__.__name__}: {e}", file=sys.stderr)
        print("Run with --debug for a full traceback.", file=sys.stderr)
        return 1


# ---- main ----
def _main_impl(argv=None) -> int:

    colorama_init(autoreset=True)

    parser = _build_parser()
    args = parser.parse_args(argv)
    rt = _rt_current()
    rt.debug = bool(args.debug)

    _install_loud_error_handlers(args.debug)

    if not ensure_runtime_deps(strict=True):
        return 1

    command = args.items[0].lower() if args.items else None

    if command == "init":
        ws, copied = seed_workspace(overwrite=False)
        print(f"Workspace ready at: {ws}")
        print(f"Copied -> profiles: {copied.get('profiles', 0)}")
        return 0
    if command == "list":
        _show_strategies()
        return 0
    if command == "where":
        print(f"Workspace: {workspace_dir()}")
        print(f"Package:   {pkg_files('nthprime')}")
        return 0

    ensure_workspace_seeded()

    if command == "profiles":
        _print_profiles_with_descriptions()
        return 0

    profile_name = _select_profile_name(args.profile)
    if args.profile and not CONFIG.has_profile(args.profile):
        raise UserInputError(
            f"Unknown profile: '{args.profile}'. Available: {', '.join(CONFIG.list_all_profiles())}"
        )
    if CONFIG.has_profile(profile_name):
        _apply_profile(profile_name, debug=args.debug)
        if args.profile:
            CONFIG.write_current_profile(args.profile)

    basis = parse_basis(args.basis) if args.basis else None
    engine = NthPrimeEngine(args.strategy, max_rank=args.preload, basis=basis)

    # --- one-shot ranks ---
    if args.items:
        ranks = [parse_rank(s) for s in args.items]
        failures = 0
        for n in ranks:
            failures += _report(engine, n, check=args.verify)
        return 1 if failures else 0

    # --- REPL ---
    print(f"{Fore.YELLOW}{Style.BRIGHT}nthprime v{_ver} — strategy: {engine.strategy}{Style.RESET_ALL}")
    while True:
        try:
            user_input = input("\nEnter a rank (hist=History, q=Quit): ").strip()
            low = user_input.lower()
            if low in {"", "q", "quit"}:
                break

            if low in {"hist", "history"}:
                hist = get_history()
                if not hist:
                    print("History is empty.")
                for item in hist:
                    ts = time.strftime("%H:%M:%S", time.localtime(item.timestamp))
                    print(f"{ts}  n={item.n:<15}  p={item.prime:<15}  {item.strategy}")
                continue

            if low.startswith("debug"):
                parts = low.split()
                if len(parts) == 1 or parts[1] == "status":
                    print(f"Debug is currently {'ON' if rt.debug else 'OFF'}.")
                elif parts[1] in {"on", "off"}:
                    rt.debug = parts[1] == "on"
                    print(f"Debug mode {'enabled' if rt.debug else 'disabled'} for this session.")
                else:
                    print("Usage: DEBUG [on|off|status]")
                continue

            _report(engine, parse_rank(user_input), check=args.verify)

        except UserInputError as e:
            _print_user_error(str(e))
        except (EOFError, KeyboardInterrupt):
            print()
            break

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
