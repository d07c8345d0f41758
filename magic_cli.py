#!/usr/bin/env python
"""
Console front end for the random magic-square search.
"""

from __future__ import annotations

import argparse
import logging
import queue
import sys
from typing import Optional

import numpy as np
import pandas as pd

from logging_config import setup_logging
from magic_background import BackgroundSearch, SearchInProgressError
from magic_benchmark import benchmark, plot_attempts, save_csv, summarize
from magic_search import (InvalidOrderError, SearchConfig, SearchLimitReached,
                          SearchResult, canonical_constant, search,
                          validate_order)

logger = logging.getLogger(__name__)


# --------------------------------------------------------------------------- #
#  Output
# --------------------------------------------------------------------------- #
def format_result(res: SearchResult) -> str:
    board = np.array2string(np.asarray(res.grid),
                            max_line_width=200)
    return (f"=== MAGIC SQUARE FOUND ===\n{board}\n"
            f"Magic constant: {res.constant} | Attempts: {res.attempts}")


# --------------------------------------------------------------------------- #
#  CLI
# --------------------------------------------------------------------------- #
def _order_arg(raw: str) -> int:
    try:
        return validate_order(raw)
    except InvalidOrderError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None


def _orders_arg(raw: str) -> list[int]:
    return [_order_arg(x) for x in raw.replace(" ", "").split(",") if x]


def _count_arg(minimum: int):
    def parse(raw: str) -> int:
        try:
            val = int(raw)
        except ValueError:
            raise argparse.ArgumentTypeError(f"invalid integer: {raw!r}") from None
        if val < minimum:
            raise argparse.ArgumentTypeError(f"must be ≥ {minimum}, got {val}")
        return val
    return parse


def hopeless_warning(n: int, max_attempts: int | None) -> Optional[str]:
    """Warning text for an uncapped search that will effectively never end."""
    if n > 4 and max_attempts is None:
        return (f"⚠  N={n} has no practical chance of finishing "
                "without --max-attempts.")
    return None


def parse_args(argv: Optional[list[str]] = None) -> SearchConfig:
    p = argparse.ArgumentParser(description="Random-search magic-square finder")
    p.add_argument("--n", type=_order_arg, default=3, help="square size (≥3)")
    p.add_argument("--max-attempts", type=_count_arg(0), default=None,
                   help="give up after this many candidates (default: never)")
    p.add_argument("--seed", type=int, default=None, help="seed for the shuffle")
    p.add_argument("--bench", type=_orders_arg, default=[],
                   help="benchmark a list of orders, e.g. 3,4")
    p.add_argument("--runs", type=_count_arg(1), default=5, help="runs per benchmarked order")
    p.add_argument("--csv", dest="csv_path", default=None,
                   help="write benchmark rows to this CSV file")
    p.add_argument("--plot", action="store_true",
                   help="show a histogram of benchmark attempts")
    p.add_argument("--menu", action="store_true", help="open the text menu")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    p.add_argument("--log-file", default=None, help="also log to this file")
    args = p.parse_args(argv)
    return SearchConfig(order=args.n,
                        max_attempts=args.max_attempts,
                        seed=args.seed,
                        runs=args.runs,
                        bench=args.bench,
                        plot=args.plot,
                        csv_path=args.csv_path,
                        menu=args.menu,
                        verbose=args.verbose,
                        log_file=args.log_file)


def run_benchmark(cfg: SearchConfig) -> None:
    df = benchmark(cfg.bench, runs=cfg.runs,
                   max_attempts=cfg.max_attempts, seed=cfg.seed)
    print(summarize(df).to_string(index=False, formatters={
        "SuccessRate": lambda x: f"{x:.0f}%",
        "AvgAttempts": lambda x: f"{x:.1f}",
        "StdAttempts": lambda x: f"{x:.1f}",
        "AvgTime": lambda x: f"{x:.3f}s" if pd.notna(x) else "–",
    }))
    if cfg.csv_path:
        save_csv(df, cfg.csv_path)
        print(f"\nResults saved to '{cfg.csv_path}'")
    if cfg.plot:
        plot_attempts(df)


def main(argv: Optional[list[str]] = None) -> int:
    cfg = parse_args(argv)
    setup_logging(logging.DEBUG if cfg.verbose else logging.WARNING, cfg.log_file)

    if cfg.menu:
        interactive_menu(cfg)
        return 0
    if cfg.bench:
        run_benchmark(cfg)
        return 0

    warning = hopeless_warning(cfg.order, cfg.max_attempts)
    if warning:
        print(warning)
    try:
        res = search(cfg.order, cfg.make_rng(), max_attempts=cfg.max_attempts,
                     on_progress=lambda k: logger.debug("%d candidates tried", k))
    except SearchLimitReached as exc:
        print(f"❌  {exc}")
        return 1
    print(format_result(res))
    if res.constant != canonical_constant(res.order):
        logger.error("Constant %d differs from n(n²+1)/2 = %d",
                     res.constant, canonical_constant(res.order))
    return 0


# --------------------------------------------------------------------------- #
#  Simple text-menu front-end
# --------------------------------------------------------------------------- #
def interactive_menu(cfg: SearchConfig, inbox: Optional[queue.Queue] = None) -> None:
    """
    Console menu; searches run on a worker thread and report back through
    ``inbox``, which the menu drains before each prompt.
    """
    if inbox is None:
        inbox = queue.Queue()
    runner = BackgroundSearch(rng=cfg.make_rng(), max_attempts=cfg.max_attempts)

    def drain() -> None:
        while True:
            try:
                kind, payload = inbox.get_nowait()
            except queue.Empty:
                return
            if kind == "done":
                print("\n" + format_result(payload))
            else:
                print(f"\n❌  {payload}")

    try:
        while True:
            drain()
            print("\n╔════════════════════════════════════════╗")
            print("║  MAGIC-SQUARE  RANDOM SEARCH           ║")
            print("╠════════════════════════════════════════╣")
            print("║ 1) Search for a square                 ║")
            print("║ 2) Status                              ║")
            print("║ 3) Exit                                ║")
            print("╚════════════════════════════════════════╝")
            choice = input("Select option → ").strip()

            if choice == "1":
                try:
                    n = validate_order(input(" Square order N (≥3) : "))
                    warning = hopeless_warning(n, cfg.max_attempts)
                    if warning:
                        # Exit waits for the running search, so this may never return
                        print(warning)
                        if input(" Start anyway? y/[n] : ").strip().lower() not in ("y", "yes"):
                            continue
                    runner.start(n,
                                 on_done=lambda r: inbox.put(("done", r)),
                                 on_error=lambda e: inbox.put(("error", e)))
                except InvalidOrderError as exc:
                    print(f"❌  {exc}")
                    continue
                except SearchInProgressError as exc:
                    print(f"⏳  {exc}")
                    continue
                print("Searching... (this may take a while)")
            elif choice == "2":
                print("Searching..." if runner.busy else "Ready to search.")
            elif choice == "3":
                print("👋  Goodbye!")
                break
            else:
                print("❓  Unknown option – please try again.")
    finally:
        # Searches cannot be cancelled; wait for the last one.
        runner.shutdown(wait=True)
        drain()


if __name__ == "__main__":
    sys.exit(main())
