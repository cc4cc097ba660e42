#!/usr/bin/env python3

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from feeshare import FeeShareToken, load_config
from feeshare.core.calendar import SECONDS_PER_DAY


def _trader(n: int) -> str:
    return "0x" + f"{n:040x}"


def main() -> int:
    ap = argparse.ArgumentParser(description="Offline fee/reward engine demo")
    ap.add_argument("--config", type=Path, default=ROOT / "examples_config" / "token.yaml")
    ap.add_argument("--traders", type=int, default=8)
    ap.add_argument("--rounds", type=int, default=20)
    ap.add_argument("-v", "--verbose", action="store_true")
    args = ap.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)
    now = max(config.launch_time, config.vest_start_time or 0)
    token = FeeShareToken(config, now=now)
    pair = token.pair
    print(f"[demo] {config.name} ({config.symbol}) supply={token.ledger.total_supply}")

    traders = [_trader(i + 1) for i in range(args.traders)]
    for t in traders:
        token.transfer(config.initial_holder, t, 1_000_000, now=now)

    # Each trader adds liquidity: tokens to the pair, receipts back.
    for i, t in enumerate(traders):
        now += 60
        token.transfer(t, config.pair_address, 100_000, now=now)
        pair.mint(t, 10_000 * (i + 1))
    print(f"[demo] pair receipt supply={pair.total_supply()}")

    for r in range(args.rounds):
        now += SECONDS_PER_DAY
        seller = traders[r % len(traders)]
        result = token.transfer(seller, config.pair_address, 50_000, now=now)
        fees = result.fees
        print(
            f"[demo] day+{r + 1}: {seller[-4:]} sold 50000 fee={fees.total_fee if fees else 0} "
            f"net={fees.net_amount if fees else 0}"
        )
        # Occasional burn to the sink.
        if r % 5 == 4:
            token.transfer(seller, config.sink, 1_000, now=now)

    print("[demo] engine state:")
    for key, value in token.summary().items():
        print(f"  {key}: {value}")
    print("[demo] trader balances:")
    for t in traders:
        print(f"  {t[-4:]}: tokens={token.balance_of(t)} receipts={pair.balance_of(t)}")
    print("[demo] OK")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
