#!/usr/bin/env python3
# PURPOSE: Command-line interface to the vault advisor pipeline.
# CONTEXT: Lets you try recommendations and projections locally without the API.
# Run: python scripts/recommend_cli.py 100 --risk Balanced --horizon 12 --network mainnet

import argparse
import json
import sys

from vault_advisor.errors import VaultAdvisorError
from vault_advisor.logging_setup import configure_logging
from vault_advisor.pipeline import run_recommend_and_project
from vault_advisor.utils.units import to_base_units


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Recommend a DeFindex vault and project a deposit.")
    p.add_argument("amount", type=float, help="Deposit in human units, e.g. 100 for 100 USDC")
    p.add_argument("--risk", default="Balanced", choices=["Conservative", "Balanced", "Aggressive"])
    p.add_argument("--horizon", type=int, default=12, choices=[6, 12, 18, 24], help="Months")
    p.add_argument("--network", default="mainnet", choices=["testnet", "mainnet"])
    p.add_argument("--liquidity", choices=["Low", "Medium", "High"])
    p.add_argument("--experience", choices=["Beginner", "Intermediate", "Advanced"])
    return p


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()

    # Same payload shape the browser posts to /api/defindex/recommend-and-project.
    payload = {
        "amountBase": to_base_units(args.amount),
        "risk": args.risk,
        "horizonMonths": args.horizon,
        "network": args.network,
    }
    if args.liquidity:
        payload["liquidityNeeds"] = args.liquidity
    if args.experience:
        payload["experienceLevel"] = args.experience

    try:
        out = run_recommend_and_project(payload)
    except VaultAdvisorError as e:
        print(json.dumps(e.to_body(), indent=2))
        return 1

    print(json.dumps(out, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
