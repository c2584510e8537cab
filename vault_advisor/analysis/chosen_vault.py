"""
Shape a selected vault for the browser.

PURPOSE: Build the ChosenVault summary (allocation percentages, idle share,
         assumed APY, risk label) straight from a vault's raw record so amounts
         stay in exact base units.
"""

from __future__ import annotations

import json
from typing import Any, Mapping, Optional, Sequence

from vault_advisor.model_interface.types import ChosenVault


def find_raw_record(records: Sequence[Mapping[str, Any]], vault_address: str) -> Optional[Mapping[str, Any]]:
    for record in records:
        if record.get("vault") == vault_address:
            return record
    return None


def normalize_vault(
    record: Mapping[str, Any],
    risk_level: str,
    assumed_apy: float,
    rationale: str,
    network: str,
) -> ChosenVault:
    """
    parameters:
    - record: RawVaultRecord – the untouched record for the chosen vault.
    - risk_level / assumed_apy / rationale – from the recommendation or fallback.
    - network: "testnet" | "mainnet".

    returns:
    - ChosenVault – percentages are of total_amount; 0 when the vault is empty.

    raises:
    - ValueError / KeyError – if the managed-funds blob is malformed. A vault only
      reaches this point after parsing cleanly, so this indicates a bug upstream.
    """
    funds = json.loads(record["totalManagedFundsBefore"])
    total = float(funds["total_amount"])
    idle = float(funds["idle_amount"])

    allocations = [
        {
            "strategyId": a["strategy_address"],
            "amount": str(a["amount"]),
            "percent": (float(a["amount"]) / total) * 100 if total > 0 else 0.0,
        }
        for a in funds["strategy_allocations"]
    ]

    return {
        "vaultId": record["vault"],
        "network": network,
        "assetId": funds["asset"],
        "tvl": str(funds["total_amount"]),
        "allocations": allocations,
        "idleAmount": str(funds["idle_amount"]),
        "idlePercent": (idle / total) * 100 if total > 0 else 0.0,
        "totalSupply": str(record["totalSupplyBefore"]),
        "assumedApy": assumed_apy,
        "riskLabel": risk_level,
        "rationale": rationale,
    }
