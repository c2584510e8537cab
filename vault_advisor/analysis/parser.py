"""
Vault data parser.

PURPOSE: Turn raw DeFindex vault records (a managed-funds JSON blob and a total
         supply per vault) into ParsedVaultData in human units.
CONTEXT: First stage of the analysis chain; its output keeps the same length and
         order as its input so later stages can line vaults up by position.
"""

from __future__ import annotations

import json
from typing import Any, Iterable, List, Mapping

import structlog

from vault_advisor.constants.risk_tiers import STROOPS_PER_UNIT
from vault_advisor.model_interface.types import ParsedVaultData, StrategyAllocation

log = structlog.get_logger(__name__)


def stroops_to_units(value: Any) -> float:
    """
    Convert an integer amount in stroops (int or digit string) to human units.

    raises:
    - ValueError / TypeError – if the value is not an integer amount.
    - OverflowError – if the amount does not fit in a float.
    """
    if isinstance(value, bool):
        raise TypeError("boolean is not an amount")
    return int(value) / STROOPS_PER_UNIT


def _parse_record(record: Mapping[str, Any]) -> ParsedVaultData:
    funds = json.loads(record["totalManagedFundsBefore"])
    allocations = tuple(
        StrategyAllocation(
            amount=stroops_to_units(a["amount"]),
            paused=bool(a.get("paused", False)),
            strategy_address=str(a.get("strategy_address", "")),
        )
        for a in funds["strategy_allocations"]
    )
    return ParsedVaultData(
        vault_address=record["vault"],
        asset=str(funds["asset"]),
        total_amount=stroops_to_units(funds["total_amount"]),
        idle_amount=stroops_to_units(funds["idle_amount"]),
        invested_amount=stroops_to_units(funds["invested_amount"]),
        total_supply=stroops_to_units(record["totalSupplyBefore"]),
        strategy_allocations=allocations,
    )


def parse_vault_data(records: Iterable[Mapping[str, Any]]) -> List[ParsedVaultData]:
    """
    Parse every raw record, one output per input in the same order.

    parameters:
    - records: iterable of RawVaultRecord-shaped mappings.

    returns:
    - list[ParsedVaultData] – a record that cannot be parsed for any reason comes
      back as ParsedVaultData.degraded(address): zeroed amounts, no allocations,
      status "degraded". The error is logged, never raised.
    """
    parsed: List[ParsedVaultData] = []
    for record in records:
        try:
            parsed.append(_parse_record(record))
        except Exception as e:
            address = record.get("vault", "") if isinstance(record, Mapping) else ""
            log.warning("vault.parse_failed", vault=address, error=f"{type(e).__name__}: {e}")
            parsed.append(ParsedVaultData.degraded(str(address)))
    return parsed
