"""
Feature extraction for vault risk analysis.

PURPOSE: Derive one VaultFeatures per parsed vault: batch-normalised TVL and share
         supply, idle ratio, Herfindahl concentration of strategy allocations and
         a stable-asset flag.
CONTEXT: Normalisation is relative to the whole list passed in one call, so the
         same vault can score differently in a different batch. Always feed the
         parser output for one universe straight through this function.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

import numpy as np

from vault_advisor.constants.risk_tiers import STABLE_ASSETS
from vault_advisor.model_interface.types import ParsedVaultData, VaultFeatures


def _positive_range(values: np.ndarray) -> Tuple[float, float]:
    """Min and max over strictly positive values; (0, 0) when there are none."""
    positive = values[values > 0]
    if positive.size == 0:
        return 0.0, 0.0
    return float(positive.min()), float(positive.max())


def min_max_normalize(values: Sequence[float]) -> List[float]:
    """
    Min-max scale values against the range of their positive members.

    returns:
    - list[float] – in [0, 1]; all zeros when the range is degenerate (max == min,
      a single vault, or no positive values). Values under the positive minimum
      (i.e. empty vaults) clamp to 0.
    """
    arr = np.asarray(values, dtype=float)
    lo, hi = _positive_range(arr)
    if not hi > lo:
        return [0.0] * arr.size
    scaled = np.clip((arr - lo) / (hi - lo), 0.0, 1.0)
    return [float(x) for x in scaled]


def herfindahl_index(amounts: Sequence[float]) -> float:
    """Sum of squared shares of the total; 0 when nothing is allocated."""
    arr = np.asarray(amounts, dtype=float)
    total = float(arr.sum()) if arr.size else 0.0
    if total <= 0:
        return 0.0
    shares = arr / total
    return float(np.sum(shares * shares))


def idle_ratio(vault: ParsedVaultData) -> float:
    return vault.idle_amount / vault.total_amount if vault.total_amount > 0 else 0.0


def extract_vault_features(vaults: Sequence[ParsedVaultData]) -> List[VaultFeatures]:
    """
    Compute features for a batch of parsed vaults, order preserving.

    parameters:
    - vaults: list[ParsedVaultData] – the full universe for this request.

    returns:
    - list[VaultFeatures] – one per input. growth_rate is always 0 since no
      historical series is available.
    """
    tvl = min_max_normalize([v.total_amount for v in vaults])
    supply = min_max_normalize([v.total_supply for v in vaults])

    features: List[VaultFeatures] = []
    for i, vault in enumerate(vaults):
        features.append(
            VaultFeatures(
                vault_address=vault.vault_address,
                asset=vault.asset,
                tvl=tvl[i],
                idle_ratio=idle_ratio(vault),
                concentration=herfindahl_index([a.amount for a in vault.strategy_allocations]),
                asset_stability=1.0 if vault.asset in STABLE_ASSETS else 0.0,
                growth_rate=0.0,
                shares_outstanding=supply[i],
            )
        )
    return features
