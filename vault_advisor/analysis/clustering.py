# PURPOSE: Bucket vaults into the three fixed risk tiers by a weighted risk score.
# CONTEXT: A threshold split on a hand-weighted linear score, not a statistical
#          clustering algorithm. Higher TVL, lower idle ratio, lower concentration
#          and stable assets all push a vault towards Conservative.

from __future__ import annotations
from typing import Dict, List, Sequence

from vault_advisor.constants.risk_tiers import (
    BALANCED_MAX_SCORE,
    CONSERVATIVE_MAX_SCORE,
    RISK_TIERS,
)
from vault_advisor.model_interface.types import RiskLevel, VaultCluster, VaultFeatures

RISK_WEIGHTS = {
    "tvl": 0.3,
    "idle": 0.2,
    "concentration": 0.3,
    "asset": 0.2,
}


def calculate_risk_score(feature: VaultFeatures) -> float:
    """Risk score in [0, 1]; 0 is the lowest risk."""
    return (
        (1 - feature.tvl) * RISK_WEIGHTS["tvl"]
        + feature.idle_ratio * RISK_WEIGHTS["idle"]
        + feature.concentration * RISK_WEIGHTS["concentration"]
        + (1 - feature.asset_stability) * RISK_WEIGHTS["asset"]
    )


def risk_level_for_score(score: float) -> RiskLevel:
    if score <= CONSERVATIVE_MAX_SCORE:
        return "Conservative"
    if score <= BALANCED_MAX_SCORE:
        return "Balanced"
    return "Aggressive"


def cluster_vaults(features: Sequence[VaultFeatures]) -> List[VaultCluster]:
    """
    Assign every vault with non-zero normalised TVL to exactly one tier.

    returns:
    - list[VaultCluster] – always [Conservative, Balanced, Aggressive], each with its
      static description and expected APY; vaults keep their input order per tier.
    """
    members: Dict[str, List[str]] = {level: [] for level in RISK_TIERS}
    for feature in features:
        if feature.tvl == 0:
            continue
        members[risk_level_for_score(calculate_risk_score(feature))].append(feature.vault_address)

    return [
        VaultCluster(
            id=tier["id"],
            name=level,
            risk_level=level,
            description=tier["description"],
            expected_apy=tier["expected_apy"],
            vault_addresses=tuple(members[level]),
        )
        for level, tier in RISK_TIERS.items()
    ]
