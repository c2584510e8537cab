# PURPOSE: Rule-based vault recommender that ranks the vaults of one risk tier
#          against a user's liquidity, horizon and experience profile.
# CONTEXT: Default VaultModel returned by model_interface.loader.load_model().

from __future__ import annotations
from typing import Dict, List, Optional, Sequence

import structlog

from vault_advisor.model_interface.vault_model import VaultModel
from vault_advisor.model_interface.types import (
    UserRiskProfile,
    VaultCluster,
    VaultFeatures,
    VaultRecommendation,
)

log = structlog.get_logger(__name__)

BASE_SCORE = 0.5
LONG_HORIZON_MONTHS = 24
SHORT_HORIZON_MONTHS = 6
DEFAULT_REASON = "balanced risk-return profile"


def _clamp(x: float, lo: float, hi: float) -> float:
    """Clamp x to the [lo, hi] interval."""
    return min(hi, max(lo, x))


def _find_cluster(clusters: Sequence[VaultCluster], risk_level: str) -> Optional[VaultCluster]:
    for cluster in clusters:
        if cluster.risk_level == risk_level:
            return cluster
    return None


def match_score(feature: VaultFeatures, profile: UserRiskProfile) -> float:
    """
    Score how well a vault fits the profile.

    parameters:
    - feature: VaultFeatures – normalised features of the vault
    - profile: UserRiskProfile – tolerance, liquidity, horizon (months), experience

    returns:
    - float – 0.5 plus additive adjustments, clamped to [0, 1]
    """
    score = BASE_SCORE

    experience = profile.get("experience_level")
    if experience == "Beginner":
        # Beginners lean on stable assets, deep vaults and diversified strategies.
        score += feature.asset_stability * 0.2
        score += feature.tvl * 0.2
        score -= feature.concentration * 0.1
    elif experience == "Advanced":
        score += feature.concentration * 0.1

    if profile.get("liquidity_needs") == "High":
        score -= feature.idle_ratio * 0.15

    horizon = int(profile.get("time_horizon") or 0)
    if horizon >= LONG_HORIZON_MONTHS:
        score += (1 - feature.asset_stability) * 0.1
    elif horizon <= SHORT_HORIZON_MONTHS:
        score += feature.asset_stability * 0.15

    return _clamp(score, 0.0, 1.0)


def build_rationale(feature: VaultFeatures, profile: UserRiskProfile) -> str:
    reasons = []
    if feature.asset_stability > 0.5:
        reasons.append("stable asset base")
    if feature.tvl > 0.7:
        reasons.append("strong TVL indicating community trust")
    if feature.concentration < 0.5:
        reasons.append("diversified strategy allocation")
    if feature.idle_ratio < 0.3:
        reasons.append("efficient capital deployment")

    reason_text = ", ".join(reasons) if reasons else DEFAULT_REASON
    return (
        f"Recommended for {profile['risk_tolerance'].lower()} investors due to {reason_text}. "
        f"Aligns with your {profile['time_horizon']}-month investment horizon."
    )


class HeuristicModel(VaultModel):
    """
    Vault recommender:
    1) Pick the cluster whose risk level equals the profile's tolerance.
    2) Score every vault in it with match_score() and explain it with build_rationale().
    3) Stable sort by score, highest first, and keep the first top_n.
    """

    def recommend(
        self,
        features: Sequence[VaultFeatures],
        clusters: Sequence[VaultCluster],
        profile: UserRiskProfile,
        top_n: int = 3,
    ) -> List[VaultRecommendation]:
        target = _find_cluster(clusters, profile.get("risk_tolerance"))
        if target is None:
            log.info("recommend.no_cluster", risk_tolerance=profile.get("risk_tolerance"))
            return []

        by_address: Dict[str, VaultFeatures] = {}
        for f in features:
            by_address.setdefault(f.vault_address, f)

        recommendations: List[VaultRecommendation] = []
        for address in target.vault_addresses:
            feature = by_address.get(address)
            if feature is None:
                continue
            recommendations.append(
                VaultRecommendation(
                    vault_address=address,
                    asset=feature.asset,
                    cluster=target,
                    score=match_score(feature, profile),
                    rationale=build_rationale(feature, profile),
                    estimated_apy=target.expected_apy,
                    tvl=feature.tvl,
                    risk_level=target.risk_level,
                )
            )

        # sorted() is stable, so equal scores keep the cluster's vault order.
        recommendations = sorted(recommendations, key=lambda r: r.score, reverse=True)
        return recommendations[: max(0, int(top_n))]


_default_model = HeuristicModel()


def recommend_vaults(
    features: Sequence[VaultFeatures],
    clusters: Sequence[VaultCluster],
    profile: UserRiskProfile,
    top_n: int = 3,
) -> List[VaultRecommendation]:
    return _default_model.recommend(features, clusters, profile, top_n)
