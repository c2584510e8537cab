# PURPOSE: Orchestrate the vault analysis chain for the HTTP/Lambda/CLI surfaces:
#          validate the request, fetch the vault universe, parse -> features ->
#          clusters -> recommend, apply the fallback cascade, project the deposit
#          and assemble the JSON the front-end consumes.
# CONTEXT: The analysis chain is pure; everything here that can fail for a
#          user-facing reason raises a VaultAdvisorError subclass (errors.py).

from __future__ import annotations
import time
from typing import Any, Dict, List, Optional, Sequence, Tuple

import structlog

from vault_advisor import agent_io
from vault_advisor.analysis.chosen_vault import find_raw_record, normalize_vault
from vault_advisor.analysis.clustering import cluster_vaults
from vault_advisor.analysis.features import extract_vault_features
from vault_advisor.analysis.parser import parse_vault_data
from vault_advisor.analysis.projections import (
    calculate_projections,
    compounding_description,
    filter_horizons,
    summarize_projections,
)
from vault_advisor.config import get_settings
from vault_advisor.constants.risk_tiers import CHECKPOINT_MONTHS, RISK_TIERS, WIDENED_TOLERANCE
from vault_advisor.errors import NoSuitableVaultError
from vault_advisor.model_interface.loader import load_model
from vault_advisor.model_interface.types import (
    ApiCall,
    ChosenVault,
    RawVaultRecord,
    UserRiskProfile,
    VaultCluster,
    VaultFeatures,
    VaultRecommendation,
    make_profile,
)
from vault_advisor.tools import vault_source
from vault_advisor.utils.units import (
    format_human_amount,
    get_asset_symbol,
    get_stellar_expert_link,
    to_base_units,
    to_human_units,
)

log = structlog.get_logger(__name__)

_model = load_model()

TOP_N = 3
FALLBACK_APY = RISK_TIERS["Conservative"]["expected_apy"]
FALLBACK_RATIONALE = "Fallback: Top TVL stable asset vault selected for safety"
FALLBACK_OPTIONS = [
    "Try Balanced risk tolerance",
    "Use top TVL stable vault",
    "See all available vaults",
]


def _api_call(method: str, path: str, purpose: str, status: str = "completed") -> ApiCall:
    return {"method": method, "path": path, "purpose": purpose, "status": status}


def analyse_universe(records: Sequence[RawVaultRecord]) -> Tuple[List[VaultFeatures], List[VaultCluster]]:
    """
    Run parse -> features -> clusters over one vault universe.

    notes:
    - The whole universe goes through in one call: feature normalisation is
      relative to the batch, so features from different batches must never mix.
    """
    parsed = parse_vault_data(records)
    features = extract_vault_features(parsed)
    clusters = cluster_vaults(features)
    log.info(
        "analysis.clustered",
        vaults=len(records),
        degraded=sum(1 for p in parsed if p.status == "degraded"),
        sizes={c.risk_level: len(c.vault_addresses) for c in clusters},
    )
    return features, clusters


def top_stable_vault(features: Sequence[VaultFeatures]) -> Optional[VaultFeatures]:
    """Stable-asset vault with the highest normalised TVL (first one wins ties)."""
    stable = [f for f in features if f.asset_stability > 0.5 and f.tvl > 0]
    if not stable:
        return None
    return max(stable, key=lambda f: f.tvl)


def choose_vault(
    records: Sequence[RawVaultRecord],
    features: Sequence[VaultFeatures],
    clusters: Sequence[VaultCluster],
    profile: UserRiskProfile,
    network: str,
) -> Tuple[Optional[ChosenVault], Optional[str]]:
    """
    Pick one vault for the profile, falling back step by step.

    cascade:
    1) Primary recommendation for the requested tolerance.
    2) Widen Conservative/Aggressive to Balanced and recommend again.
    3) Highest-TVL stable-asset vault, labelled Conservative at the fallback APY.

    returns:
    - (chosen_vault, fallback_used): chosen_vault is None when every step came up
      empty; fallback_used names the step taken, None for the primary path.
    """
    requested = profile["risk_tolerance"]
    fallback_used: Optional[str] = None

    recs: List[VaultRecommendation] = _model.recommend(features, clusters, profile, TOP_N)

    if not recs:
        widened = WIDENED_TOLERANCE.get(requested, requested)
        relaxed: UserRiskProfile = {**profile, "risk_tolerance": widened}
        recs = _model.recommend(features, clusters, relaxed, TOP_N)
        log.info("recommend.fallback", step="widen_risk", from_risk=requested, to_risk=widened, found=len(recs))
        if recs:
            fallback_used = f"Widened risk tolerance from {requested} to {widened}"

    if recs:
        rec = recs[0]
        raw = find_raw_record(records, rec.vault_address)
        if raw is None:
            return None, fallback_used
        chosen = normalize_vault(raw, rec.risk_level, rec.estimated_apy, rec.rationale, network)
        return chosen, fallback_used

    best = top_stable_vault(features)
    log.info("recommend.fallback", step="top_tvl_stable", found=best is not None)
    if best is None:
        return None, None
    raw = find_raw_record(records, best.vault_address)
    if raw is None:
        return None, None
    chosen = normalize_vault(raw, "Conservative", FALLBACK_APY, FALLBACK_RATIONALE, network)
    return chosen, "Selected top TVL stable asset vault as fallback"


def run_recommend_and_project(payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    POST /api/defindex/recommend-and-project.

    steps:
    1) Validate the request (amountBase, risk, horizonMonths, network, optional
       liquidityNeeds/experienceLevel).
    2) Fetch the vault universe and analyse it.
    3) Choose a vault through the fallback cascade; none -> NoSuitableVaultError.
    4) Project the deposit at the vault's APY and keep checkpoints up to the
       requested horizon.
    5) Validate and return the response.

    raises:
    - RequestValidationError – bad request body (HTTP 400).
    - NoSuitableVaultError – nothing survived the cascade (HTTP 404).
    """
    t0 = time.time()
    agent_io.validate_recommend_and_project_request(payload)

    network = payload["network"]
    horizon = int(payload["horizonMonths"])
    amount_human = to_human_units(payload["amountBase"])
    api_calls: List[ApiCall] = []

    records, source = vault_source.get_vault_data(network)
    api_calls.append(_api_call("GET", "/api/defindex/vaults", f"Fetch vault universe ({source})"))
    features, clusters = analyse_universe(records)

    profile = make_profile(
        payload["risk"],
        horizon,
        payload.get("liquidityNeeds"),
        payload.get("experienceLevel"),
    )
    api_calls.append(_api_call(
        "POST", "/api/defindex/recommend",
        "Cluster & score vaults from user profile; returns vaultId + rationale",
    ))
    chosen, fallback_used = choose_vault(records, features, clusters, profile, network)

    if chosen is None:
        log.warning("recommend.no_vault", risk=payload["risk"], network=network)
        raise NoSuitableVaultError(fallback_options=FALLBACK_OPTIONS, api_calls=api_calls)

    api_calls.append(_api_call(
        "POST", "/api/defindex/project",
        "Compute 6/12/18/24-month projections from assumedApy",
    ))
    projections = [
        p for p in calculate_projections(amount_human, chosen["assumedApy"])
        if p.months <= horizon
    ]

    out: Dict[str, Any] = {
        "vault": chosen,
        "projection": [
            {
                "months": p.months,
                "amountHuman": format_human_amount(p.balance, chosen["assetId"]),
                "amountBase": to_base_units(p.balance),
            }
            for p in projections
        ],
        "apiCalls": api_calls,
        "success": True,
        "stellarExpertLink": get_stellar_expert_link(chosen["vaultId"], network),
    }
    if fallback_used:
        out["fallbackUsed"] = fallback_used

    agent_io.validate_recommend_and_project_response(out)
    log.info(
        "recommend.chosen",
        vault=chosen["vaultId"],
        risk_label=chosen["riskLabel"],
        fallback=fallback_used,
        latency_ms=round((time.time() - t0) * 1000, 1),
    )
    return out


def _recommendation_view(rec: VaultRecommendation) -> Dict[str, Any]:
    return {
        "vaultAddress": rec.vault_address,
        "asset": get_asset_symbol(rec.asset),
        "estimatedApy": rec.estimated_apy,
        "riskLevel": rec.risk_level,
        "tvl": rec.tvl,
        "score": rec.score,
        "rationale": rec.rationale,
    }


def run_recommend(payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    POST /api/defindex/recommend: best vault plus alternatives, no fallback cascade.

    raises:
    - RequestValidationError, NoSuitableVaultError
    """
    agent_io.validate_recommend_request(payload)
    network = payload.get("network") or get_settings().default_network
    records, _ = vault_source.get_vault_data(network)
    features, clusters = analyse_universe(records)

    profile = make_profile(
        payload["riskTolerance"],
        payload["timeHorizon"],
        payload.get("liquidityNeeds"),
        payload.get("experienceLevel"),
    )
    recs = _model.recommend(features, clusters, profile, TOP_N)
    if not recs:
        raise NoSuitableVaultError("No suitable vaults found for your profile")

    tolerance = payload["riskTolerance"].lower()
    return {
        "recommendation": _recommendation_view(recs[0]),
        "alternatives": [_recommendation_view(r) for r in recs[1:]],
        "assumptions": {
            "apySource": f"Estimated APY based on {tolerance} risk cluster analysis",
            "riskAssessment": (
                "Risk assessment based on TVL, asset stability, and strategy concentration "
                f"for {profile['time_horizon']}-month horizon"
            ),
        },
    }


def run_projection(payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    POST /api/defindex/project: projections filtered to the requested horizons.

    notes:
    - Only horizons in {6, 12, 18, 24} can match; the schedule is fixed.
    """
    agent_io.validate_project_request(payload)
    principal = float(payload["principal"])
    horizons = payload.get("timeHorizons") or list(CHECKPOINT_MONTHS)

    projections = filter_horizons(
        calculate_projections(
            principal,
            float(payload["apy"]),
            months=max(horizons),
            monthly_contribution=float(payload.get("monthlyContribution") or 0),
        ),
        horizons,
    )
    return {
        "projections": [p.to_dict() for p in projections],
        "assumptions": {
            "compounding": compounding_description(payload.get("compoundingFrequency") or "monthly"),
            "apyType": "Estimated APY based on vault risk profile and historical performance",
            "fees": "Projections are gross of protocol fees and gas costs",
        },
        "summary": summarize_projections(principal, projections),
    }


def projection_scenarios(principal: float = 1000.0) -> Dict[str, Any]:
    """GET /api/defindex/project: one example projection per risk tier."""
    labels = {
        "Conservative": ("Stable yield with low risk", "Low"),
        "Balanced": ("Moderate risk with balanced returns", "Medium"),
        "Aggressive": ("Higher risk with potential for higher returns", "High"),
    }
    scenarios = []
    for level, tier in RISK_TIERS.items():
        description, risk = labels[level]
        scenarios.append({
            "name": level,
            "description": description,
            "apy": tier["expected_apy"],
            "riskLevel": risk,
            "example": [p.to_dict() for p in calculate_projections(principal, tier["expected_apy"])],
        })
    return {"scenarios": scenarios}


def list_vaults(network: Optional[str] = None) -> Dict[str, Any]:
    """GET /api/defindex/vaults: the raw universe in DeFindex GraphQL shape."""
    records, source = vault_source.get_vault_data(network or get_settings().default_network)
    return {"data": {"deFindexVaults": {"nodes": records}}, "source": source}
