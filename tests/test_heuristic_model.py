import pytest

from vault_advisor.model_impl.heuristic_model import HeuristicModel, match_score, recommend_vaults
from vault_advisor.model_interface.loader import load_model
from vault_advisor.model_interface.types import VaultCluster, VaultFeatures, make_profile


def feat(address, tvl=0.5, idle=0.0, conc=0.0, stab=1.0):
    return VaultFeatures(address, "ASSET", tvl, idle, conc, stab, 0.0, 0.0)


def cluster(level, addresses, apy=12):
    return VaultCluster(level.lower(), level, level, "desc", apy, tuple(addresses))


def test_no_matching_cluster_returns_empty():
    profile = make_profile("Balanced", 12)
    assert recommend_vaults([feat("A")], [], profile) == []
    assert recommend_vaults([feat("A")], [cluster("Conservative", ["A"])], profile) == []


def test_score_is_clamped_to_one():
    profile = make_profile("Conservative", 6, experience_level="Beginner")
    # 0.5 + 0.2 (stable) + 0.2 (tvl) + 0.15 (short horizon) = 1.05
    assert match_score(feat("A", tvl=1.0, stab=1.0), profile) == 1.0


def test_score_adjustments():
    base = feat("A", tvl=0.5, idle=0.4, conc=0.6, stab=0.0)
    assert match_score(base, make_profile("Balanced", 12)) == 0.5
    advanced = make_profile("Balanced", 12, experience_level="Advanced")
    assert abs(match_score(base, advanced) - 0.56) < 1e-9
    liquid = make_profile("Balanced", 12, liquidity_needs="High")
    assert abs(match_score(base, liquid) - 0.44) < 1e-9
    long_horizon = make_profile("Balanced", 24)
    assert abs(match_score(base, long_horizon) - 0.6) < 1e-9


def test_sorted_by_score_with_stable_ties_and_top_n():
    features = [feat("V1", stab=1.0), feat("V2", stab=0.0), feat("V3", stab=1.0), feat("V4", stab=0.0)]
    clusters = [cluster("Balanced", ["V1", "V2", "V3", "V4"])]
    # Long horizon favours volatile assets: V2/V4 score 0.6, V1/V3 score 0.5.
    recs = recommend_vaults(features, clusters, make_profile("Balanced", 24), top_n=3)
    assert [r.vault_address for r in recs] == ["V2", "V4", "V1"]
    assert recs[0].estimated_apy == 12
    assert recs[0].risk_level == "Balanced"
    assert recs[0].cluster.name == "Balanced"


def test_missing_features_are_skipped():
    recs = recommend_vaults([feat("A")], [cluster("Balanced", ["GHOST", "A"])], make_profile("Balanced", 12))
    assert [r.vault_address for r in recs] == ["A"]


def test_rationale_text():
    strong = feat("A", tvl=0.9, idle=0.1, conc=0.2, stab=1.0)
    rec = recommend_vaults([strong], [cluster("Conservative", ["A"])], make_profile("Conservative", 18))[0]
    assert rec.rationale == (
        "Recommended for conservative investors due to stable asset base, strong TVL indicating "
        "community trust, diversified strategy allocation, efficient capital deployment. "
        "Aligns with your 18-month investment horizon."
    )
    weak = feat("B", tvl=0.2, idle=0.9, conc=0.9, stab=0.0)
    rec = recommend_vaults([weak], [cluster("Aggressive", ["B"])], make_profile("Aggressive", 6))[0]
    assert "due to balanced risk-return profile." in rec.rationale
    assert "6-month" in rec.rationale


def test_loader_defaults_and_env_override(monkeypatch):
    monkeypatch.delenv("VAULT_MODEL_MODULE", raising=False)
    assert isinstance(load_model(), HeuristicModel)
    monkeypatch.setenv("VAULT_MODEL_MODULE", "vault_advisor.model_impl.heuristic_model:HeuristicModel")
    assert isinstance(load_model(), HeuristicModel)


def test_loader_rejects_malformed_setting(monkeypatch):
    monkeypatch.setenv("VAULT_MODEL_MODULE", "vault_advisor.model_impl.heuristic_model")
    with pytest.raises(ValueError):
        load_model()
