import pytest

from vault_advisor import pipeline
from vault_advisor.errors import NoSuitableVaultError, RequestValidationError
from vault_advisor.tools import vault_source

CBNK = "CBNKCU3HGFKHFOF7JTGXQCNKE3G3DXS5RDBQUKQMIIECYKXPIOUGB2S3"
CAIZ = "CAIZ3NMNPEN5SQISJV7PD2YY6NI6DIPFA4PCRUBOGDE4I7A3DXDLK5OI"
CA5R = "CA5RG7DCLMNJFRMG3LP2VDUBWCZ4QTZ776VCEQKWBPGDUAJAT26K2OXM"
CBDZ = "CBDZYJVQJQT7QJ7ZTMGNGZ7RR3DF32LERLZ26A2HLW5FNJ4OOZCLI3OG"


def request(risk="Conservative", horizon=12, network="mainnet", amount="1000000000", **extra):
    return {"amountBase": amount, "risk": risk, "horizonMonths": horizon, "network": network, **extra}


def test_mainnet_universe_clusters():
    records, _ = vault_source.get_vault_data("mainnet")
    _, clusters = pipeline.analyse_universe(records)
    by_level = {c.risk_level: c.vault_addresses for c in clusters}
    assert by_level == {"Conservative": (CBNK,), "Balanced": (CAIZ, CA5R, CBDZ), "Aggressive": ()}


def test_primary_recommendation_and_projection():
    out = pipeline.run_recommend_and_project(request("Conservative", 12))
    assert out["success"] is True
    assert "fallbackUsed" not in out
    vault = out["vault"]
    assert vault["vaultId"] == CBNK
    assert vault["riskLabel"] == "Conservative"
    assert vault["assumedApy"] == 6
    assert vault["network"] == "mainnet"
    assert vault["idleAmount"] == "0"
    assert sum(a["percent"] for a in vault["allocations"]) == pytest.approx(100.0)
    assert [p["months"] for p in out["projection"]] == [6, 12]
    assert out["projection"][0]["amountHuman"] == "102.96 USDT"
    assert out["projection"][0]["amountBase"] == "1029563014"
    assert out["stellarExpertLink"].endswith(f"/public/contract/{CBNK}")
    assert [c["path"] for c in out["apiCalls"]] == [
        "/api/defindex/vaults",
        "/api/defindex/recommend",
        "/api/defindex/project",
    ]


def test_aggressive_widens_to_balanced():
    out = pipeline.run_recommend_and_project(request("Aggressive", 24))
    assert out["fallbackUsed"] == "Widened risk tolerance from Aggressive to Balanced"
    assert out["vault"]["vaultId"] == CAIZ
    assert out["vault"]["riskLabel"] == "Balanced"
    assert out["vault"]["assumedApy"] == 12
    assert len(out["projection"]) == 4


def test_empty_tier_falls_back_to_top_stable_vault():
    out = pipeline.run_recommend_and_project(request("Balanced", 6, network="testnet"))
    assert out["fallbackUsed"] == "Selected top TVL stable asset vault as fallback"
    assert out["vault"]["vaultId"] == CAIZ
    assert out["vault"]["riskLabel"] == "Conservative"
    assert out["vault"]["assumedApy"] == 6
    assert out["vault"]["rationale"] == pipeline.FALLBACK_RATIONALE
    assert out["stellarExpertLink"].endswith(f"/testnet/contract/{CAIZ}")


def test_no_vault_raises_with_fallback_options(monkeypatch):
    monkeypatch.setattr(vault_source, "get_vault_data", lambda network: ([], "snapshot"))
    with pytest.raises(NoSuitableVaultError) as e:
        pipeline.run_recommend_and_project(request("Balanced"))
    body = e.value.to_body()
    assert e.value.status_code == 404
    assert body["success"] is False
    assert body["error"] == "No suitable vaults found"
    assert body["fallbackOptions"] == pipeline.FALLBACK_OPTIONS
    assert len(body["apiCalls"]) == 2


def test_invalid_request_is_rejected_before_fetching(monkeypatch):
    def boom(network):
        raise AssertionError("vault source must not be called")

    monkeypatch.setattr(vault_source, "get_vault_data", boom)
    with pytest.raises(RequestValidationError):
        pipeline.run_recommend_and_project(request(risk="Reckless"))


def test_top_stable_vault_ignores_volatile_and_empty(make_record):
    records = [
        make_record("A", asset="CVOLATILE", invested=900),
        make_record("B", invested=500),
        make_record("C", invested=100),
        make_record("D"),
    ]
    features, _ = pipeline.analyse_universe(records)
    assert pipeline.top_stable_vault(features).vault_address == "B"
    assert pipeline.top_stable_vault(features[:1]) is None


def test_run_recommend_returns_alternatives():
    out = pipeline.run_recommend({"amount": 100, "riskTolerance": "Balanced", "timeHorizon": 12})
    assert out["recommendation"]["vaultAddress"] == CAIZ
    assert out["recommendation"]["asset"] == "USDC"
    assert out["recommendation"]["estimatedApy"] == 12
    assert [a["vaultAddress"] for a in out["alternatives"]] == [CA5R, CBDZ]
    assert out["assumptions"]["apySource"] == "Estimated APY based on balanced risk cluster analysis"
    assert "12-month horizon" in out["assumptions"]["riskAssessment"]


def test_run_recommend_without_match_is_404():
    with pytest.raises(NoSuitableVaultError) as e:
        pipeline.run_recommend({"amount": 100, "riskTolerance": "Aggressive", "timeHorizon": 12})
    assert e.value.message == "No suitable vaults found for your profile"


def test_run_projection_filters_horizons():
    out = pipeline.run_projection({"principal": 1000, "apy": 12, "timeHorizons": [12, 24, 36]})
    assert [p["months"] for p in out["projections"]] == [12, 24]
    assert set(out["projections"][0]) == {"months", "balance", "totalContributions", "totalReturns"}
    assert out["summary"]["effectiveApy"] == 12.0
    assert out["assumptions"]["compounding"].startswith("Monthly compounding")


def test_projection_scenarios():
    out = pipeline.projection_scenarios()
    assert [(s["name"], s["apy"], s["riskLevel"]) for s in out["scenarios"]] == [
        ("Conservative", 6, "Low"),
        ("Balanced", 12, "Medium"),
        ("Aggressive", 20, "High"),
    ]
    assert all(len(s["example"]) == 4 for s in out["scenarios"])


def test_list_vaults_graphql_shape():
    out = pipeline.list_vaults("testnet")
    assert out["source"] == "snapshot"
    assert len(out["data"]["deFindexVaults"]["nodes"]) == 2
