import json

import pytest

from vault_advisor.config import get_settings

USDC = "CDTKPWPLOURQA2SGTKTUQOWRCBZEORB4BWBOMJ3D3ZTQQSGE5F6JBQLV"
USDT = "CCW67TSZV3SSS2HXMBQ5JFGCKJNXKZM7UQUWUZPUTHXSTZLEO7SJMI75"
VOLATILE = "CVOLATILEASSETXXXXXXXXXXXXXXXXXXXXXXXXXXXXXXXXXXXXXXXXX"


@pytest.fixture(autouse=True)
def snapshot_settings(monkeypatch):
    # Every test starts from the bundled snapshot unless it opts into a remote URL.
    monkeypatch.delenv("VAULTS_API_URL", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def make_record():
    def _make(vault, asset=USDC, idle=0, invested=0, allocations=None, supply=None, total=None):
        allocations = allocations if allocations is not None else [invested]
        funds = {
            "asset": asset,
            "idle_amount": str(idle),
            "invested_amount": str(invested),
            "strategy_allocations": [
                {"amount": str(a), "paused": False, "strategy_address": f"CSTRAT{i}"}
                for i, a in enumerate(allocations)
            ],
            "total_amount": str(total if total is not None else idle + invested),
        }
        return {
            "vault": vault,
            "totalManagedFundsBefore": json.dumps(funds),
            "totalSupplyBefore": str(supply if supply is not None else idle + invested),
        }
    return _make
