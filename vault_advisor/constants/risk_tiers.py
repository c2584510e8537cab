STROOPS_PER_UNIT = 10_000_000

CHECKPOINT_MONTHS = (6, 12, 18, 24)

# Risk score upper bounds, checked in order; anything above the last is Aggressive.
CONSERVATIVE_MAX_SCORE = 0.33
BALANCED_MAX_SCORE = 0.66

RISK_TIERS = {
    "Conservative": {
        "id": "conservative",
        "expected_apy": 6,
        "description": "Large TVL, stable assets, diversified strategies with low concentration",
    },
    "Balanced": {
        "id": "balanced",
        "expected_apy": 12,
        "description": "Medium TVL, mix of stable and volatile assets, moderate concentration",
    },
    "Aggressive": {
        "id": "aggressive",
        "expected_apy": 20,
        "description": "Smaller TVL or high concentration, volatile assets, higher expected returns",
    },
}

# Known stable assets on Stellar (Soroban token contract ids).
STABLE_ASSETS = frozenset({
    "CDTKPWPLOURQA2SGTKTUQOWRCBZEORB4BWBOMJ3D3ZTQQSGE5F6JBQLV",  # USDC
    "CCW67TSZV3SSS2HXMBQ5JFGCKJNXKZM7UQUWUZPUTHXSTZLEO7SJMI75",  # USDT
    "CAS3J7GYLGXMF6TDJBBYYSE3HQ6BBSMLNUQ34T6TZMYMW2EVH34XOWMA",
})

ASSET_SYMBOLS = {
    "CCW67TSZV3SSS2HXMBQ5JFGCKJNXKZM7UQUWUZPUTHXSTZLEO7SJMI75": "USDT",
    "CDTKPWPLOURQA2SGTKTUQOWRCBZEORB4BWBOMJ3D3ZTQQSGE5F6JBQLV": "USDC",
    "CAS3J7GYLGXMF6TDJBBYYSE3HQ6BBSMLNUQ34T6TZMYMW2EVH34XOWMA": "STABLE",
}

# Fallback cascade: which tier to retry with when the requested one is empty.
WIDENED_TOLERANCE = {
    "Conservative": "Balanced",
    "Aggressive": "Balanced",
}
