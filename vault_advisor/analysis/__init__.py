from .parser import parse_vault_data
from .features import extract_vault_features
from .clustering import calculate_risk_score, cluster_vaults
from .projections import calculate_projections

__all__ = [
    "parse_vault_data",
    "extract_vault_features",
    "calculate_risk_score",
    "cluster_vaults",
    "calculate_projections",
]
