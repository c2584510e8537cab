from typing import List, Sequence

from vault_advisor.model_interface.types import UserRiskProfile, VaultCluster, VaultFeatures, VaultRecommendation


class VaultModel:
    def recommend(
        self,
        features: Sequence[VaultFeatures],
        clusters: Sequence[VaultCluster],
        profile: UserRiskProfile,
        top_n: int = 3,
    ) -> List[VaultRecommendation]:
        raise NotImplementedError
