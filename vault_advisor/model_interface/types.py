from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Tuple, TypedDict

RiskLevel = Literal["Conservative", "Balanced", "Aggressive"]
LiquidityNeed = Literal["Low", "Medium", "High"]
ExperienceLevel = Literal["Beginner", "Intermediate", "Advanced"]
Network = Literal["testnet", "mainnet"]
ParseStatus = Literal["ok", "degraded"]


class RawVaultRecord(TypedDict):
    vault: str
    totalManagedFundsBefore: str
    totalSupplyBefore: str


class UserRiskProfile(TypedDict):
    risk_tolerance: RiskLevel
    liquidity_needs: LiquidityNeed
    time_horizon: int
    experience_level: ExperienceLevel


class ApiCall(TypedDict, total=False):
    method: str
    path: str
    purpose: str
    status: Literal["pending", "completed", "failed"]


class AllocationShare(TypedDict):
    strategyId: str
    amount: str
    percent: float


class ChosenVault(TypedDict):
    vaultId: str
    network: Network
    assetId: str
    tvl: str
    allocations: List[AllocationShare]
    idleAmount: str
    idlePercent: float
    totalSupply: str
    assumedApy: float
    riskLabel: RiskLevel
    rationale: str


@dataclass(frozen=True)
class StrategyAllocation:
    amount: float
    paused: bool
    strategy_address: str

    def to_dict(self) -> Dict[str, Any]:
        return {"amount": self.amount, "paused": self.paused, "strategy_address": self.strategy_address}


@dataclass(frozen=True)
class ParsedVaultData:
    """
    Balance sheet of one vault in human units.

    attributes:
    - status: "ok" when the managed-funds blob parsed cleanly, "degraded" when it
      did not and every numeric field was zeroed instead.
    """
    vault_address: str
    asset: str
    total_amount: float
    idle_amount: float
    invested_amount: float
    total_supply: float
    strategy_allocations: Tuple[StrategyAllocation, ...] = ()
    status: ParseStatus = "ok"

    @classmethod
    def degraded(cls, vault_address: str) -> "ParsedVaultData":
        return cls(
            vault_address=vault_address,
            asset="",
            total_amount=0.0,
            idle_amount=0.0,
            invested_amount=0.0,
            total_supply=0.0,
            strategy_allocations=(),
            status="degraded",
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "vaultAddress": self.vault_address,
            "asset": self.asset,
            "totalAmount": self.total_amount,
            "idleAmount": self.idle_amount,
            "investedAmount": self.invested_amount,
            "totalSupply": self.total_supply,
            "strategyAllocations": [a.to_dict() for a in self.strategy_allocations],
            "status": self.status,
        }


@dataclass(frozen=True)
class VaultFeatures:
    vault_address: str
    asset: str
    tvl: float
    idle_ratio: float
    concentration: float
    asset_stability: float
    growth_rate: float
    shares_outstanding: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "vaultAddress": self.vault_address,
            "asset": self.asset,
            "tvl": self.tvl,
            "idleRatio": self.idle_ratio,
            "concentration": self.concentration,
            "assetStability": self.asset_stability,
            "growthRate": self.growth_rate,
            "sharesOutstanding": self.shares_outstanding,
        }


@dataclass(frozen=True)
class VaultCluster:
    id: str
    name: str
    risk_level: RiskLevel
    description: str
    expected_apy: float
    vault_addresses: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "riskLevel": self.risk_level,
            "description": self.description,
            "expectedApy": self.expected_apy,
            "vaultAddresses": list(self.vault_addresses),
        }


@dataclass(frozen=True)
class VaultRecommendation:
    vault_address: str
    asset: str
    cluster: VaultCluster
    score: float
    rationale: str
    estimated_apy: float
    tvl: float
    risk_level: RiskLevel

    def to_dict(self) -> Dict[str, Any]:
        return {
            "vaultAddress": self.vault_address,
            "asset": self.asset,
            "cluster": self.cluster.to_dict(),
            "score": self.score,
            "rationale": self.rationale,
            "estimatedApy": self.estimated_apy,
            "tvl": self.tvl,
            "riskLevel": self.risk_level,
        }


@dataclass(frozen=True)
class ProjectionResult:
    months: int
    balance: float
    total_contributions: float
    total_returns: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "months": self.months,
            "balance": self.balance,
            "totalContributions": self.total_contributions,
            "totalReturns": self.total_returns,
        }


def make_profile(
    risk_tolerance: RiskLevel,
    time_horizon: int,
    liquidity_needs: Optional[LiquidityNeed] = None,
    experience_level: Optional[ExperienceLevel] = None,
) -> UserRiskProfile:
    """Build a profile, defaulting liquidity to Medium and experience to Intermediate."""
    return {
        "risk_tolerance": risk_tolerance,
        "liquidity_needs": liquidity_needs or "Medium",
        "time_horizon": int(time_horizon),
        "experience_level": experience_level or "Intermediate",
    }
