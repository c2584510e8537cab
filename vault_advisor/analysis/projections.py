"""
Compounding-growth projections for a vault deposit.

PURPOSE: Project a principal forward with monthly compounding at a vault's APY,
         optionally adding a fixed deposit every month.
CONTEXT: Used by the recommend-and-project and project endpoints. The schedule is
         fixed at 24 months with checkpoints at 6/12/18/24; callers that want a
         shorter horizon filter the returned checkpoints.
"""

from __future__ import annotations

from typing import Dict, List, Sequence

from vault_advisor.constants.risk_tiers import CHECKPOINT_MONTHS
from vault_advisor.model_interface.types import ProjectionResult

SCHEDULE_MONTHS = 24

COMPOUNDING_DESCRIPTIONS = {
    "monthly": "Monthly compounding (r_m = (1 + APY)^(1/12) - 1)",
    "quarterly": "Quarterly compounding (r_q = (1 + APY)^(1/4) - 1)",
    "annually": "Annual compounding (r_a = APY)",
}


def monthly_rate(apy: float) -> float:
    """Monthly rate equivalent to a whole-number percent APY (12 means 12%)."""
    return (1 + apy / 100) ** (1 / 12) - 1


def calculate_projections(
    principal: float,
    apy: float,
    months: int = SCHEDULE_MONTHS,
    monthly_contribution: float = 0.0,
) -> List[ProjectionResult]:
    """
    Compound the principal month by month and record the canonical checkpoints.

    parameters:
    - principal: float – starting balance, counted as the first contribution.
    - apy: float – annual percentage yield as a whole-number percent.
    - months: int – accepted for call-site compatibility; the loop always runs the
      full 24-month schedule.
    - monthly_contribution: float – added after each month's growth when > 0.

    returns:
    - list[ProjectionResult] – exactly one per month in CHECKPOINT_MONTHS.
    """
    rate = monthly_rate(apy)
    balance = float(principal)
    contributions = float(principal)

    results: List[ProjectionResult] = []
    for month in range(1, SCHEDULE_MONTHS + 1):
        balance *= 1 + rate
        if monthly_contribution > 0:
            balance += monthly_contribution
            contributions += monthly_contribution
        if month in CHECKPOINT_MONTHS:
            results.append(
                ProjectionResult(
                    months=month,
                    balance=balance,
                    total_contributions=contributions,
                    total_returns=balance - contributions,
                )
            )
    return results


def filter_horizons(projections: Sequence[ProjectionResult], horizons: Sequence[int]) -> List[ProjectionResult]:
    wanted = set(int(h) for h in horizons)
    return [p for p in projections if p.months in wanted]


def effective_apy(principal: float, projection: ProjectionResult) -> float:
    """Annualised growth of the balance over the principal, in percent (2dp)."""
    if principal <= 0 or projection.months <= 0:
        return 0.0
    return round(((projection.balance / principal) ** (12 / projection.months) - 1) * 100, 2)


def summarize_projections(principal: float, projections: Sequence[ProjectionResult]) -> Dict[str, float]:
    """Headline numbers taken from the last projection; principal-only when there is none."""
    if not projections:
        return {
            "totalInvested": principal,
            "finalBalance": principal,
            "totalReturns": 0.0,
            "effectiveApy": 0.0,
        }
    last = projections[-1]
    return {
        "totalInvested": last.total_contributions,
        "finalBalance": last.balance,
        "totalReturns": last.total_returns,
        "effectiveApy": effective_apy(principal, last),
    }


def compounding_description(frequency: str) -> str:
    return COMPOUNDING_DESCRIPTIONS.get(frequency, "Monthly compounding (default)")
