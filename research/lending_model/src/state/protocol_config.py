"""Rate model and fee parameters"""
from dataclasses import dataclass, field
from typing import Dict

from ..constants import (
    DEFAULT_BASE_BORROW_RATE,
    DEFAULT_BASE_PROFIT_TARGET,
    DEFAULT_CROSS_A_LIQUIDATION_FEE,
    DEFAULT_CROSS_A_PREMIUM,
    DEFAULT_CROSS_B_LIQUIDATION_FEE,
    DEFAULT_CROSS_B_PREMIUM,
    DEFAULT_ISOLATED_LIQUIDATION_FEE,
    DEFAULT_ISOLATED_PREMIUM,
    DEFAULT_OPTIMAL_UTILIZATION,
    DEFAULT_SLOPE1,
    DEFAULT_SLOPE2,
    DEFAULT_STABLE_LIQUIDATION_FEE,
    DEFAULT_STABLE_PREMIUM,
    INTEREST_SCALE,
)
from ..errors import InvalidRateConfig
from .asset import Tier


def _default_tier_premiums() -> Dict[Tier, int]:
    return {
        Tier.STABLE: DEFAULT_STABLE_PREMIUM,
        Tier.CROSS_A: DEFAULT_CROSS_A_PREMIUM,
        Tier.CROSS_B: DEFAULT_CROSS_B_PREMIUM,
        Tier.ISOLATED: DEFAULT_ISOLATED_PREMIUM,
    }


def _default_liquidation_fees() -> Dict[Tier, int]:
    return {
        Tier.STABLE: DEFAULT_STABLE_LIQUIDATION_FEE,
        Tier.CROSS_A: DEFAULT_CROSS_A_LIQUIDATION_FEE,
        Tier.CROSS_B: DEFAULT_CROSS_B_LIQUIDATION_FEE,
        Tier.ISOLATED: DEFAULT_ISOLATED_LIQUIDATION_FEE,
    }


@dataclass(frozen=True)
class RateConfig:
    """Annual rates and fees, all scaled by INTEREST_SCALE"""
    base_borrow_rate: int = DEFAULT_BASE_BORROW_RATE
    tier_premiums: Dict[Tier, int] = field(default_factory=_default_tier_premiums)
    optimal_utilization: int = DEFAULT_OPTIMAL_UTILIZATION
    slope1: int = DEFAULT_SLOPE1
    slope2: int = DEFAULT_SLOPE2
    base_profit_target: int = DEFAULT_BASE_PROFIT_TARGET
    liquidation_fees: Dict[Tier, int] = field(default_factory=_default_liquidation_fees)

    def validate(self) -> None:
        if set(self.tier_premiums) != set(Tier):
            raise InvalidRateConfig("a premium is required for every tier")
        if set(self.liquidation_fees) != set(Tier):
            raise InvalidRateConfig("a liquidation fee is required for every tier")

        # Riskier tiers must always pay strictly more
        premiums = [self.tier_premiums[tier] for tier in sorted(Tier)]
        if premiums[0] < 0 or any(low >= high for low, high in zip(premiums, premiums[1:])):
            raise InvalidRateConfig("tier premiums must strictly increase with risk")

        if not 0 < self.optimal_utilization < INTEREST_SCALE:
            raise InvalidRateConfig("optimal utilization must be within (0, 1)")
        if min(self.base_borrow_rate, self.slope1, self.slope2, self.base_profit_target) < 0:
            raise InvalidRateConfig("rates must be non-negative")
        if any(fee < 0 or fee > INTEREST_SCALE for fee in self.liquidation_fees.values()):
            raise InvalidRateConfig("liquidation fees must be within [0, 1]")
