"""Interest rate model and lazy debt accrual"""
import logging

from ..constants import INTEREST_SCALE, RAY, YEAR_IN_SECONDS
from ..events import InterestAccrued
from ..fixed_point import checked_add, checked_sub, mul_div, rpow, to_ray
from ..state.asset import AssetRegistry, Tier
from ..state.market import Market
from ..state.pool import PoolState
from ..state.position import Position
from ..state.protocol_config import RateConfig

logger = logging.getLogger(__name__)


def get_utilization(pool: PoolState) -> int:
    """Fraction of supplied liquidity currently borrowed, INTEREST_SCALE"""
    if pool.total_supplied_liquidity == 0:
        return 0
    return mul_div(pool.total_borrow, INTEREST_SCALE, pool.total_supplied_liquidity)


def utilization_premium(utilization: int, config: RateConfig) -> int:
    """Kinked piecewise linear premium

    Grows at slope1 up to the optimal utilization, then at slope2 over the
    remaining range. Utilization above 100% (possible once interest is
    committed to total borrow) is clamped.
    """
    utilization = min(utilization, INTEREST_SCALE)
    optimal = config.optimal_utilization

    if utilization <= optimal:
        return mul_div(config.slope1, utilization, optimal)

    excess = mul_div(utilization - optimal, INTEREST_SCALE, INTEREST_SCALE - optimal)
    return config.slope1 + mul_div(config.slope2, excess, INTEREST_SCALE)


def get_borrow_rate(tier: Tier, pool: PoolState, config: RateConfig) -> int:
    """Annual borrow rate for a tier at the pool's current utilization"""
    return (
        config.base_borrow_rate
        + config.tier_premiums[Tier(tier)]
        + utilization_premium(get_utilization(pool), config)
    )


def accrue_interest(principal: int, annual_rate: int, elapsed: int) -> int:
    """Principal grown by per-second compounding of an annual rate

    debt = principal * (1 + annual_rate / YEAR) ^ elapsed, evaluated in RAY
    precision and truncated to the principal's units.
    """
    if principal == 0 or elapsed <= 0:
        return principal

    rate_per_second = to_ray(annual_rate) // YEAR_IN_SECONDS
    growth = rpow(RAY + rate_per_second, elapsed)
    return mul_div(principal, growth, RAY)


def get_highest_tier(position: Position, registry: AssetRegistry) -> Tier:
    """Riskiest tier among the held assets, STABLE when nothing is held"""
    tier = Tier.STABLE
    for asset in position.collateral:
        tier = max(tier, registry.get_asset(asset).tier)
    return tier


def calculate_debt_with_interest(market: Market, position: Position) -> int:
    """Current debt, including interest not yet committed to storage"""
    if position.debt_amount == 0:
        return 0
    tier = get_highest_tier(position, market.registry)
    rate = get_borrow_rate(tier, market.pool, market.rate_config)
    elapsed = market.clock.now - position.last_interest_accrual
    return accrue_interest(position.debt_amount, rate, elapsed)


def accrue_position(market: Market, position: Position) -> int:
    """Commit pending interest, returns the interest added

    Runs at the start of every debt-affecting operation.
    """
    debt = calculate_debt_with_interest(market, position)
    interest = checked_sub(debt, position.debt_amount)

    if interest:
        position.update_debt(interest)
        market.pool.update_borrow(interest)
        market.pool.total_accrued_borrower_interest = checked_add(
            market.pool.total_accrued_borrower_interest, interest
        )
        market.events.emit(InterestAccrued(position.owner, position.position_id, interest))

    position.last_interest_accrual = market.clock.now
    return interest
