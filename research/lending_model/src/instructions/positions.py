"""Position instructions

Every instruction validates first (prices included) and only then
commits, so a failure never leaves a partial update behind.
"""
import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from ..constants import INTEREST_SCALE, MAX_ASSETS_PER_POSITION, PROTOCOL_ACCOUNT
from ..errors import (
    AssetDisabled,
    ExceedsCreditLimit,
    InsufficientCollateralBalance,
    InsufficientLiquidity,
    InvalidAmount,
    InvalidAssetForIsolation,
    IsolationDebtCapExceeded,
    IsolationModeRequired,
    MaximumAssetsReached,
    NoIsolatedCollateral,
    NotLiquidatable,
    WithdrawalExceedsCreditLimit,
)
from ..events import (
    Borrowed,
    CollateralSupplied,
    CollateralWithdrawn,
    PositionClosed,
    PositionLiquidated,
    PositionOpened,
    Repaid,
)
from ..fixed_point import mul_div
from ..state.asset import Tier
from ..state.market import Market
from ..state.position import Position, PositionStatus
from .interest import accrue_position, calculate_debt_with_interest, get_highest_tier
from .valuation import (
    collateral_value,
    credit_limit,
    liquidation_value,
    position_health,
)

logger = logging.getLogger(__name__)


def _require_positive(amount: int) -> None:
    if amount <= 0:
        raise InvalidAmount(amount)


def open_position(market: Market, owner: str, asset: str, isolated: bool) -> int:
    """Open an empty position, returns its id

    An ISOLATED tier asset can only back an isolated position. Any listed
    asset may be used in isolation, which pins the position to it.
    """
    config = market.registry.get_asset(asset)
    if config.tier == Tier.ISOLATED and not isolated:
        raise IsolationModeRequired(asset)

    position = market.ledger.open(owner, isolated, asset, market.clock.now)
    market.events.emit(PositionOpened(owner, position.position_id, isolated))
    return position.position_id


def supply_collateral(
    market: Market, owner: str, position_id: int, asset: str, amount: int
) -> None:
    _require_positive(amount)
    position = market.ledger.get_active(owner, position_id)
    config = market.registry.get_asset(asset)

    if not config.active:
        raise AssetDisabled(asset)

    if position.is_isolated:
        if asset != position.isolated_asset:
            raise InvalidAssetForIsolation(asset, position.isolated_asset)
    elif config.tier == Tier.ISOLATED:
        raise IsolationModeRequired(asset)

    if asset not in position.collateral and len(position.collateral) >= MAX_ASSETS_PER_POSITION:
        raise MaximumAssetsReached(position_id, MAX_ASSETS_PER_POSITION)

    market.registry.check_capacity(asset, amount)
    market.collateral_token(asset).transfer(owner, PROTOCOL_ACCOUNT, amount)

    market.registry.deposit(asset, amount)
    position.add_collateral(asset, amount)
    market.events.emit(CollateralSupplied(owner, position_id, asset, amount))


def withdraw_collateral(
    market: Market, owner: str, position_id: int, asset: str, amount: int
) -> None:
    """Withdraw collateral as long as the remainder still covers the debt

    Inactive assets can always be withdrawn. A position without debt is
    not priced at all.
    """
    _require_positive(amount)
    position = market.ledger.get_active(owner, position_id)
    market.registry.get_asset(asset)

    available = position.balance_of(asset)
    if amount > available:
        raise InsufficientCollateralBalance(asset, amount, available)

    debt = calculate_debt_with_interest(market, position)
    if debt > 0:
        remaining = dict(position.collateral)
        remaining[asset] = available - amount
        limit = credit_limit(market, remaining)
        if debt > limit:
            raise WithdrawalExceedsCreditLimit(debt, limit)

    position.remove_collateral(asset, amount)
    market.registry.withdraw(asset, amount)
    market.collateral_token(asset).transfer(PROTOCOL_ACCOUNT, owner, amount)
    market.events.emit(CollateralWithdrawn(owner, position_id, asset, amount))


def borrow(market: Market, owner: str, position_id: int, amount: int) -> None:
    _require_positive(amount)
    position = market.ledger.get_active(owner, position_id)
    debt = calculate_debt_with_interest(market, position)
    requested_debt = debt + amount

    if position.is_isolated:
        if not position.collateral:
            raise NoIsolatedCollateral(owner, position_id)
        cap = market.registry.get_asset(position.isolated_asset).debt_cap
        if cap and requested_debt > cap:
            raise IsolationDebtCapExceeded(position.isolated_asset, requested_debt, cap)

    limit = credit_limit(market, position.collateral)
    if requested_debt > limit:
        raise ExceedsCreditLimit(requested_debt, limit)

    if market.cash < amount:
        raise InsufficientLiquidity(amount, market.cash)

    accrue_position(market, position)
    market.pool.update_borrow(amount)
    position.update_debt(amount)
    market.base_token.transfer(PROTOCOL_ACCOUNT, owner, amount)
    market.events.emit(Borrowed(owner, position_id, amount))


def repay(market: Market, owner: str, position_id: int, amount: int) -> int:
    """Repay up to the current debt, returns the amount actually repaid"""
    _require_positive(amount)
    position = market.ledger.get_active(owner, position_id)
    debt = calculate_debt_with_interest(market, position)
    payment = min(amount, debt)
    if payment == 0:
        return 0

    market.base_token.require_balance(owner, payment)

    accrue_position(market, position)
    _settle_debt(market, position, owner, payment)
    return payment


def _settle_debt(market: Market, position: Position, payer: str, payment: int) -> None:
    market.base_token.transfer(payer, PROTOCOL_ACCOUNT, payment)
    position.update_debt(-payment)
    market.pool.update_borrow(-payment)
    market.events.emit(Repaid(position.owner, position.position_id, payment))


def _release_collateral(market: Market, position: Position, recipient: str) -> None:
    for asset, amount in list(position.collateral.items()):
        position.remove_collateral(asset, amount)
        market.registry.withdraw(asset, amount)
        market.collateral_token(asset).transfer(PROTOCOL_ACCOUNT, recipient, amount)
        market.events.emit(
            CollateralWithdrawn(position.owner, position.position_id, asset, amount)
        )


def exit_position(market: Market, owner: str, position_id: int) -> int:
    """Repay everything, return all collateral and close, returns the debt paid"""
    position = market.ledger.get_active(owner, position_id)
    debt = calculate_debt_with_interest(market, position)
    market.base_token.require_balance(owner, debt)

    accrue_position(market, position)
    if debt:
        _settle_debt(market, position, owner, debt)
    _release_collateral(market, position, owner)

    position.status = PositionStatus.CLOSED
    market.events.emit(PositionClosed(owner, position_id))
    return debt


def get_liquidation_fee(market: Market, tier: Tier) -> int:
    return market.rate_config.liquidation_fees[Tier(tier)]


def liquidate(market: Market, liquidator: str, owner: str, position_id: int) -> Tuple[int, int]:
    """Liquidator repays the debt plus the tier fee and takes all collateral

    The fee stays in the pool as profit for liquidity providers. Returns
    (debt, fee).
    """
    position = market.ledger.get_active(owner, position_id)
    debt = calculate_debt_with_interest(market, position)
    if debt == 0 or debt <= liquidation_value(market, position.collateral):
        raise NotLiquidatable(owner, position_id, position_health(market, position))

    tier = get_highest_tier(position, market.registry)
    fee = mul_div(debt, get_liquidation_fee(market, tier), INTEREST_SCALE)
    market.base_token.require_balance(liquidator, debt + fee)

    accrue_position(market, position)
    _settle_debt(market, position, liquidator, debt)
    market.base_token.transfer(liquidator, PROTOCOL_ACCOUNT, fee)
    _release_collateral(market, position, liquidator)

    position.status = PositionStatus.LIQUIDATED
    market.events.emit(PositionLiquidated(owner, position_id, liquidator, debt, fee))
    logger.warning("Liquidated position %s of %s, debt %s", position_id, owner, debt)
    return debt, fee


@dataclass(frozen=True)
class PositionSummary:
    owner: str
    position_id: int
    status: PositionStatus
    is_isolated: bool
    isolated_asset: Optional[str]
    tier: Tier
    collateral: Dict[str, int]
    collateral_value: int
    current_debt: int
    available_credit: int
    health_factor: int


def get_position_summary(market: Market, owner: str, position_id: int) -> PositionSummary:
    position = market.ledger.get(owner, position_id)
    debt = calculate_debt_with_interest(market, position)
    limit = credit_limit(market, position.collateral)
    return PositionSummary(
        owner=owner,
        position_id=position_id,
        status=position.status,
        is_isolated=position.is_isolated,
        isolated_asset=position.isolated_asset,
        tier=get_highest_tier(position, market.registry),
        collateral=dict(position.collateral),
        collateral_value=collateral_value(market, position.collateral),
        current_debt=debt,
        available_credit=max(limit - debt, 0),
        health_factor=position_health(market, position),
    )
