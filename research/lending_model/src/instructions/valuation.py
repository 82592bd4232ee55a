"""Collateral valuation, credit limit and liquidation checks"""
from typing import Callable, Mapping

from ..constants import HEALTH_FACTOR_SCALE, MAX_HEALTH_FACTOR, THRESHOLD_SCALE
from ..fixed_point import checked_add, checked_mul, mul_div
from ..state.asset import Asset
from ..state.market import Market
from ..state.position import Position
from .interest import calculate_debt_with_interest


def asset_value(
    amount: int,
    price: int,
    asset: Asset,
    base_decimals: int,
    threshold: int = THRESHOLD_SCALE,
) -> int:
    """USD value of an asset amount in base units, weighted by a per-mille threshold"""
    if amount == 0:
        return 0
    numerator = checked_mul(checked_mul(checked_mul(amount, price), threshold), 10**base_decimals)
    denominator = 10**asset.decimals * 10**asset.oracle_decimals * THRESHOLD_SCALE
    return numerator // denominator


def _weighted_value(
    market: Market,
    balances: Mapping[str, int],
    threshold_of: Callable[[Asset], int],
) -> int:
    total = 0
    for asset_name, amount in balances.items():
        if amount == 0:
            continue
        asset = market.registry.get_asset(asset_name)
        price = market.price_of(asset_name)
        total = checked_add(
            total, asset_value(amount, price, asset, market.base_decimals, threshold_of(asset))
        )
    return total


def collateral_value(market: Market, balances: Mapping[str, int]) -> int:
    return _weighted_value(market, balances, lambda asset: THRESHOLD_SCALE)


def credit_limit(market: Market, balances: Mapping[str, int]) -> int:
    return _weighted_value(market, balances, lambda asset: asset.borrow_threshold)


def liquidation_value(market: Market, balances: Mapping[str, int]) -> int:
    return _weighted_value(market, balances, lambda asset: asset.liquidation_threshold)


def calculate_collateral_value(market: Market, owner: str, position_id: int) -> int:
    position = market.ledger.get(owner, position_id)
    return collateral_value(market, position.collateral)


def calculate_credit_limit(market: Market, owner: str, position_id: int) -> int:
    position = market.ledger.get(owner, position_id)
    return credit_limit(market, position.collateral)


def calculate_liquidation_value(market: Market, owner: str, position_id: int) -> int:
    position = market.ledger.get(owner, position_id)
    return liquidation_value(market, position.collateral)


def position_health(market: Market, position: Position) -> int:
    """Liquidation value over debt, HEALTH_FACTOR_SCALE is 1.0"""
    debt = calculate_debt_with_interest(market, position)
    if debt == 0:
        return MAX_HEALTH_FACTOR
    return mul_div(liquidation_value(market, position.collateral), HEALTH_FACTOR_SCALE, debt)


def position_is_liquidatable(market: Market, position: Position) -> bool:
    """Debt strictly above the liquidation value; equal is still healthy"""
    debt = calculate_debt_with_interest(market, position)
    if debt == 0:
        return False
    return debt > liquidation_value(market, position.collateral)


def health_factor(market: Market, owner: str, position_id: int) -> int:
    return position_health(market, market.ledger.get(owner, position_id))


def is_liquidatable(market: Market, owner: str, position_id: int) -> bool:
    return position_is_liquidatable(market, market.ledger.get(owner, position_id))
