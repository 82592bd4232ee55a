"""Liquidity provider deposits, share exchange and pool rates"""
import logging

from ..constants import EXCHANGE_RATE_SCALE, INTEREST_SCALE, PROTOCOL_ACCOUNT
from ..errors import InsufficientLiquidity, InvalidAmount
from ..events import LiquidityExchanged, LiquiditySupplied
from ..fixed_point import checked_add, mul_div
from ..state.market import Market

logger = logging.getLogger(__name__)


def pool_value(market: Market) -> int:
    """Cash on hand plus outstanding borrow"""
    return market.cash + market.pool.total_borrow


def supply_liquidity(market: Market, provider: str, amount: int) -> int:
    """Deposit base asset, returns the shares minted

    Shares are priced against the pool value before the deposit.
    """
    if amount <= 0:
        raise InvalidAmount(amount)

    total_shares = market.share_token.total_supply
    value_before = pool_value(market)
    if total_shares == 0 or value_before == 0:
        shares = amount
    else:
        shares = mul_div(amount, total_shares, value_before)

    market.base_token.transfer(provider, PROTOCOL_ACCOUNT, amount)
    market.pool.total_supplied_liquidity = checked_add(
        market.pool.total_supplied_liquidity, amount
    )
    market.share_token.mint(provider, shares)
    market.events.emit(LiquiditySupplied(provider, amount, shares))
    return shares


def exchange(market: Market, provider: str, shares: int) -> int:
    """Burn shares for base asset, returns the amount paid out

    When the pool value exceeds supplied principal by more than the base
    profit target on the principal being redeemed, the treasury is minted
    a fee of ``shares * base_profit_target`` before the payout is priced.
    """
    if shares <= 0:
        raise InvalidAmount(shares)
    market.share_token.require_balance(provider, shares)

    pool = market.pool
    supply = market.share_token.total_supply
    total = pool_value(market)
    base_amount = mul_div(shares, pool.total_supplied_liquidity, supply)
    target = mul_div(base_amount, market.rate_config.base_profit_target, INTEREST_SCALE)

    fee_shares = 0
    if total >= pool.total_supplied_liquidity + target:
        fee_shares = mul_div(shares, market.rate_config.base_profit_target, INTEREST_SCALE)

    value = mul_div(shares, total, supply + fee_shares)
    if value > market.cash:
        raise InsufficientLiquidity(value, market.cash)

    if fee_shares:
        market.share_token.mint(market.treasury, fee_shares)
    market.share_token.burn(provider, shares)
    pool.total_supplied_liquidity -= base_amount
    if value > base_amount:
        pool.total_accrued_supplier_interest += value - base_amount
    market.base_token.transfer(PROTOCOL_ACCOUNT, provider, value)
    market.events.emit(LiquidityExchanged(provider, shares, value, fee_shares))
    return value


def get_exchange_rate(market: Market) -> int:
    """Base units per share, EXCHANGE_RATE_SCALE is 1:1"""
    supply = market.share_token.total_supply
    if supply == 0:
        return EXCHANGE_RATE_SCALE
    return mul_div(pool_value(market), EXCHANGE_RATE_SCALE, supply)


def get_supply_rate(market: Market) -> int:
    """Yield earned by liquidity providers over supplied principal

    Zero while the pool holds no profit. Once profit exceeds the base
    profit target, the target share is set aside for the treasury.
    """
    supplied = market.pool.total_supplied_liquidity
    total = pool_value(market)
    if supplied == 0 or total <= supplied:
        return 0

    target = mul_div(supplied, market.rate_config.base_profit_target, INTEREST_SCALE)
    fee = target if total >= supplied + target else 0
    rate = mul_div(INTEREST_SCALE, total, supplied + fee) - INTEREST_SCALE
    return max(rate, 0)
