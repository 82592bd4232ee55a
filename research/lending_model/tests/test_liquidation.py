"""Health factor, liquidation checks and the liquidation flow"""
import pytest

from lending_model.src.constants import HEALTH_FACTOR_SCALE, MAX_HEALTH_FACTOR, PROTOCOL_ACCOUNT
from lending_model.src.errors import InactivePosition, InsufficientTokenBalance, NotLiquidatable
from lending_model.src.events import PositionLiquidated
from lending_model.src.state.asset import Tier
from lending_model.src.state.position import PositionStatus

from conftest import ALICE, BTC, ETHER, LIQUIDATOR, POOL_LIQUIDITY, USDC, refresh_prices

DAY = 24 * 60 * 60


@pytest.fixture()
def leveraged(protocol):
    """1 WETH at $2500 backing 1900 USDC of debt"""
    position_id = protocol.open_position(ALICE, "WETH")
    protocol.supply_collateral(ALICE, position_id, "WETH", ETHER)
    protocol.borrow(ALICE, position_id, 1_900 * USDC)
    return position_id


def test_price_drop_makes_position_liquidatable(protocol, feeds, clock, leveraged):
    assert not protocol.is_liquidatable(ALICE, leveraged)

    feeds["ETH/USD"].push_price(2250, clock.now)
    assert protocol.calculate_liquidation_value(ALICE, leveraged) == 1_912_500_000
    assert not protocol.is_liquidatable(ALICE, leveraged)
    assert protocol.health_factor(ALICE, leveraged) == 1_006_578

    feeds["ETH/USD"].push_price(2225, clock.now)
    assert protocol.calculate_liquidation_value(ALICE, leveraged) == 1_891_250_000
    assert protocol.is_liquidatable(ALICE, leveraged)
    assert protocol.health_factor(ALICE, leveraged) == 995_394

    feeds["ETH/USD"].push_price(2300, clock.now)
    assert not protocol.is_liquidatable(ALICE, leveraged)
    assert protocol.health_factor(ALICE, leveraged) >= HEALTH_FACTOR_SCALE


def test_debt_equal_to_liquidation_value_is_healthy(protocol, feeds, clock):
    position_id = protocol.open_position(ALICE, "WETH")
    protocol.supply_collateral(ALICE, position_id, "WETH", ETHER)
    protocol.borrow(ALICE, position_id, 1_700 * USDC)

    feeds["ETH/USD"].push_price(2000, clock.now)
    assert protocol.calculate_liquidation_value(ALICE, position_id) == 1_700 * USDC
    assert protocol.health_factor(ALICE, position_id) == HEALTH_FACTOR_SCALE
    assert not protocol.is_liquidatable(ALICE, position_id)

    feeds["ETH/USD"].push_price(1999, clock.now)
    assert protocol.is_liquidatable(ALICE, position_id)
    assert protocol.health_factor(ALICE, position_id) < HEALTH_FACTOR_SCALE


def test_interest_alone_can_push_position_under(protocol, feeds, clock):
    position_id = protocol.open_position(ALICE, "DAI")
    protocol.supply_collateral(ALICE, position_id, "DAI", 1_000 * ETHER)
    protocol.borrow(ALICE, position_id, 900 * USDC)

    clock.advance(150 * DAY)
    refresh_prices(feeds, clock)
    assert not protocol.is_liquidatable(ALICE, position_id)

    # roughly 11% a year on a 95% liquidation threshold
    clock.advance(215 * DAY)
    refresh_prices(feeds, clock)
    assert protocol.calculate_debt_with_interest(ALICE, position_id) > 950 * USDC
    assert protocol.is_liquidatable(ALICE, position_id)

    # Nothing was committed by the views
    assert protocol.get_position(ALICE, position_id).debt_amount == 900 * USDC


def test_no_debt_is_never_liquidatable(protocol):
    position_id = protocol.open_position(ALICE, "WETH")
    protocol.supply_collateral(ALICE, position_id, "WETH", ETHER)
    assert protocol.health_factor(ALICE, position_id) == MAX_HEALTH_FACTOR
    with pytest.raises(NotLiquidatable) as exc_info:
        protocol.liquidate(LIQUIDATOR, ALICE, position_id)
    assert exc_info.value.health_factor == MAX_HEALTH_FACTOR


def test_healthy_position_cannot_be_liquidated(protocol, leveraged):
    with pytest.raises(NotLiquidatable) as exc_info:
        protocol.liquidate(LIQUIDATOR, ALICE, leveraged)
    assert exc_info.value.health_factor > HEALTH_FACTOR_SCALE


def test_liquidation_flow(protocol, usdc, feeds, clock, leveraged):
    feeds["ETH/USD"].push_price(2225, clock.now)
    usdc.mint(LIQUIDATOR, 2_000 * USDC)

    debt, fee = protocol.liquidate(LIQUIDATOR, ALICE, leveraged)

    assert debt == 1_900 * USDC
    assert fee == 38 * USDC  # 2% for CROSS_A
    assert usdc.balance_of(LIQUIDATOR) == 62 * USDC
    assert usdc.balance_of(PROTOCOL_ACCOUNT) == POOL_LIQUIDITY + 38 * USDC
    assert protocol.collateral_token("WETH").balance_of(LIQUIDATOR) == ETHER
    assert protocol.get_asset_tvl("WETH") == 0
    assert protocol.market.pool.total_borrow == 0

    position = protocol.get_position(ALICE, leveraged)
    assert position.status == PositionStatus.LIQUIDATED
    assert position.debt_amount == 0
    assert position.collateral == {}
    assert protocol.market.events.of_type(PositionLiquidated) == [
        PositionLiquidated(ALICE, leveraged, LIQUIDATOR, debt, fee)
    ]

    with pytest.raises(InactivePosition):
        protocol.repay(ALICE, leveraged, USDC)


def test_liquidator_must_cover_debt_and_fee(protocol, usdc, feeds, clock, leveraged):
    feeds["ETH/USD"].push_price(2225, clock.now)
    usdc.mint(LIQUIDATOR, 1_900 * USDC)

    with pytest.raises(InsufficientTokenBalance):
        protocol.liquidate(LIQUIDATOR, ALICE, leveraged)

    position = protocol.get_position(ALICE, leveraged)
    assert position.status == PositionStatus.ACTIVE
    assert position.collateral == {"WETH": ETHER}
    assert usdc.balance_of(LIQUIDATOR) == 1_900 * USDC


def test_fee_follows_riskiest_tier(protocol, usdc, feeds, clock):
    position_id = protocol.open_position(ALICE, "DAI")
    protocol.supply_collateral(ALICE, position_id, "DAI", 1_000 * ETHER)
    protocol.supply_collateral(ALICE, position_id, "WBTC", BTC // 100)
    # credit 900 + 420
    protocol.borrow(ALICE, position_id, 1_300 * USDC)

    feeds["BTC/USD"].push_price(40_000, clock.now)
    assert protocol.get_position_tier(ALICE, position_id) == Tier.CROSS_B
    assert protocol.is_liquidatable(ALICE, position_id)

    usdc.mint(LIQUIDATOR, 2_000 * USDC)
    debt, fee = protocol.liquidate(LIQUIDATOR, ALICE, position_id)
    assert fee == debt * 3 // 100
    assert protocol.get_liquidation_fee(Tier.CROSS_B) == 3 * 10**16


def test_liquidation_commits_interest(protocol, usdc, feeds, clock, leveraged):
    clock.advance(30 * DAY)
    refresh_prices(feeds, clock)
    feeds["ETH/USD"].push_price(2225, clock.now)

    owed = protocol.calculate_debt_with_interest(ALICE, leveraged)
    usdc.mint(LIQUIDATOR, 3_000 * USDC)
    debt, _ = protocol.liquidate(LIQUIDATOR, ALICE, leveraged)

    assert debt == owed > 1_900 * USDC
    assert protocol.market.pool.total_accrued_borrower_interest == owed - 1_900 * USDC
