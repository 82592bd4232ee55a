"""Shared fixtures: a market with one asset per tier and a funded pool."""
from typing import Dict

import pytest

from lending_model.src.clock import Clock
from lending_model.src.oracle.price_feed import RoundHistoryFeed
from lending_model.src.protocol import LendingProtocol
from lending_model.src.state.asset import Asset, Tier
from lending_model.src.state.token import Token

START_TIME = 1_700_000_000
USDC = 10**6
ETHER = 10**18
BTC = 10**8

MANAGER = "manager"
LP = "lp"
ALICE = "alice"
BOB = "bob"
LIQUIDATOR = "liquidator"

POOL_LIQUIDITY = 1_000_000 * USDC

PRICES = {"DAI/USD": 1, "ETH/USD": 2500, "BTC/USD": 60_000, "RWA/USD": 1000}


def refresh_prices(feeds: Dict[str, RoundHistoryFeed], clock: Clock) -> None:
    """Re-publish the starting prices at the current time"""
    for name, price in PRICES.items():
        feeds[name].push_price(price, clock.now)


@pytest.fixture()
def clock() -> Clock:
    return Clock(START_TIME)


@pytest.fixture()
def feeds(clock: Clock) -> Dict[str, RoundHistoryFeed]:
    result = {}
    for name, price in PRICES.items():
        feed = RoundHistoryFeed(name, decimals=8)
        feed.push_price(price, clock.now)
        result[name] = feed
    return result


@pytest.fixture()
def assets() -> Dict[str, Asset]:
    return {
        "DAI": Asset(
            asset="DAI", oracle="DAI/USD", oracle_decimals=8, decimals=18,
            max_supply=10_000_000 * ETHER, borrow_threshold=900,
            liquidation_threshold=950, tier=Tier.STABLE,
        ),
        "WETH": Asset(
            asset="WETH", oracle="ETH/USD", oracle_decimals=8, decimals=18,
            max_supply=100_000 * ETHER, borrow_threshold=800,
            liquidation_threshold=850, tier=Tier.CROSS_A,
        ),
        "WBTC": Asset(
            asset="WBTC", oracle="BTC/USD", oracle_decimals=8, decimals=8,
            max_supply=500 * BTC, borrow_threshold=700,
            liquidation_threshold=750, tier=Tier.CROSS_B,
        ),
        "RWA": Asset(
            asset="RWA", oracle="RWA/USD", oracle_decimals=8, decimals=18,
            max_supply=1_000_000 * ETHER, borrow_threshold=650,
            liquidation_threshold=750, tier=Tier.ISOLATED,
            isolation_debt_cap=100_000 * USDC,
        ),
    }


@pytest.fixture()
def empty_protocol(clock: Clock, feeds: Dict[str, RoundHistoryFeed]) -> LendingProtocol:
    return LendingProtocol(
        base_token=Token("USDC", 6),
        clock=clock,
        manager=MANAGER,
        feeds=feeds.values(),
    )


@pytest.fixture()
def protocol(empty_protocol: LendingProtocol, assets: Dict[str, Asset]) -> LendingProtocol:
    """Every asset listed, pool funded by LP, collateral minted to alice and bob"""
    for asset in assets.values():
        empty_protocol.upsert_asset(MANAGER, asset)

    empty_protocol.market.base_token.mint(LP, POOL_LIQUIDITY)
    empty_protocol.supply_liquidity(LP, POOL_LIQUIDITY)

    for account in (ALICE, BOB):
        empty_protocol.collateral_token("DAI").mint(account, 100_000 * ETHER)
        empty_protocol.collateral_token("WETH").mint(account, 100 * ETHER)
        empty_protocol.collateral_token("WBTC").mint(account, 10 * BTC)
        empty_protocol.collateral_token("RWA").mint(account, 1_000 * ETHER)
    return empty_protocol


@pytest.fixture()
def usdc(protocol: LendingProtocol) -> Token:
    return protocol.market.base_token
