"""Lending protocol entry point

Wraps the instructions with the cross-cutting guards: one operation at a
time, the pause switch and manager-only configuration.
"""
import functools
import logging
import threading
from typing import Callable, Dict, Iterable, List, Optional, Tuple, TypeVar

from .clock import Clock
from .config import MarketConfig
from .constants import MANAGER_ROLE
from .errors import Paused
from .events import AssetUpdated, Event, PauseChanged, RateConfigUpdated, TierUpdated
from .instructions import interest, liquidity, positions, valuation
from .oracle.price_feed import PriceFeed
from .oracle.validator import OraclePriceValidator
from .state.asset import Asset, AssetRegistry, Tier
from .state.market import Market
from .state.position import Position
from .state.protocol_config import RateConfig
from .state.roles import RoleRegistry
from .state.token import Token

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable)


def mutating(method: F) -> F:
    """Serialize the call and refuse it while paused"""

    @functools.wraps(method)
    def wrapper(self: "LendingProtocol", *args, **kwargs):
        with self._lock:
            if self._paused:
                raise Paused()
            return method(self, *args, **kwargs)

    return wrapper


def managed(method: F) -> F:
    """Mutating call restricted to MANAGER_ROLE; the caller is the first argument"""

    @functools.wraps(method)
    def wrapper(self: "LendingProtocol", caller: str, *args, **kwargs):
        self.roles.require_role(MANAGER_ROLE, caller)
        return method(self, caller, *args, **kwargs)

    return mutating(wrapper)


class LendingProtocol:
    def __init__(
        self,
        base_token: Token,
        clock: Clock,
        manager: str,
        treasury: Optional[str] = None,
        rate_config: Optional[RateConfig] = None,
        feeds: Iterable[PriceFeed] = (),
        validator: Optional[OraclePriceValidator] = None,
    ):
        rate_config = rate_config or RateConfig()
        rate_config.validate()

        self.roles = RoleRegistry()
        self.roles.grant_role(MANAGER_ROLE, manager)
        self.market = Market(
            base_token=base_token,
            share_token=Token(f"lp{base_token.symbol}", base_token.decimals),
            clock=clock,
            validator=validator or OraclePriceValidator(clock),
            registry=AssetRegistry(base_token.symbol),
            rate_config=rate_config,
            feeds={feed.name: feed for feed in feeds},
        )
        if treasury is not None:
            self.market.treasury = treasury
        self._lock = threading.RLock()
        self._paused = False

    @classmethod
    def from_config(
        cls, config: MarketConfig, clock: Clock, feeds: Iterable[PriceFeed]
    ) -> "LendingProtocol":
        """Build a market with every configured asset listed"""
        protocol = cls(
            base_token=Token(config.base_asset, config.base_decimals),
            clock=clock,
            manager=config.manager,
            treasury=config.treasury,
            rate_config=config.rates,
            feeds=feeds,
        )
        for asset in config.assets:
            protocol.upsert_asset(config.manager, asset)
        return protocol

    # Configuration

    @managed
    def add_price_feed(self, caller: str, feed: PriceFeed) -> None:
        self.market.feeds[feed.name] = feed

    @managed
    def upsert_asset(self, caller: str, asset: Asset) -> None:
        is_new = self.market.registry.upsert_asset(asset)
        logger.info("%s asset %s (tier %s)", "Listed" if is_new else "Updated", asset.asset, asset.tier.name)
        self.market.events.emit(AssetUpdated(asset.asset))

    @managed
    def set_tier(self, caller: str, asset: str, tier: Tier) -> None:
        updated = self.market.registry.set_tier(asset, tier)
        self.market.events.emit(TierUpdated(asset, int(updated.tier)))

    @managed
    def update_rate_config(self, caller: str, rate_config: RateConfig) -> None:
        rate_config.validate()
        self.market.rate_config = rate_config
        self.market.events.emit(RateConfigUpdated(rate_config.base_borrow_rate))

    def pause(self, caller: str) -> None:
        self._set_paused(caller, True)

    def unpause(self, caller: str) -> None:
        self._set_paused(caller, False)

    def _set_paused(self, caller: str, paused: bool) -> None:
        self.roles.require_role(MANAGER_ROLE, caller)
        with self._lock:
            self._paused = paused
            self.market.events.emit(PauseChanged(caller, paused))

    @property
    def paused(self) -> bool:
        return self._paused

    # Positions

    @mutating
    def open_position(self, owner: str, asset: str, isolated: bool = False) -> int:
        return positions.open_position(self.market, owner, asset, isolated)

    @mutating
    def supply_collateral(self, owner: str, position_id: int, asset: str, amount: int) -> None:
        positions.supply_collateral(self.market, owner, position_id, asset, amount)

    @mutating
    def withdraw_collateral(self, owner: str, position_id: int, asset: str, amount: int) -> None:
        positions.withdraw_collateral(self.market, owner, position_id, asset, amount)

    @mutating
    def borrow(self, owner: str, position_id: int, amount: int) -> None:
        positions.borrow(self.market, owner, position_id, amount)

    @mutating
    def repay(self, owner: str, position_id: int, amount: int) -> int:
        return positions.repay(self.market, owner, position_id, amount)

    @mutating
    def exit_position(self, owner: str, position_id: int) -> int:
        return positions.exit_position(self.market, owner, position_id)

    @mutating
    def liquidate(self, liquidator: str, owner: str, position_id: int) -> Tuple[int, int]:
        return positions.liquidate(self.market, liquidator, owner, position_id)

    # Liquidity

    @mutating
    def supply_liquidity(self, provider: str, amount: int) -> int:
        return liquidity.supply_liquidity(self.market, provider, amount)

    @mutating
    def exchange(self, provider: str, shares: int) -> int:
        return liquidity.exchange(self.market, provider, shares)

    # Views

    def get_asset(self, asset: str) -> Asset:
        return self.market.registry.get_asset(asset)

    def listed_assets(self) -> List[str]:
        return self.market.registry.listed_assets()

    def get_asset_tvl(self, asset: str) -> int:
        return self.market.registry.tvl(asset)

    def collateral_token(self, asset: str) -> Token:
        return self.market.collateral_token(asset)

    def get_position(self, owner: str, position_id: int) -> Position:
        """Copy of the position, changes to it are not written back"""
        return self.market.ledger.get(owner, position_id).snapshot()

    def get_user_positions(self, owner: str) -> List[Position]:
        return [position.snapshot() for position in self.market.ledger.positions_of(owner)]

    def get_collateral_amount(self, owner: str, position_id: int, asset: str) -> int:
        return self.get_position(owner, position_id).balance_of(asset)

    def get_position_assets(self, owner: str, position_id: int) -> List[str]:
        return self.get_position(owner, position_id).assets

    def get_position_tier(self, owner: str, position_id: int) -> Tier:
        return interest.get_highest_tier(self.get_position(owner, position_id), self.market.registry)

    def get_position_summary(self, owner: str, position_id: int) -> positions.PositionSummary:
        return positions.get_position_summary(self.market, owner, position_id)

    def calculate_collateral_value(self, owner: str, position_id: int) -> int:
        return valuation.calculate_collateral_value(self.market, owner, position_id)

    def calculate_credit_limit(self, owner: str, position_id: int) -> int:
        return valuation.calculate_credit_limit(self.market, owner, position_id)

    def calculate_liquidation_value(self, owner: str, position_id: int) -> int:
        return valuation.calculate_liquidation_value(self.market, owner, position_id)

    def calculate_debt_with_interest(self, owner: str, position_id: int) -> int:
        return interest.calculate_debt_with_interest(self.market, self.get_position(owner, position_id))

    def is_liquidatable(self, owner: str, position_id: int) -> bool:
        return valuation.is_liquidatable(self.market, owner, position_id)

    def health_factor(self, owner: str, position_id: int) -> int:
        return valuation.health_factor(self.market, owner, position_id)

    def get_borrow_rate(self, tier: Tier) -> int:
        return interest.get_borrow_rate(tier, self.market.pool, self.market.rate_config)

    def get_utilization(self) -> int:
        return interest.get_utilization(self.market.pool)

    def get_supply_rate(self) -> int:
        return liquidity.get_supply_rate(self.market)

    def get_exchange_rate(self) -> int:
        return liquidity.get_exchange_rate(self.market)

    def get_liquidation_fee(self, tier: Tier) -> int:
        return positions.get_liquidation_fee(self.market, tier)

    @property
    def events(self) -> List[Event]:
        return self.market.events.events

    @property
    def feeds(self) -> Dict[str, PriceFeed]:
        return self.market.feeds
