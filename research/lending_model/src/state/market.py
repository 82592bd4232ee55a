"""Everything an instruction reads or mutates"""
from dataclasses import dataclass, field
from typing import Dict

from ..clock import Clock
from ..constants import DEFAULT_TREASURY, PROTOCOL_ACCOUNT
from ..errors import InvalidAssetConfig
from ..events import EventLog
from ..oracle.price_feed import PriceFeed
from ..oracle.validator import OraclePriceValidator
from .asset import AssetRegistry
from .pool import PoolState
from .position import PositionLedger
from .protocol_config import RateConfig
from .token import Token


@dataclass
class Market:
    base_token: Token
    share_token: Token
    clock: Clock
    validator: OraclePriceValidator
    registry: AssetRegistry
    ledger: PositionLedger = field(default_factory=PositionLedger)
    pool: PoolState = field(default_factory=PoolState)
    rate_config: RateConfig = field(default_factory=RateConfig)
    collateral_tokens: Dict[str, Token] = field(default_factory=dict)
    feeds: Dict[str, PriceFeed] = field(default_factory=dict)
    treasury: str = DEFAULT_TREASURY
    events: EventLog = field(default_factory=EventLog)

    @property
    def base_decimals(self) -> int:
        return self.base_token.decimals

    @property
    def cash(self) -> int:
        """Base asset held by the protocol"""
        return self.base_token.balance_of(PROTOCOL_ACCOUNT)

    def collateral_token(self, asset: str) -> Token:
        token = self.collateral_tokens.get(asset)
        if token is None:
            token = self.collateral_tokens[asset] = Token(
                asset, self.registry.get_asset(asset).decimals
            )
        return token

    def feed_for(self, asset: str) -> PriceFeed:
        oracle = self.registry.get_asset(asset).oracle
        try:
            return self.feeds[oracle]
        except KeyError:
            raise InvalidAssetConfig(asset, f"no price feed named {oracle}") from None

    def price_of(self, asset: str) -> int:
        """Validated price in the asset's oracle decimals"""
        return self.validator.validate(self.feed_for(asset))
