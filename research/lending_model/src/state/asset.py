"""Collateral asset configuration and per-asset deposits"""
from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Dict, List

from ..constants import THRESHOLD_SCALE
from ..errors import AssetCapacityReached, AssetNotListed, InvalidAssetConfig


class Tier(IntEnum):
    """Risk tier, ordered by increasing risk"""
    STABLE = 0
    CROSS_A = 1
    CROSS_B = 2
    ISOLATED = 3


@dataclass(frozen=True)
class Asset:
    """Represents a listed collateral asset"""
    asset: str  # Token handle
    oracle: str  # Price feed name
    oracle_decimals: int
    decimals: int
    max_supply: int  # Cap on total deposits in asset units
    active: bool = True
    borrow_threshold: int = 800  # Per-mille of USD value usable as credit
    liquidation_threshold: int = 850  # Per-mille of USD value before liquidation
    tier: Tier = Tier.CROSS_A
    isolation_debt_cap: int = 0  # Base units, enforced while ISOLATED, 0 = unbounded

    def validate(self) -> None:
        if not 0 < self.borrow_threshold <= THRESHOLD_SCALE:
            raise InvalidAssetConfig(self.asset, "borrow threshold out of range")
        if not 0 < self.liquidation_threshold <= THRESHOLD_SCALE:
            raise InvalidAssetConfig(self.asset, "liquidation threshold out of range")
        if self.liquidation_threshold < self.borrow_threshold:
            raise InvalidAssetConfig(
                self.asset, "liquidation threshold below borrow threshold"
            )
        if self.decimals < 0 or self.oracle_decimals < 0:
            raise InvalidAssetConfig(self.asset, "negative decimals")
        if self.max_supply < 0 or self.isolation_debt_cap < 0:
            raise InvalidAssetConfig(self.asset, "negative cap")

    @property
    def debt_cap(self) -> int:
        """Isolation debt cap in force, 0 when the tier is not ISOLATED"""
        return self.isolation_debt_cap if self.tier == Tier.ISOLATED else 0


class AssetRegistry:
    """Listed assets in listing order, plus total deposits (TVL) per asset"""

    def __init__(self, base_asset: str):
        self.base_asset = base_asset
        self._assets: Dict[str, Asset] = {}
        self._tvl: Dict[str, int] = {}

    def upsert_asset(self, asset: Asset) -> bool:
        """Insert or overwrite an asset config, returns True if newly listed"""
        if asset.asset == self.base_asset:
            raise InvalidAssetConfig(asset.asset, "base asset cannot be collateral")
        asset.validate()
        is_new = asset.asset not in self._assets
        self._assets[asset.asset] = asset
        if is_new:
            self._tvl[asset.asset] = 0
        return is_new

    def set_tier(self, asset: str, tier: Tier) -> Asset:
        """Change the tier only, a stored isolation debt cap is kept"""
        updated = replace(self.get_asset(asset), tier=Tier(tier))
        self._assets[asset] = updated
        return updated

    def get_asset(self, asset: str) -> Asset:
        try:
            return self._assets[asset]
        except KeyError:
            raise AssetNotListed(asset) from None

    def is_listed(self, asset: str) -> bool:
        return asset in self._assets

    def listed_assets(self) -> List[str]:
        return list(self._assets)

    def tvl(self, asset: str) -> int:
        self.get_asset(asset)
        return self._tvl[asset]

    def check_capacity(self, asset: str, amount: int) -> None:
        config = self.get_asset(asset)
        available = max(config.max_supply - self._tvl[asset], 0)
        if amount > available:
            raise AssetCapacityReached(asset, amount, available)

    def deposit(self, asset: str, amount: int) -> None:
        """Record a deposit against the asset's supply cap"""
        self.check_capacity(asset, amount)
        self._tvl[asset] += amount

    def withdraw(self, asset: str, amount: int) -> None:
        if amount > self._tvl[asset]:
            raise ValueError(f"Insufficient {asset} deposits")
        self._tvl[asset] -= amount
