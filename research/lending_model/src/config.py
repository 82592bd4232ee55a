"""Market configuration loader: reads a YAML market file, interpolates env vars, validates."""
import logging
import os
import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import yaml
from dotenv import load_dotenv

from .constants import DEFAULT_BASE_DECIMALS, DEFAULT_TREASURY, INTEREST_SCALE
from .state.asset import Asset, Tier
from .state.protocol_config import RateConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MarketConfig:
    base_asset: str = "USDC"
    base_decimals: int = DEFAULT_BASE_DECIMALS
    manager: str = ""
    treasury: str = DEFAULT_TREASURY
    rates: RateConfig = field(default_factory=RateConfig)
    assets: Tuple[Asset, ...] = ()


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")


def _interpolate_env(value: Any) -> Any:
    """Recursively replace ${VAR} references with environment variable values."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# YAML → dataclass builders
# ---------------------------------------------------------------------------


def _to_fixed(value: Any, scale: int, name: str) -> int:
    """Exact decimal string (or number) to a scaled integer"""
    try:
        scaled = Decimal(str(value)) * scale
    except InvalidOperation:
        raise ValueError(f"{name}: not a number: {value!r}") from None
    if scaled != scaled.to_integral_value():
        raise ValueError(f"{name}: {value} has more precision than the scale allows")
    return int(scaled)


def _build_tier_map(raw: Dict[str, Any], name: str) -> Dict[Tier, int]:
    return {
        Tier[tier_name.upper()]: _to_fixed(rate, INTEREST_SCALE, f"{name}.{tier_name}")
        for tier_name, rate in raw.items()
    }


def _build_rates(raw: Dict[str, Any]) -> RateConfig:
    defaults = RateConfig()

    def rate(key: str, default: int) -> int:
        if key not in raw:
            return default
        return _to_fixed(raw[key], INTEREST_SCALE, key)

    return RateConfig(
        base_borrow_rate=rate("base_borrow_rate", defaults.base_borrow_rate),
        tier_premiums=_build_tier_map(raw["tier_premiums"], "tier_premiums")
        if "tier_premiums" in raw
        else defaults.tier_premiums,
        optimal_utilization=rate("optimal_utilization", defaults.optimal_utilization),
        slope1=rate("slope1", defaults.slope1),
        slope2=rate("slope2", defaults.slope2),
        base_profit_target=rate("base_profit_target", defaults.base_profit_target),
        liquidation_fees=_build_tier_map(raw["liquidation_fees"], "liquidation_fees")
        if "liquidation_fees" in raw
        else defaults.liquidation_fees,
    )


def _build_asset(raw: Dict[str, Any], base_decimals: int) -> Asset:
    name = raw.get("asset", "")
    decimals = int(raw.get("decimals", 18))
    return Asset(
        asset=name,
        oracle=raw.get("oracle", ""),
        oracle_decimals=int(raw.get("oracle_decimals", 8)),
        decimals=decimals,
        max_supply=_to_fixed(raw.get("max_supply", 0), 10**decimals, f"{name}.max_supply"),
        active=bool(raw.get("active", True)),
        borrow_threshold=int(raw.get("borrow_threshold", 800)),
        liquidation_threshold=int(raw.get("liquidation_threshold", 850)),
        tier=Tier[str(raw.get("tier", "CROSS_A")).upper()],
        isolation_debt_cap=_to_fixed(
            raw.get("isolation_debt_cap", 0), 10**base_decimals, f"{name}.isolation_debt_cap"
        ),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_config(raw: Dict[str, Any]) -> MarketConfig:
    raw = _interpolate_env(raw or {})
    base = raw.get("base_asset", {})
    base_decimals = int(base.get("decimals", DEFAULT_BASE_DECIMALS))

    cfg = MarketConfig(
        base_asset=base.get("symbol", "USDC"),
        base_decimals=base_decimals,
        manager=raw.get("manager", ""),
        treasury=raw.get("treasury") or DEFAULT_TREASURY,
        rates=_build_rates(raw.get("rates", {})),
        assets=tuple(_build_asset(a, base_decimals) for a in raw.get("assets", [])),
    )
    _validate(cfg)
    return cfg


def load_config(config_path: Optional[Union[str, Path]] = None) -> MarketConfig:
    """Load and validate a market configuration from YAML + .env.

    Args:
        config_path: Path to the market file. Defaults to ``market.yaml`` in
            the repository root.
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(__file__).resolve().parents[3] / "market.yaml"
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f)

    cfg = parse_config(raw)
    logger.info("Market configuration loaded from %s (%d assets)", config_path, len(cfg.assets))
    return cfg


def _validate(cfg: MarketConfig) -> None:
    """Raise on invalid configuration."""
    if not cfg.manager:
        raise ValueError("A manager account must be configured")

    cfg.rates.validate()

    seen = set()
    for asset in cfg.assets:
        if not asset.asset:
            raise ValueError("Every asset needs a name")
        if asset.asset in seen:
            raise ValueError(f"Asset '{asset.asset}' is listed twice")
        if not asset.oracle:
            raise ValueError(f"Asset '{asset.asset}' has no oracle")
        seen.add(asset.asset)
        asset.validate()
