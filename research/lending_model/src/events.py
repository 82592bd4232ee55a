"""Events emitted by state changing operations"""
import logging
from dataclasses import dataclass, field
from typing import List

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Event:
    pass


@dataclass(frozen=True)
class AssetUpdated(Event):
    asset: str


@dataclass(frozen=True)
class TierUpdated(Event):
    asset: str
    tier: int


@dataclass(frozen=True)
class RateConfigUpdated(Event):
    base_borrow_rate: int


@dataclass(frozen=True)
class PauseChanged(Event):
    account: str
    paused: bool


@dataclass(frozen=True)
class PositionOpened(Event):
    owner: str
    position_id: int
    isolated: bool


@dataclass(frozen=True)
class CollateralSupplied(Event):
    owner: str
    position_id: int
    asset: str
    amount: int


@dataclass(frozen=True)
class CollateralWithdrawn(Event):
    owner: str
    position_id: int
    asset: str
    amount: int


@dataclass(frozen=True)
class InterestAccrued(Event):
    owner: str
    position_id: int
    interest: int


@dataclass(frozen=True)
class Borrowed(Event):
    owner: str
    position_id: int
    amount: int


@dataclass(frozen=True)
class Repaid(Event):
    owner: str
    position_id: int
    amount: int


@dataclass(frozen=True)
class PositionClosed(Event):
    owner: str
    position_id: int


@dataclass(frozen=True)
class PositionLiquidated(Event):
    owner: str
    position_id: int
    liquidator: str
    debt: int
    fee: int


@dataclass(frozen=True)
class LiquiditySupplied(Event):
    provider: str
    amount: int
    shares: int


@dataclass(frozen=True)
class LiquidityExchanged(Event):
    provider: str
    shares: int
    amount: int
    fee_shares: int


@dataclass
class EventLog:
    """Append-only record of emitted events"""
    events: List[Event] = field(default_factory=list)

    def emit(self, event: Event) -> None:
        self.events.append(event)
        logger.info("%s", event)

    def of_type(self, event_type: type) -> List[Event]:
        return [event for event in self.events if isinstance(event, event_type)]
