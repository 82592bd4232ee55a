"""Position state management"""
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Optional

from ..errors import InactivePosition, InsufficientCollateralBalance, InvalidPosition


class PositionStatus(Enum):
    ACTIVE = "active"
    CLOSED = "closed"
    LIQUIDATED = "liquidated"


@dataclass
class Position:
    """Represents a borrowing position owned by a single account"""
    owner: str
    position_id: int  # Per-owner sequential index
    is_isolated: bool
    isolated_asset: Optional[str] = None  # Set for isolated positions only
    debt_amount: int = 0  # Base units, including interest committed so far
    last_interest_accrual: int = 0
    status: PositionStatus = PositionStatus.ACTIVE
    collateral: Dict[str, int] = field(default_factory=dict)  # Only non-zero balances

    @property
    def is_active(self) -> bool:
        return self.status == PositionStatus.ACTIVE

    @property
    def assets(self) -> List[str]:
        return list(self.collateral)

    def snapshot(self) -> "Position":
        """Detached copy for read-only callers"""
        return replace(self, collateral=dict(self.collateral))

    def balance_of(self, asset: str) -> int:
        return self.collateral.get(asset, 0)

    def add_collateral(self, asset: str, amount: int) -> None:
        """Update position collateral"""
        self.collateral[asset] = self.collateral.get(asset, 0) + amount

    def remove_collateral(self, asset: str, amount: int) -> None:
        available = self.balance_of(asset)
        if amount > available:
            raise InsufficientCollateralBalance(asset, amount, available)
        if amount == available:
            del self.collateral[asset]
        else:
            self.collateral[asset] = available - amount

    def update_debt(self, amount_change: int) -> None:
        """Update position debt"""
        if amount_change < 0 and self.debt_amount < abs(amount_change):
            raise ValueError("Insufficient debt")
        self.debt_amount += amount_change


class PositionLedger:
    """Positions per owner, indexed by position id"""

    def __init__(self):
        self._positions: Dict[str, List[Position]] = {}

    def open(
        self,
        owner: str,
        is_isolated: bool,
        isolated_asset: Optional[str],
        timestamp: int,
    ) -> Position:
        positions = self._positions.setdefault(owner, [])
        position = Position(
            owner=owner,
            position_id=len(positions),
            is_isolated=is_isolated,
            isolated_asset=isolated_asset if is_isolated else None,
            last_interest_accrual=timestamp,
        )
        positions.append(position)
        return position

    def get(self, owner: str, position_id: int) -> Position:
        positions = self._positions.get(owner, [])
        if not 0 <= position_id < len(positions):
            raise InvalidPosition(owner, position_id)
        return positions[position_id]

    def get_active(self, owner: str, position_id: int) -> Position:
        position = self.get(owner, position_id)
        if not position.is_active:
            raise InactivePosition(owner, position_id)
        return position

    def positions_of(self, owner: str) -> List[Position]:
        return list(self._positions.get(owner, []))
