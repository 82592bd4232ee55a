"""Liquidity pool totals"""
from dataclasses import dataclass


@dataclass
class PoolState:
    """Process-wide pool accounting, base asset units"""
    total_supplied_liquidity: int = 0  # Principal supplied by LPs, net of exchanges
    total_borrow: int = 0  # Outstanding debt including committed interest
    total_accrued_borrower_interest: int = 0
    total_accrued_supplier_interest: int = 0

    def update_borrow(self, debt_change: int) -> None:
        """Update pool totals when debt changes"""
        if debt_change < 0 and self.total_borrow < abs(debt_change):
            raise ValueError("Total borrow underflow")
        self.total_borrow += debt_change
