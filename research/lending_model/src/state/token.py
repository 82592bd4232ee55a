"""Fungible token balances: base asset, collateral tokens and pool shares"""
from collections import defaultdict
from typing import Dict

from ..errors import InsufficientTokenBalance


class Token:
    """Balance ledger for a single token"""

    def __init__(self, symbol: str, decimals: int):
        self.symbol = symbol
        self.decimals = decimals
        self.balances: Dict[str, int] = defaultdict(int)
        self.total_supply = 0

    def balance_of(self, account: str) -> int:
        return self.balances.get(account, 0)

    def require_balance(self, account: str, amount: int) -> None:
        available = self.balance_of(account)
        if available < amount:
            raise InsufficientTokenBalance(self.symbol, account, available)

    def mint(self, account: str, amount: int) -> None:
        self.balances[account] += amount
        self.total_supply += amount

    def burn(self, account: str, amount: int) -> None:
        self.require_balance(account, amount)
        self.balances[account] -= amount
        self.total_supply -= amount

    def transfer(self, sender: str, recipient: str, amount: int) -> None:
        self.require_balance(sender, amount)
        self.balances[sender] -= amount
        self.balances[recipient] += amount

    def __repr__(self) -> str:
        return f"Token({self.symbol!r}, supply={self.total_supply})"
