"""Round based price feed interface and an in-memory implementation"""
from dataclasses import dataclass
from typing import List, Optional, Protocol


@dataclass(frozen=True)
class RoundData:
    """One aggregator round, as reported by the feed"""
    round_id: int
    answer: int  # Price scaled by the feed's decimals, may be <= 0 on a broken feed
    started_at: int
    updated_at: int
    answered_in_round: int


class PriceFeed(Protocol):
    """USD price source for one asset"""

    @property
    def name(self) -> str: ...

    @property
    def decimals(self) -> int: ...

    def latest_round_data(self) -> RoundData: ...

    def get_round_data(self, round_id: int) -> RoundData: ...


class RoundHistoryFeed:
    """Keeps every pushed round; round ids start at 1"""

    def __init__(self, name: str, decimals: int = 8):
        self._name = name
        self._decimals = decimals
        self.rounds: List[RoundData] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def decimals(self) -> int:
        return self._decimals

    def push_round(
        self,
        answer: int,
        updated_at: int,
        answered_in_round: Optional[int] = None,
    ) -> RoundData:
        round_id = len(self.rounds) + 1
        round_data = RoundData(
            round_id=round_id,
            answer=answer,
            started_at=updated_at,
            updated_at=updated_at,
            answered_in_round=round_id if answered_in_round is None else answered_in_round,
        )
        self.rounds.append(round_data)
        return round_data

    def push_price(self, price: int, updated_at: int) -> RoundData:
        """Push a whole-dollar price scaled to the feed's decimals"""
        return self.push_round(price * 10**self._decimals, updated_at)

    def latest_round_data(self) -> RoundData:
        if not self.rounds:
            return RoundData(0, 0, 0, 0, 0)
        return self.rounds[-1]

    def get_round_data(self, round_id: int) -> RoundData:
        if round_id < 1 or round_id > len(self.rounds):
            return RoundData(round_id, 0, 0, 0, 0)
        return self.rounds[round_id - 1]

    def __repr__(self) -> str:
        return f"RoundHistoryFeed({self._name!r})"
