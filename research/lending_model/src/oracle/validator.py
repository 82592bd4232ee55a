"""Price validation applied on every valuation"""
import logging

from ..clock import Clock
from ..constants import (
    ORACLE_MAX_PRICE_CHANGE_PCT,
    ORACLE_TIMEOUT,
    ORACLE_VOLATILITY_WINDOW,
)
from ..errors import (
    OracleInvalidPrice,
    OracleInvalidPriceVolatility,
    OracleStalePrice,
    OracleTimeout,
)
from .price_feed import PriceFeed

logger = logging.getLogger(__name__)


class OraclePriceValidator:
    """Returns a feed's latest price or raises the reason it can't be trusted.

    Checks run in a fixed order: non-positive answer, round answered in an
    older round, age beyond ``timeout`` (the boundary itself is accepted),
    and finally a volatility check against the previous round. A move of
    more than ``max_change_pct`` is only rejected when the round is at
    least ``volatility_window`` seconds old.
    """

    def __init__(
        self,
        clock: Clock,
        timeout: int = ORACLE_TIMEOUT,
        volatility_window: int = ORACLE_VOLATILITY_WINDOW,
        max_change_pct: int = ORACLE_MAX_PRICE_CHANGE_PCT,
    ):
        self.clock = clock
        self.timeout = timeout
        self.volatility_window = volatility_window
        self.max_change_pct = max_change_pct

    def validate(self, feed: PriceFeed) -> int:
        latest = feed.latest_round_data()
        price = latest.answer

        if price <= 0:
            raise OracleInvalidPrice(feed.name, price)

        if latest.answered_in_round < latest.round_id:
            raise OracleStalePrice(feed.name, latest.round_id, latest.answered_in_round)

        now = self.clock.now
        age = now - latest.updated_at
        if age > self.timeout:
            raise OracleTimeout(feed.name, latest.updated_at, now, self.timeout)

        if latest.round_id > 1:
            previous = feed.get_round_data(latest.round_id - 1)
            if previous.answer > 0 and previous.updated_at > 0:
                delta = abs(price - previous.answer)
                if delta * 100 > self.max_change_pct * previous.answer and age >= self.volatility_window:
                    change_pct = delta * 100 // previous.answer
                    logger.warning(
                        "Rejecting %s: %s%% move on a round %ss old", feed.name, change_pct, age
                    )
                    raise OracleInvalidPriceVolatility(feed.name, price, change_pct)

        return price
