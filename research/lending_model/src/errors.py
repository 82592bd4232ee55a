"""Custom errors for the lending model"""


class ProtocolError(Exception):
    """Base error class for protocol errors"""
    pass


class ArithmeticOverflow(ProtocolError):
    """Error for arithmetic overflow/underflow"""
    pass


# Configuration errors

class ConfigurationError(ProtocolError):
    """Caller must fix the asset or parameter argument"""
    pass


class AssetNotListed(ConfigurationError):
    def __init__(self, asset: str):
        self.asset = asset
        super().__init__(f"Asset {asset} is not listed")


class AssetDisabled(ConfigurationError):
    def __init__(self, asset: str):
        self.asset = asset
        super().__init__(f"Asset {asset} does not accept new deposits")


class InvalidAssetConfig(ConfigurationError):
    def __init__(self, asset: str, reason: str):
        self.asset = asset
        self.reason = reason
        super().__init__(f"Invalid config for {asset}: {reason}")


class InvalidRateConfig(ConfigurationError):
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid rate config: {reason}")


class InvalidAmount(ConfigurationError):
    def __init__(self, amount: int):
        self.amount = amount
        super().__init__(f"Amount must be positive, got {amount}")


# Position state errors

class PositionStateError(ProtocolError):
    """Misuse of position semantics"""
    pass


class InvalidPosition(PositionStateError):
    def __init__(self, owner: str, position_id: int):
        self.owner = owner
        self.position_id = position_id
        super().__init__(f"Position {position_id} does not exist for {owner}")


class InactivePosition(PositionStateError):
    def __init__(self, owner: str, position_id: int):
        self.owner = owner
        self.position_id = position_id
        super().__init__(f"Position {position_id} of {owner} is not active")


class IsolationModeRequired(PositionStateError):
    def __init__(self, asset: str):
        self.asset = asset
        super().__init__(f"Asset {asset} can only be used in an isolated position")


class InvalidAssetForIsolation(PositionStateError):
    def __init__(self, asset: str, isolated_asset: str):
        self.asset = asset
        self.isolated_asset = isolated_asset
        super().__init__(
            f"Isolated position holds {isolated_asset}, cannot add {asset}"
        )


class NoIsolatedCollateral(PositionStateError):
    def __init__(self, owner: str, position_id: int):
        self.owner = owner
        self.position_id = position_id
        super().__init__(f"Isolated position {position_id} of {owner} has no collateral")


class MaximumAssetsReached(PositionStateError):
    def __init__(self, position_id: int, limit: int):
        self.position_id = position_id
        self.limit = limit
        super().__init__(f"Position {position_id} already holds {limit} assets")


class NotLiquidatable(PositionStateError):
    def __init__(self, owner: str, position_id: int, health_factor: int):
        self.owner = owner
        self.position_id = position_id
        self.health_factor = health_factor
        super().__init__(
            f"Position {position_id} of {owner} is healthy (health factor {health_factor})"
        )


# Solvency errors: always carry the attempted value and the computed limit

class SolvencyError(ProtocolError):
    """Operation would leave the position or pool undercollateralized"""

    def __init__(self, message: str, requested: int, limit: int):
        self.requested = requested
        self.limit = limit
        super().__init__(message)


class ExceedsCreditLimit(SolvencyError):
    def __init__(self, requested: int, limit: int):
        super().__init__(
            f"Debt of {requested} exceeds credit limit {limit}", requested, limit
        )


class WithdrawalExceedsCreditLimit(SolvencyError):
    def __init__(self, debt: int, limit: int):
        super().__init__(
            f"Debt of {debt} exceeds credit limit {limit} after withdrawal", debt, limit
        )


class IsolationDebtCapExceeded(SolvencyError):
    def __init__(self, asset: str, requested: int, cap: int):
        self.asset = asset
        super().__init__(
            f"Debt of {requested} exceeds isolation debt cap {cap} for {asset}",
            requested,
            cap,
        )


class InsufficientLiquidity(SolvencyError):
    def __init__(self, requested: int, available: int):
        super().__init__(
            f"Requested {requested} but the pool only holds {available}",
            requested,
            available,
        )


class InsufficientCollateralBalance(SolvencyError):
    def __init__(self, asset: str, requested: int, available: int):
        self.asset = asset
        super().__init__(
            f"Requested {requested} {asset} but position holds {available}",
            requested,
            available,
        )


class AssetCapacityReached(SolvencyError):
    def __init__(self, asset: str, requested: int, available: int):
        self.asset = asset
        super().__init__(
            f"Supplying {requested} {asset} exceeds remaining capacity {available}",
            requested,
            available,
        )


# Oracle errors: transient, caller may retry once the feed updates

class OracleError(ProtocolError):
    """Error for invalid or stale price data"""

    def __init__(self, message: str, feed: str):
        self.feed = feed
        super().__init__(message)


class OracleInvalidPrice(OracleError):
    def __init__(self, feed: str, price: int):
        self.price = price
        super().__init__(f"Feed {feed} reported non-positive price {price}", feed)


class OracleStalePrice(OracleError):
    def __init__(self, feed: str, round_id: int, answered_in_round: int):
        self.round_id = round_id
        self.answered_in_round = answered_in_round
        super().__init__(
            f"Feed {feed} round {round_id} answered in older round {answered_in_round}",
            feed,
        )


class OracleTimeout(OracleError):
    def __init__(self, feed: str, updated_at: int, now: int, timeout: int):
        self.updated_at = updated_at
        self.now = now
        self.timeout = timeout
        super().__init__(
            f"Feed {feed} last updated at {updated_at}, older than {timeout}s at {now}",
            feed,
        )


class OracleInvalidPriceVolatility(OracleError):
    def __init__(self, feed: str, price: int, change_pct: int):
        self.price = price
        self.change_pct = change_pct
        super().__init__(
            f"Feed {feed} moved {change_pct}% to {price} on a stale round", feed
        )


# Funds errors

class FundsError(ProtocolError):
    pass


class InsufficientTokenBalance(FundsError):
    def __init__(self, token: str, who: str, available: int):
        self.token = token
        self.who = who
        self.available = available
        super().__init__(f"{who} holds only {available} {token}")


# Access errors

class AccessError(ProtocolError):
    pass


class Paused(AccessError):
    def __init__(self):
        super().__init__("Protocol is paused")


class Unauthorized(AccessError):
    def __init__(self, account: str, role: str):
        self.account = account
        self.role = role
        super().__init__(f"{account} is missing role {role}")
