# Fixed point scale factors
INTEREST_SCALE = 1_000_000_000_000_000_000  # 1e18 for rates and utilization
RAY = 1_000_000_000_000_000_000_000_000_000  # 1e27, compounding precision
THRESHOLD_SCALE = 1_000  # Borrow/liquidation thresholds (800 = 80%)
HEALTH_FACTOR_SCALE = 1_000_000  # 1.0 health factor
EXCHANGE_RATE_SCALE = 1_000_000  # 1 share == 1 base unit
U256_MAX = 2**256 - 1

# Time constants
YEAR_IN_SECONDS = 365 * 24 * 60 * 60  # 365 days * 24 hours * 60 minutes * 60 seconds
HOUR_IN_SECONDS = 60 * 60

# Oracle constants
ORACLE_TIMEOUT = 8 * HOUR_IN_SECONDS
ORACLE_VOLATILITY_WINDOW = 1 * HOUR_IN_SECONDS  # Large moves older than this are rejected
ORACLE_MAX_PRICE_CHANGE_PCT = 20

# Base asset
DEFAULT_BASE_DECIMALS = 6

# Position constants
MAX_ASSETS_PER_POSITION = 20
MAX_HEALTH_FACTOR = 2**256 - 1  # Reported for positions without debt

# Rate model defaults (annual, INTEREST_SCALE)
DEFAULT_BASE_BORROW_RATE = INTEREST_SCALE * 6 // 100       # 6%
DEFAULT_STABLE_PREMIUM = INTEREST_SCALE * 5 // 100         # 5%
DEFAULT_CROSS_A_PREMIUM = INTEREST_SCALE * 8 // 100        # 8%
DEFAULT_CROSS_B_PREMIUM = INTEREST_SCALE * 12 // 100       # 12%
DEFAULT_ISOLATED_PREMIUM = INTEREST_SCALE * 15 // 100      # 15%
DEFAULT_OPTIMAL_UTILIZATION = INTEREST_SCALE * 80 // 100   # 80% kink
DEFAULT_SLOPE1 = INTEREST_SCALE * 4 // 100                 # 4% up to the kink
DEFAULT_SLOPE2 = INTEREST_SCALE * 60 // 100                # 60% above it
DEFAULT_BASE_PROFIT_TARGET = INTEREST_SCALE * 1 // 100     # 1%

# Liquidation fee per tier (INTEREST_SCALE)
DEFAULT_STABLE_LIQUIDATION_FEE = INTEREST_SCALE * 1 // 100
DEFAULT_CROSS_A_LIQUIDATION_FEE = INTEREST_SCALE * 2 // 100
DEFAULT_CROSS_B_LIQUIDATION_FEE = INTEREST_SCALE * 3 // 100
DEFAULT_ISOLATED_LIQUIDATION_FEE = INTEREST_SCALE * 4 // 100

# Accounts
PROTOCOL_ACCOUNT = "protocol"  # Custody of pooled cash and collateral
DEFAULT_TREASURY = "treasury"

# Roles
MANAGER_ROLE = "MANAGER_ROLE"
