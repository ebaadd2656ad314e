"""
Core Module - Constants.

============================================================
RESPONSIBILITY
============================================================
Engine-wide constants shared by collectors, scorer and
orchestrator.

============================================================
"""

# ============================================================
# SYSTEM CONSTANTS
# ============================================================

SYSTEM_NAME = "ecosystem-intel"
SYSTEM_VERSION = "1.0.0"

# ============================================================
# SCHEDULING
# ============================================================

DEFAULT_REFRESH_INTERVAL_SECONDS = 300
DEFAULT_COLLECTOR_TIMEOUT_SECONDS = 10.0
HISTORY_CAPACITY = 10

# ============================================================
# SCORE RANGE
# ============================================================

MIN_SCORE = 0
MAX_SCORE = 100
DEGENERATE_RANGE_SCORE = 50

# ============================================================
# DOMAIN NAMES
# ============================================================

DOMAIN_CODE_ACTIVITY = "code_activity"
DOMAIN_MARKET = "market"
DOMAIN_NEWS = "news"
DOMAIN_GEO = "geo"
DOMAIN_SOCIAL = "social"

ALL_DOMAINS = (
    DOMAIN_CODE_ACTIVITY,
    DOMAIN_MARKET,
    DOMAIN_NEWS,
    DOMAIN_GEO,
    DOMAIN_SOCIAL,
)
