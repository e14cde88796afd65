"""
tokendao Constants

This module consolidates the global constants and environment configuration
used throughout the codebase. Constants are organized by category for easy
reference and maintenance.
"""
from dotenv import dotenv_values

# =============================================================================
# ENVIRONMENT CONFIGURATION
# =============================================================================
# Load environment variables once at module import
_config = dotenv_values(".env")

LOGGER_DEFAULTS = {
    'LOG_LEVEL':                       'INFO',
    'LOG_FORMAT':                      '%(asctime)s - %(levelname)s - %(name)s - %(message)s',
    'LOG_DATE_FORMAT':                 '%Y-%m-%dT%H:%M:%S',
    'LOG_CONSOLE_HIGHLIGHTING':        'True',
    'LOG_FILE_OUTPUT':                 'False',
}

LOG_MAX_FILE_SIZE = 10 * 1024 * 1024 # 10MB
LOG_BACKUP_COUNT = 5


# ==================================================================================
# ADDRESSES
# ==================================================================================
ZERO_ADDRESS = '0x' + '00' * 20


# ==================================================================================
# TOKEN DEFAULTS
# ==================================================================================
DAO_TOKEN_NAME = 'DaoToken'
DAO_TOKEN_SYMBOL = 'DAT'
DAO_TOKEN_DECIMALS = 18
DAO_TOKEN_INITIAL_SUPPLY = 1_000_000 * 10 ** DAO_TOKEN_DECIMALS


# ==================================================================================
# GOVERNANCE DEFAULTS
# ==================================================================================
DAO_DEFAULT_MINIMAL_QUORUM = 5
DAO_DEFAULT_DEBATING_PERIOD = 7 * 24 * 60 * 60  # 7 days

# Role identifier granted to the deployer (keccak256("ADMIN_ROLE"))
ADMIN_ROLE_NAME = 'ADMIN_ROLE'

# Function signature of the call attached to proposals by the reference tooling
DAO_SAMPLE_CALL_SIGNATURE = 'myMethod(uint256,string)'


# ==================================================================================
# CONFIGURATION WRAPPERS
# ==================================================================================
class ConfigString(str):
    """
    String subclass that stores a default value.
    """
    def __new__(cls, value, default):
        obj = str.__new__(cls, value)
        obj._default = default
        return obj

    def default(self):
        return self._default

class ConfigBool(int):
    """
    Int subclass acting as a boolean that stores a default value.
    """
    def __new__(cls, value, default):
        obj = int.__new__(cls, bool(value))
        obj._default = default
        return obj

    def default(self):
        return self._default


# ==================================================================================
# DYNAMIC CONFIGURATION LOADING
# ==================================================================================
DEFAULTS = dict(LOGGER_DEFAULTS)
namespace = globals()

def parse_bool(v):
    """Map "true"/"false" strings (any casing) to bool; other values pass through."""
    if isinstance(v, str) and v.strip().casefold() in {"true", "false"}:
        return v.strip().casefold() == "true"
    return v

for key, default_raw in DEFAULTS.items():
    # dotenv_values returns strings or None. None is treated as missing.
    raw = _config.get(key)
    value_raw = default_raw if raw is None else raw

    value = parse_bool(value_raw)
    default_val = parse_bool(default_raw)

    if isinstance(value, bool):
        namespace[key] = ConfigBool(value, default_val)
    else:
        namespace[key] = ConfigString(value_raw, default_val)
