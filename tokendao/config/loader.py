"""
tokendao TOML Configuration Loader

Loads the sections of config.toml with environment variable overrides
(dataclass + from_dict + from_file).

Environment variable mapping:
    [dao] minimal_quorum       → TOKENDAO_MINIMAL_QUORUM
    [dao] debating_period      → TOKENDAO_DEBATING_PERIOD
    [dao] lock_policy          → TOKENDAO_LOCK_POLICY
    [dao] proposal_id_scheme   → TOKENDAO_PROPOSAL_ID_SCHEME
    [logging] log_level        → TOKENDAO_LOG_LEVEL
    config file path           → TOKENDAO_CONFIG
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

try:
    import tomllib as tomli  # Python 3.11+
except ImportError:
    import tomli  # type: ignore[no-redef]

from ..constants import (
    DAO_DEFAULT_DEBATING_PERIOD,
    DAO_DEFAULT_MINIMAL_QUORUM,
    DAO_TOKEN_INITIAL_SUPPLY,
    DAO_TOKEN_NAME,
    DAO_TOKEN_SYMBOL,
)
from ..exceptions import ConfigurationError
from ..logger import LogManager

logger = logging.getLogger(__name__)

LOCK_POLICIES = ("timestamp", "counter")
PROPOSAL_ID_SCHEMES = ("sequential", "block_offset")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _env_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from e


# ---------------------------------------------------------------------------
# Subsection dataclasses, one per [section] of config.example.toml
# ---------------------------------------------------------------------------


@dataclass
class DAOSectionConfig:
    """[dao] section."""
    minimal_quorum: int = DAO_DEFAULT_MINIMAL_QUORUM
    debating_period: int = DAO_DEFAULT_DEBATING_PERIOD
    lock_policy: str = "timestamp"
    proposal_id_scheme: str = "sequential"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DAOSectionConfig":
        return cls(
            minimal_quorum=data.get("minimal_quorum", DAO_DEFAULT_MINIMAL_QUORUM),
            debating_period=data.get("debating_period", DAO_DEFAULT_DEBATING_PERIOD),
            lock_policy=data.get("lock_policy", "timestamp"),
            proposal_id_scheme=data.get("proposal_id_scheme", "sequential"),
        )

    def apply_env(self) -> None:
        """Override from environment variables."""
        if v := os.environ.get("TOKENDAO_MINIMAL_QUORUM"):
            self.minimal_quorum = _env_int("TOKENDAO_MINIMAL_QUORUM", v)
        if v := os.environ.get("TOKENDAO_DEBATING_PERIOD"):
            self.debating_period = _env_int("TOKENDAO_DEBATING_PERIOD", v)
        if v := os.environ.get("TOKENDAO_LOCK_POLICY"):
            self.lock_policy = v.lower()
        if v := os.environ.get("TOKENDAO_PROPOSAL_ID_SCHEME"):
            self.proposal_id_scheme = v.lower()

    def validate(self) -> None:
        if not isinstance(self.minimal_quorum, int) or self.minimal_quorum <= 0:
            raise ConfigurationError(f"minimal_quorum must be a positive integer, got {self.minimal_quorum!r}")
        if not isinstance(self.debating_period, int) or self.debating_period <= 0:
            raise ConfigurationError(f"debating_period must be a positive integer, got {self.debating_period!r}")
        if self.lock_policy not in LOCK_POLICIES:
            raise ConfigurationError(f"Invalid lock_policy: {self.lock_policy}")
        if self.proposal_id_scheme not in PROPOSAL_ID_SCHEMES:
            raise ConfigurationError(f"Invalid proposal_id_scheme: {self.proposal_id_scheme}")


@dataclass
class TokenSectionConfig:
    """[token] section."""
    name: str = DAO_TOKEN_NAME
    symbol: str = DAO_TOKEN_SYMBOL
    initial_supply: int = DAO_TOKEN_INITIAL_SUPPLY

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TokenSectionConfig":
        return cls(
            name=data.get("name", DAO_TOKEN_NAME),
            symbol=data.get("symbol", DAO_TOKEN_SYMBOL),
            initial_supply=data.get("initial_supply", DAO_TOKEN_INITIAL_SUPPLY),
        )

    def validate(self) -> None:
        if not self.name or not self.symbol:
            raise ConfigurationError("Token name and symbol must not be empty")
        if not isinstance(self.initial_supply, int) or self.initial_supply < 0:
            raise ConfigurationError(f"initial_supply must be a non-negative integer, got {self.initial_supply!r}")


@dataclass
class LoggingSectionConfig:
    """[logging] section."""
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LoggingSectionConfig":
        return cls(log_level=str(data.get("log_level", "INFO")).upper())

    def apply_env(self) -> None:
        if v := os.environ.get("TOKENDAO_LOG_LEVEL"):
            self.log_level = v.upper()

    def validate(self) -> None:
        if self.log_level not in LOG_LEVELS:
            raise ConfigurationError(f"Invalid log_level: {self.log_level}")

    def apply(self) -> None:
        """Reconfigure the tokendao log handlers at this level."""
        LogManager().reconfigure(log_level=self.log_level)
        logger.info("Log level set to %s", self.log_level)


# -----------------------------------------------------------------------
# Top-level config
# -----------------------------------------------------------------------

@dataclass
class DAOConfig:
    """
    DAO deployment configuration.

    Loads every section of config.toml and applies environment variable
    overrides.
    """
    dao: DAOSectionConfig = field(default_factory=DAOSectionConfig)
    token: TokenSectionConfig = field(default_factory=TokenSectionConfig)
    logging: LoggingSectionConfig = field(default_factory=LoggingSectionConfig)

    # --- factories --------------------------------------------------------

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DAOConfig":
        """Create DAOConfig from a parsed TOML dict."""
        return cls(
            dao=DAOSectionConfig.from_dict(data.get("dao", {})),
            token=TokenSectionConfig.from_dict(data.get("token", {})),
            logging=LoggingSectionConfig.from_dict(data.get("logging", {})),
        )

    @classmethod
    def from_file(cls, config_path: str) -> "DAOConfig":
        """
        Load configuration from a TOML file.

        Args:
            config_path: Path to config.toml

        Returns:
            DAOConfig instance
        """
        path = Path(config_path)
        if not path.exists():
            logger.warning("Config file not found: %s, using defaults", config_path)
            cfg = cls()
            cfg.apply_env()
            return cfg

        try:
            with open(path, "rb") as f:
                raw = tomli.load(f)
        except tomli.TOMLDecodeError as e:
            raise ConfigurationError(f"Malformed config file {config_path}: {e}") from e

        cfg = cls.from_dict(raw)
        cfg.apply_env()
        return cfg

    # --- env overrides ----------------------------------------------------

    def apply_env(self) -> None:
        """Apply environment variable overrides to all sections."""
        self.dao.apply_env()
        self.logging.apply_env()

    # --- validation -------------------------------------------------------

    def validate(self) -> bool:
        """
        Validate all configuration sections.

        Returns:
            True if all valid

        Raises:
            ConfigurationError: on invalid config
        """
        self.dao.validate()
        self.token.validate()
        self.logging.validate()
        return True

    # --- serialisation ----------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dict (for diagnostics, NOT for re-creating TOML)."""
        return {
            "dao": {
                "minimal_quorum": self.dao.minimal_quorum,
                "debating_period": self.dao.debating_period,
                "lock_policy": self.dao.lock_policy,
                "proposal_id_scheme": self.dao.proposal_id_scheme,
            },
            "token": {
                "name": self.token.name,
                "symbol": self.token.symbol,
                "initial_supply": str(self.token.initial_supply),
            },
            "logging": {
                "log_level": self.logging.log_level,
            },
        }


# -----------------------------------------------------------------------
# Convenience function
# -----------------------------------------------------------------------

def load_config(path: Optional[str] = None) -> DAOConfig:
    """
    Load DAO configuration.

    Resolution order:
        1. Explicit *path* argument
        2. TOKENDAO_CONFIG env var
        3. ./config.toml in current directory
        4. Defaults (with env overrides)
    """
    if path is None:
        path = os.environ.get("TOKENDAO_CONFIG", "config.toml")

    return DAOConfig.from_file(path)
