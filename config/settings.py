"""
Application Settings - Load from YAML configs + .env secrets

Design Philosophy:
- Service configs (hosts, pools, rate limits) → YAML files (public, versioned in git)
- Secrets (passwords, tokens) → .env file (gitignored)

Uses Pydantic for validation and type safety
"""

import logging
from zoneinfo import ZoneInfo

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.utils.config import load_yaml_safe

logger = logging.getLogger(__name__)

MIN_RPS = 1
MAX_RPS = 4


class Settings(BaseSettings):
    """
    Application settings

    Architecture:
    - Infrastructure configs → config/providers/*.yaml (public)
    - Secrets → .env (gitignored)

    Usage:
        from config.settings import get_settings

        settings = get_settings()
        print(settings.CLICKHOUSE_HOST)  # From databases.yaml
        print(settings.GROWW_ACCESS_TOKEN)  # From .env
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # Ignore extra fields in .env
    )

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Load YAML configs from files (cached at class level)
        if not hasattr(Settings, "_yaml_loaded"):
            Settings._database_config = load_yaml_safe("config/providers/databases.yaml")
            Settings._market_data_config = load_yaml_safe("config/providers/market_data.yaml")
            Settings._screener_config = load_yaml_safe("config/providers/screener.yaml")
            Settings._yaml_loaded = True

    # ============================================
    # ENVIRONMENT (.env only)
    # ============================================
    ENVIRONMENT: str = Field(default="local", description="Environment: local, dev, prod")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")

    @property
    def log_level(self) -> int:
        """LOG_LEVEL as a logging level number (INFO when unrecognized)"""
        level = logging.getLevelName(self.LOG_LEVEL.strip().upper())
        return level if isinstance(level, int) else logging.INFO

    # ============================================
    # CLICKHOUSE (from YAML + .env)
    # ============================================
    @property
    def CLICKHOUSE_HOST(self) -> str:
        """ClickHouse host from databases.yaml"""
        return self._database_config.get("clickhouse", {}).get("host", "localhost")

    @property
    def CLICKHOUSE_PORT(self) -> int:
        """ClickHouse native port from databases.yaml"""
        return self._database_config.get("clickhouse", {}).get("port", 9000)

    @property
    def CLICKHOUSE_DB(self) -> str:
        """ClickHouse database from databases.yaml"""
        return self._database_config.get("clickhouse", {}).get("database", "screener")

    @property
    def CLICKHOUSE_USER(self) -> str:
        """ClickHouse user from databases.yaml"""
        return self._database_config.get("clickhouse", {}).get("user", "screener_user")

    # ClickHouse password from .env (secret)
    CLICKHOUSE_PASSWORD: str = Field(default="screener_pass")

    @property
    def clickhouse_address(self) -> str:
        """host:port/database, without credentials (safe to log)"""
        return f"{self.CLICKHOUSE_HOST}:{self.CLICKHOUSE_PORT}/{self.CLICKHOUSE_DB}"

    # ============================================
    # MARKET (from YAML)
    # ============================================
    @property
    def MARKET_TIMEZONE(self) -> str:
        """Timezone candle days are normalized to, from market_data.yaml"""
        return self._market_data_config.get("market", {}).get("timezone", "Asia/Kolkata")

    @property
    def market_tz(self) -> ZoneInfo:
        """Market timezone as a ZoneInfo"""
        return ZoneInfo(self.MARKET_TIMEZONE)

    @property
    def MARKET_EXCHANGE(self) -> str:
        """Exchange code used for stocks read back from the store"""
        return self._market_data_config.get("market", {}).get("exchange", "NSE")

    @property
    def MARKET_SEGMENT(self) -> str:
        """Segment code used for stocks read back from the store"""
        return self._market_data_config.get("market", {}).get("segment", "CASH")

    @property
    def LOOKBACK_DAYS(self) -> int:
        """History depth fetched for a stock with nothing stored"""
        return self._market_data_config.get("market", {}).get("lookback_days", 1080)

    # ============================================
    # GROWW MARKET DATA API (from YAML + .env)
    # ============================================
    @property
    def GROWW_BASE_URL(self) -> str:
        """Groww API base URL from market_data.yaml"""
        return self._market_data_config.get("groww", {}).get("base_url", "https://api.groww.in")

    @property
    def GROWW_API_VERSION(self) -> str:
        """Groww API path version from market_data.yaml"""
        return self._market_data_config.get("groww", {}).get("api_version", "v1")

    @property
    def GROWW_X_API_VERSION(self) -> str:
        """Value of the X-API-VERSION header"""
        return str(self._market_data_config.get("groww", {}).get("x_api_version", "1.0"))

    @property
    def GROWW_TIMEOUT_SECONDS(self) -> float:
        """HTTP timeout for Groww requests"""
        return self._market_data_config.get("groww", {}).get("timeout_seconds", 10.0)

    @property
    def GROWW_RPS(self) -> int:
        """
        Requests per second against the market-data API, clamped to [MIN_RPS, MAX_RPS]

        Invalid values fall back to MAX_RPS.
        """
        raw = self._market_data_config.get("groww", {}).get("requests_per_second", MAX_RPS)
        try:
            rps = int(raw)
        except (TypeError, ValueError):
            logger.warning(f"Invalid requests_per_second {raw!r}, defaulting to {MAX_RPS}")
            return MAX_RPS
        return max(MIN_RPS, min(rps, MAX_RPS))

    # Groww access token from .env (secret)
    GROWW_ACCESS_TOKEN: str = Field(default="")

    # ============================================
    # NSE REFERENCE DATA (from YAML)
    # ============================================
    @property
    def NSE_ARCHIVE_BASE_URL(self) -> str:
        """Base URL of the NSE bhavcopy archive"""
        return self._market_data_config.get("nse", {}).get(
            "archive_base_url", "https://nsearchives.nseindia.com/archives/equities/bhavcopy/pr"
        )

    @property
    def NSE_PROBE_DAYS(self) -> int:
        """Days to probe backward for the latest archive"""
        return self._market_data_config.get("nse", {}).get("probe_days", 10)

    @property
    def NSE_TIMEOUT_SECONDS(self) -> float:
        """HTTP timeout for archive downloads"""
        return self._market_data_config.get("nse", {}).get("timeout_seconds", 30.0)

    # ============================================
    # SCREENER (from YAML)
    # ============================================
    @property
    def SCREENER_WORKERS(self) -> int:
        """Stock worker threads in the screener pool"""
        return self._screener_config.get("screener", {}).get("workers", 4)

    @property
    def SCREENER_STEP_WORKERS(self) -> int:
        """Threads shared by all step tasks"""
        return self._screener_config.get("screener", {}).get("step_workers", 32)

    @property
    def SCREENER_SOURCE_SIZE(self) -> int:
        """Capacity of the screener source channel"""
        return self._screener_config.get("screener", {}).get("source_size", 100)

    @property
    def SCREENER_SINK_SIZE(self) -> int:
        """Capacity of each strategy sink"""
        return self._screener_config.get("screener", {}).get("sink_size", 100)

    @property
    def SCREENER_DELETE_DELISTED(self) -> bool:
        """Remove delisted stocks after a completed run"""
        return self._screener_config.get("screener", {}).get("delete_delisted", True)

    @property
    def SCREENER_SYNC_BEFORE_RUN(self) -> bool:
        """Backfill stale candles before screening"""
        return self._screener_config.get("screener", {}).get("sync_before_run", True)

    @property
    def STRATEGIES_CONFIG_PATH(self) -> str:
        """Path to strategies.yaml"""
        return self._screener_config.get("screener", {}).get(
            "strategies_config", "config/providers/strategies.yaml"
        )

    @property
    def UNIVERSE_FILE(self) -> str | None:
        """Optional YAML list of stocks used instead of the NSE listing"""
        return self._screener_config.get("universe", {}).get("file")

    # ============================================
    # INGESTION (from YAML)
    # ============================================
    @property
    def INGESTION_WORKERS(self) -> int:
        """Backfill worker threads"""
        return self._screener_config.get("ingestion", {}).get("workers", 4)

    @property
    def INGESTION_QUEUE_SIZE(self) -> int:
        """Capacity of the backfill queue"""
        return self._screener_config.get("ingestion", {}).get("queue_size", 100)


# Singleton pattern
_settings_instance: Settings | None = None


def get_settings() -> Settings:
    """
    Get application settings (singleton)

    Returns:
        Settings instance

    Example:
        >>> settings = get_settings()
        >>> print(settings.SCREENER_WORKERS)
        4
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
