"""Application configuration helpers.

Every value has a default matching the directory we harvest by default, so a
bare ``houzz-harvest`` run works without any environment at all. Environment
variables (or a ``.env`` file) only exist to point the harvester somewhere else
or to slow it down.
"""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://www.houzz.com/professionals/general-contractor/probr0-bo~t_11786"
DEFAULT_PROFILE_PREFIX = "https://www.houzz.com/professionals/"
DEFAULT_LISTING_MARKER = "probr0-bo~"
DEFAULT_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 Chrome/120 Safari/537.36"


class ConfigError(RuntimeError):
    """Raised when configuration values are unusable."""


@dataclass(frozen=True)
class Settings:
    base_url: str = DEFAULT_BASE_URL
    profile_prefix: str = DEFAULT_PROFILE_PREFIX
    listing_marker: str = DEFAULT_LISTING_MARKER
    start_fi: int = 1
    end_fi: int = 1425
    step: int = 15
    page_sleep_ms: int = 20000
    business_sleep_ms: int = 2000
    listing_settle_ms: int = 3000
    scroll_settle_ms: int = 5000
    business_settle_ms: int = 2500
    navigation_timeout_ms: int = 60000
    output_json: str = "houzz_businesses.json"
    output_xlsx: str = "houzz_businesses.xlsx"
    headless: bool = True
    user_agent: str = DEFAULT_USER_AGENT
    viewport_width: int = 1280
    viewport_height: int = 800


def _get_int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc


def validate_range(start: int, end: int, step: int) -> None:
    """Reject pagination ranges the harvester cannot walk."""
    if step <= 0:
        raise ConfigError(f"pagination step must be positive, got {step}")
    if end < start:
        raise ConfigError(f"pagination end ({end}) is before start ({start})")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    start_fi = _get_int_env("HARVEST_START_FI", Settings.start_fi)
    end_fi = _get_int_env("HARVEST_END_FI", Settings.end_fi)
    step = _get_int_env("HARVEST_STEP", Settings.step)
    validate_range(start_fi, end_fi, step)

    headless = os.getenv("HARVEST_HEADLESS", "true").lower() in {"1", "true", "yes"}

    settings = Settings(
        base_url=os.getenv("HARVEST_BASE_URL") or DEFAULT_BASE_URL,
        profile_prefix=os.getenv("HARVEST_PROFILE_PREFIX") or DEFAULT_PROFILE_PREFIX,
        listing_marker=os.getenv("HARVEST_LISTING_MARKER") or DEFAULT_LISTING_MARKER,
        start_fi=start_fi,
        end_fi=end_fi,
        step=step,
        page_sleep_ms=_get_int_env("HARVEST_PAGE_SLEEP_MS", Settings.page_sleep_ms),
        business_sleep_ms=_get_int_env("HARVEST_BUSINESS_SLEEP_MS", Settings.business_sleep_ms),
        listing_settle_ms=_get_int_env("HARVEST_LISTING_SETTLE_MS", Settings.listing_settle_ms),
        scroll_settle_ms=_get_int_env("HARVEST_SCROLL_SETTLE_MS", Settings.scroll_settle_ms),
        business_settle_ms=_get_int_env("HARVEST_BUSINESS_SETTLE_MS", Settings.business_settle_ms),
        navigation_timeout_ms=_get_int_env("HARVEST_NAVIGATION_TIMEOUT_MS", Settings.navigation_timeout_ms),
        output_json=os.getenv("HARVEST_OUTPUT_JSON") or Settings.output_json,
        output_xlsx=os.getenv("HARVEST_OUTPUT_XLSX") or Settings.output_xlsx,
        headless=headless,
    )

    if settings.page_sleep_ms < settings.business_sleep_ms:
        logger.warning(
            "HARVEST_PAGE_SLEEP_MS (%s) is shorter than HARVEST_BUSINESS_SLEEP_MS (%s); listing pages will be hit faster than businesses.",
            settings.page_sleep_ms,
            settings.business_sleep_ms,
        )
    if not settings.headless:
        logger.info("HARVEST_HEADLESS is off; a visible browser window will be opened.")

    return settings
