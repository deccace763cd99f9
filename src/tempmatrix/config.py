"""Runtime settings read from the environment (.env supported)."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from tempmatrix.models import LegendDomain

_ROOT = Path(__file__).parent.parent.parent

MALFORMED_POLICIES = ("propagate", "skip", "raise")


class ConfigError(ValueError):
    """An environment variable holds an unusable value."""


@dataclass(frozen=True)
class Settings:
    data_path: Path = _ROOT / "data" / "temperature_daily.csv"
    site_dir: Path = _ROOT / "site"
    window_years: int = 10
    legend_domain: LegendDomain = LegendDomain.FIXED
    malformed_policy: str = "propagate"
    host: str = "127.0.0.1"
    port: int = 3000


def _int_env(name: str, default: int, minimum: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer (got {raw!r})") from exc
    if value < minimum:
        raise ConfigError(f"{name} must be >= {minimum} (got {value})")
    return value


def load_settings() -> Settings:
    """Build Settings from TEMPMATRIX_* environment variables.

    Unset variables fall back to the Settings defaults.

    Raises:
        ConfigError: When a variable is set to a value that cannot be used.
    """
    load_dotenv()
    defaults = Settings()

    domain_raw = os.environ.get("TEMPMATRIX_LEGEND_DOMAIN", defaults.legend_domain.value)
    try:
        legend_domain = LegendDomain(domain_raw.strip().lower())
    except ValueError as exc:
        raise ConfigError(
            f"TEMPMATRIX_LEGEND_DOMAIN must be 'fixed' or 'data' (got {domain_raw!r})"
        ) from exc

    policy = os.environ.get("TEMPMATRIX_MALFORMED", defaults.malformed_policy).strip().lower()
    if policy not in MALFORMED_POLICIES:
        raise ConfigError(
            f"TEMPMATRIX_MALFORMED must be one of {', '.join(MALFORMED_POLICIES)} (got {policy!r})"
        )

    data_path = os.environ.get("TEMPMATRIX_DATA_PATH")
    site_dir = os.environ.get("TEMPMATRIX_SITE_DIR")

    return Settings(
        data_path=Path(data_path) if data_path else defaults.data_path,
        site_dir=Path(site_dir) if site_dir else defaults.site_dir,
        window_years=_int_env("TEMPMATRIX_WINDOW_YEARS", defaults.window_years, 1),
        legend_domain=legend_domain,
        malformed_policy=policy,
        host=os.environ.get("TEMPMATRIX_HOST", defaults.host),
        port=_int_env("TEMPMATRIX_PORT", defaults.port, 0),
    )
