from __future__ import annotations

from dataclasses import dataclass
import os

from simwrap.api.errors import ConfigError

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    host: str
    scheme: str = "https"
    api_prefix: str = "api"
    verify_tls: bool = True
    timeout_s: float | None = 10.0

    @property
    def api_base(self) -> str:
        prefix = self.api_prefix.strip("/")
        return f"{self.scheme}://{self.host}/{prefix}/"


def _parse_timeout(raw: str) -> float | None:
    if raw.strip().lower() in ("none", ""):
        return None
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"SIM_TIMEOUT_S must be a number, got {raw!r}") from None
    if value < 0:
        raise ConfigError(f"SIM_TIMEOUT_S must not be negative, got {raw!r}")
    if value == 0:
        return None
    return value


def get_settings() -> Settings:
    """
    Centralized configuration for the client and the test suites.
    SIMULATION_SERVER is required, everything else has a default.
    """
    host = os.getenv("SIMULATION_SERVER", "").strip()
    if not host:
        raise ConfigError("SIMULATION_SERVER is not set")

    return Settings(
        host=host,
        scheme=os.getenv("SIM_SCHEME", "https"),
        api_prefix=os.getenv("SIM_API_PREFIX", "api"),
        verify_tls=os.getenv("SIM_INSECURE_TLS", "").strip().lower() not in _TRUTHY,
        timeout_s=_parse_timeout(os.getenv("SIM_TIMEOUT_S", "10.0")),
    )
