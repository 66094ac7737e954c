"""Runtime configuration for the PPPoE rotator.

Values come from the process environment, optionally seeded from a ``.env``
file. Variables already present in the environment take precedence.
"""
import os
import logging
from dataclasses import dataclass, field
from typing import Optional, Mapping

from dotenv import find_dotenv, load_dotenv

from .core.candidates import ConfigurationError, parse_candidates
from .core.engine import DEFAULT_DISABLE_SECRET
from .core.models import CandidateSet, Thresholds

logger = logging.getLogger(__name__)

DEFAULT_USAGE_PORTAL_URL = "http://10.220.20.12/index.php/home/login"
ENGINES = ("playwright", "selenium")

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}

__all__ = ["ConfigurationError", "Settings", "DEFAULT_USAGE_PORTAL_URL", "ENGINES"]


def _require(env: Mapping[str, str], key: str) -> str:
    value = env.get(key, "").strip()
    if not value:
        raise ConfigurationError(f"{key} not found in environment or .env file")
    return value


def _int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        raise ConfigurationError(f"{key} must be an integer, got '{raw}'")
    if value < 0:
        raise ConfigurationError(f"{key} cannot be negative, got {value}")
    return value


def _float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw.strip())
    except ValueError:
        raise ConfigurationError(f"{key} must be a number of seconds, got '{raw}'")
    if value < 0:
        raise ConfigurationError(f"{key} cannot be negative, got {value}")
    return value


def _bool(env: Mapping[str, str], key: str, default: bool) -> bool:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    lowered = raw.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ConfigurationError(f"{key} must be a boolean (true/false), got '{raw}'")


@dataclass
class Settings:
    router_ip: str
    router_password: str = field(repr=False)
    candidates: CandidateSet
    thresholds: Thresholds = field(default_factory=Thresholds)
    usage_portal_url: str = DEFAULT_USAGE_PORTAL_URL
    disable_secret: str = field(default=DEFAULT_DISABLE_SECRET, repr=False)
    engine: str = "playwright"
    headless: bool = True
    chromedriver_url: Optional[str] = None
    apply_wait: float = 35.0
    settle_wait: float = 2.0

    @classmethod
    def from_env(cls, env_file: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> 'Settings':
        """Build settings from the environment.

        Args:
            env_file: Path to a .env file. When omitted, the nearest .env
                found walking up from the current directory is used.
            environ: Mapping to read instead of ``os.environ`` (no .env file is
                loaded when given).

        Raises:
            ConfigurationError: If a required key is missing or a value is invalid
        """
        if environ is None:
            if env_file and not os.path.isfile(env_file):
                raise ConfigurationError(f".env file not found: {env_file}")
            loaded = load_dotenv(dotenv_path=env_file or find_dotenv(usecwd=True), override=False)
            logger.debug(f"Loaded .env file: {loaded}")
            environ = os.environ
        return cls.from_mapping(environ)

    @classmethod
    def from_mapping(cls, env: Mapping[str, str]) -> 'Settings':
        router_ip = _require(env, "ROUTER_IP")
        router_password = _require(env, "ROUTER_PASSWORD")
        candidates = parse_candidates(_require(env, "PPPOE_CREDENTIALS"))

        thresholds = Thresholds(
            switch=_int(env, "PPPOE_SWITCH_THRESHOLD", 10000),
            available=_int(env, "PPPOE_AVAILABLE_THRESHOLD", 10000),
            disable=_int(env, "PPPOE_DISABLE_THRESHOLD", 11000),
        )
        if thresholds.disable <= thresholds.switch:
            logger.warning(
                f"PPPOE_DISABLE_THRESHOLD ({thresholds.disable}) is not above "
                f"PPPOE_SWITCH_THRESHOLD ({thresholds.switch}); an exhausted pool will always disable"
            )

        engine = env.get("BROWSER_ENGINE", "playwright").strip().lower() or "playwright"
        if engine not in ENGINES:
            raise ConfigurationError(f"BROWSER_ENGINE must be one of {', '.join(ENGINES)}, got '{engine}'")

        disable_secret = env.get("PPPOE_DISABLE_SECRET", "").strip() or DEFAULT_DISABLE_SECRET
        if disable_secret in {identity.secret for identity in candidates}:
            raise ConfigurationError("PPPOE_DISABLE_SECRET must not match any configured PPPoE secret")

        return cls(
            router_ip=router_ip,
            router_password=router_password,
            candidates=candidates,
            thresholds=thresholds,
            usage_portal_url=env.get("USAGE_PORTAL_URL", "").strip() or DEFAULT_USAGE_PORTAL_URL,
            disable_secret=disable_secret,
            engine=engine,
            headless=_bool(env, "BROWSER_HEADLESS", True),
            chromedriver_url=env.get("CHROMEDRIVER_URL", "").strip() or None,
            apply_wait=_float(env, "ROUTER_APPLY_WAIT", 35.0),
            settle_wait=_float(env, "PAGE_SETTLE_WAIT", 2.0),
        )
