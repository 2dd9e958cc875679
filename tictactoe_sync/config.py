import os
import logging
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_BACKEND_URL = "http://localhost:3010"
DEFAULT_TIMEOUT = 5.0

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    """
    runtime settings, all overridable from the environment or a .env file
    """
    backend_url: str = DEFAULT_BACKEND_URL
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = "INFO"
    server_host: str = "127.0.0.1"
    server_port: int = 3010


def _float_env(env, name, default):
    raw = env.get(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("ignoring bad %s=%r, using %s", name, raw, default)
        return default


def _int_env(env, name, default):
    raw = env.get(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("ignoring bad %s=%r, using %s", name, raw, default)
        return default


def load_settings(env=None, use_dotenv=True) -> Settings:
    """
    read TICTACTOE_* variables; env defaults to os.environ
    """
    if env is None:
        if use_dotenv:
            load_dotenv()
        env = os.environ
    backend_url = (env.get("TICTACTOE_BACKEND_URL") or DEFAULT_BACKEND_URL).rstrip("/")
    return Settings(
        backend_url=backend_url,
        timeout=_float_env(env, "TICTACTOE_TIMEOUT", DEFAULT_TIMEOUT),
        log_level=(env.get("TICTACTOE_LOG_LEVEL") or "INFO").upper(),
        server_host=env.get("TICTACTOE_SERVER_HOST") or "127.0.0.1",
        server_port=_int_env(env, "TICTACTOE_SERVER_PORT", 3010),
    )


def setup_logging(settings: Settings):
    # one place for the log format
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s %(message)s",
    )
