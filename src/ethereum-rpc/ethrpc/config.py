import logging
import os
from dataclasses import dataclass

DEFAULT_RPC_URL = "http://127.0.0.1:8545"
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class Config:
    rpc_url: str = DEFAULT_RPC_URL
    request_timeout: int = 10
    max_retries: int = 3
    backoff_seconds: float = 0.5
    log_level: str = "WARNING"


def _env_number(name: str, default: str, cast):
    raw = os.getenv(name, default).strip()
    try:
        return cast(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got '{raw}'.") from exc


def load_config() -> Config:
    """Load configuration from environment variables."""
    rpc_url = os.getenv("ETH_RPC_URL", DEFAULT_RPC_URL).strip() or DEFAULT_RPC_URL
    timeout = _env_number("REQUEST_TIMEOUT", "10", int)
    max_retries = _env_number("REQUEST_RETRIES", "3", int)
    backoff = _env_number("REQUEST_BACKOFF_SECONDS", "0.5", float)
    log_level = os.getenv("LOG_LEVEL", "WARNING").strip().upper() or "WARNING"

    if not isinstance(logging.getLevelName(log_level), int):
        raise ValueError(f"LOG_LEVEL '{log_level}' is not a logging level.")

    return Config(
        rpc_url=rpc_url,
        request_timeout=timeout,
        max_retries=max_retries,
        backoff_seconds=backoff,
        log_level=log_level,
    )


def configure_logging(config: Config) -> None:
    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format=DEFAULT_LOG_FORMAT,
    )
