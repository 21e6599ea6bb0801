"""
Configuration for the CLMM swap client

Every field defaults from an environment variable; a .env file next to the
package is loaded on import. Sections are plain dataclasses, so tests and
callers can build them with explicit values instead.
"""

import os
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Callable, List, Optional, TypeVar

from dotenv import load_dotenv

T = TypeVar("T")

_ENV_FILE = Path(__file__).parent.parent / ".env"
_TRUE_VALUES = ("true", "1", "yes", "on")


def _load_env_file():
    if _ENV_FILE.exists():
        load_dotenv(_ENV_FILE)


_load_env_file()


def _env(key: str, default: T, cast: Callable[[str], T] = str) -> T:
    """Read key and cast it; a value that fails to cast logs a warning and yields default"""
    raw = os.getenv(key)
    if raw is None:
        return default
    try:
        return cast(raw)
    except ValueError:
        logging.getLogger(__name__).warning(
            f"Invalid {cast.__name__} value for {key}='{raw}', using default={default}"
        )
        return default


def _flag(raw: str) -> bool:
    return raw.strip().lower() in _TRUE_VALUES


def _from_env(key: str, default: T, cast: Callable[[str], T] = str):
    return field(default_factory=lambda: _env(key, default, cast))


@dataclass
class RpcConfig:
    url: str = _from_env("CLMM_RPC_URL", "")
    # 0 = read chain id from the node
    chain_id: int = _from_env("CLMM_CHAIN_ID", 0, int)
    timeout_seconds: float = _from_env("RPC_TIMEOUT_SECONDS", 30.0, float)
    # View calls only; simulations and writes are never retried
    max_retries: int = _from_env("RPC_MAX_RETRIES", 3, int)
    retry_delay: float = _from_env("RPC_RETRY_DELAY", 1.0, float)


@dataclass
class ContractsConfig:
    """Deployed DEX addresses"""
    pool_manager: str = _from_env("CLMM_POOL_MANAGER", "")
    position_manager: str = _from_env("CLMM_POSITION_MANAGER", "")
    swap_router: str = _from_env("CLMM_SWAP_ROUTER", "")


@dataclass
class SignerConfig:
    # Name of the variable holding the key, not the key itself
    private_key_env: str = _from_env("CLMM_PRIVATE_KEY_ENV", "EVM_PRIVATE_KEY")


@dataclass
class TxConfig:
    # Swap and mint deadline, seconds after submission
    deadline_seconds: int = _from_env("TX_DEADLINE_SECONDS", 1200, int)
    approve_gas_limit: int = _from_env("TX_APPROVE_GAS_LIMIT", 100_000, int)
    swap_gas_limit: int = _from_env("TX_SWAP_GAS_LIMIT", 500_000, int)
    lp_gas_limit: int = _from_env("TX_LP_GAS_LIMIT", 1_000_000, int)
    priority_fee_gwei: float = _from_env("TX_PRIORITY_FEE_GWEI", 0.1, float)
    # maxFeePerGas = base fee * multiplier + tip
    base_fee_multiplier: float = _from_env("TX_BASE_FEE_MULTIPLIER", 2.0, float)
    receipt_poll_interval: float = _from_env("TX_RECEIPT_POLL_INTERVAL", 1.0, float)
    # One receipt wait window; waiting continues across windows until mined
    receipt_wait_slice: float = _from_env("TX_RECEIPT_WAIT_SLICE", 120.0, float)


@dataclass
class TradingConfig:
    # False = approve MAX_UINT256 once per token/spender
    approve_exact_amount: bool = _from_env("APPROVE_EXACT_AMOUNT", False, _flag)


def _default_log_path() -> str:
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    return str(Path(__file__).parent / "log" / f"clmm_swap_{stamp}.log")


@dataclass
class LoggingConfig:
    """
    Environment variables:
        LOG_FILE: log file path (default clmm_swap/log/clmm_swap_<utc>.log; empty disables)
        LOG_LEVEL: DEBUG, INFO, WARNING, ERROR, CRITICAL (default INFO)
        LOG_FORMAT: logging format string
        LOG_CONSOLE: also log to stderr (default true)
        LOG_MAX_BYTES / LOG_BACKUP_COUNT: rotation (default 10MB x 5)
    """
    log_file: str = field(default_factory=lambda: _env("LOG_FILE", _default_log_path()))
    log_level: str = _from_env("LOG_LEVEL", "INFO")
    log_format: str = _from_env("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    console_output: bool = _from_env("LOG_CONSOLE", True, _flag)
    max_bytes: int = _from_env("LOG_MAX_BYTES", 10 * 1024 * 1024, int)
    backup_count: int = _from_env("LOG_BACKUP_COUNT", 5, int)

    @property
    def level(self) -> int:
        return getattr(logging, self.log_level.upper(), logging.INFO)


@dataclass
class Config:
    """
    All configuration sections

    Usage:
        from clmm_swap.config import config

        config.rpc.url
        config.contracts.swap_router
    """
    rpc: RpcConfig = field(default_factory=RpcConfig)
    contracts: ContractsConfig = field(default_factory=ContractsConfig)
    signer: SignerConfig = field(default_factory=SignerConfig)
    tx: TxConfig = field(default_factory=TxConfig)
    trading: TradingConfig = field(default_factory=TradingConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def reload(cls) -> "Config":
        _load_env_file()
        return cls()


config = Config()


def get_config() -> Config:
    return config


def reload_config() -> Config:
    """Re-read .env and the environment into a fresh global config"""
    global config
    config = Config.reload()
    return config


def setup_logging(
    log_config: Optional[LoggingConfig] = None,
    logger_name: str = "clmm_swap",
) -> logging.Logger:
    """
    Attach file and/or console handlers to the package logger.

    Calling it again replaces the handlers it installed earlier. Child
    loggers (modules, contracts, routing, infra) propagate to this one.

    Example:
        setup_logging(LoggingConfig(log_file="swap.log", log_level="DEBUG"))
    """
    log_config = log_config or config.logging
    root = logging.getLogger(logger_name)
    root.setLevel(log_config.level)

    for old in root.handlers[:]:
        old.close()
        root.removeHandler(old)

    handlers: List[logging.Handler] = []
    if log_config.log_file:
        Path(log_config.log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(RotatingFileHandler(
            log_config.log_file,
            maxBytes=log_config.max_bytes,
            backupCount=log_config.backup_count,
            encoding="utf-8",
        ))
    if log_config.console_output:
        handlers.append(logging.StreamHandler())

    formatter = logging.Formatter(log_config.log_format)
    for handler in handlers:
        handler.setLevel(log_config.level)
        handler.setFormatter(formatter)
        root.addHandler(handler)

    for child in ("infra", "modules", "contracts", "routing"):
        logging.getLogger(f"{logger_name}.{child}").setLevel(log_config.level)

    if log_config.log_file:
        root.info(f"Logging to {log_config.log_file} at {log_config.log_level}")
    return root


def enable_file_logging(
    log_file: Optional[str] = None,
    level: str = "INFO",
    console: bool = True,
) -> logging.Logger:
    """Shortcut for setup_logging with a file path and level"""
    return setup_logging(LoggingConfig(
        log_file=log_file or config.logging.log_file,
        log_level=level,
        console_output=console,
    ))
