"""
Read retries and trade tracing

call_with_retry() wraps view calls (pools, positions, balances, allowances,
token metadata). Quote simulations and signed transactions never go through
it: a reverted simulation is an answer, and a resent transaction could trade
twice.

CorrelationContext tags every log line of one trade (approval, swap and the
reads in between) with the same id.
"""

import logging
import time
import uuid
from contextvars import ContextVar, Token
from typing import Callable, Optional, Tuple, TypeVar

from ..errors import ErrorCode, RpcError, SwapClientError
from ..config import config as global_config

logger = logging.getLogger(__name__)

T = TypeVar("T")

_trace_id: ContextVar[Optional[str]] = ContextVar("clmm_trace_id", default=None)


def generate_correlation_id() -> str:
    return uuid.uuid4().hex[:12]


def get_correlation_id() -> Optional[str]:
    return _trace_id.get()


def set_correlation_id(correlation_id: Optional[str]) -> Token:
    return _trace_id.set(correlation_id)


def reset_correlation_id(token: Token) -> None:
    _trace_id.reset(token)


class CorrelationContext:
    """
    Scope a trace id over a block

    Usage:
        with CorrelationContext("swap") as cid:
            orchestrator.execute(plan)
    """

    def __init__(self, prefix: Optional[str] = None):
        suffix = generate_correlation_id()
        self.correlation_id = f"{prefix}_{suffix}" if prefix else suffix
        self._token: Optional[Token] = None

    def __enter__(self) -> str:
        self._token = set_correlation_id(self.correlation_id)
        return self.correlation_id

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._token is not None:
            reset_correlation_id(self._token)
            self._token = None


def log_with_correlation(
    level: int,
    message: str,
    operation_name: str,
    attempt: Optional[int] = None,
    max_retries: Optional[int] = None,
    log: Optional[logging.Logger] = None,
    **extra
):
    """
    Log as "[cid] [operation] [attempt/max] message"

    The trace id and attempt fields are also attached as record attributes
    for structured handlers.
    """
    cid = get_correlation_id()
    prefix = [f"[{cid}]"] if cid else []
    prefix.append(f"[{operation_name}]")
    if attempt is not None and max_retries is not None:
        prefix.append(f"[{attempt}/{max_retries}]")

    (log or logger).log(
        level,
        " ".join(prefix + [message]),
        extra={
            "correlation_id": cid,
            "operation": operation_name,
            "attempt": attempt,
            "max_retries": max_retries,
            **extra,
        },
    )


# Checked in order; the first family with a matching marker wins
TRANSIENT_MARKERS: Tuple[Tuple[ErrorCode, Tuple[str, ...]], ...] = (
    (ErrorCode.RPC_TIMEOUT, ("timeout", "timed out", "etimedout")),
    (ErrorCode.RPC_CONNECTION_FAILED, ("connection", "network", "socket", "econnreset", "enotfound")),
    (ErrorCode.RPC_RATE_LIMITED, ("rate limit", "too many requests", "429")),
    (ErrorCode.RPC_INVALID_RESPONSE, (
        "502", "503", "504", "temporarily unavailable", "service unavailable", "request failed",
    )),
)


def classify_error(error: Exception) -> Tuple[bool, Optional[ErrorCode]]:
    """
    (worth retrying, error code) for a failed view call.

    Anything without a transient marker (reverts, bad arguments, decoding
    failures) is fatal and returns (False, None).
    """
    text = str(error).lower()
    for code, markers in TRANSIENT_MARKERS:
        if any(marker in text for marker in markers):
            return True, code
    return False, None


def call_with_retry(
    operation: Callable[[], T],
    operation_name: str,
    max_retries: Optional[int] = None,
    retry_delay: Optional[float] = None,
) -> T:
    """
    Run a view call, retrying transient RPC failures with linear backoff.

    Args:
        operation: Zero-argument callable performing the read
        operation_name: Label for logs and the raised error
        max_retries: Total attempts (default config.rpc.max_retries, at least 1)
        retry_delay: Base delay; attempt n waits n * retry_delay before retrying

    Raises:
        RpcError: Fatal failure, or transient failure on the last attempt
        SwapClientError: Re-raised untouched (already classified)
    """
    attempts = max(1, max_retries if max_retries is not None else global_config.rpc.max_retries)
    delay = retry_delay if retry_delay is not None else global_config.rpc.retry_delay

    attempt = 1
    while True:
        try:
            result = operation()
        except SwapClientError:
            raise
        except Exception as e:
            transient, code = classify_error(e)
            if not transient or attempt >= attempts:
                log_with_correlation(
                    logging.ERROR,
                    f"Failed: {e}",
                    operation_name,
                    attempt,
                    attempts,
                    error_type="recoverable" if transient else "fatal",
                )
                raise RpcError.read_failed(operation_name, e, code) from e

            log_with_correlation(
                logging.WARNING,
                f"Transient error, retrying: {e}",
                operation_name,
                attempt,
                attempts,
                error_type="recoverable",
            )
            time.sleep(delay * attempt)
            attempt += 1
            continue

        if attempt > 1:
            log_with_correlation(logging.INFO, f"Succeeded after {attempt} attempts", operation_name, attempt, attempts)
        return result
