"""
User-facing classification of transaction failures

Maps known substrings of wallet / node / revert messages to a small set of
categories the caller can show to a user. Unrecognized errors keep their raw
message.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class FailureCategory(Enum):
    """Categories of approval/swap failures"""
    USER_CANCELLED = "user_cancelled"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    INSUFFICIENT_ALLOWANCE = "insufficient_allowance"
    INSUFFICIENT_GAS = "insufficient_gas"
    TIMEOUT = "timeout"
    OTHER = "other"


# Checked in order; first match wins
USER_CANCELLED_KEYWORDS = ["user rejected", "user denied", "rejected by user", "user cancelled"]
INSUFFICIENT_FUNDS_KEYWORDS = ["insufficient funds", "insufficient balance", "exceeds balance"]
INSUFFICIENT_ALLOWANCE_KEYWORDS = ["allowance"]
INSUFFICIENT_GAS_KEYWORDS = ["gas"]
TIMEOUT_KEYWORDS = ["timeout", "timed out"]

_CATEGORY_MESSAGES = {
    FailureCategory.USER_CANCELLED: "Transaction cancelled by user",
    FailureCategory.INSUFFICIENT_FUNDS: "Insufficient balance",
    FailureCategory.INSUFFICIENT_ALLOWANCE: "Insufficient token allowance, approve the token first",
    FailureCategory.INSUFFICIENT_GAS: "Insufficient gas or transaction failed",
    FailureCategory.TIMEOUT: "Transaction timed out, please retry",
}

_RULES = [
    (USER_CANCELLED_KEYWORDS, FailureCategory.USER_CANCELLED),
    (INSUFFICIENT_FUNDS_KEYWORDS, FailureCategory.INSUFFICIENT_FUNDS),
    (INSUFFICIENT_ALLOWANCE_KEYWORDS, FailureCategory.INSUFFICIENT_ALLOWANCE),
    (INSUFFICIENT_GAS_KEYWORDS, FailureCategory.INSUFFICIENT_GAS),
    (TIMEOUT_KEYWORDS, FailureCategory.TIMEOUT),
]


@dataclass(frozen=True)
class FailureReason:
    """
    Classified failure

    Attributes:
        category: Failure category
        message: Message to show to the user
        raw: Original error text
    """
    category: FailureCategory
    message: str
    raw: Optional[str] = None

    def __str__(self) -> str:
        return self.message


def _error_text(error: BaseException) -> str:
    # SwapClientError keeps the bare message separate from the "[code]" prefix
    message = getattr(error, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(error)


def classify_failure(error: object) -> FailureReason:
    """
    Classify an approval/swap failure into a user-facing reason.

    Args:
        error: Exception (or anything else) raised on the transaction path

    Returns:
        FailureReason; OTHER carries the raw error message
    """
    if not isinstance(error, BaseException):
        return FailureReason(FailureCategory.OTHER, "Unknown error", raw=None if error is None else str(error))

    raw = _error_text(error)
    lowered = raw.lower()

    for keywords, category in _RULES:
        if any(keyword in lowered for keyword in keywords):
            return FailureReason(category, _CATEGORY_MESSAGES[category], raw=raw)

    return FailureReason(FailureCategory.OTHER, raw or "Unknown error", raw=raw)


def is_user_rejection(error: object) -> bool:
    """Check if an error is the user declining the transaction"""
    return classify_failure(error).category == FailureCategory.USER_CANCELLED
