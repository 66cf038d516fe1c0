"""Application-level exceptions."""

from decimal import Decimal


def _money(value: Decimal) -> str:
    return f"${value:,.2f}"


def _shares(value: Decimal) -> str:
    return f"{value:.4f}"


class AppError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str, code: str = "APP_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(AppError):
    """Raised when input validation fails."""

    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")


class NotFoundError(AppError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(f"{resource} not found: {identifier}", code="NOT_FOUND")


class UnauthorizedError(AppError):
    """Raised when no user identity accompanies a request."""

    def __init__(self, message: str = "Unauthorized. Please log in."):
        super().__init__(message, code="UNAUTHORIZED")


class QuoteUnavailableError(AppError):
    """Raised when the price oracle cannot produce a usable price."""

    def __init__(self, symbol: str, reason: str):
        self.symbol = symbol
        self.reason = reason
        super().__init__(
            f"Could not fetch current price for {symbol}: {reason}",
            code="QUOTE_UNAVAILABLE",
        )


class InsufficientFundsError(AppError):
    """Raised when a buy costs more than the cash held."""

    def __init__(self, held: Decimal, required: Decimal, symbol: str, quantity: Decimal):
        self.held = held
        self.required = required
        super().__init__(
            f"Insufficient balance. You have {_money(held)}, but need {_money(required)} "
            f"for {_shares(quantity)} shares of {symbol}.",
            code="INSUFFICIENT_FUNDS",
        )


class InsufficientSharesError(AppError):
    """Raised when attempting to sell more shares than owned."""

    def __init__(self, symbol: str, owned: Decimal, requested: Decimal):
        self.owned = owned
        self.requested = requested
        super().__init__(
            f"Insufficient shares of {symbol}. You own {_shares(owned)} shares, "
            f"but tried to sell {_shares(requested)} shares.",
            code="INSUFFICIENT_SHARES",
        )


class PersistenceError(AppError):
    """Raised when the record store fails to commit a trade."""

    def __init__(self, message: str):
        super().__init__(message, code="PERSISTENCE_ERROR")


class LogAppendError(AppError):
    """Raised when a transaction log entry cannot be written."""

    def __init__(self, message: str):
        super().__init__(message, code="LOG_APPEND_ERROR")
