"""
QKart - Custom Exceptions
==========================
Business-level exceptions raised by the service layer.
Each carries a machine-checkable `kind` and the HTTP status the API
surface answers with (see the handler registered in main.py).
"""

from typing import Optional

from fastapi import status


class QKartError(Exception):
    """Base exception for all business logic errors."""
    kind = "Error"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "Something went wrong"):
        self.message = message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"code": self.status_code, "kind": self.kind, "message": self.message}


class NotFoundError(QKartError):
    """Raised when the user has no cart."""
    kind = "NotFound"
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(QKartError):
    """Raised when a product is already in the cart."""
    kind = "Conflict"
    status_code = status.HTTP_409_CONFLICT


class InvalidReferenceError(QKartError):
    """Raised when a product id does not resolve in the catalog."""
    kind = "InvalidReference"


class InvalidStateError(QKartError):
    """Raised when a cart/checkout precondition does not hold."""
    kind = "InvalidState"


class InsufficientFundsError(QKartError):
    """Raised when wallet balance is not enough."""
    kind = "InsufficientFunds"

    def __init__(self, balance: Optional[int] = None, total: Optional[int] = None):
        msg = "Wallet balance is insufficient"
        if balance is not None and total is not None:
            msg = f"Wallet balance is insufficient (balance={balance}, total={total})"
        super().__init__(msg)


class InternalError(QKartError):
    """Raised when the store fails underneath an operation."""
    kind = "InternalError"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class AuthenticationError(QKartError):
    """Raised when authentication fails."""
    kind = "Unauthorized"
    status_code = status.HTTP_401_UNAUTHORIZED
