"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/User
  2xxx: Balance
  3xxx: Transaction
  6xxx: Notification
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Auth/User ---

class PhoneExistsError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Phone number already registered", 409)


class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid phone number or PIN", 401)


class AccountDisabledError(AppError):
    def __init__(self) -> None:
        super().__init__(1004, "Account is disabled", 403)


class InvalidRefreshTokenError(AppError):
    def __init__(self) -> None:
        super().__init__(1005, "Refresh token is invalid or expired", 401)


class AdminRequiredError(AppError):
    def __init__(self) -> None:
        super().__init__(1006, "Admin privileges required", 403)


# --- 2xxx: Balance ---

class InsufficientBalanceError(AppError):
    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            2001,
            f"Insufficient balance: required {required}, available {available}",
            422,
        )


class UserNotFoundError(AppError):
    def __init__(self, user_id: str) -> None:
        super().__init__(2002, f"User not found: {user_id}", 404)


# --- 3xxx: Transaction ---

class AmountOutOfRangeError(AppError):
    def __init__(self, txn_type: str, minimum: int, maximum: int, amount: int) -> None:
        super().__init__(
            3001,
            f"Amount {amount} out of range for {txn_type}: must be between {minimum} and {maximum}",
            422,
        )


class MissingFieldError(AppError):
    def __init__(self, field: str) -> None:
        super().__init__(3002, f"Missing required field: {field}", 422)


class RecipientNotFoundError(AppError):
    def __init__(self, phone_number: str) -> None:
        super().__init__(3003, f"No registered user with phone number {phone_number}", 404)


class TransactionNotFoundError(AppError):
    def __init__(self, transaction_id: str) -> None:
        super().__init__(3004, f"Transaction not found: {transaction_id}", 404)


class SelfTransferError(AppError):
    def __init__(self) -> None:
        super().__init__(3005, "Cannot send money to yourself", 422)


class TransactionAlreadyResolvedError(AppError):
    def __init__(self, transaction_id: str, status: str) -> None:
        super().__init__(
            3006, f"Transaction {transaction_id} is already {status}", 409
        )


# --- 6xxx: Notification ---

class NotificationNotFoundError(AppError):
    def __init__(self, notification_id: str) -> None:
        super().__init__(6001, f"Notification not found: {notification_id}", 404)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)


class BalanceBusyError(AppError):
    def __init__(self, user_id: str | None = None) -> None:
        subject = f"Balance for user {user_id}" if user_id else "Balance"
        super().__init__(9003, f"{subject} is busy, please retry", 503)
