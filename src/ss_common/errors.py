"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/User
  2xxx: Settlement calculation
  3xxx: Show
  4xxx: Share link
  5xxx: Billing/Entitlement
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

class EmailExistsError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Email already exists", 409)


class UserNotFoundError(AppError):
    def __init__(self, user_id: str) -> None:
        super().__init__(1002, f"User not found: {user_id}", 404)


class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid email or password", 401)


class AccountDisabledError(AppError):
    def __init__(self) -> None:
        super().__init__(1004, "Account is disabled", 403)


class InvalidRefreshTokenError(AppError):
    def __init__(self) -> None:
        super().__init__(1005, "Refresh token is invalid or expired", 401)


class AdminRequiredError(AppError):
    def __init__(self) -> None:
        super().__init__(1006, "Admin privileges required", 403)


# --- 2xxx: Settlement ---

class SettlementValidationError(AppError):
    """Carries the user-facing form message verbatim."""

    def __init__(self, reason: str) -> None:
        super().__init__(2001, reason, 422)


# --- 3xxx: Show ---

class ShowNotFoundError(AppError):
    # Same response whether the show is missing or owned by someone else
    def __init__(self, show_id: str) -> None:
        super().__init__(3001, f"Show not found: {show_id}", 404)


class CorruptShowRecordError(AppError):
    def __init__(self, show_id: str) -> None:
        super().__init__(3002, f"Stored settlement for show {show_id} is unreadable", 500)


# --- 4xxx: Share link ---

class ShareLinkNotFoundError(AppError):
    def __init__(self) -> None:
        super().__init__(4001, "Share link not found", 404)


# --- 5xxx: Billing/Entitlement ---

class SubscriptionRequiredError(AppError):
    def __init__(self) -> None:
        super().__init__(5001, "An active subscription is required", 403)


class AlreadySubscribedError(AppError):
    def __init__(self) -> None:
        super().__init__(5002, "You already have an active subscription", 409)


class NoSubscriptionError(AppError):
    def __init__(self) -> None:
        super().__init__(5003, "No subscription found. Please subscribe first", 400)


class WebhookSignatureError(AppError):
    def __init__(self, detail: str = "Invalid signature") -> None:
        super().__init__(5004, detail, 400)


class BillingNotConfiguredError(AppError):
    def __init__(self, setting_name: str) -> None:
        super().__init__(5005, f"Billing is not configured: {setting_name} is not set", 500)


# --- 9xxx: System ---

class RateLimitError(AppError):
    def __init__(self) -> None:
        super().__init__(9001, "Rate limit exceeded", 429)


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)


class ExternalServiceError(AppError):
    def __init__(self, service: str) -> None:
        super().__init__(9003, f"{service} is unavailable, please try again", 502)
