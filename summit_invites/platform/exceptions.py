from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from summit_invites.platform.logger import get_logger
from summit_invites.platform.response import api_response

logger = get_logger(__name__)


class InviteGateError(Exception):
    """Base class for every error the core surfaces to callers.

    ``message`` is safe to show to an end user; it never carries identifiers
    or driver output.
    """

    status_code: int = status.HTTP_400_BAD_REQUEST
    message: str = "Request could not be completed"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


# ── Validation errors ───────────────────────────


class InvalidInvitationCode(InviteGateError):
    message = "Invalid or expired invitation code"


class AccountAlreadyExists(InviteGateError):
    message = "An account with this email already exists"


class AlreadyOnWaitlist(InviteGateError):
    message = "Email already registered or in waitlist"


class BotCheckFailed(InviteGateError):
    message = "reCAPTCHA verification failed"


class UserNotFound(InviteGateError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "User not found"


class WaitlistEntryNotFound(InviteGateError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Waitlist entry not found"


# ── Race-condition errors ───────────────────────


class CodeAlreadyConsumed(InviteGateError):
    status_code = status.HTTP_409_CONFLICT
    message = "This invitation code has already been used"


class NoCodesAvailable(InviteGateError):
    message = "No invitation codes available"


class WaitlistEntryAlreadyPromoted(InviteGateError):
    status_code = status.HTTP_409_CONFLICT
    message = "Waitlist entry has already been processed"


# ── Best-effort side effects ────────────────────


class InvitationDeliveryFailed(InviteGateError):
    status_code = status.HTTP_502_BAD_GATEWAY
    message = "Failed to send invitation email"


# ── Resource exhaustion / infrastructure ────────


class CodeSpaceExhausted(InviteGateError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Could not issue invitation codes, please try again later"


class StoreUnavailable(InviteGateError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    message = "Service temporarily unavailable, please try again"


def add_exception_handlers(app):
    @app.exception_handler(InviteGateError)
    async def invite_gate_exception_handler(request: Request, exc: InviteGateError):
        return api_response(message=exc.message, status_code=exc.status_code)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        response = api_response(message=str(exc.detail) or "Error", status_code=exc.status_code)
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = errors[0].get("msg", "Validation failed") if errors else "Validation failed"
        return api_response(
            message=message,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            data={"errors": [{"loc": e.get("loc"), "msg": e.get("msg")} for e in errors]},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception on {request.url.path}: {exc}")
        return api_response(
            message="Something went wrong, please try again",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
