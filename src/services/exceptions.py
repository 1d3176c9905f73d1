"""Domain exceptions raised by the service layer."""


class FloodAlertError(Exception):
    """Base exception carrying a user-facing message and HTTP status."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class DuplicateEmailError(FloodAlertError):
    """The email address is already registered."""

    status_code = 409
    default_message = "Email already registered and verified"


class InvalidTokenError(FloodAlertError):
    """No unredeemed verification token matches."""

    status_code = 400
    default_message = "Invalid or already used verification token"


class UserNotFoundError(FloodAlertError):
    status_code = 404
    default_message = "User not found"


class InvalidTideTypeError(FloodAlertError):
    """Tide type is not High or Low."""

    status_code = 400
    default_message = "Tide type must be 'High' or 'Low'"


class TideFetchError(FloodAlertError):
    """The tide prediction source could not be reached or returned an error."""

    status_code = 502
    default_message = "Failed to fetch tide predictions"


class MailDeliveryError(FloodAlertError):
    """An email could not be handed to the mail provider."""

    status_code = 500
    default_message = "Failed to send email"
