"""Errors raised across the schedule gateway boundary."""

AUTH_ERROR_MESSAGE = "Authentication failed"


class ScheduleGatewayError(Exception):
    """The upstream booking service could not be queried."""


class AuthenticationError(ScheduleGatewayError):
    """The upstream credential is missing, invalid or expired.

    The message always contains ``AUTH_ERROR_MESSAGE`` so callers can prompt
    for a new credential.
    """

    def __init__(self, detail: str = "") -> None:
        if not detail:
            message = AUTH_ERROR_MESSAGE
        elif detail.startswith(AUTH_ERROR_MESSAGE):
            message = detail
        else:
            message = f"{AUTH_ERROR_MESSAGE}: {detail}"
        super().__init__(message)
