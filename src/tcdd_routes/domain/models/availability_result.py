"""Availability query result domain model."""

from dataclasses import dataclass, field

from tcdd_routes.domain.exceptions import AuthenticationError, ScheduleGatewayError
from tcdd_routes.domain.models.train_offer import TrainOffer


@dataclass(frozen=True)
class AvailabilityResult:
    """Outcome of one availability query for a station pair and date.

    Failures are carried as data (success=False) rather than raised.
    """

    success: bool
    offers: tuple[TrainOffer, ...] = field(default_factory=tuple)
    message: str | None = None
    auth_failed: bool = False

    @classmethod
    def failed(cls, message: str, auth_failed: bool = False) -> "AvailabilityResult":
        """Build a failed result."""
        return cls(success=False, message=message, auth_failed=auth_failed)

    def raise_for_failure(self) -> None:
        """Raise the matching gateway error if the query failed."""
        if self.success:
            return
        if self.auth_failed:
            raise AuthenticationError(self.message or "")
        raise ScheduleGatewayError(self.message or "Availability query failed")
