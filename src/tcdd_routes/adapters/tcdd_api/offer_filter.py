"""Filtering of sold-out offers."""

import logging
from collections.abc import Iterable

from tcdd_routes.domain.models.train_offer import TrainOffer

logger = logging.getLogger(__name__)


class OfferFilterPolicy:
    """Drops offers that cannot be booked in the standard class."""

    def __init__(self, show_sold_out: bool = False) -> None:
        """Initialize the policy.

        Args:
            show_sold_out: Keep sold-out offers (useful for showing a full timetable).
        """
        self.show_sold_out = show_sold_out

    def is_bookable(self, offer: TrainOffer) -> bool:
        """Whether the offer still has free seats, in economy if it has an economy class."""
        return offer.available_seats > 0 and offer.economy_seats() > 0

    def apply(self, offers: Iterable[TrainOffer]) -> list[TrainOffer]:
        """Return the offers to show, preserving their order."""
        offers = list(offers)
        if self.show_sold_out:
            return offers

        bookable = [offer for offer in offers if self.is_bookable(offer)]
        if len(bookable) != len(offers):
            logger.debug(f"Dropped {len(offers) - len(bookable)} sold-out trains")
        return bookable
