# managers/booking_validator.py


import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, List, Optional, Union

from managers.slot_manager import (
    DAILY_QUOTA_MINUTES,
    booked_count,
    generate_slots,
    remaining_minutes,
)
from models.booking import Booking, BookingStatus
from models.decision import BookingDecision, BookingError
from models.facility import Facility
from models.slot import Slot
from utils.time_utils import parse_api_datetime


@dataclass
class BookingRequest:
    """Everything a constraint may look at while checking one request"""

    start: datetime
    existing_bookings: List[Booking]
    facility: Facility
    people_count: int
    user_daily_minutes_used: int
    now: datetime
    slot: Optional[Slot] = None


Constraint = Callable[[BookingRequest], Optional[BookingDecision]]


class BookingValidator:
    """
    Client-side advisory gate for booking requests.

    Constraints run in registration order and the first rejection wins. The
    backend that persists bookings remains the authority; this only saves a
    round trip for requests that are certain to fail.
    """

    def __init__(self, daily_quota_minutes: int = DAILY_QUOTA_MINUTES):
        self.daily_quota_minutes = daily_quota_minutes
        self.constraints = []
        self.logger = logging.getLogger("booking_validator")
        self.setup_constraints()

    def setup_constraints(self):
        self.add_constraint(
            self.check_slot_exists,
            "Slot must be one of the facility's generated slots",
        )
        self.add_constraint(self.check_not_past, "Slot must not have started")
        self.add_constraint(self.check_daily_quota, "Daily booking quota")
        self.add_constraint(self.check_capacity, "Slot capacity")

    def add_constraint(self, constraint_func: Constraint, description: str):
        self.constraints.append({"func": constraint_func, "description": description})

    def validate(
        self,
        candidate: Union[Slot, datetime, str],
        existing_bookings: List[Booking],
        facility: Facility,
        people_count: int,
        user_daily_minutes_used: int,
        now: Optional[datetime] = None,
    ) -> BookingDecision:
        start = self._candidate_start(candidate)
        if start is None or facility is None:
            return BookingDecision.reject(
                BookingError.SELECTION, "Select a facility and slot"
            )
        if not isinstance(people_count, int) or isinstance(people_count, bool):
            return BookingDecision.reject(
                BookingError.SELECTION, "People count must be a whole number"
            )
        if people_count < 1:
            return BookingDecision.reject(
                BookingError.SELECTION, "People count must be at least 1"
            )

        request = BookingRequest(
            start=start,
            existing_bookings=list(existing_bookings or []),
            facility=facility,
            people_count=people_count,
            user_daily_minutes_used=user_daily_minutes_used or 0,
            now=now or datetime.now(),
        )

        self.logger.debug(
            f"Validating booking at {start.isoformat()} on facility {facility.id} "
            f"for {people_count} people"
        )

        for constraint in self.constraints:
            decision = constraint["func"](request)
            if decision is not None:
                self.logger.info(
                    f"Booking rejected by '{constraint['description']}': {decision.message}"
                )
                return decision

        self.logger.debug("All booking constraints passed")
        return BookingDecision(
            allowed=True,
            message="OK",
            slot=request.slot,
            people_count=people_count,
            remaining_minutes=remaining_minutes(
                request.user_daily_minutes_used + facility.slot_mins,
                self.daily_quota_minutes,
            ),
        )

    @staticmethod
    def _candidate_start(candidate) -> Optional[datetime]:
        if isinstance(candidate, Slot):
            return candidate.start
        if isinstance(candidate, datetime):
            return candidate
        if isinstance(candidate, str) and candidate.strip():
            try:
                return parse_api_datetime(candidate)
            except ValueError:
                return None
        return None

    def check_slot_exists(self, request: BookingRequest) -> Optional[BookingDecision]:
        slots = generate_slots(request.facility, request.start.date())
        matches = [slot for slot in slots if slot.start == request.start]
        if len(matches) != 1:
            return BookingDecision.reject(BookingError.INVALID_SLOT, "Select a valid slot")
        request.slot = matches[0]
        return None

    def check_not_past(self, request: BookingRequest) -> Optional[BookingDecision]:
        if request.start < request.now:
            return BookingDecision.reject(
                BookingError.PAST_SLOT, "Cannot book a past slot", slot=request.slot
            )
        return None

    def check_daily_quota(self, request: BookingRequest) -> Optional[BookingDecision]:
        used = request.user_daily_minutes_used
        if used + request.facility.slot_mins > self.daily_quota_minutes:
            remaining = remaining_minutes(used, self.daily_quota_minutes)
            return BookingDecision.reject(
                BookingError.DAILY_LIMIT,
                f"Daily limit reached, {remaining} minutes remaining",
                slot=request.slot,
                remaining_minutes=remaining,
            )
        return None

    def check_capacity(self, request: BookingRequest) -> Optional[BookingDecision]:
        booked = booked_count(request.existing_bookings, request.start)
        if booked + request.people_count > request.facility.capacity:
            self.logger.debug(
                f"Slot {request.start.isoformat()} has {booked}/{request.facility.capacity} booked"
            )
            return BookingDecision.reject(
                BookingError.SLOT_FULL,
                "This slot is full",
                slot=request.slot,
                people_count=request.people_count,
            )
        return None


_default_validator = BookingValidator()


def validate_booking(
    candidate: Union[Slot, datetime, str],
    existing_bookings: List[Booking],
    facility: Facility,
    people_count: int,
    user_daily_minutes_used: int,
    now: Optional[datetime] = None,
) -> BookingDecision:
    return _default_validator.validate(
        candidate,
        existing_bookings,
        facility,
        people_count,
        user_daily_minutes_used,
        now=now,
    )


def cancel_booking(booking: Booking, requesting_user_id: str) -> BookingDecision:
    """
    Gate a cancellation: only the owner may cancel, and only a confirmed booking.

    On success the decision carries a cancelled copy; the input is untouched.
    """
    if booking is None:
        return BookingDecision.reject(BookingError.SELECTION, "Select a booking")
    if str(booking.user_id) != str(requesting_user_id):
        return BookingDecision.reject(
            BookingError.NOT_OWNER, "You can only cancel your own bookings"
        )
    if booking.status != BookingStatus.CONFIRMED:
        return BookingDecision.reject(
            BookingError.NOT_CANCELLABLE, "Only confirmed bookings can be cancelled"
        )

    return BookingDecision(
        allowed=True,
        message="Cancelled",
        booking=replace(booking, status=BookingStatus.CANCELLED),
    )
