# booking_service.py - Facility booking flow on top of the slot scheduler

import logging
from datetime import date, datetime
from typing import List, Optional, Union

from backend.errors import BackendError
from backend.get_bookings import get_bookings, get_user_bookings
from backend.get_facilities import get_facilities
from backend.post_booking import cancel_booking_request, create_booking
from managers.booking_validator import BookingValidator, cancel_booking
from managers.slot_manager import (
    describe_slots,
    generate_slots,
    minutes_used,
    parse_people_count,
    remaining_minutes,
)
from models.booking import Booking
from models.decision import BookingDecision, BookingError
from models.facility import Facility
from models.mutation import Mutation, MutationKind
from models.session import Session
from models.slot import Slot, SlotAvailability
from utils.time_utils import parse_calendar_date


class BookingService:
    """
    Keeps a snapshot of facilities and bookings for one facility/day and runs
    booking and cancellation requests against it.

    Checks here are a best-effort pre-check on data fetched moments earlier;
    the backend accepts or rejects the write. Local state only changes after
    the backend confirms.
    """

    def __init__(self, session: Session, validator: Optional[BookingValidator] = None):
        self.session = session
        self.validator = validator or BookingValidator()
        self.logger = logging.getLogger("booking_service")

        self.facilities: List[Facility] = []
        self.facility: Optional[Facility] = None
        self.day: Optional[date] = None
        self.bookings: List[Booking] = []
        self.user_bookings: List[Booking] = []
        self.mutations: List[Mutation] = []

    # Loading

    def load(self, facility_id: Optional[str], day: Union[date, str]) -> bool:
        """
        Refresh the snapshot. Each fetch failure is logged and leaves that
        list empty; returns False if any fetch failed.
        """
        self.day = parse_calendar_date(day)
        ok = self.load_facilities()

        if facility_id is None and self.facilities:
            facility_id = self.facilities[0].id
        self.facility = next(
            (f for f in self.facilities if f.id == str(facility_id)), None
        )
        if self.facility is None:
            self.logger.warning(f"Facility {facility_id} not found")

        return self.load_bookings() and ok

    def load_facilities(self) -> bool:
        try:
            self.facilities = get_facilities(self.session)
            self.logger.info(f"Loaded {len(self.facilities)} facilities")
            return True
        except BackendError as e:
            self.logger.error(f"Failed to load facilities: {e.message}")
            self.facilities = []
            return False

    def load_bookings(self) -> bool:
        if self.facility is None or self.day is None:
            self.bookings = []
            self.user_bookings = []
            return False

        ok = True
        try:
            self.bookings = get_bookings(self.session, self.facility.id, self.day)
        except BackendError as e:
            self.logger.error(f"Failed to load bookings: {e.message}")
            self.bookings = []
            ok = False

        try:
            self.user_bookings = get_user_bookings(self.session, self.day)
        except BackendError as e:
            self.logger.error(f"Failed to load user bookings: {e.message}")
            self.user_bookings = []
            ok = False

        self.logger.info(
            f"Snapshot for {self.facility.id} on {self.day}: {len(self.bookings)} bookings, "
            f"{self.minutes_used()} minutes used by user"
        )
        return ok

    # Queries

    def slots(self) -> List[Slot]:
        if self.day is None:
            return []
        return generate_slots(self.facility, self.day)

    def available_slots(self, now: Optional[datetime] = None) -> List[SlotAvailability]:
        if self.day is None:
            return []
        return describe_slots(self.facility, self.day, self.bookings, now=now)

    def minutes_used(self) -> int:
        return minutes_used(self.user_bookings)

    def minutes_left(self) -> int:
        return remaining_minutes(self.minutes_used(), self.validator.daily_quota_minutes)

    def find_booking(self, booking_id: str) -> Optional[Booking]:
        for booking in self.bookings + self.user_bookings:
            if booking.id == str(booking_id):
                return booking
        return None

    # Mutations

    def check(
        self,
        slot_start: Union[Slot, datetime, str, None],
        people_count="1",
        now: Optional[datetime] = None,
    ) -> BookingDecision:
        """Run the local gate without submitting anything"""
        if self.facility is None or not slot_start:
            return BookingDecision.reject(
                BookingError.SELECTION, "Select a facility and slot"
            )

        count = parse_people_count(people_count, self.facility.capacity)
        return self.validator.validate(
            slot_start,
            self.bookings,
            self.facility,
            count,
            self.minutes_used(),
            now=now,
        )

    def book(
        self,
        slot_start: Union[Slot, datetime, str, None],
        people_count="1",
        note: str = "",
        now: Optional[datetime] = None,
    ) -> Mutation:
        mutation = Mutation(kind=MutationKind.CREATE)
        self.mutations.append(mutation)

        decision = self.check(slot_start, people_count, now=now)
        if not decision.allowed:
            mutation.reject(decision.message)
            return mutation

        try:
            booking = create_booking(
                self.session,
                self.facility.id,
                decision.slot,
                decision.people_count,
                note=note,
            )
        except BackendError as e:
            self.logger.error(f"Backend rejected booking: {e.message}")
            mutation.reject(e.message)
            return mutation

        mutation.confirm(booking, "Booked")
        self.load_bookings()
        return mutation

    def cancel(self, booking_id: str) -> Mutation:
        mutation = Mutation(kind=MutationKind.CANCEL)
        self.mutations.append(mutation)

        booking = self.find_booking(booking_id)
        decision = cancel_booking(booking, self.session.user_id)
        if not decision.allowed:
            mutation.reject(decision.message)
            return mutation

        try:
            updated = cancel_booking_request(self.session, booking.id)
        except BackendError as e:
            self.logger.error(f"Backend rejected cancellation: {e.message}")
            mutation.reject(e.message)
            return mutation

        mutation.confirm(updated or decision.booking, "Cancelled")
        self.load_bookings()
        return mutation
