# models/mutation.py

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from models.booking import Booking


class MutationState(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"


class MutationKind(Enum):
    CREATE = "create"
    CANCEL = "cancel"


@dataclass
class Mutation:
    """A single create/cancel request and its reconciliation state."""

    kind: MutationKind
    state: MutationState = MutationState.PENDING
    booking: Optional[Booking] = None
    message: str = ""

    def confirm(self, booking: Optional[Booking], message: str = ""):
        if self.state != MutationState.PENDING:
            raise ValueError(f"Mutation already {self.state.value}")
        self.state = MutationState.CONFIRMED
        self.booking = booking
        self.message = message

    def reject(self, message: str):
        if self.state != MutationState.PENDING:
            raise ValueError(f"Mutation already {self.state.value}")
        self.state = MutationState.REJECTED
        self.message = message

    @property
    def is_confirmed(self) -> bool:
        return self.state == MutationState.CONFIRMED
