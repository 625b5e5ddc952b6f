"""Ticket Service - Ticket operations and business rules."""

from ticketctl.service.exceptions import (
    InvalidPriorityError,
    InvalidStatusError,
    InvalidTitleError,
    InvalidTypeError,
    TicketServiceError,
    ValidationError,
)
from ticketctl.service.service import TicketService

__all__ = [
    "InvalidPriorityError",
    "InvalidStatusError",
    "InvalidTitleError",
    "InvalidTypeError",
    "TicketService",
    "TicketServiceError",
    "ValidationError",
]
