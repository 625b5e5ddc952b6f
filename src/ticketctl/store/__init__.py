"""Ticket Store - File-system persistence for ticket documents."""

from ticketctl.store.codec import decode, encode
from ticketctl.store.exceptions import (
    MalformedDocumentError,
    StorageIOError,
    TicketCollisionError,
    TicketNotFoundError,
    TicketStoreError,
)
from ticketctl.store.models import (
    PRIORITIES,
    STATUSES,
    TYPES,
    UNASSIGNED,
    Comment,
    Ticket,
    TicketPriority,
    TicketStatus,
    TicketSummary,
    TicketType,
    generate_ticket_id,
)
from ticketctl.store.store import TicketStore

__all__ = [
    "PRIORITIES",
    "STATUSES",
    "TYPES",
    "UNASSIGNED",
    "Comment",
    "MalformedDocumentError",
    "StorageIOError",
    "Ticket",
    "TicketCollisionError",
    "TicketNotFoundError",
    "TicketPriority",
    "TicketStatus",
    "TicketStore",
    "TicketStoreError",
    "TicketSummary",
    "TicketType",
    "decode",
    "encode",
    "generate_ticket_id",
]
