"""Data models for Ticket Store."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from enum import StrEnum
from typing import Any

from ticketctl.store.exceptions import MalformedDocumentError


class TicketStatus(StrEnum):
    """Workflow status enum. Also the name of the directory holding the ticket."""

    BACKLOG = "backlog"
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    REVIEW = "review"
    DONE = "done"
    BLOCKED = "blocked"
    ARCHIVE = "archive"


class TicketPriority(StrEnum):
    """Ticket priority enum."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class TicketType(StrEnum):
    """Ticket type enum."""

    BUG = "bug"
    FEATURE = "feature"
    TASK = "task"
    SPIKE = "spike"


STATUSES: tuple[str, ...] = tuple(s.value for s in TicketStatus)
PRIORITIES: tuple[str, ...] = tuple(p.value for p in TicketPriority)
TYPES: tuple[str, ...] = tuple(t.value for t in TicketType)

UNASSIGNED = "unassigned"

# Metadata block keys, in serialization order
METADATA_KEYS = (
    "id",
    "title",
    "status",
    "priority",
    "type",
    "assignee",
    "reporter",
    "labels",
    "created_at",
    "updated_at",
    "comments",
)

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_ticket_id(now: datetime | None = None) -> str:
    """Generate a new ticket ID.

    The ID is a base-36 millisecond timestamp followed by eight random hex
    characters, e.g. ``TICKET-mgw1x2k3-9f1c2ab4``.

    Args:
        now: Timestamp to encode. Defaults to the current UTC time.

    Returns:
        A new ticket ID string.
    """
    if now is None:
        now = datetime.now(UTC)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    millis = (now - _EPOCH) // timedelta(milliseconds=1)
    return f"TICKET-{_base36(millis)}-{uuid.uuid4().hex[:8]}"


def format_timestamp(value: datetime) -> str:
    """Format a datetime as an ISO-8601 UTC string with millisecond precision."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    value = value.astimezone(UTC)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime | None:
    """Parse an ISO-8601 timestamp into an aware UTC datetime.

    Returns None for values that aren't timestamps. Naive values are taken
    as UTC.
    """
    try:
        parsed = datetime.fromisoformat(value)
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def _as_timestamp(value: Any) -> str:
    # Hand-edited documents may carry unquoted YAML timestamps
    if isinstance(value, datetime):
        return format_timestamp(value)
    return str(value)


@dataclass
class Comment:
    """A single entry in a ticket's comment log."""

    author: str
    comment: str
    timestamp: str

    @classmethod
    def from_dict(cls, data: Any) -> Comment:
        """Create from a metadata mapping.

        Raises:
            MalformedDocumentError: If the entry is not a complete mapping.
        """
        if not isinstance(data, dict):
            raise MalformedDocumentError(f"Comment entry must be a mapping, got {data!r}")
        missing = [key for key in ("author", "comment", "timestamp") if key not in data]
        if missing:
            raise MalformedDocumentError(f"Comment entry missing fields: {', '.join(missing)}")
        return cls(
            author=str(data["author"]),
            comment=str(data["comment"]),
            timestamp=_as_timestamp(data["timestamp"]),
        )

    def to_dict(self) -> dict[str, str]:
        """Convert to a metadata mapping."""
        return {"author": self.author, "comment": self.comment, "timestamp": self.timestamp}


@dataclass
class TicketSummary:
    """Row returned by list operations."""

    id: str
    title: str
    status: str
    priority: str
    type: str
    assignee: str  # UNASSIGNED when nobody is assigned


@dataclass
class Ticket:
    """A tracked unit of work, persisted as one document per ticket."""

    id: str
    title: str
    status: str
    priority: str
    type: str
    reporter: str
    created_at: str
    updated_at: str
    assignee: str | None = None
    labels: list[str] = field(default_factory=list)
    comments: list[Comment] = field(default_factory=list)
    body: str = ""

    @classmethod
    def from_document(cls, metadata: dict[str, Any], body: str) -> Ticket:
        """Create a ticket from a decoded metadata block and body.

        Args:
            metadata: Metadata mapping as returned by the codec.
            body: Document body.

        Returns:
            The parsed Ticket.

        Raises:
            MalformedDocumentError: If required keys are missing or invalid.
        """
        missing = [key for key in METADATA_KEYS if key not in metadata]
        if missing:
            raise MalformedDocumentError(f"Metadata missing fields: {', '.join(missing)}")

        labels = metadata["labels"] or []
        comments = metadata["comments"] or []
        if not isinstance(labels, list):
            raise MalformedDocumentError(f"'labels' must be a list, got {labels!r}")
        if not isinstance(comments, list):
            raise MalformedDocumentError(f"'comments' must be a list, got {comments!r}")

        assignee = metadata["assignee"]
        return cls(
            id=str(metadata["id"]),
            title=str(metadata["title"]),
            status=str(metadata["status"]),
            priority=str(metadata["priority"]),
            type=str(metadata["type"]),
            reporter=str(metadata["reporter"]),
            created_at=_as_timestamp(metadata["created_at"]),
            updated_at=_as_timestamp(metadata["updated_at"]),
            assignee=str(assignee) if assignee is not None else None,
            labels=[str(label) for label in labels],
            comments=[Comment.from_dict(entry) for entry in comments],
            body=body,
        )

    def to_metadata(self) -> dict[str, Any]:
        """Build the metadata mapping in serialization order."""
        return {
            "id": self.id,
            "title": self.title,
            "status": self.status,
            "priority": self.priority,
            "type": self.type,
            "assignee": self.assignee,
            "reporter": self.reporter,
            "labels": list(self.labels),
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "comments": [c.to_dict() for c in self.comments],
        }

    def summary(self) -> TicketSummary:
        """Build the list-view summary of this ticket."""
        return TicketSummary(
            id=self.id,
            title=self.title,
            status=self.status,
            priority=self.priority,
            type=self.type,
            assignee=self.assignee or UNASSIGNED,
        )

    def __repr__(self) -> str:
        return f"<Ticket(id={self.id!r}, title={self.title!r}, status={self.status!r})>"
