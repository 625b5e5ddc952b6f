"""TicketService - Ticket operations over a TicketStore."""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from ticketctl.service.exceptions import (
    InvalidPriorityError,
    InvalidStatusError,
    InvalidTitleError,
    InvalidTypeError,
    ValidationError,
)
from ticketctl.store import (
    PRIORITIES,
    STATUSES,
    TYPES,
    Comment,
    MalformedDocumentError,
    Ticket,
    TicketPriority,
    TicketStatus,
    TicketType,
    decode,
    encode,
    generate_ticket_id,
)
from ticketctl.store.models import format_timestamp, parse_timestamp

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path

    from ticketctl.store import TicketStore, TicketSummary

logger = logging.getLogger(__name__)


def _check_choice(
    value: str, allowed: tuple[str, ...], error: type[ValidationError], label: str
) -> None:
    if value not in allowed:
        raise error(f"Invalid {label} '{value}'. Must be one of: {', '.join(allowed)}")


class TicketService:
    """Implements ticket operations and their validation rules.

    Status transitions form a complete graph: a ticket may move from any
    status to any other. ``archive`` is terminal by convention only.
    """

    def __init__(
        self,
        store: TicketStore,
        reporter: str = "unknown",
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the Ticket Service.

        Args:
            store: TicketStore holding the documents.
            reporter: Identity recorded as reporter on created tickets.
            clock: Returns the current time. Defaults to UTC wall clock.
        """
        self.store = store
        self.reporter = reporter
        self._clock = clock or (lambda: datetime.now(UTC))

    # --- Helpers ---

    def _now(self) -> str:
        return format_timestamp(self._clock())

    def _touch(self, ticket: Ticket) -> None:
        now = parse_timestamp(self._now())
        created = parse_timestamp(ticket.created_at)
        # Never let updated_at fall behind created_at, even if the clock steps back
        if created is not None and created > now:
            now = created
        ticket.updated_at = format_timestamp(now)

    def _load(self, path: Path) -> Ticket:
        text = self.store.read(path)
        try:
            metadata, body = decode(text)
            return Ticket.from_document(metadata, body)
        except MalformedDocumentError as e:
            raise MalformedDocumentError(f"{path}: {e}") from e

    def _render(self, ticket: Ticket) -> str:
        return encode(ticket.to_metadata(), ticket.body)

    # --- Operations ---

    def create(
        self,
        title: str,
        description: str = "",
        priority: str = TicketPriority.MEDIUM.value,
        ticket_type: str = TicketType.TASK.value,
        assignee: str | None = None,
        labels: list[str] | None = None,
    ) -> Ticket:
        """Create a new ticket in the backlog.

        Args:
            title: Ticket title (required, non-blank)
            description: Free-text body
            priority: One of PRIORITIES
            ticket_type: One of TYPES
            assignee: Optional assignee
            labels: Optional labels, order and duplicates kept

        Returns:
            The created Ticket

        Raises:
            InvalidTitleError: If the title is blank
            InvalidPriorityError: If priority is unknown
            InvalidTypeError: If ticket_type is unknown
        """
        if not title or not title.strip():
            raise InvalidTitleError("Ticket title must not be empty")
        _check_choice(priority, PRIORITIES, InvalidPriorityError, "priority")
        _check_choice(ticket_type, TYPES, InvalidTypeError, "type")

        now = self._clock()
        ticket_id = generate_ticket_id(now)
        while self.store.exists(ticket_id):
            ticket_id = generate_ticket_id(now)

        timestamp = format_timestamp(now)
        ticket = Ticket(
            id=ticket_id,
            title=title,
            status=TicketStatus.BACKLOG.value,
            priority=priority,
            type=ticket_type,
            reporter=self.reporter,
            created_at=timestamp,
            updated_at=timestamp,
            assignee=assignee or None,
            labels=list(labels or []),
            body=description or "",
        )
        self.store.write(ticket.status, ticket.id, self._render(ticket))
        logger.info("Created ticket %s (%s)", ticket.id, ticket.title)
        return ticket

    def move(self, ticket_id: str, new_status: str) -> Ticket:
        """Move a ticket to another status.

        Args:
            ticket_id: The ticket's ID
            new_status: Destination status, one of STATUSES

        Returns:
            The updated Ticket

        Raises:
            InvalidStatusError: If new_status is unknown
            TicketNotFoundError: If the ticket doesn't exist
        """
        _check_choice(new_status, STATUSES, InvalidStatusError, "status")

        path = self.store.resolve(ticket_id)
        ticket = self._load(path)
        old_status = ticket.status
        ticket.status = new_status
        self._touch(ticket)

        self.store.relocate(ticket_id, path, new_status, self._render(ticket))
        logger.info("Moved ticket %s: %s -> %s", ticket_id, old_status, new_status)
        return ticket

    def comment(self, ticket_id: str, author: str, text: str) -> Ticket:
        """Append a comment to a ticket.

        Raises:
            TicketNotFoundError: If the ticket doesn't exist
        """
        path = self.store.resolve(ticket_id)
        ticket = self._load(path)
        timestamp = self._now()
        ticket.comments.append(Comment(author=author, comment=text, timestamp=timestamp))
        self._touch(ticket)

        self.store.write(path.parent.name, ticket_id, self._render(ticket))
        logger.info("Added comment to ticket %s by %s", ticket_id, author)
        return ticket

    def assign(self, ticket_id: str, assignee: str) -> Ticket:
        """Assign a ticket.

        Raises:
            TicketNotFoundError: If the ticket doesn't exist
        """
        path = self.store.resolve(ticket_id)
        ticket = self._load(path)
        ticket.assignee = assignee
        self._touch(ticket)

        self.store.write(path.parent.name, ticket_id, self._render(ticket))
        logger.info("Assigned ticket %s to %s", ticket_id, assignee)
        return ticket

    def archive(self, ticket_id: str) -> Ticket:
        """Move a ticket to the archive."""
        return self.move(ticket_id, TicketStatus.ARCHIVE.value)

    def list(
        self,
        status: str | None = None,
        assignee: str | None = None,
        ticket_type: str | None = None,
        priority: str | None = None,
    ) -> Iterator[TicketSummary]:
        """List ticket summaries matching all given filters.

        Filters are validated up front; documents are read lazily as the
        result is iterated, in status order then file name order.

        Raises:
            InvalidStatusError: If status is unknown
            InvalidTypeError: If ticket_type is unknown
            InvalidPriorityError: If priority is unknown
        """
        if status is not None:
            _check_choice(status, STATUSES, InvalidStatusError, "status")
        if ticket_type is not None:
            _check_choice(ticket_type, TYPES, InvalidTypeError, "type")
        if priority is not None:
            _check_choice(priority, PRIORITIES, InvalidPriorityError, "priority")

        statuses = [status] if status is not None else None
        return self._iter_summaries(statuses, assignee, ticket_type, priority)

    def _iter_summaries(
        self,
        statuses: list[str] | None,
        assignee: str | None,
        ticket_type: str | None,
        priority: str | None,
    ) -> Iterator[TicketSummary]:
        for path in self.store.iter_paths(statuses):
            ticket = self._load(path)
            if assignee is not None and ticket.assignee != assignee:
                continue
            if ticket_type is not None and ticket.type != ticket_type:
                continue
            if priority is not None and ticket.priority != priority:
                continue
            yield ticket.summary()

    def show(self, ticket_id: str) -> Ticket:
        """Get the full ticket, comments in insertion order.

        Raises:
            TicketNotFoundError: If the ticket doesn't exist
        """
        return self._load(self.store.resolve(ticket_id))

    def validate(self) -> list[str]:
        """Check every document against the storage invariants.

        Reports undecodable documents, status fields that disagree with
        their directory, IDs that disagree with their file name, and tickets
        present in more than one status directory. Never modifies anything.

        Returns:
            Human-readable problem descriptions; empty when consistent
        """
        problems: list[str] = []
        found_in: dict[str, list[str]] = defaultdict(list)

        for path in self.store.iter_paths():
            directory = path.parent.name
            found_in[path.stem].append(directory)
            try:
                ticket = self._load(path)
            except MalformedDocumentError as e:
                problems.append(str(e))
                continue
            if ticket.status != directory:
                problems.append(f"{path}: status '{ticket.status}' does not match directory")
            if ticket.id != path.stem:
                problems.append(f"{path}: id '{ticket.id}' does not match file name")

        for ticket_id, directories in found_in.items():
            if len(directories) > 1:
                problems.append(
                    f"Ticket {ticket_id} found in multiple statuses: {', '.join(directories)}"
                )

        return problems
