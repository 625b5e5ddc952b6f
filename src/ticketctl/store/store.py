"""TicketStore - Maps ticket IDs to documents under a status-partitioned root."""

from __future__ import annotations

import contextlib
import logging
import os
import re
from pathlib import Path
from typing import TYPE_CHECKING

from ticketctl.store.exceptions import (
    MalformedDocumentError,
    StorageIOError,
    TicketCollisionError,
    TicketNotFoundError,
)
from ticketctl.store.models import STATUSES

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

logger = logging.getLogger("ticketctl.store")

DOCUMENT_SUFFIX = ".md"

# IDs are used verbatim as file names
ID_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


class TicketStore:
    """File-system storage for ticket documents.

    Layout is ``<root>/<status>/<id>.md``. The root is created lazily on the
    first write.
    """

    def __init__(self, root: str | Path) -> None:
        """Initialize Ticket Store.

        Args:
            root: Root directory holding one subdirectory per status
        """
        self.root = Path(root)

    def path_for(self, status: str, ticket_id: str) -> Path:
        """Get the document path for a ticket in a given status."""
        return self.root / status / f"{ticket_id}{DOCUMENT_SUFFIX}"

    def resolve(self, ticket_id: str) -> Path:
        """Find the document for a ticket.

        Status directories are probed in enumeration order; the first match
        wins.

        Args:
            ticket_id: The ticket's ID

        Returns:
            Path to the ticket's document

        Raises:
            TicketNotFoundError: If no status directory holds the ticket
        """
        if ID_RE.match(ticket_id):
            for status in STATUSES:
                path = self.path_for(status, ticket_id)
                if path.is_file():
                    return path
        raise TicketNotFoundError(f"Ticket {ticket_id} not found")

    def exists(self, ticket_id: str) -> bool:
        """Check whether any status directory holds the ticket."""
        try:
            self.resolve(ticket_id)
        except TicketNotFoundError:
            return False
        return True

    def locations(self, ticket_id: str) -> list[Path]:
        """List every status directory document for a ticket ID."""
        if not ID_RE.match(ticket_id):
            return []
        return [
            self.path_for(status, ticket_id)
            for status in STATUSES
            if self.path_for(status, ticket_id).is_file()
        ]

    def ensure_dir(self, status: str) -> Path:
        """Create the directory for a status if it doesn't exist.

        Raises:
            StorageIOError: If the directory cannot be created
        """
        directory = self.root / status
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageIOError(f"Cannot create directory {directory}: {e}") from e
        return directory

    def read(self, path: Path) -> str:
        """Read a document's text.

        Raises:
            StorageIOError: If the file cannot be read
            MalformedDocumentError: If the file is not valid UTF-8
        """
        try:
            return path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise MalformedDocumentError(f"{path}: not valid UTF-8: {e}") from e
        except OSError as e:
            raise StorageIOError(f"Cannot read {path}: {e}") from e

    def write(self, status: str, ticket_id: str, text: str) -> Path:
        """Write a document at ``<root>/<status>/<id>.md``, replacing any existing one.

        The text goes to a temporary sibling first and is moved into place
        with ``os.replace``, so readers never observe a partial document.

        Args:
            status: Status directory to write into
            ticket_id: The ticket's ID
            text: Encoded document

        Returns:
            Path of the written document

        Raises:
            StorageIOError: If the directory or file cannot be written
        """
        self.ensure_dir(status)
        path = self.path_for(status, ticket_id)
        tmp = path.with_name(path.name + ".tmp")
        try:
            tmp.write_text(text, encoding="utf-8")
            os.replace(tmp, path)
        except OSError as e:
            with contextlib.suppress(OSError):
                tmp.unlink()
            raise StorageIOError(f"Cannot write {path}: {e}") from e
        logger.debug("Wrote %s", path)
        return path

    def relocate(self, ticket_id: str, from_path: Path, to_status: str, text: str) -> Path:
        """Move a ticket's document to another status directory.

        The destination is written before the source is removed, so an
        interruption leaves the ticket in two places rather than none.

        Args:
            ticket_id: The ticket's ID
            from_path: Current document path
            to_status: Destination status
            text: Encoded document for the destination

        Returns:
            Path of the document at its new location

        Raises:
            TicketCollisionError: If a different document already exists at
                the destination
            StorageIOError: If the write or the source removal fails
        """
        dest = self.path_for(to_status, ticket_id)
        if dest == from_path:
            return self.write(to_status, ticket_id, text)
        if dest.exists():
            raise TicketCollisionError(
                f"Cannot move ticket {ticket_id} to {to_status}: {dest} already exists"
            )

        self.write(to_status, ticket_id, text)
        try:
            from_path.unlink()
        except FileNotFoundError:
            logger.warning("Source %s vanished during relocation of %s", from_path, ticket_id)
        except OSError as e:
            raise StorageIOError(
                f"Ticket {ticket_id} written to {dest} but {from_path} could not be removed: {e}"
            ) from e

        logger.debug("Relocated %s from %s to %s", ticket_id, from_path.parent.name, to_status)
        return dest

    def iter_paths(self, statuses: Iterable[str] | None = None) -> Iterator[Path]:
        """Yield document paths under the given status directories.

        Args:
            statuses: Status directories to scan. Defaults to all, in
                enumeration order.

        Yields:
            Document paths, sorted by file name within each directory
        """
        for status in STATUSES if statuses is None else statuses:
            directory = self.root / status
            if not directory.is_dir():
                continue
            try:
                paths = sorted(directory.glob(f"*{DOCUMENT_SUFFIX}"))
            except OSError as e:
                raise StorageIOError(f"Cannot scan {directory}: {e}") from e
            yield from (p for p in paths if p.is_file())
