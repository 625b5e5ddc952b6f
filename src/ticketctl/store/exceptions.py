"""Custom exceptions for Ticket Store."""


class TicketStoreError(Exception):
    """Base exception for Ticket Store errors."""


class TicketNotFoundError(TicketStoreError):
    """Ticket with given ID does not exist under any status directory."""


class MalformedDocumentError(TicketStoreError):
    """A ticket document could not be decoded."""


class StorageIOError(TicketStoreError):
    """A directory or file operation failed."""


class TicketCollisionError(TicketStoreError):
    """Another document already occupies the relocation target."""
