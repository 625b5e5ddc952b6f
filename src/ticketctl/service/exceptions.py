"""Exceptions for the Ticket Service module."""


class TicketServiceError(Exception):
    """Base exception for ticket service errors."""


class ValidationError(TicketServiceError):
    """Input rejected before any file-system mutation."""


class InvalidStatusError(ValidationError):
    """Status is not one of the known workflow states."""


class InvalidPriorityError(ValidationError):
    """Priority is not one of the known priorities."""


class InvalidTypeError(ValidationError):
    """Ticket type is not one of the known types."""


class InvalidTitleError(ValidationError):
    """Ticket title is missing or blank."""
