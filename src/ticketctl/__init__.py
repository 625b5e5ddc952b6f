"""ticketctl - a file-system-backed ticket tracker."""

__version__ = "0.1.0"


def get_version() -> str:
    """Return the installed ticketctl version."""
    return __version__
