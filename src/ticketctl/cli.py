"""CLI entry point for ticketctl.

Each command maps onto one TicketService operation. Failures are printed to
stderr and mapped to a distinct exit code per error kind.
"""

from __future__ import annotations

import contextlib
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click

from ticketctl import __version__
from ticketctl.config import ConfigError, load_settings
from ticketctl.logging import get_logger, setup_logging
from ticketctl.service import (
    InvalidPriorityError,
    InvalidStatusError,
    InvalidTitleError,
    InvalidTypeError,
    TicketService,
    TicketServiceError,
)
from ticketctl.store import (
    UNASSIGNED,
    MalformedDocumentError,
    StorageIOError,
    TicketCollisionError,
    TicketNotFoundError,
    TicketStore,
    TicketStoreError,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

    from ticketctl.store import Ticket, TicketSummary

logger = get_logger("cli")

# Exit codes per error kind; click usage errors keep 2
EXIT_CODES: dict[type[Exception], int] = {
    TicketNotFoundError: 3,
    InvalidStatusError: 4,
    InvalidPriorityError: 5,
    InvalidTypeError: 6,
    InvalidTitleError: 7,
    MalformedDocumentError: 8,
    StorageIOError: 9,
    TicketCollisionError: 10,
    ConfigError: 11,
}

TABLE_HEADERS = ("ID", "TITLE", "STATUS", "PRIORITY", "TYPE", "ASSIGNEE")


def exit_code_for(error: Exception) -> int:
    """Get the process exit code for an error."""
    for error_type, code in EXIT_CODES.items():
        if isinstance(error, error_type):
            return code
    return 1


@contextlib.contextmanager
def reporting_errors() -> Iterator[None]:
    """Report ticketctl errors on stderr and exit with the matching code."""
    try:
        yield
    except (TicketStoreError, TicketServiceError, ConfigError) as e:
        logger.debug("Command failed: %s", e, exc_info=True)
        click.echo(f"Error: {e}", err=True)
        sys.exit(exit_code_for(e))


def parse_labels(value: str | None) -> list[str]:
    """Split a comma-separated label list, dropping empty entries."""
    if not value:
        return []
    return [label.strip() for label in value.split(",") if label.strip()]


def format_table(rows: list[TicketSummary]) -> list[str]:
    """Render summaries as aligned table lines, header first."""
    data = [(r.id, r.title, r.status, r.priority, r.type, r.assignee) for r in rows]
    widths = [
        max([len(header)] + [len(row[i]) for row in data])
        for i, header in enumerate(TABLE_HEADERS)
    ]

    def line(cells: tuple[str, ...]) -> str:
        return "  ".join(cell.ljust(width) for cell, width in zip(cells, widths)).rstrip()

    return [line(TABLE_HEADERS), line(tuple("-" * w for w in widths))] + [line(r) for r in data]


def format_ticket(ticket: Ticket) -> list[str]:
    """Render a ticket's full details."""
    lines = [
        f"Ticket {ticket.id}",
        f"  Title:     {ticket.title}",
        f"  Status:    {ticket.status}",
        f"  Priority:  {ticket.priority}",
        f"  Type:      {ticket.type}",
        f"  Assignee:  {ticket.assignee or UNASSIGNED}",
        f"  Reporter:  {ticket.reporter}",
        f"  Labels:    {', '.join(ticket.labels) if ticket.labels else '-'}",
        f"  Created:   {ticket.created_at}",
        f"  Updated:   {ticket.updated_at}",
        "",
        "Description:",
        "------------",
        ticket.body or "(none)",
    ]
    if ticket.comments:
        lines += ["", "Comments:", "---------"]
        for index, comment in enumerate(ticket.comments, start=1):
            lines.append(f"{index}. {comment.author} ({comment.timestamp}):")
            lines.append(f"   {comment.comment}")
    return lines


@click.group()
@click.version_option(version=__version__, prog_name="ticket")
@click.option(
    "--root",
    type=click.Path(path_type=Path),
    default=None,
    help="Ticket root directory (default: $TICKET_ROOT or ./tickets)",
)
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to .ticketctl.yaml (auto-detected if not specified)",
)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Enable debug logging on stderr",
)
@click.pass_context
def main(ctx: click.Context, root: Path | None, config_path: Path | None, verbose: bool) -> None:
    """File-system ticket tracker."""
    with reporting_errors():
        settings = load_settings(root=root, config_path=config_path)
        try:
            setup_logging(
                log_dir=settings.log_dir,
                level="DEBUG" if verbose else settings.log_level,
            )
        except OSError as e:
            raise ConfigError(f"Cannot open log directory {settings.log_dir}: {e}") from e
    logger.debug("Using ticket root %s", settings.root)
    ctx.obj = TicketService(TicketStore(settings.root), reporter=settings.reporter)


@main.command()
@click.option("-t", "--title", required=True, help="Ticket title")
@click.option("-d", "--description", default="", help="Ticket description")
@click.option("-p", "--priority", default="medium", show_default=True, help="Ticket priority")
@click.option("--type", "ticket_type", default="task", show_default=True, help="Ticket type")
@click.option("-a", "--assignee", default=None, help="Assignee")
@click.option("-l", "--labels", default=None, help="Comma-separated labels")
@click.pass_obj
def create(
    service: TicketService,
    title: str,
    description: str,
    priority: str,
    ticket_type: str,
    assignee: str | None,
    labels: str | None,
) -> None:
    """Create a new ticket in the backlog."""
    with reporting_errors():
        ticket = service.create(
            title=title,
            description=description,
            priority=priority,
            ticket_type=ticket_type,
            assignee=assignee,
            labels=parse_labels(labels),
        )
    click.echo(f"Created ticket {ticket.id} in {ticket.status}")


@main.command()
@click.argument("ticket_id")
@click.argument("status")
@click.pass_obj
def move(service: TicketService, ticket_id: str, status: str) -> None:
    """Move a ticket to a different status."""
    with reporting_errors():
        ticket = service.move(ticket_id, status)
    click.echo(f"Moved ticket {ticket.id} to {ticket.status}")


@main.command()
@click.argument("ticket_id")
@click.argument("text")
@click.option("--author", default=None, help="Comment author (default: reporter identity)")
@click.pass_obj
def comment(service: TicketService, ticket_id: str, text: str, author: str | None) -> None:
    """Add a comment to a ticket."""
    with reporting_errors():
        service.comment(ticket_id, author or service.reporter, text)
    click.echo(f"Added comment to ticket {ticket_id}")


@main.command()
@click.argument("ticket_id")
@click.argument("assignee")
@click.pass_obj
def assign(service: TicketService, ticket_id: str, assignee: str) -> None:
    """Assign a ticket to someone."""
    with reporting_errors():
        service.assign(ticket_id, assignee)
    click.echo(f"Assigned ticket {ticket_id} to {assignee}")


@main.command()
@click.argument("ticket_id")
@click.pass_obj
def archive(service: TicketService, ticket_id: str) -> None:
    """Archive a ticket."""
    with reporting_errors():
        service.archive(ticket_id)
    click.echo(f"Archived ticket {ticket_id}")


@main.command(name="list")
@click.option("-s", "--status", default=None, help="Filter by status")
@click.option("-a", "--assignee", default=None, help="Filter by assignee")
@click.option("-t", "--type", "ticket_type", default=None, help="Filter by type")
@click.option("-p", "--priority", default=None, help="Filter by priority")
@click.pass_obj
def list_tickets(
    service: TicketService,
    status: str | None,
    assignee: str | None,
    ticket_type: str | None,
    priority: str | None,
) -> None:
    """List tickets."""
    with reporting_errors():
        rows = list(
            service.list(
                status=status,
                assignee=assignee,
                ticket_type=ticket_type,
                priority=priority,
            )
        )

    if not rows:
        click.echo("No tickets found.")
        return
    for line in format_table(rows):
        click.echo(line)


@main.command()
@click.argument("ticket_id")
@click.pass_obj
def show(service: TicketService, ticket_id: str) -> None:
    """Show ticket details."""
    with reporting_errors():
        ticket = service.show(ticket_id)
    for line in format_ticket(ticket):
        click.echo(line)


@main.command()
@click.pass_obj
def validate(service: TicketService) -> None:
    """Check every ticket document for consistency."""
    with reporting_errors():
        problems = service.validate()

    if not problems:
        click.echo("All tickets are consistent.")
        return
    for problem in problems:
        click.echo(problem)
    click.echo(f"{len(problems)} problem(s) found.", err=True)
    sys.exit(1)
