"""Turn attributed commits into colored lines for a terminal."""

import logging

from rich.console import Console
from rich.text import Text

from jmullan.git_tag_tickets.models import AttributionRecord, ShowSha, TagCommits

logger = logging.getLogger(__name__)

INDENT = "  "
TICKET_COLUMN_WIDTH = 10
NO_TICKETS = "(no tickets)"
NO_ENTRIES = "(no entries)"

TICKET_STYLE = "bold italic"
HEADER_STYLE = "bold green"
MUTED_STYLE = "dim"
ERROR_STYLE = "red"


def tag_matches_filter(tag_name: str, filter_text: str | None) -> bool:
    """Determine if the tag name alone is enough to pass the filter."""
    if filter_text is None:
        return True
    return filter_text in tag_name


def filter_records(
    tag_name: str, records: list[AttributionRecord], filter_text: str | None
) -> list[AttributionRecord] | None:
    """Pick the commits to show under a tag, or None to hide the whole tag."""
    if filter_text is None:
        return list(records)
    if tag_matches_filter(tag_name, filter_text):
        return list(records)
    filtered = [record for record in records if filter_text in record.ticket_text]
    if not filtered:
        return None
    return filtered


def format_tickets(tickets: list[str]) -> Text:
    """Emphasize each ticket, or show a placeholder when there are none."""
    if not tickets:
        return Text(NO_TICKETS, style=MUTED_STYLE)
    return Text(", ").join(Text(ticket, style=TICKET_STYLE) for ticket in tickets)


def format_header(tag_name: str, *, empty: bool) -> Text:
    """Build the line that starts a tag's section."""
    if empty:
        return Text(f"{tag_name} {NO_ENTRIES}", style=MUTED_STYLE)
    return Text(tag_name, style=HEADER_STYLE)


def format_record(record: AttributionRecord, *, show_links: bool, show_sha: ShowSha = ShowSha.FALSE) -> Text:
    """Build the indented line for one commit."""
    line = Text(INDENT)
    if show_sha:
        line.append(f"{record.commit.short_sha} ", style=MUTED_STYLE)
    tickets = format_tickets(record.tickets)
    line.append_text(tickets)
    if show_links:
        padding = TICKET_COLUMN_WIDTH - len(tickets.plain)
        if padding > 0:
            line.append(" " * padding)
        line.append(" | ")
        line.append(", ".join(record.urls))
    return line


def build_report(
    tag_commits: TagCommits,
    filter_text: str | None = None,
    *,
    show_links: bool = False,
    show_sha: ShowSha = ShowSha.FALSE,
) -> list[Text]:
    """Lay out the whole report, one Text per line."""
    records_by_tag_name = tag_commits.records_by_tag_name()
    lines = []
    for tag_name in tag_commits.tag_names:
        records = filter_records(tag_name, records_by_tag_name.get(tag_name, []), filter_text)
        if records is None:
            logger.debug("Hiding %s, nothing matches %s", tag_name, filter_text)
            continue
        lines.append(format_header(tag_name, empty=not records))
        lines.extend(format_record(record, show_links=show_links, show_sha=show_sha) for record in records)
    return lines


def print_report(
    tag_commits: TagCommits,
    console: Console | None = None,
    filter_text: str | None = None,
    *,
    show_links: bool = False,
    show_sha: ShowSha = ShowSha.FALSE,
) -> None:
    """Print the report for every tag."""
    if console is None:
        console = Console(highlight=False)
    for line in build_report(tag_commits, filter_text, show_links=show_links, show_sha=show_sha):
        console.print(line, soft_wrap=True, highlight=False)


def print_error(message: str, console: Console | None = None) -> None:
    """Print a single red diagnostic line to stderr."""
    if console is None:
        console = Console(stderr=True, highlight=False)
    console.print(Text(message, style=ERROR_STYLE), soft_wrap=True, highlight=False)
