"""Functions for pulling tickets out of text."""

import logging
import re
from typing import TypeGuard

from jmullan.git_tag_tickets.errors import RegexError

logger = logging.getLogger(__name__)

DEFAULT_TICKET_REGEX = "[A-Z]+-[0-9]+"
TICKET_PLACEHOLDER = "{ticket}"


def none_as_empty(string: str | None) -> str:
    """Turn that None into an empty string or leave it alone."""
    if string is None:
        return ""
    return string


def none_as_empty_stripped(string: str | None) -> str:
    """Turn Nones into empty strings, and strip other strings."""
    return none_as_empty(string).strip()


def some_string(string: str | None) -> TypeGuard[str]:
    """Determine if the string is None or blank."""
    if string is None:
        return False
    return len(string.strip()) > 0


def compile_ticket_pattern(regex: str | re.Pattern[str] | None) -> re.Pattern[str]:
    """Compile the user's ticket pattern, failing with a RegexError."""
    if isinstance(regex, re.Pattern):
        return regex
    if regex is None:
        regex = DEFAULT_TICKET_REGEX
    try:
        return re.compile(regex)
    except re.error as e:
        raise RegexError(str(e)) from e


def extract_tickets(message: str | None, pattern: re.Pattern[str]) -> list[str]:
    """Find every ticket-looking substring, in order, duplicates included."""
    if message is None:
        return []
    return [match.group(0) for match in pattern.finditer(message)]


def build_ticket_url(jira_url: str, ticket: str) -> str:
    """Link a ticket by filling in or appending to the base url."""
    if TICKET_PLACEHOLDER in jira_url:
        return jira_url.replace(TICKET_PLACEHOLDER, ticket)
    return f"{jira_url}{ticket}"


def build_ticket_urls(jira_url: str | None, tickets: list[str]) -> list[str]:
    """Link every ticket, or nothing at all when there is no base url."""
    if jira_url is None:
        return []
    return [build_ticket_url(jira_url, ticket) for ticket in tickets]
