#!/usr/bin/env python3.13
"""Print the tickets that went into each recent tag."""

import logging
import os
import sys

from jmullan.git_tag_tickets.durations import parse_duration
from jmullan.git_tag_tickets.errors import TagCommitsError
from jmullan.git_tag_tickets.models import IncludeUnmatched, ShowSha
from jmullan.git_tag_tickets.report import print_error, print_report
from jmullan.git_tag_tickets.repository import GitRepository
from jmullan.git_tag_tickets.tag_commits import DEFAULT_DEPTH, attribute_tags
from jmullan.git_tag_tickets.text import DEFAULT_TICKET_REGEX
from jmullan.logging import easy_logging

from jmullan.cmd import cmd

logger = logging.getLogger(__name__)


class TagTicketsMain(cmd.Main):
    """Show which tickets landed in which tags."""

    def __init__(self):
        super().__init__()
        self.parser.add_argument(
            "-d",
            "--depth",
            dest="depth",
            type=int,
            default=DEFAULT_DEPTH,
            help="Maximum depth to search commits from tags",
        )
        self.parser.add_argument(
            "-t",
            "--age",
            dest="age",
            default="1y",
            help="The maximum age ([t]ime) of tags to show, in the format 1y 2mon 3w 4d 5h 6m 7s",
        )
        self.parser.add_argument(
            "-u",
            "--jira-url",
            dest="jira_url",
            default=os.environ.get("JIRA_URL") or None,
            help=(
                "The base URL for JIRA tickets, e.g. https://jira.example.com/browse/ ."
                " If {ticket} is in the URL it is replaced with the ticket, otherwise the ticket is appended."
                " Defaults to $JIRA_URL."
            ),
        )
        self.parser.add_argument(
            "-r",
            "--jira-regex",
            dest="jira_regex",
            default=DEFAULT_TICKET_REGEX,
            help="The regex to use to match JIRA ticket numbers",
        )
        self.parser.add_argument(
            "-a",
            "--all",
            dest="all",
            action="store_true",
            default=False,
            help="Show all commits, not just those matching the JIRA regex",
        )
        self.parser.add_argument(
            "-f",
            "--filter",
            dest="filter",
            default=None,
            help="Filter by tag name or ticket",
        )
        self.parser.add_argument(
            "-C",
            "--repo",
            dest="repo",
            default=".",
            help="Look at the repository containing this path",
        )
        self.parser.add_argument(
            "--sha",
            dest="sha",
            action="store_true",
            default=False,
            help="Show the abbreviated sha of each commit",
        )

    def setup(self) -> None:
        """Configure logging."""
        super().setup()
        if self.args.verbose:
            easy_logging.easy_initialize_logging("DEBUG", stream=sys.stderr)
        elif self.args.quiet:
            easy_logging.easy_initialize_logging("WARNING", stream=sys.stderr)
        else:
            easy_logging.easy_initialize_logging("INFO", stream=sys.stderr)

    def main(self) -> None:
        """Print the tickets by tag."""
        super().main()
        repo_path = self.args.repo
        if repo_path == ".":
            repo_path = os.getcwd()
        max_age = parse_duration(self.args.age)
        try:
            repository = GitRepository.open(repo_path)
            tag_commits = attribute_tags(
                repository,
                max_age,
                self.args.depth,
                self.args.jira_regex,
                IncludeUnmatched.if_true(self.args.all),
                self.args.jira_url,
            )
        except TagCommitsError as e:
            print_error(e.describe())
            sys.exit(1)
        print_report(
            tag_commits,
            filter_text=self.args.filter,
            show_links=self.args.jira_url is not None,
            show_sha=ShowSha.if_true(self.args.sha),
        )


def main() -> None:
    """Run the command."""
    TagTicketsMain().main()


if __name__ == "__main__":
    main()
