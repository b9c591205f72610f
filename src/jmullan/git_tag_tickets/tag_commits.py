"""Work out which tag each recent commit belongs to."""

import datetime
import logging
import re
import time

from jmullan.git_tag_tickets.errors import NoTagsError
from jmullan.git_tag_tickets.models import (
    AttributionRecord,
    Commit,
    CommitDepthInfo,
    IncludeUnmatched,
    TagCommits,
)
from jmullan.git_tag_tickets.repository import Repository
from jmullan.git_tag_tickets.text import (
    build_ticket_urls,
    compile_ticket_pattern,
    extract_tickets,
    some_string,
)

logger = logging.getLogger(__name__)

DEFAULT_DEPTH = 10


def walk_ancestors(repository: Repository, start: Commit, max_depth: int = DEFAULT_DEPTH) -> list[CommitDepthInfo]:
    """Get all the ancestors of a commit, up to a maximum depth.

    The worklist is a stack, and the depth recorded for a sha is whatever was
    written last when one of its children was expanded, not the minimum. So a
    commit reachable by paths of different lengths is reported at the depth of
    the path that scheduled it most recently before it was popped.

    Each commit is reported once, at the smallest depth any of its pops saw.
    Every pop within the cap expands the parents again, so later pops keep
    overwriting the depths recorded for them.
    """
    shas_to_check = list(start.parent_shas)
    depths = {sha: 1 for sha in shas_to_check}
    found: dict[str, CommitDepthInfo] = {}

    while shas_to_check:
        sha = shas_to_check.pop()
        commit = repository.find_commit(sha)
        depth = depths.get(sha, 1)

        if depth > max_depth:
            continue

        parent_shas = commit.parent_shas
        shas_to_check.extend(parent_shas)
        for parent_sha in parent_shas:
            depths[parent_sha] = depth + 1

        seen = found.get(sha)
        if seen is None or depth < seen.depth:
            found[sha] = CommitDepthInfo(commit, depth)
    return list(found.values())


def is_within_age(commit: Commit, max_age: datetime.timedelta, now: float) -> bool:
    """Check that the commit is no older than now minus max_age."""
    cutoff = now - max_age.total_seconds()
    return commit.timestamp >= cutoff


def add_if_matches(
    commit: Commit,
    depth: int,
    tag_name: str,
    commits_by_sha: dict[str, AttributionRecord],
    ticket_pattern: re.Pattern[str],
    include_unmatched: IncludeUnmatched,
    jira_url: str | None,
) -> bool:
    """Attribute the commit to the tag if it mentions a ticket, or if we want everything."""
    tickets = extract_tickets(commit.message, ticket_pattern)
    if not tickets and not include_unmatched:
        return False
    previous = commits_by_sha.get(commit.sha)
    if previous is not None and previous.tag_name != tag_name:
        logger.debug(
            "%s moves from %s at %s to %s at %s", commit.short_sha, previous.tag_name, previous.depth, tag_name, depth
        )
    commits_by_sha[commit.sha] = AttributionRecord(
        commit=commit,
        depth=depth,
        tag_name=tag_name,
        tickets=tickets,
        urls=build_ticket_urls(jira_url, tickets),
    )
    return True


def attribute_tags(
    repository: Repository,
    max_age: datetime.timedelta,
    max_depth: int = DEFAULT_DEPTH,
    ticket_pattern: str | re.Pattern[str] | None = None,
    include_unmatched: IncludeUnmatched = IncludeUnmatched.FALSE,
    jira_url: str | None = None,
    now: float | None = None,
) -> TagCommits:
    """Map every nearby commit to the closest tag that reaches it.

    Any failure is raised before anything is returned, so a caller never
    prints a report built from only some of the tags.
    """
    pattern = compile_ticket_pattern(ticket_pattern)
    if now is None:
        now = time.time()

    commits_by_sha: dict[str, AttributionRecord] = {}
    tag_names: list[str] = []

    for tag in repository.tags():
        tag_name = tag.ref_name
        if not some_string(tag_name):
            raise NoTagsError()
        tag_names.append(tag_name)

        commit = repository.tag_target(tag)
        if not is_within_age(commit, max_age, now):
            logger.debug("Skipping %s, %s is too old", tag_name, commit.short_sha)
            continue

        # the commit the tag points at always gets a chance
        add_if_matches(commit, 0, tag_name, commits_by_sha, pattern, include_unmatched, jira_url)

        for ancestor in walk_ancestors(repository, commit, max_depth):
            existing = commits_by_sha.get(ancestor.commit.sha)
            if existing is not None and existing.depth < ancestor.depth:
                continue
            add_if_matches(
                ancestor.commit,
                ancestor.depth,
                tag_name,
                commits_by_sha,
                pattern,
                include_unmatched,
                jira_url,
            )

    tag_names.sort()
    return TagCommits(commits_by_sha, tag_names)
