"""Classes and enums mostly devoid of business logic."""

import enum
import logging
import typing
from collections import defaultdict
from dataclasses import dataclass, field

from jmullan.git_tag_tickets.text import none_as_empty, none_as_empty_stripped

logger = logging.getLogger(__name__)


class BooleanEnum(enum.Enum):
    """Extend this to make simple two-value enums to replace boolean arguments."""

    def __bool__(self):
        """Cast me into a boolean."""
        return bool(self.value)

    @classmethod
    def if_true(cls, true_false: bool) -> typing.Self:  # noqa: FBT001
        """Build this enum from something truthy."""
        for item in cls:
            if bool(true_false) == bool(item.value):
                return item
        raise ValueError("Not a boolean")


class IncludeUnmatched(BooleanEnum):
    """Whether commits without any ticket still get attributed."""

    FALSE = False
    TRUE = True


class ShowSha(BooleanEnum):
    """Boolean-ish definitions."""

    FALSE = False
    TRUE = True


@dataclass(frozen=True)
class Tag:
    """A named sha."""

    sha_sha: str = field(metadata={"template": "%(*objectname):%(objectname)"})
    type_type: str = field(metadata={"template": "%(*objecttype):%(objecttype)"})
    ref_name: str = field(metadata={"template": "%(refname:strip=2)"})

    @property
    def sha(self) -> str:
        """Find the sha this tag points to."""
        parts = none_as_empty(self.sha_sha).split(":")
        if len(parts[0]):
            return parts[0]
        return parts[-1]

    @property
    def target_type(self) -> str:
        """Find the type of object this tag ends up pointing at."""
        parts = none_as_empty(self.type_type).split(":")
        if len(parts[0]):
            return parts[0]
        return parts[-1]


@dataclass(frozen=True)
class Commit:
    """A node of the ancestry graph, as much of it as we read."""

    sha: str = field(metadata={"template": "%H"})
    parents: str = field(metadata={"template": "%P"})
    author_time: str = field(metadata={"template": "%at"})
    commit_time: str = field(metadata={"template": "%ct"})
    body: str = field(metadata={"template": "%B"})

    @property
    def parent_shas(self) -> list[str]:
        """Get the parents of this commit."""
        if self.parents is None:
            return []
        # use a dictionary's keys as an ordered set
        shas = {sha.strip(): True for sha in self.parents.split(" ") if sha.strip()}
        return list(shas.keys())

    @property
    def timestamp(self) -> int:
        """Seconds since the epoch at which this commit was recorded."""
        stamp = none_as_empty_stripped(self.commit_time) or none_as_empty_stripped(self.author_time)
        if not stamp:
            return 0
        return int(stamp)

    @property
    def message(self) -> str:
        """The full commit message."""
        return none_as_empty(self.body)

    @property
    def short_sha(self) -> str:
        """Abbreviate the sha for display."""
        return self.sha[:7]


@dataclass(frozen=True)
class CommitDepthInfo:
    """A commit plus how many parent hops it took to get to it."""

    commit: Commit
    depth: int


@dataclass(frozen=True)
class AttributionRecord:
    """A commit and the tag that gets credit for it."""

    commit: Commit
    depth: int
    tag_name: str
    tickets: list[str] = field(default_factory=list)
    urls: list[str] = field(default_factory=list)

    @property
    def ticket_text(self) -> str:
        """The tickets as a single plain string."""
        return ", ".join(self.tickets)


@dataclass
class TagCommits:
    """Everything the report needs: the commit owners and the tags to print."""

    commits_by_sha: dict[str, AttributionRecord]
    tag_names: list[str]

    def records_by_tag_name(self) -> dict[str, list[AttributionRecord]]:
        """Group attributed commits under their tags, shallowest first."""
        grouped: dict[str, list[AttributionRecord]] = defaultdict(list)
        for record in self.commits_by_sha.values():
            grouped[record.tag_name].append(record)
        # sort is stable, so equal depths keep the order they were attributed in
        return {tag_name: sorted(records, key=lambda r: r.depth) for tag_name, records in grouped.items()}
