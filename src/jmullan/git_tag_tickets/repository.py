"""Read tags and commits, either from memory or from a git repo on disk."""

import logging
import subprocess
from collections.abc import Iterable, Iterator
from dataclasses import fields
from typing import IO

from jmullan.git_tag_tickets.errors import GitError, NoTagsError, NotARepositoryError
from jmullan.git_tag_tickets.models import Commit, Tag
from jmullan.git_tag_tickets.text import some_string

logger = logging.getLogger(__name__)

# git-for-each-ref doesn't have a -z option, so we manually add the null character
GIT_TAG_FORMAT = (
    "\n".join(
        f"{tag_field.name} {tag_field.metadata['template']}"
        for tag_field in fields(Tag)
        if tag_field.metadata.get("template") is not None
    )
    + "%00"
)

GIT_COMMIT_FORMAT = "\n".join(
    f"%h {commit_field.name} {commit_field.metadata['template']}"
    for commit_field in fields(Commit)
    if commit_field.metadata.get("template") is not None
)

# how many commits to read at once when asked for one we have not seen
PREFETCH_COUNT = 64


class Repository:
    """An arena of commits keyed by sha, plus the tags that point into it."""

    def __init__(self, commits: Iterable[Commit] = (), tags: Iterable[Tag] = ()):
        self.commits_by_sha: dict[str, Commit] = {commit.sha: commit for commit in commits}
        self._tags = list(tags)

    def tags(self) -> list[Tag]:
        """List every tag, in whatever order the source gives them."""
        return list(self._tags)

    def load_commit(self, sha: str) -> None:
        """Give subclasses a chance to fill in a commit we have not seen."""

    def find_commit(self, sha: str) -> Commit:
        """Look up a commit by sha."""
        commit = self.commits_by_sha.get(sha)
        if commit is None:
            self.load_commit(sha)
            commit = self.commits_by_sha.get(sha)
        if commit is None:
            raise GitError(f"commit {sha} not found")
        return commit

    def tag_target(self, tag: Tag) -> Commit:
        """Resolve a tag to the commit it points at."""
        if not some_string(tag.ref_name):
            raise NoTagsError()
        if not some_string(tag.sha):
            raise GitError(f"tag {tag.ref_name} has no target")
        target_type = tag.target_type
        if some_string(target_type) and target_type != "commit":
            raise GitError(f"tag {tag.ref_name} points at a {target_type}, not a commit")
        return self.find_commit(tag.sha)


def stream_chunks(io: IO[bytes] | None, separator: str = "\n") -> Iterator[str]:
    """Read a stream of bytes and yield strings divided by the separator."""
    separator_bytes = separator.encode("UTF8")
    accumulated = bytearray()
    keep_going = True
    while io is not None and io.readable() and keep_going:
        read_chunk = io.read(1024)
        if read_chunk == b"":
            keep_going = False
        accumulated.extend(read_chunk)
        while separator_bytes in accumulated:
            chunk, accumulated = accumulated.split(separator_bytes, 1)
            yield chunk.decode("UTF8", errors="replace")
    yield accumulated.decode("UTF8", errors="replace")


def chunk_command(args: list[str]) -> list[str]:
    """Run the args as a command and split its output on null characters.

    This is provided to be mockable.
    """
    logger.debug("Running %s", args)
    try:
        with subprocess.Popen(args, stdout=subprocess.PIPE, stderr=subprocess.PIPE) as proc:  # noqa: S603
            chunks = list(stream_chunks(proc.stdout, "\x00"))
            stderr = proc.stderr.read().decode("UTF8", errors="replace") if proc.stderr is not None else ""
            returncode = proc.wait()
    except OSError as e:
        raise GitError(str(e)) from e
    if returncode != 0:
        raise GitError(stderr.strip() or f"{' '.join(args)} exited with {returncode}")
    return chunks


def extract_header_fields(header: str) -> dict[str, str]:
    """Convert a specially formatted string into a dictionary."""
    if not some_string(header):
        return {}
    data = {}
    for line in header.split("\n"):
        if not some_string(line):
            continue
        parts = line.split(" ", 1)
        data[parts[0]] = parts[1] if len(parts) > 1 else ""
    return data


def chunk_to_tag(chunk: str | None) -> Tag | None:
    """Build a tag from a string."""
    if not some_string(chunk):
        return None
    tag_data = {tag_field.name: "" for tag_field in fields(Tag)}
    tag_data.update(extract_header_fields(chunk.strip("\n")))
    return Tag(**tag_data)


def chunk_to_commit(chunk: str | None) -> Commit | None:
    """Turn a chunk into a commit object."""
    if not some_string(chunk):
        return None
    chunk = chunk.lstrip("\n")
    abbreviated_sha = chunk.split(" ", 1)[0]
    field_pieces = chunk.removeprefix(f"{abbreviated_sha} ").split(f"\n{abbreviated_sha} ")
    commit_data = {p[0]: p[1] for p in [piece.split(" ", 1) for piece in field_pieces] if len(p) > 1}
    if not commit_data.get("sha"):
        logger.debug("No sha in commit %r", chunk)
        return None
    # an empty parent list leaves a bare field name behind
    for commit_field in fields(Commit):
        commit_data.setdefault(commit_field.name, "")
    return Commit(**commit_data)


class GitRepository(Repository):
    """A repository read by running the git command line tool."""

    def __init__(self, path: str = "."):
        super().__init__()
        self.path = path
        self._tags_loaded = False

    @classmethod
    def open(cls, path: str = ".") -> "GitRepository":
        """Open the repository containing path, failing if there isn't one."""
        try:
            chunk_command(["git", "-C", path, "rev-parse", "--git-dir"])
        except GitError as e:
            logger.debug("%s is not a repository: %s", path, e)
            raise NotARepositoryError(path) from e
        return cls(path)

    def git(self, *args: str) -> list[str]:
        """Run a git subcommand against this repository."""
        return chunk_command(["git", "-C", self.path, *args])

    def tags(self) -> list[Tag]:
        """Find all the tags in the repo."""
        if not self._tags_loaded:
            chunks = self.git("for-each-ref", f"--format={GIT_TAG_FORMAT}", "refs/tags")
            self._tags = [tag for tag in (chunk_to_tag(chunk) for chunk in chunks) if tag is not None]
            self._tags_loaded = True
        return list(self._tags)

    def load_commit(self, sha: str) -> None:
        """Read the commit and a handful of its ancestors into the arena."""
        chunks = self.git("log", "-z", f"--format={GIT_COMMIT_FORMAT}", f"--max-count={PREFETCH_COUNT}", sha, "--")
        for chunk in chunks:
            commit = chunk_to_commit(chunk)
            if commit is None:
                continue
            self.commits_by_sha.setdefault(commit.sha, commit)
