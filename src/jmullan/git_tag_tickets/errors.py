"""Everything that can stop a report from being printed."""


class TagCommitsError(Exception):
    """Base class for the failures that abort a run."""

    prefix = ""

    def describe(self) -> str:
        """Build the one-line diagnostic shown to the user."""
        if self.prefix:
            return f"{self.prefix}: {self}"
        return str(self)


class NoTagsError(TagCommitsError):
    """A tag exists but its name cannot be read."""

    def __init__(self, message: str = "No tags found!"):
        super().__init__(message)


class GitError(TagCommitsError):
    """Reading from the repository failed."""

    prefix = "Git error"


class RegexError(TagCommitsError):
    """The ticket pattern does not compile."""

    prefix = "Regex error"


class NotARepositoryError(TagCommitsError):
    """The requested path is not inside a git work tree."""

    def __init__(self, path: str):
        super().__init__(f"{path} is not a git repository!")
        self.path = path
