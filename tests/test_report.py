import io

from rich.console import Console

from jmullan.git_tag_tickets import report
from jmullan.git_tag_tickets.models import AttributionRecord, Commit, ShowSha, TagCommits


def make_record(sha: str, tag_name: str, tickets: list[str], depth: int = 1) -> AttributionRecord:
    commit = Commit(sha=sha, parents="", author_time="0", commit_time="0", body=" ".join(tickets))
    return AttributionRecord(commit=commit, depth=depth, tag_name=tag_name, tickets=tickets)


def make_tag_commits() -> TagCommits:
    records = [
        make_record("aaaaaaaaaa", "v1.0.0", ["ABC-1"]),
        make_record("bbbbbbbbbb", "v1.1.0", ["XYZ-2"], depth=2),
        make_record("cccccccccc", "v1.1.0", ["ABC-3"], depth=0),
    ]
    return TagCommits({record.commit.sha: record for record in records}, ["v1.0.0", "v1.1.0", "v2.0.0"])


def render(tag_commits: TagCommits, **kwargs) -> str:
    with io.StringIO() as handle:
        console = Console(file=handle, color_system=None, width=200)
        report.print_report(tag_commits, console, **kwargs)
        return handle.getvalue()


def test_format_tickets():
    text = report.format_tickets(["ABC-1", "ABC-2"])
    assert text.plain == "ABC-1, ABC-2"
    assert [span.style for span in text.spans] == ["bold italic", "bold italic"]


def test_format_no_tickets():
    text = report.format_tickets([])
    assert text.plain == "(no tickets)"
    assert text.style == "dim"


def test_format_header():
    assert report.format_header("v1", empty=False).style == "bold green"
    empty = report.format_header("v1", empty=True)
    assert empty.plain == "v1 (no entries)"
    assert empty.style == "dim"


def test_report_orders_tags_and_depths():
    assert render(make_tag_commits()) == "\n".join(
        [
            "v1.0.0",
            "  ABC-1",
            "v1.1.0",
            "  ABC-3",
            "  XYZ-2",
            "v2.0.0 (no entries)",
            "",
        ]
    )


def test_filter_by_ticket():
    assert render(make_tag_commits(), filter_text="ABC") == "v1.0.0\n  ABC-1\nv1.1.0\n  ABC-3\n"


def test_filter_by_tag_name_shows_everything_in_the_tag():
    assert render(make_tag_commits(), filter_text="1.1") == "v1.1.0\n  ABC-3\n  XYZ-2\n"


def test_filter_keeps_matching_empty_tags():
    assert render(make_tag_commits(), filter_text="v2") == "v2.0.0 (no entries)\n"


def test_filter_matches_nothing():
    assert render(make_tag_commits(), filter_text="nope") == ""


def test_show_sha():
    tag_commits = TagCommits({"aaaaaaaaaa": make_record("aaaaaaaaaa", "v1", ["ABC-1"])}, ["v1"])
    assert render(tag_commits, show_sha=ShowSha.TRUE) == "v1\n  aaaaaaa ABC-1\n"


def test_print_error():
    with io.StringIO() as handle:
        report.print_error("Git error: boom", Console(file=handle, color_system=None))
        assert handle.getvalue() == "Git error: boom\n"
