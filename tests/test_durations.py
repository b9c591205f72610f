import datetime

from jmullan.git_tag_tickets import durations


def test_parse_duration():
    assert durations.parse_duration("1y") == datetime.timedelta(days=365)
    assert durations.parse_duration("1d") == datetime.timedelta(days=1)
    assert durations.parse_duration("2mon") == datetime.timedelta(days=60)
    assert durations.parse_duration("90") == datetime.timedelta(seconds=90)
    assert durations.parse_duration("2 weeks") == datetime.timedelta(days=14)
    assert durations.parse_duration("1y2mon3w4d5h6m7s") == datetime.timedelta(
        days=365 + 60 + 21 + 4, hours=5, minutes=6, seconds=7
    )


def test_parse_duration_is_case_and_space_tolerant():
    assert durations.parse_duration(" 1H 30M ") == datetime.timedelta(hours=1, minutes=30)


def test_malformed_durations_are_zero():
    for duration in ["", "garbage", "1x", "y1", "1.5d", "99999999999y", None]:
        assert durations.parse_duration(duration) == datetime.timedelta(0)
