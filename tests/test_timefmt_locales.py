from datetime import timedelta, timezone

from tsdoc.utils.locales import lcid_display_name
from tsdoc.utils.timefmt import parse_utc_stamp, utc_to_local


def test_lcid_names():
    assert lcid_display_name(1033) == "English (United States)"
    assert lcid_display_name(1031) == "German (Germany)"
    assert lcid_display_name(9999) == "Unknown Locale"


def test_utc_to_local():
    stamp = "20240115103000.000000+000"
    assert parse_utc_stamp(stamp).hour == 10
    assert utc_to_local(stamp, timezone(timedelta(hours=-5))) == "2024-01-15 05:30:00"
    assert utc_to_local("not a date") == ""
    assert utc_to_local("20241345000000") == ""
