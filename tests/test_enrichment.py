from __future__ import annotations

from datetime import datetime, timezone

import pytest
from fake_github import FakeSource

from github_contributors.reporting.enrichment import enrich_users
from github_contributors.reporting.filter_rules import FilterSet


def test_resolves_name_url_and_times():
    source = FakeSource(
        profiles={"external1": {"login": "external1", "name": "External One", "html_url": "https://github.com/external1"}}
    )
    users = enrich_users(source, {"external1": ["2021-03-04T05:06:07Z"], "noname": []}, FilterSet())

    assert users["external1"].name == "External One"
    assert users["external1"].url == "https://github.com/external1"
    assert users["external1"].times == (datetime(2021, 3, 4, 5, 6, 7, tzinfo=timezone.utc),)
    # Profiles without a display name fall back to the login.
    assert users["noname"].name == "noname"


def test_one_lookup_per_login():
    source = FakeSource()
    enrich_users(source, {"a": ["2021-01-01T00:00:00Z"] * 3, "b": []}, FilterSet())
    assert sorted(source.looked_up) == ["a", "b"]


def test_drops_blocklisted_logins_and_internal_names():
    source = FakeSource(
        profiles={
            "jd": {"login": "jd", "name": "Jane Doe", "html_url": "https://github.com/jd"},
            "ok": {"login": "ok", "name": "Okay Person", "html_url": "https://github.com/ok"},
        }
    )
    filters = FilterSet(names=frozenset({"Jane Doe"}), blocklist=frozenset({"spammer"}))
    users = enrich_users(source, {"jd": [], "ok": [], "spammer": ["2021-01-01T00:00:00Z"] * 10}, filters)
    assert set(users) == {"ok"}


def test_concurrency_cap_is_respected():
    source = FakeSource(lookup_delay=0.05)
    record = {f"user{i}": [] for i in range(25)}

    users = enrich_users(source, record, FilterSet(), pool_size=4)

    assert len(users) == 25
    # Lookups overlap up to the cap and never beyond it.
    assert source.max_active == 4


def test_pool_size_one_is_sequential():
    source = FakeSource(lookup_delay=0.005)
    enrich_users(source, {f"u{i}": [] for i in range(5)}, FilterSet(), pool_size=1)
    assert source.max_active == 1


def test_lookup_failure_aborts_after_all_lookups_finish():
    source = FakeSource(lookup_delay=0.01, fail_logins={"broken"})
    record = {"broken": [], **{f"user{i}": [] for i in range(6)}}

    with pytest.raises(RuntimeError, match="broken"):
        enrich_users(source, record, FilterSet(), pool_size=2)

    assert sorted(source.looked_up) == sorted(record)
    assert source.active == 0


@pytest.mark.parametrize(
    "value",
    [
        "yesterday-ish",
        "now",
        "today",
        "2021",
        "2021-03",
        "2021-03-04",
        "20210304",
        "2021-03-04T05:06:07",
        "2021-13-40T05:06:07Z",
        "",
    ],
)
def test_malformed_timestamp_is_fatal(value):
    with pytest.raises(ValueError):
        enrich_users(FakeSource(), {"a": [value]}, FilterSet())


def test_offset_timestamps_are_normalized_to_utc():
    users = enrich_users(FakeSource(), {"a": ["2021-03-04T00:30:00+02:00", "2021-03-04T05:06:07.250Z"]}, FilterSet())
    assert users["a"].times[0] == datetime(2021, 3, 3, 22, 30, 0, tzinfo=timezone.utc)
    assert users["a"].times[1].replace(microsecond=0) == datetime(2021, 3, 4, 5, 6, 7, tzinfo=timezone.utc)


def test_invalid_pool_size():
    with pytest.raises(ValueError):
        enrich_users(FakeSource(), {"a": []}, FilterSet(), pool_size=0)


def test_empty_record():
    assert enrich_users(FakeSource(), {}, FilterSet()) == {}
