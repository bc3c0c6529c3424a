from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone

import pytest

from github_contributors.analysis_tools.timestamps import parse_timestamp
from github_contributors.reporting.checkpoint import CheckpointError, load_checkpoint, save_checkpoint


def _record():
    return {
        "external1": [
            datetime(2021, 3, 4, 5, 6, 7, tzinfo=timezone.utc),
            datetime(2014, 1, 1, 0, 0, 1, tzinfo=timezone.utc),
        ],
        "bob": [datetime(2020, 12, 31, 23, 59, 59, tzinfo=timezone(timedelta(hours=-5)))],
        "nobody": [],
    }


def test_round_trip_preserves_instants(tmp_path):
    path = tmp_path / "intermediate_output.json"
    record = _record()

    save_checkpoint(path, record)
    loaded = load_checkpoint(path)

    assert set(loaded) == set(record)
    for login, times in record.items():
        assert [parse_timestamp(t) for t in loaded[login]] == times


def test_written_as_rfc3339_utc(tmp_path):
    path = save_checkpoint(tmp_path / "cp.json", _record())
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["external1"] == ["2021-03-04T05:06:07Z", "2014-01-01T00:00:01Z"]
    assert data["bob"] == ["2021-01-01T04:59:59Z"]
    assert list(data) == sorted(data)


def test_sub_second_precision_is_dropped(tmp_path):
    path = save_checkpoint(tmp_path / "cp.json", {"a": [datetime(2021, 1, 1, 0, 0, 0, 999999, tzinfo=timezone.utc)]})
    assert load_checkpoint(path) == {"a": ["2021-01-01T00:00:00Z"]}


def test_overwrites_existing_file(tmp_path):
    path = tmp_path / "cp.json"
    path.write_text('{"stale": ["2015-01-01T00:00:00Z"]}', encoding="utf-8")
    save_checkpoint(path, {})
    assert load_checkpoint(path) == {}


def test_missing_file_is_an_error(tmp_path):
    with pytest.raises(CheckpointError):
        load_checkpoint(tmp_path / "missing.json")


@pytest.mark.parametrize(
    "content",
    [
        "not json",
        '["a", "b"]',
        '{"a": "2021-01-01T00:00:00Z"}',
        '{"a": [1, 2]}',
    ],
)
def test_malformed_documents_are_errors(tmp_path, content):
    path = tmp_path / "cp.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(CheckpointError):
        load_checkpoint(path)
