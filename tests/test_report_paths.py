from __future__ import annotations

from datetime import datetime

from github_contributors.reporting.report_paths import default_markdown_path, write_report


def test_default_markdown_path_is_timestamped_and_not_created(tmp_path):
    path = default_markdown_path("report", base_dir=tmp_path / "reports", now=datetime(2021, 3, 4, 5, 6, 7))

    assert path == (tmp_path / "reports" / "20210304_050607" / "report.md").resolve()
    assert not (tmp_path / "reports").exists()


def test_write_report_creates_parent_and_overwrites(tmp_path):
    path = default_markdown_path(base_dir=tmp_path, now=datetime(2021, 3, 4, 5, 6, 7))

    write_report(path, "first")
    write_report(path, "second")

    assert path.name == "output.md"
    assert path.read_text(encoding="utf-8") == "second"
