from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Optional, Union


DEFAULT_REPORTS_DIRNAME = "data_reports"
DEFAULT_REPORT_FILENAME = "output.md"


def default_markdown_path(
    report_filename: str = DEFAULT_REPORT_FILENAME,
    *,
    base_dir: Union[str, Path] = DEFAULT_REPORTS_DIRNAME,
    now: Optional[datetime] = None,
) -> Path:
    """Return an absolute Markdown path of the form `<base_dir>/<YYYYMMDD_HHMMSS>/<name>.md`.

    Nothing is created on disk; `write_report` makes the directory once there is
    a report to put in it.
    """
    name = report_filename
    if not name.lower().endswith(".md"):
        name = f"{name}.md"
    stamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    return (Path(base_dir).expanduser() / stamp / name).resolve()


def write_report(path: Union[str, Path], text: str) -> Path:
    """Overwrite `path` with the rendered report."""
    out = Path(path).expanduser()
    out.parent.mkdir(parents=True, exist_ok=True)
    with out.open("w", encoding="utf-8") as fh:
        fh.write(text)
    return out
