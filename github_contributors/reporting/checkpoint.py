"""Intermediate output between commit collection and report generation.

The checkpoint is a JSON object mapping each external login to the RFC-3339
timestamps of their qualifying commits:

    {"external1": ["2021-03-04T05:06:07Z", "2021-05-01T10:00:00Z"]}

Writing it after collection lets `--use-intermediate` regenerate the report
(e.g. after editing the blocklist) without walking commit history again.
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Mapping, Sequence, Union

from github_contributors.analysis_tools.timestamps import format_timestamp

DEFAULT_CHECKPOINT_FILE = "intermediate_output.json"


class CheckpointError(RuntimeError):
    pass


def save_checkpoint(path: Union[str, Path], record: Mapping[str, Sequence[datetime]]) -> Path:
    out = Path(path).expanduser()
    payload = {login: [format_timestamp(t) for t in record[login]] for login in sorted(record)}
    out.parent.mkdir(parents=True, exist_ok=True)
    with out.open("w", encoding="utf-8") as fh:
        json.dump(payload, fh, indent=2)
        fh.write("\n")
    return out


def load_checkpoint(path: Union[str, Path]) -> Dict[str, List[str]]:
    src = Path(path).expanduser()
    try:
        with src.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except FileNotFoundError as e:
        raise CheckpointError(f"Checkpoint file not found: {src}") from e
    except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
        raise CheckpointError(f"Could not read checkpoint {src}: {e}") from e

    if not isinstance(data, dict):
        raise CheckpointError(f"Checkpoint {src} must contain a JSON object")
    out: Dict[str, List[str]] = {}
    for login, times in data.items():
        if not isinstance(times, list) or not all(isinstance(t, str) for t in times):
            raise CheckpointError(f"Checkpoint entry for {login!r} must be a list of timestamp strings")
        out[login] = list(times)
    return out
