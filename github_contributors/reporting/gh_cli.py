from __future__ import annotations

import json
import os
import shutil
import subprocess
import time
from typing import Any, Dict, List, Optional


class GhCliNotFound(RuntimeError):
    pass


class GhCliError(RuntimeError):
    pass


def _env_flag(name: str) -> bool:
    return (os.getenv(name) or "").strip().lower() in {"1", "true", "yes", "on"}


def _gh_timeout_seconds() -> Optional[float]:
    value = (os.getenv("GITHUB_CONTRIBUTORS_GH_TIMEOUT_SECONDS") or "").strip()
    if not value:
        return None
    try:
        seconds = float(value)
    except ValueError:
        return None
    if seconds <= 0:
        return None
    return seconds


def ensure_gh_available() -> str:
    gh = shutil.which("gh")
    if not gh:
        raise GhCliNotFound(
            "GitHub CLI (gh) not found in PATH. Install it from https://cli.github.com/ and run `gh auth login`."
        )
    return gh


def run_gh(args: List[str]) -> str:
    gh = ensure_gh_available()
    cmd = [gh] + args

    timeout = _gh_timeout_seconds()
    verbose = _env_flag("GITHUB_CONTRIBUTORS_VERBOSE")

    if verbose:
        pretty = " ".join(cmd)
        if timeout:
            print(f"[gh] -> {pretty} (timeout={timeout}s)")
        else:
            print(f"[gh] -> {pretty}")
        start = time.perf_counter()

    try:
        proc = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            check=False,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        pretty = " ".join(cmd)
        raise GhCliError(
            "Timed out while running GitHub CLI command. "
            f"Command: {pretty}. "
            "Tip: increase timeout via GITHUB_CONTRIBUTORS_GH_TIMEOUT_SECONDS."
        )

    if verbose:
        elapsed = time.perf_counter() - start
        print(f"[gh] <- exit={proc.returncode} ({elapsed:.2f}s)")
    if proc.returncode != 0:
        stderr = (proc.stderr or "").strip()
        stdout = (proc.stdout or "").strip()
        msg = stderr or stdout or f"gh exited with code {proc.returncode}"
        raise GhCliError(msg)
    return (proc.stdout or "").strip()


def gh_api_json(
    path: str,
    *,
    method: str = "GET",
    params: Optional[Dict[str, str]] = None,
) -> Any:
    """Call `gh api` and parse JSON.

    Args:
        path: REST path like `orgs/ORG/members` or `/users/LOGIN`.
        method: HTTP method. Always passed explicitly, since `gh api` switches
            to POST as soon as fields are given.
        params: Query parameters (strings). `None` values are skipped.
    """
    if not path.startswith("/"):
        path = "/" + path

    args: List[str] = ["api", path, "-X", method]

    if params:
        for k, v in params.items():
            if v is None:
                continue
            args.extend(["-f", f"{k}={v}"])

    out = run_gh(args)
    if not out:
        return None
    try:
        return json.loads(out)
    except json.JSONDecodeError as e:
        raise GhCliError(f"gh api {path} returned invalid JSON: {e}") from e
