"""Read-only GitHub REST operations used by the contributors report.

All calls go through `gh api` (see `gh_cli`), so authentication and HTTP-level
rate limiting are whatever the GitHub CLI is configured with. Every error is
raised as `GhCliError` and is meant to abort the run.
"""

from __future__ import annotations

import base64
from typing import Dict, List, Optional

from github_contributors.reporting.gh_cli import GhCliError, gh_api_json

# GitHub caps `per_page` at 100 for every listing used here.
PAGE_SIZE = 100


class GitHubSource:
    """Thin wrapper around the REST endpoints the report consumes.

    One instance is created per run and reused for every request.
    """

    def __init__(self, page_size: int = PAGE_SIZE):
        self.page_size = max(1, min(int(page_size), PAGE_SIZE))

    def _paginate(self, path: str, params: Optional[Dict[str, str]] = None) -> List[Dict]:
        results: List[Dict] = []
        page = 1
        while True:
            query: Dict[str, str] = dict(params or {})
            query["per_page"] = str(self.page_size)
            query["page"] = str(page)
            items = gh_api_json(path, params=query) or []
            if not isinstance(items, list):
                raise GhCliError(f"Expected a JSON list from {path}, got {type(items).__name__}")
            results.extend(items)
            if len(items) < self.page_size:
                return results
            page += 1

    def list_org_members(self, organization: str) -> Dict[str, Dict]:
        members: Dict[str, Dict] = {}
        for member in self._paginate(f"/orgs/{organization}/members"):
            login = (member or {}).get("login")
            if login:
                members[login] = member
        return members

    def list_org_repos(self, organization: str) -> List[Dict]:
        return self._paginate(f"/orgs/{organization}/repos", params={"type": "all"})

    def get_file_contents(self, owner: str, repo: str, path: str) -> str:
        """Return the decoded text of a file in a repository's default branch."""
        payload = gh_api_json(f"/repos/{owner}/{repo}/contents/{path}") or {}
        if not isinstance(payload, dict) or payload.get("type") != "file":
            raise GhCliError(f"{owner}/{repo}/{path} is not a file")
        content = payload.get("content") or ""
        encoding = payload.get("encoding") or "base64"
        if encoding != "base64":
            raise GhCliError(f"Unsupported content encoding {encoding!r} for {owner}/{repo}/{path}")
        return base64.b64decode(content).decode("utf-8")

    def list_commits(
        self,
        owner: str,
        repo: str,
        *,
        since: Optional[str] = None,
        until: Optional[str] = None,
    ) -> List[Dict]:
        params: Dict[str, str] = {}
        if since:
            params["since"] = since
        if until:
            params["until"] = until
        return self._paginate(f"/repos/{owner}/{repo}/commits", params=params)

    def get_user(self, login: str) -> Dict:
        payload = gh_api_json(f"/users/{login}")
        if not isinstance(payload, dict):
            raise GhCliError(f"Unexpected response looking up user {login!r}")
        return payload
