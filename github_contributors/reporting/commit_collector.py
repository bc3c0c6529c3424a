from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from typing import Dict, Iterable, List, Mapping, Optional

from github_contributors.analysis_tools.timestamps import format_timestamp, parse_timestamp
from github_contributors.reporting.filter_rules import DEFAULT_INTERNAL_DOMAIN, FilterSet

MERGE_PR_PREFIX = "Merge pull request "


def is_external_commit(
    item: Dict,
    members: Mapping[str, object],
    filters: FilterSet,
    required_substring: str = DEFAULT_INTERNAL_DOMAIN,
) -> bool:
    """Decide whether a commit listing entry counts as an external contribution.

    `item` is one element of `GET /repos/{owner}/{repo}/commits`: the GitHub
    account is under `author`, the git metadata under `commit`.
    """
    commit_obj = item.get("commit") or {}
    account = item.get("author") or {}
    git_author = commit_obj.get("author") or {}

    # Root commits are never attributed, even to external authors.
    if not (item.get("parents") or commit_obj.get("parents")):
        return False

    login = account.get("login") or ""
    if not login:
        return False
    if login in members:
        return False

    email = git_author.get("email") or ""
    if required_substring and required_substring in email:
        return False
    if (commit_obj.get("message") or "").startswith(MERGE_PR_PREFIX):
        return False

    for name in (account.get("name"), git_author.get("name")):
        if name and name in filters.names:
            return False

    if email in filters.emails:
        return False
    return True


def _commit_time(item: Dict) -> datetime:
    commit_obj = item.get("commit") or {}
    return parse_timestamp((commit_obj.get("author") or {}).get("date"))


def collect_contributions(
    source,
    organization: str,
    repos: Iterable[str],
    members: Mapping[str, object],
    filters: FilterSet,
    *,
    required_substring: str = DEFAULT_INTERNAL_DOMAIN,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
) -> Dict[str, List[datetime]]:
    """Walk every repository's history and group external commit times by login."""
    since = format_timestamp(start_date) if start_date else None
    until = format_timestamp(end_date) if end_date else None

    user_times: Dict[str, List[datetime]] = defaultdict(list)
    for repo in repos:
        print(f"* Looking at repo {repo}")
        for item in source.list_commits(organization, repo, since=since, until=until):
            if not is_external_commit(item, members, filters, required_substring):
                continue
            login = item["author"]["login"]
            when = _commit_time(item)
            email = ((item.get("commit") or {}).get("author") or {}).get("email") or ""
            print(f"* found commit by {login} ({email}) on {format_timestamp(when)}")
            user_times[login].append(when)
    return dict(user_times)
