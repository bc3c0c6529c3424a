from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, wait
from typing import Dict, List, Mapping, Sequence

from github_contributors.analysis_tools.timestamps import parse_timestamp
from github_contributors.models import EnrichedUser
from github_contributors.reporting.filter_rules import FilterSet

DEFAULT_POOL_SIZE = 20


def lookup_user(source, login: str, raw_times: Sequence[str]) -> EnrichedUser:
    print(f"** looking up {login}")
    profile = source.get_user(login)
    times = tuple(parse_timestamp(t) for t in raw_times)
    return EnrichedUser(
        login=login,
        name=(profile.get("name") or "").strip() or login,
        url=profile.get("html_url") or f"https://github.com/{login}",
        times=times,
    )


def enrich_users(
    source,
    raw_record: Mapping[str, Sequence[str]],
    filters: FilterSet,
    *,
    pool_size: int = DEFAULT_POOL_SIZE,
) -> Dict[str, EnrichedUser]:
    """Resolve profiles for every login, at most `pool_size` lookups at a time.

    All lookups are waited on before any result is used. If one of them failed,
    its exception is re-raised and nothing is returned.
    """
    if pool_size < 1:
        raise ValueError(f"pool_size must be >= 1, got {pool_size}")
    if not raw_record:
        return {}

    with ThreadPoolExecutor(max_workers=pool_size, thread_name_prefix="user-lookup") as executor:
        futures = [executor.submit(lookup_user, source, login, list(times)) for login, times in raw_record.items()]
        wait(futures)

    results: List[EnrichedUser] = []
    for fut in futures:
        exc = fut.exception()
        if exc is not None:
            raise exc
        results.append(fut.result())

    users: Dict[str, EnrichedUser] = {}
    for user in results:
        if filters.is_blocked(user.login, user.name):
            continue
        users[user.login] = user
    return users
