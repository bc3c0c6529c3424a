"""Yearly aggregation and Markdown rendering of external contributions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from github_contributors.analysis_tools.timestamps import format_timestamp, to_utc
from github_contributors.models import EnrichedUser

FIRST_YEAR = 2014
SEPARATOR = ", "


@dataclass(frozen=True)
class YearBucket:
    label: str
    start: datetime
    end: datetime


def year_buckets(now: datetime, first_year: int = FIRST_YEAR) -> List[YearBucket]:
    """All-time bucket first, then one bucket per year from `now.year` down to `first_year`."""
    now = to_utc(now)
    buckets = [YearBucket(label="all-time", start=datetime(first_year, 1, 1, tzinfo=timezone.utc), end=now)]
    for year in range(now.year, first_year - 1, -1):
        buckets.append(
            YearBucket(
                label=str(year),
                start=datetime(year, 1, 1, tzinfo=timezone.utc),
                end=datetime(year + 1, 1, 1, tzinfo=timezone.utc),
            )
        )
    return buckets


def contributions_frame(users: Mapping[str, EnrichedUser]) -> pd.DataFrame:
    rows = [{"login": u.login, "timestamp": to_utc(t)} for u in users.values() for t in u.times]
    if not rows:
        return pd.DataFrame({"login": pd.Series(dtype=str), "timestamp": pd.Series(dtype="datetime64[ns, UTC]")})
    df = pd.DataFrame(rows)
    df["timestamp"] = pd.to_datetime(df["timestamp"], utc=True)
    return df


def rank_contributors(
    users: Mapping[str, EnrichedUser],
    start: datetime,
    end: datetime,
    frame: Optional[pd.DataFrame] = None,
) -> List[Tuple[EnrichedUser, int]]:
    """Users with commits strictly between `start` and `end`, most commits first, ties by login.

    Timestamps equal to either boundary are not counted.
    """
    df = contributions_frame(users) if frame is None else frame
    if df.empty:
        return []
    lo = pd.Timestamp(to_utc(start))
    hi = pd.Timestamp(to_utc(end))
    in_range = df[(df["timestamp"] > lo) & (df["timestamp"] < hi)]
    counts = in_range.groupby("login").size()
    ranked = [(users[login], int(count)) for login, count in counts.items() if count > 0]
    ranked.sort(key=lambda entry: (-entry[1], entry[0].login))
    return ranked


def format_ranked(ranked: Sequence[Tuple[EnrichedUser, int]]) -> str:
    total = sum(count for _, count in ranked)
    entries = [f"[{u.name}]({u.url}) ({count})" for u, count in ranked]
    return f"{len(ranked)} contributors, {total} commits\n\n" + SEPARATOR.join(entries)


def format_contributors(users: Mapping[str, EnrichedUser], start: datetime, end: datetime) -> str:
    return format_ranked(rank_contributors(users, start, end))


def repo_links(organization: str, repos: Iterable[str]) -> List[str]:
    return [f"[{repo}](https://github.com/{organization}/{repo})" for repo in repos]


def render_report(
    users: Mapping[str, EnrichedUser],
    *,
    organization: str,
    repos: Sequence[str],
    now: Optional[datetime] = None,
    first_year: int = FIRST_YEAR,
) -> str:
    now = to_utc(now or datetime.now(timezone.utc))
    frame = contributions_frame(users)
    buckets = year_buckets(now, first_year)
    all_time, yearly = buckets[0], buckets[1:]

    out = (
        "\n"
        f"Last generated at {format_timestamp(now)}.\n"
        "\n"
        f"Contributions from: {SEPARATOR.join(repo_links(organization, repos))}.\n"
        "\n"
        "# All-Time External Contributors\n"
        "\n"
        f"{format_ranked(rank_contributors(users, all_time.start, all_time.end, frame))}\n"
        "\n"
        "# By Year\n"
    )
    for bucket in yearly:
        section = format_ranked(rank_contributors(users, bucket.start, bucket.end, frame))
        out += f"## {bucket.label}\n\n{section}\n\n"
    return out
