from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Iterable, Set, Tuple

DEFAULT_INTERNAL_DOMAIN = "@cockroachlabs.com"
DEFAULT_BLOCKLIST = (
    "petermattis-square,craig[bot],nigeltao,dependabot,dependabot[bot],"
    "alimi,timgraham,papb,chrislovecnm,marlabrizel,rkruze"
)


@dataclass(frozen=True)
class FilterSet:
    """Identities treated as internal for the duration of a run."""

    emails: FrozenSet[str] = frozenset()
    names: FrozenSet[str] = frozenset()
    blocklist: FrozenSet[str] = frozenset()

    def is_blocked(self, login: str, name: str = "") -> bool:
        if login in self.blocklist:
            return True
        return bool(name) and name in self.names


def parse_roster(text: str, required_substring: str) -> Tuple[FrozenSet[str], FrozenSet[str]]:
    """Extract internal emails and names from an AUTHORS-style roster.

    Each qualifying line looks like `Jane Doe <jane@example.com> <jd@example.com>`.
    Every `<...>` token is collected as an email, while only the words before the
    first one are taken as the display name. Comment lines (`#`) and lines
    without `required_substring` are skipped.
    """
    emails: Set[str] = set()
    names: Set[str] = set()
    for line in (text or "").split("\n"):
        if line.startswith("#"):
            continue
        if required_substring not in line:
            continue
        fields = line.split(" ")
        seen_email = False
        for i, field in enumerate(fields):
            if len(field) >= 2 and field.startswith("<") and field.endswith(">"):
                if not seen_email:
                    names.add(" ".join(fields[:i]))
                seen_email = True
                emails.add(field[1:-1])
    return frozenset(emails), frozenset(names)


def parse_blocklist(value: str | Iterable[str] | None) -> FrozenSet[str]:
    if value is None:
        return frozenset()
    if isinstance(value, str):
        value = value.split(",")
    return frozenset(v.strip() for v in value if v and v.strip())


def load_filter_set(
    source,
    *,
    roster_owner: str,
    roster_repo: str,
    roster_path: str,
    required_substring: str = DEFAULT_INTERNAL_DOMAIN,
    blocklist: str | Iterable[str] | None = DEFAULT_BLOCKLIST,
) -> FilterSet:
    text = source.get_file_contents(roster_owner, roster_repo, roster_path)
    emails, names = parse_roster(text, required_substring)
    print(f"* Loaded {len(emails)} internal emails from {roster_owner}/{roster_repo}/{roster_path}")
    return FilterSet(emails=emails, names=names, blocklist=parse_blocklist(blocklist))
