#!/usr/bin/env python3
"""External contributors report backed by the GitHub CLI (`gh`).

Two phases:
- collect: walk the commit history of the configured repositories, keep commits
  from people outside the organization, and write them to an intermediate JSON
  checkpoint;
- report: look up each contributor's profile, drop blocklisted and internal
  names, and render a Markdown report of contributors per year.

`--use-intermediate` skips the collect phase and regenerates the report from an
existing checkpoint.
"""

from __future__ import annotations

import argparse
import os
import sys
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from dotenv import load_dotenv

from github_contributors.analysis_tools.yearly_report import render_report
from github_contributors.models import EnrichedUser
from github_contributors.reporting.checkpoint import (
    DEFAULT_CHECKPOINT_FILE,
    CheckpointError,
    load_checkpoint,
    save_checkpoint,
)
from github_contributors.reporting.commit_collector import collect_contributions
from github_contributors.reporting.enrichment import DEFAULT_POOL_SIZE, enrich_users
from github_contributors.reporting.filter_rules import (
    DEFAULT_BLOCKLIST,
    DEFAULT_INTERNAL_DOMAIN,
    FilterSet,
    load_filter_set,
)
from github_contributors.reporting.gh_cli import GhCliError, GhCliNotFound, ensure_gh_available
from github_contributors.reporting.github_source import GitHubSource
from github_contributors.reporting.report_paths import DEFAULT_REPORT_FILENAME, default_markdown_path, write_report

DEFAULT_ORGANIZATION = "cockroachdb"
DEFAULT_REPOS = (
    "cockroach,pebble,docs,activerecord-cockroachdb-adapter,cockroach-go,cockroach-operator,"
    "django-cockroachdb,sequelize-cockroachdb,sqlalchemy-cockroachdb"
)


class ExternalContributorsReport:
    """Runs the collect and report phases against one organization."""

    def __init__(
        self,
        source: GitHubSource,
        *,
        organization: str = DEFAULT_ORGANIZATION,
        repos: Optional[Sequence[str]] = None,
        authors_organization: str = DEFAULT_ORGANIZATION,
        authors_repo: str = "cockroach",
        authors_path: str = "AUTHORS",
        internal_domain: str = DEFAULT_INTERNAL_DOMAIN,
        blocklist: str = DEFAULT_BLOCKLIST,
        pool_size: int = DEFAULT_POOL_SIZE,
    ):
        self.source = source
        self.organization = organization
        self.repos: List[str] = list(repos) if repos is not None else _split_csv(DEFAULT_REPOS)
        self.authors_organization = authors_organization
        self.authors_repo = authors_repo
        self.authors_path = authors_path
        self.internal_domain = internal_domain
        self.blocklist = blocklist
        self.pool_size = pool_size
        self._filters: Optional[FilterSet] = None

    @property
    def filters(self) -> FilterSet:
        if self._filters is None:
            self._filters = load_filter_set(
                self.source,
                roster_owner=self.authors_organization,
                roster_repo=self.authors_repo,
                roster_path=self.authors_path,
                required_substring=self.internal_domain,
                blocklist=self.blocklist,
            )
        return self._filters

    def use_all_org_repos(self) -> List[str]:
        repos = self.source.list_org_repos(self.organization)
        self.repos = sorted(r["name"] for r in repos if (r or {}).get("name"))
        print(f"* Found {len(self.repos)} repositories in {self.organization}")
        return self.repos

    def collect(
        self,
        checkpoint_file: str = DEFAULT_CHECKPOINT_FILE,
        *,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> Dict[str, List[datetime]]:
        members = self.source.list_org_members(self.organization)
        print(f"* Found {len(members)} members of {self.organization}")
        record = collect_contributions(
            self.source,
            self.organization,
            self.repos,
            members,
            self.filters,
            required_substring=self.internal_domain,
            start_date=start_date,
            end_date=end_date,
        )
        path = save_checkpoint(checkpoint_file, record)
        print(f"* Intermediate output to {str(path)!r}")
        return record

    def enrich(self, checkpoint_file: str = DEFAULT_CHECKPOINT_FILE) -> Dict[str, EnrichedUser]:
        raw = load_checkpoint(checkpoint_file)
        return enrich_users(self.source, raw, self.filters, pool_size=self.pool_size)

    def generate_report(
        self,
        output_file: str = DEFAULT_REPORT_FILENAME,
        checkpoint_file: str = DEFAULT_CHECKPOINT_FILE,
        *,
        now: Optional[datetime] = None,
    ) -> str:
        users = self.enrich(checkpoint_file)
        out = render_report(
            users,
            organization=self.organization,
            repos=self.repos,
            now=now or datetime.now(timezone.utc),
        )
        print(out)
        path = write_report(output_file, out)
        print(f"* Output to {str(path)!r}")
        return out


def _split_csv(value: str) -> List[str]:
    return [v.strip() for v in (value or "").split(",") if v.strip()]


def _parse_date(value: str) -> datetime:
    try:
        return datetime.strptime(value, "%Y-%m-%d").replace(tzinfo=timezone.utc)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date {value!r} (expected YYYY-MM-DD)")


def _positive_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer {value!r}")
    if n < 1:
        raise argparse.ArgumentTypeError("must be >= 1")
    return n


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="github-contributors-report",
        description="Report external (non-organization) commit authors per year.",
    )
    parser.add_argument('--organization', default=DEFAULT_ORGANIZATION, help='Organization whose repositories are scanned')
    parser.add_argument('--authors-organization', default=DEFAULT_ORGANIZATION, help='Owner of the repository holding the AUTHORS roster')
    parser.add_argument('--authors-repo', default="cockroach", help='Repository holding the AUTHORS roster')
    parser.add_argument('--authors-path', default="AUTHORS", help='Path of the roster file inside --authors-repo')
    parser.add_argument('--internal-domain', default=DEFAULT_INTERNAL_DOMAIN, help='Email substring marking internal authors')
    parser.add_argument('--repos', default=DEFAULT_REPOS, help='Repositories to scan, comma separated')
    parser.add_argument('--all-repos', action='store_true', help='Scan every repository in --organization instead of --repos')
    parser.add_argument('--blocklist', default=DEFAULT_BLOCKLIST, help='Logins to exclude, comma separated')
    parser.add_argument('--intermediate-output-file', default=DEFAULT_CHECKPOINT_FILE, help='Checkpoint JSON written after collection')
    parser.add_argument('--output', default=None, help=f'Markdown output file (default: {DEFAULT_REPORT_FILENAME})')
    parser.add_argument('--output-dir', default=None, help='Base directory for timestamped outputs (when --output not set)')
    parser.add_argument(
        '--use-intermediate',
        action='store_true',
        help='Generate the report from an existing --intermediate-output-file instead of collecting commits',
    )
    parser.add_argument('--start-date', type=_parse_date, default=None, help='Only collect commits after this date (YYYY-MM-DD)')
    parser.add_argument('--end-date', type=_parse_date, default=None, help='Only collect commits before this date (YYYY-MM-DD)')
    parser.add_argument('--pool-size', type=_positive_int, default=DEFAULT_POOL_SIZE, help='Maximum concurrent user lookups')
    parser.add_argument('--verbose', action='store_true', help='Print every gh command and its timing')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()

    args = build_parser().parse_args(sys.argv[1:] if argv is None else argv)
    if args.verbose:
        os.environ['GITHUB_CONTRIBUTORS_VERBOSE'] = '1'

    output_file = args.output
    if not output_file:
        if args.output_dir:
            output_file = str(default_markdown_path(base_dir=args.output_dir))
        else:
            output_file = DEFAULT_REPORT_FILENAME

    try:
        ensure_gh_available()
        report = ExternalContributorsReport(
            GitHubSource(),
            organization=args.organization,
            repos=_split_csv(args.repos),
            authors_organization=args.authors_organization,
            authors_repo=args.authors_repo,
            authors_path=args.authors_path,
            internal_domain=args.internal_domain,
            blocklist=args.blocklist,
            pool_size=args.pool_size,
        )
        if args.all_repos:
            report.use_all_org_repos()
        if not args.use_intermediate:
            report.collect(
                args.intermediate_output_file,
                start_date=args.start_date,
                end_date=args.end_date,
            )
        report.generate_report(output_file, args.intermediate_output_file)
    except (GhCliNotFound, GhCliError, CheckpointError, ValueError) as e:
        print(f"Error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
