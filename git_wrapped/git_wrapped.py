import argparse
import logging
import sys

from git_wrapped import __version__
from git_wrapped.display import render_json, render_report
from git_wrapped.models import Options, Report
from git_wrapped.stats import (
    get_basic_stats,
    get_branch_stats,
    get_commit_frequency_stats,
    get_commit_size_stats,
    get_contributor_stats,
    get_file_churn_stats,
    get_language_stats,
    get_line_stats,
    get_time_based_stats,
)
from git_wrapped.streaks import get_commits_by_day, get_streak_stats
from git_wrapped.utils import COLORS, CommandFailure, repository_name, run_command

logger = logging.getLogger("git-wrapped")


def build_parser():
    parser = argparse.ArgumentParser(
        prog="git-wrapped",
        description="Your repository's year in review, right in the terminal",
        add_help=False,
    )
    parser.add_argument(
        "--year", type=int, metavar="YYYY", help="Only analyze commits from this year"
    )
    parser.add_argument(
        "--all-time",
        action="store_true",
        help="Analyze the whole history (default)",
    )
    parser.add_argument("--since", help="Only analyze commits more recent than a date")
    parser.add_argument("--until", help="Only analyze commits older than a date")
    parser.add_argument(
        "--current-branch-only",
        action="store_true",
        help="Restrict contributor, branch and streak stats to the checked-out branch",
    )
    parser.add_argument(
        "--no-emoji", action="store_true", help="Do not decorate section titles"
    )
    parser.add_argument(
        "--minimal", action="store_true", help="Skip optional report sections"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Print every git command and its raw output",
    )
    parser.add_argument(
        "-o",
        "--output",
        choices=["text", "json"],
        default="text",
        help="Output format",
    )
    parser.add_argument(
        "-V", "--version", action="store_true", help="Show version and exit"
    )
    parser.add_argument(
        "-h", "--help", action="store_true", help="Show this help message"
    )
    return parser


def options_from_args(args):
    return Options(
        year=None if args.all_time else args.year,
        since=None if args.all_time else args.since,
        until=None if args.all_time else args.until,
        all_branches=not args.current_branch_only,
        no_emoji=args.no_emoji,
        minimal=args.minimal,
        verbose=args.verbose,
        output=args.output,
    )


def is_git_repository():
    try:
        run_command("git rev-parse --git-dir", strict=True)
    except CommandFailure as e:
        logger.debug("Repository check failed: %s", e.reason)
        return False
    return True


def collect_report(options):
    """Run every aggregator for the given options."""
    return Report(
        repository=repository_name(run_command("git config --get remote.origin.url")),
        basic=get_basic_stats(options),
        lines=get_line_stats(options),
        languages=get_language_stats(options),
        contributors=get_contributor_stats(options),
        frequency=get_commit_frequency_stats(options),
        time=get_time_based_stats(options),
        streaks=get_streak_stats(options),
        commit_size=get_commit_size_stats(options),
        file_churn=get_file_churn_stats(options),
        branches=get_branch_stats(options),
        commits_by_day=get_commits_by_day(options),
    )


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.help:
        parser.print_help()
        return

    if args.version:
        print(f"git-wrapped {__version__}")
        return

    options = options_from_args(args)
    logging.basicConfig(
        level=logging.DEBUG if options.verbose else logging.WARNING,
        format="%(message)s",
        stream=sys.stderr,
    )

    if not is_git_repository():
        print(f"{COLORS['alert']}Error: Not a git repository{COLORS['reset']}")
        sys.exit(1)

    try:
        report = collect_report(options)
        if options.output == "json":
            render_json(report)
        else:
            render_report(report, options)
    except KeyboardInterrupt:
        print(f"{COLORS['alert']}Interrupted{COLORS['reset']}")
        sys.exit(130)
    except Exception as e:
        logger.debug("Unhandled error", exc_info=True)
        print(f"{COLORS['alert']}Error: {e}{COLORS['reset']}")
        sys.exit(1)


if __name__ == "__main__":
    main()
