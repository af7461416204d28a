"""
Repository statistics.

Each ``*_stats`` function is a pure aggregator over git's plain-text output
(``None`` stands for a failed command) and returns a frozen record from
``git_wrapped.models``. The matching ``get_*`` function builds the git
commands for the given options and runs them.
"""

import logging
import re
import shlex
from collections import defaultdict

from git_wrapped.models import (
    BasicStats,
    BranchActivity,
    BranchStats,
    CommitSizeStats,
    Contributor,
    FileChurn,
    FileLines,
    FrequencyStats,
    HourCount,
    LanguageCount,
    LanguageStats,
    LineStats,
    PeriodCount,
    TimeStats,
)
from git_wrapped.utils import (
    extension_to_language,
    get_branch_filter,
    get_date_filter,
    get_file_extension,
    parse_count,
    parse_count_line,
    parse_lines,
    parse_timestamp,
    run_command,
)

logger = logging.getLogger("git-wrapped")

PULL_REQUEST_PATTERN = "Merge pull request"
LARGEST_FILES_LIMIT = 10
FILE_CHURN_LIMIT = 20
ACTIVE_BRANCHES_LIMIT = 10

WEEKDAYS = [
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
]

TIME_BLOCKS = [
    ("Late Night", 0, 4),
    ("Early Morning", 4, 8),
    ("Morning", 8, 12),
    ("Afternoon", 12, 16),
    ("Evening", 16, 20),
    ("Night", 20, 24),
]

COMMIT_SIZE_PATTERN = re.compile(
    r"^\s*(\d+) files? changed(?:, (\d+) insertions?\(\+\))?(?:, (\d+) deletions?\(-\))?"
)
DATE_KEY_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})")


def _revision(options):
    return get_branch_filter(options) or "HEAD"


def _average(total, count):
    return total / count if count else 0


def time_block(hour):
    """Label of the 4-hour block containing hour."""
    for label, start, end in TIME_BLOCKS:
        if start <= hour < end:
            return label
    raise ValueError(f"hour out of range: {hour}")


# --- Basic stats ---

def basic_stats(
    first_commit=None,
    last_commit=None,
    num_commits=None,
    num_branches=None,
    num_pull_requests=None,
    num_contributors=None,
):
    """Summary counts; every failed lookup falls back to 0 (or None for dates)."""
    return BasicStats(
        first_commit_date=first_commit.strip() if first_commit else None,
        last_commit_date=last_commit.strip() if last_commit else None,
        num_commits=parse_count(num_commits),
        num_branches=parse_count(num_branches),
        num_pull_requests=parse_count(num_pull_requests),
        num_contributors=parse_count(num_contributors),
    )


def get_basic_stats(options):
    date_filter = get_date_filter(options)
    return basic_stats(
        first_commit=run_command(
            f"git log --reverse --format=%ci HEAD {date_filter} | head -n 1"
        ),
        last_commit=run_command(f"git log -1 --format=%ci HEAD {date_filter}"),
        num_commits=run_command(f"git rev-list --count HEAD {date_filter}"),
        num_branches=run_command("git branch -a | wc -l"),
        num_pull_requests=run_command(
            f'git log --oneline --grep="{PULL_REQUEST_PATTERN}" HEAD {date_filter} | wc -l'
        ),
        num_contributors=run_command(
            f"git shortlog -sn {_revision(options)} {date_filter} | wc -l"
        ),
    )


# --- Lines of code ---

def parse_file_lines(line):
    parsed = parse_count_line(line)
    if parsed is None:
        return None
    lines, path = parsed
    return FileLines(file=path, lines=lines)


def line_stats(output):
    """Total lines of code and the largest files from 'wc -l' output."""
    files = [
        record
        for record in parse_lines(output, parse_file_lines).records
        if record.file != "total"
    ]
    files.sort(key=lambda f: f.lines, reverse=True)
    return LineStats(
        total_loc=sum(f.lines for f in files),
        largest_files=files[:LARGEST_FILES_LIMIT],
    )


def get_line_stats(options):
    return line_stats(run_command("git ls-files -z | xargs -0 wc -l 2>/dev/null"))


# --- Contributors ---

def parse_contributor(line):
    commits, _, name = line.strip().partition("\t")
    if not name or not commits.isdigit():
        return None
    return Contributor(name=name, commits=int(commits))


def contributor_stats(output):
    """Contributors in 'git shortlog -sn' order (most commits first)."""
    return parse_lines(output, parse_contributor).records


def get_contributor_stats(options):
    return contributor_stats(
        run_command(
            f"git shortlog -sn {_revision(options)} {get_date_filter(options)}"
        )
    )


# --- Time of day / day of week ---

def time_based_stats(output):
    """Hour, weekday and time block distributions of commit timestamps."""
    timestamps = parse_lines(output, parse_timestamp).records
    if not timestamps:
        return TimeStats()

    hourly = defaultdict(int)
    weekdays = {}
    blocks = {label: 0 for label, _, _ in TIME_BLOCKS}
    weekend = 0

    for ts in timestamps:
        hourly[ts.hour] += 1
        day_name = WEEKDAYS[ts.weekday()]
        weekdays[day_name] = weekdays.get(day_name, 0) + 1
        blocks[time_block(ts.hour)] += 1
        if ts.weekday() >= 5:
            weekend += 1

    most_active = HourCount()
    for hour in sorted(hourly):
        if hourly[hour] > most_active.count:
            most_active = HourCount(hour=hour, count=hourly[hour])

    return TimeStats(
        most_active_hour=most_active,
        weekday_commits=weekdays,
        hourly_commits=dict(sorted(hourly.items())),
        time_blocks=blocks,
        weekend=weekend,
        weekday=len(timestamps) - weekend,
    )


def get_time_based_stats(options):
    return time_based_stats(
        run_command(f"git log --format=%ai HEAD {get_date_filter(options)}")
    )


# --- Commit frequency ---

def _busiest(counts):
    busiest = PeriodCount()
    for key, count in counts.items():
        if count > busiest.count:
            busiest = PeriodCount(date=key, count=count)
    return busiest


def parse_date_key(line):
    match = DATE_KEY_PATTERN.match(line.strip())
    if not match:
        return None
    return match.groups()


def commit_frequency_stats(output):
    """Busiest day, month and year plus average commits per month and day."""
    dates = parse_lines(output, parse_date_key).records

    days = defaultdict(int)
    months = defaultdict(int)
    years = defaultdict(int)
    for year, month, day in dates:
        days[f"{year}-{month}-{day}"] += 1
        months[f"{year}-{month}"] += 1
        years[year] += 1

    return FrequencyStats(
        max_day=_busiest(days),
        max_month=_busiest(months),
        max_year=_busiest(years),
        avg_commits_per_month=_average(len(dates), len(months)),
        avg_commits_per_day=_average(len(dates), len(days)),
    )


def get_commit_frequency_stats(options):
    return commit_frequency_stats(
        run_command(f"git log --format=%ai HEAD {get_date_filter(options)}")
    )


# --- Commit size ---

def parse_commit_size(line):
    match = COMMIT_SIZE_PATTERN.match(line)
    if not match:
        return None
    return tuple(int(group or 0) for group in match.groups())


def commit_size_stats(output):
    """Average files changed, insertions and deletions per commit."""
    sizes = [
        parse_commit_size(line)
        for line in (output or "").splitlines()
        if "changed" in line
    ]
    sizes = [size for size in sizes if size is not None]
    if not sizes:
        return CommitSizeStats()

    files_changed, insertions, deletions = (sum(column) for column in zip(*sizes))
    return CommitSizeStats(
        avg_files_changed=_average(files_changed, len(sizes)),
        avg_insertions=_average(insertions, len(sizes)),
        avg_deletions=_average(deletions, len(sizes)),
    )


def get_commit_size_stats(options):
    return commit_size_stats(
        run_command(f"git log --shortstat --oneline HEAD {get_date_filter(options)}")
    )


# --- Languages ---

def language_stats(output):
    """Tracked files per language, most common first."""
    files = [line.strip() for line in (output or "").splitlines() if line.strip()]
    counts = {}
    for path in files:
        ext = get_file_extension(path)
        if not ext:
            continue
        language = extension_to_language(ext)
        counts[language] = counts.get(language, 0) + 1

    languages = [
        LanguageCount(language=language, count=count)
        for language, count in sorted(counts.items(), key=lambda x: x[1], reverse=True)
    ]
    return LanguageStats(languages=languages, total_files=len(files))


def get_language_stats(options):
    return language_stats(run_command("git ls-files"))


# --- File churn ---

def parse_file_churn(line):
    parsed = parse_count_line(line)
    if parsed is None:
        return None
    changes, path = parsed
    return FileChurn(file=path, changes=changes)


def file_churn_stats(output):
    """Most frequently changed files from 'uniq -c | sort -rn' output."""
    return parse_lines(output, parse_file_churn).records[:FILE_CHURN_LIMIT]


def get_file_churn_stats(options):
    return file_churn_stats(
        run_command(
            f'git log --name-only --format="" HEAD {get_date_filter(options)}'
            f" | sed '/^$/d' | sort | uniq -c | sort -rn | head -{FILE_CHURN_LIMIT}"
        )
    )


# --- Branches ---

def parse_branch_name(line):
    name = line.strip().lstrip("* ").strip()
    if not name or name.startswith("(") or name == "HEAD" or name.endswith("/HEAD"):
        return None
    return name


def branch_stats(branches_output, branch_details=None):
    """Rank branches by reachable commits.

    branch_details maps a branch name to the raw output of its commit count
    and tip author lookups; branches without details are counted but not
    ranked.
    """
    names = parse_lines(branches_output, parse_branch_name).records
    branch_details = branch_details or {}

    active = []
    for name in names:
        if name not in branch_details:
            continue
        commits, author = branch_details[name]
        active.append(
            BranchActivity(
                name=name,
                commits=parse_count(commits),
                last_author=author.strip() if author else "unknown",
            )
        )
    active.sort(key=lambda b: b.commits, reverse=True)

    return BranchStats(
        total_branches=len(names),
        active_branches=active[:ACTIVE_BRANCHES_LIMIT],
    )


def get_branch_stats(options):
    if options.all_branches:
        branches_output = run_command(
            'git for-each-ref --sort=-committerdate --format="%(refname:short)"'
            " refs/heads refs/remotes"
        )
    else:
        branches_output = run_command("git rev-parse --abbrev-ref HEAD")

    date_filter = get_date_filter(options)
    details = {}
    for name in parse_lines(branches_output, parse_branch_name).records:
        ref = shlex.quote(name)
        details[name] = (
            run_command(f"git rev-list --count {ref} {date_filter}"),
            run_command(f"git log -1 --format=%an {ref} {date_filter}"),
        )
    return branch_stats(branches_output, details)
