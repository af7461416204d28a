"""
Data models for git-wrapped.

Every statistics record is a frozen dataclass built once per run by one of
the aggregators in ``git_wrapped.stats`` or ``git_wrapped.streaks`` and
handed to the renderer in ``git_wrapped.display``.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass(frozen=True)
class Options:
    """Command line options, see ``git_wrapped.git_wrapped.main``."""
    year: Optional[int] = None
    since: Optional[str] = None
    until: Optional[str] = None
    all_branches: bool = True
    no_emoji: bool = False
    minimal: bool = False
    verbose: bool = False
    output: str = "text"


@dataclass(frozen=True)
class BasicStats:
    first_commit_date: Optional[str] = None
    last_commit_date: Optional[str] = None
    num_commits: int = 0
    num_branches: int = 0
    num_pull_requests: int = 0
    num_contributors: int = 0


@dataclass(frozen=True)
class FileLines:
    file: str
    lines: int


@dataclass(frozen=True)
class LineStats:
    total_loc: int = 0
    largest_files: List[FileLines] = field(default_factory=list)


@dataclass(frozen=True)
class Contributor:
    name: str
    commits: int


@dataclass(frozen=True)
class HourCount:
    hour: int = 0
    count: int = 0


@dataclass(frozen=True)
class TimeStats:
    most_active_hour: HourCount = field(default_factory=HourCount)
    weekday_commits: Dict[str, int] = field(default_factory=dict)
    hourly_commits: Dict[int, int] = field(default_factory=dict)
    time_blocks: Dict[str, int] = field(default_factory=dict)
    weekend: int = 0
    weekday: int = 0


@dataclass(frozen=True)
class PeriodCount:
    date: str = ""
    count: int = 0


@dataclass(frozen=True)
class FrequencyStats:
    max_day: PeriodCount = field(default_factory=PeriodCount)
    max_month: PeriodCount = field(default_factory=PeriodCount)
    max_year: PeriodCount = field(default_factory=PeriodCount)
    avg_commits_per_month: float = 0
    avg_commits_per_day: float = 0


@dataclass(frozen=True)
class CommitSizeStats:
    avg_files_changed: float = 0
    avg_insertions: float = 0
    avg_deletions: float = 0


@dataclass(frozen=True)
class LanguageCount:
    language: str
    count: int


@dataclass(frozen=True)
class LanguageStats:
    languages: List[LanguageCount] = field(default_factory=list)
    total_files: int = 0


@dataclass(frozen=True)
class FileChurn:
    file: str
    changes: int


@dataclass(frozen=True)
class BranchActivity:
    name: str
    commits: int
    last_author: str


@dataclass(frozen=True)
class BranchStats:
    total_branches: int = 0
    active_branches: List[BranchActivity] = field(default_factory=list)


@dataclass(frozen=True)
class StreakStats:
    current_streak: int = 0
    longest_streak: int = 0
    longest_streak_start: Optional[str] = None
    longest_streak_end: Optional[str] = None
    total_active_days: int = 0
    streak_milestones: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class Report:
    """Everything the text and JSON renderers need for one run."""
    repository: str
    basic: BasicStats
    lines: LineStats
    languages: LanguageStats
    contributors: List[Contributor]
    frequency: FrequencyStats
    time: TimeStats
    streaks: StreakStats
    commit_size: CommitSizeStats
    file_churn: List[FileChurn]
    branches: BranchStats
    commits_by_day: Dict[str, int] = field(default_factory=dict)
