"""
Commit streaks.

A streak is a run of consecutive calendar days with at least one commit.
Days are handled as ``YYYY-MM-DD`` keys; several commits on the same day
count once.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

from git_wrapped.models import StreakStats
from git_wrapped.utils import get_branch_filter, get_date_filter, run_command

MILESTONES = [
    (7, "Week Warrior"),
    (30, "Month Master"),
    (100, "Century Club"),
    (365, "Year Legend"),
]

CALENDAR_WEEKS = 12


@dataclass
class StreakState:
    current_streak: int = 0
    longest_streak: int = 0
    longest_streak_start: Optional[date] = None
    longest_streak_end: Optional[date] = None
    temp_streak: int = 0
    temp_streak_start: Optional[date] = None


def to_date_keys(timestamps):
    """Distinct, ascending day keys for an iterable of commit timestamps."""
    keys = set()
    for ts in timestamps:
        key = ts.strip()[:10]
        try:
            date.fromisoformat(key)
        except ValueError:
            continue
        keys.add(key)
    return sorted(keys)


def streak_milestones(longest_streak):
    return [name for days, name in MILESTONES if longest_streak >= days]


def _current_streak(days, today):
    last = days[-1]
    if (today - last).days > 1:
        return 0

    streak = 1
    check = last
    for day in reversed(days[:-1]):
        gap = (check - day).days
        if gap == 1:
            streak += 1
            check = day
        elif gap > 1:
            break
    return streak


def _close_streak(state, end):
    if state.temp_streak > state.longest_streak:
        state.longest_streak = state.temp_streak
        state.longest_streak_start = state.temp_streak_start
        state.longest_streak_end = end


def calculate_streaks(date_keys, today=None):
    """Current and longest streak over sorted, distinct day keys.

    today defaults to the local date; the current streak survives while the
    last active day is today or yesterday.
    """
    if not date_keys:
        return StreakStats()

    today = today or date.today()
    days = [date.fromisoformat(key) for key in date_keys]

    state = StreakState(
        current_streak=_current_streak(days, today),
        temp_streak=1,
        temp_streak_start=days[0],
    )
    for prev, day in zip(days, days[1:]):
        gap = (day - prev).days
        if gap == 1:
            state.temp_streak += 1
        elif gap == 0:
            continue
        else:
            _close_streak(state, prev)
            state.temp_streak = 1
            state.temp_streak_start = day
    _close_streak(state, days[-1])

    longest = max(state.longest_streak, state.current_streak)
    return StreakStats(
        current_streak=state.current_streak,
        longest_streak=longest,
        longest_streak_start=state.longest_streak_start.isoformat(),
        longest_streak_end=state.longest_streak_end.isoformat(),
        total_active_days=len(days),
        streak_milestones=streak_milestones(longest),
    )


def _commit_dates(options):
    output = run_command(
        f"git log --format=%ai {get_branch_filter(options)} {get_date_filter(options)}"
    )
    return output.splitlines() if output else []


def get_streak_stats(options, today=None):
    return calculate_streaks(to_date_keys(_commit_dates(options)), today=today)


def get_commits_by_day(options):
    """Number of commits per day key."""
    counts = {}
    for key in (ts.strip()[:10] for ts in _commit_dates(options)):
        if key:
            counts[key] = counts.get(key, 0) + 1
    return counts


def calendar_symbol(commits):
    if commits == 0:
        return "·"
    if commits <= 5:
        return "▪"
    return "█"


def streak_calendar(commits_by_day, today=None, weeks=CALENDAR_WEEKS):
    """Rows of 7 day cells covering the last weeks, oldest row first."""
    if not commits_by_day:
        return []

    today = today or date.today()
    rows = []
    for week in range(weeks - 1, -1, -1):
        cells = []
        for day in range(7):
            key = (today - timedelta(days=week * 7 + (6 - day))).isoformat()
            cells.append(calendar_symbol(commits_by_day.get(key, 0)))
        rows.append(" ".join(cells))
    return rows
