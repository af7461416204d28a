import json
from dataclasses import asdict

from git_wrapped import __version__
from git_wrapped.stats import TIME_BLOCKS
from git_wrapped.streaks import streak_calendar
from git_wrapped.utils import (
    COLORS,
    format_average,
    format_date,
    format_duration,
    format_month,
    format_percentage,
)

RULE_WIDTH = 60

BANNER = r"""
       _ _                                           _
  __ _(_) |_  __      ___ __ __ _ _ __  _ __   ___  __| |
 / _` | | __| \ \ /\ / / '__/ _` | '_ \| '_ \ / _ \/ _` |
| (_| | | |_   \ V  V /| | | (_| | |_) | |_) |  __/ (_| |
 \__, |_|\__|   \_/\_/ |_|  \__,_| .__/| .__/ \___|\__,_|
 |___/                           |_|   |_|
"""


def c(color, text):
    return f"{COLORS[color]}{text}{COLORS['reset']}"


def render_banner(repo_name):
    print(c("title", BANNER))
    print(c("title", "Your Repository's Stats".rjust(40)))
    if repo_name and repo_name != "unknown":
        print(c("highlight", f"Repository: {repo_name}".rjust(40)))
    print()


def render_section(title, emoji="", options=None):
    if emoji and not (options and options.no_emoji):
        title = f"{emoji} {title}"
    print()
    print(c("title", title))
    print(c("muted", "─" * RULE_WIDTH))


def render_bar(count, scale, bar_char="█"):
    return bar_char * max(1, count // scale)


def render_repository_overview(basic, options):
    render_section("REPOSITORY OVERVIEW", "📦", options)
    print(f"Total Commits       {c('number', basic.num_commits)}")
    print(f"Branches            {c('number', basic.num_branches)}")
    print(f"Pull Requests       {c('number', basic.num_pull_requests)}")
    print(f"Contributors        {c('number', basic.num_contributors)}")
    if basic.first_commit_date and basic.last_commit_date:
        age = format_duration(basic.first_commit_date, basic.last_commit_date)
        print(f"Repository Age      {c('number', age)}")


def render_timeline(basic, options):
    render_section("TIMELINE", "🗓️", options)
    first = format_date(basic.first_commit_date) if basic.first_commit_date else "No commits"
    last = format_date(basic.last_commit_date) if basic.last_commit_date else "No commits"
    print(f"First Commit: {c('date', first)}")
    print(f"Last Commit:  {c('date', last)}")
    duration = format_duration(basic.first_commit_date, basic.last_commit_date)
    print(f"Duration:     {c('number', duration)}")


def render_contributors(contributors, options):
    if not contributors:
        return
    render_section("CONTRIBUTOR STATISTICS", "👥", options)
    for i, contributor in enumerate(contributors, 1):
        print(
            f"{i}. {contributor.name.ljust(30)} {c('number', f'{contributor.commits} commits')}"
        )


def render_code_stats(lines, languages, options):
    render_section("CODE STATISTICS", "📊", options)
    print(f"Total Lines of Code: {c('number', f'{lines.total_loc:,}')}")

    if languages.languages:
        print("\nTop Languages:")
        for entry in languages.languages[:5]:
            share = format_percentage(entry.count, languages.total_files)
            print(
                f"  {entry.language.ljust(20)} {c('number', f'{entry.count} files')} ({share}%)"
            )

    if lines.largest_files:
        print("\nLargest Files:")
        for entry in lines.largest_files[:5]:
            print(f"  {entry.file.ljust(40)} {c('number', f'{entry.lines:,} lines')}")


def render_commit_frequency(frequency, options):
    render_section("COMMIT FREQUENCY ANALYSIS", "📈", options)
    max_day = format_date(frequency.max_day.date) if frequency.max_day.date else ""
    max_month = format_month(frequency.max_month.date) if frequency.max_month.date else ""
    print(f"Most Active Day:   {c('date', max_day)} ({frequency.max_day.count} commits)")
    print(f"Most Active Month: {c('date', max_month)} ({frequency.max_month.count} commits)")
    print(
        f"Most Active Year:  {c('date', frequency.max_year.date)} ({frequency.max_year.count} commits)"
    )
    print(f"Avg Commits/Month: {c('number', format_average(frequency.avg_commits_per_month))}")
    print(f"Avg Commits/Day:   {c('number', format_average(frequency.avg_commits_per_day))}")


def render_time_analysis(time_stats, options):
    render_section("TIME-BASED ANALYSIS", "⏰", options)
    hour = time_stats.most_active_hour
    print(f"Most Active Hour: {c('number', f'{hour.hour:02d}:00')} ({hour.count} commits)")

    if time_stats.time_blocks:
        print("\nCommits by Time of Day:")
        for label, start, end in TIME_BLOCKS:
            count = time_stats.time_blocks.get(label, 0)
            block = f"{label} ({start:02d}:00-{end - 1:02d}:59)"
            print(f"  {block.ljust(30)} {c('bar', render_bar(count, 5))} {count}")

    print("\nWeekend vs Weekday:")
    print(f"  Weekday commits: {c('number', time_stats.weekday)}")
    print(f"  Weekend commits: {c('number', time_stats.weekend)}")
    share = format_percentage(time_stats.weekend, time_stats.weekend + time_stats.weekday)
    print(f"  Weekend warrior: {c('number', share + '%')}")

    if time_stats.weekday_commits:
        print("\nCommits by Day of Week:")
        for day, count in sorted(
            time_stats.weekday_commits.items(), key=lambda x: x[1], reverse=True
        ):
            print(f"  {day.ljust(10)} {c('bar', render_bar(count, 3))} {count}")


def render_streaks(streaks, commits_by_day, options):
    render_section("COMMIT STREAK ANALYSIS", "🔥", options)
    print(f"Current Streak:  {c('number', f'{streaks.current_streak} days')}")
    print(f"Longest Streak:  {c('number', f'{streaks.longest_streak} days')}")
    if streaks.longest_streak_start and streaks.longest_streak_end:
        print(c("muted", f"   ({streaks.longest_streak_start} to {streaks.longest_streak_end})"))
    print(f"Total Active Days: {c('number', streaks.total_active_days)}")

    if streaks.streak_milestones:
        print("\nStreak Achievements:")
        for milestone in streaks.streak_milestones:
            print(c("highlight", f"  {milestone}"))

    calendar = [] if options.minimal else streak_calendar(commits_by_day)
    if calendar:
        print(f"\nLast {len(calendar)} Weeks:")
        for row in calendar:
            print(f"  {c('bar', row)}")


def render_commit_size(size, options):
    render_section("COMMIT SIZE STATISTICS", "📏", options)
    print(f"Avg files changed per commit: {c('number', format_average(size.avg_files_changed))}")
    print(f"Avg insertions per commit:    {c('date', '+' + format_average(size.avg_insertions))}")
    print(f"Avg deletions per commit:     {c('alert', '-' + format_average(size.avg_deletions))}")


def render_file_churn(file_churn, options):
    if not file_churn:
        return
    render_section("MOST CHANGED FILES", "🔄", options)
    for entry in file_churn[:10]:
        name = entry.file
        if len(name) > 45:
            name = "..." + name[-42:]
        print(f"  {name.ljust(45)} {c('number', f'{entry.changes} changes')}")


def render_branch_stats(branches, options):
    if not branches.total_branches:
        return
    render_section("BRANCH STATISTICS", "🌿", options)
    print(f"Total Branches: {c('number', branches.total_branches)}")

    if branches.active_branches:
        print("\nMost Active Branches:")
        for i, branch in enumerate(branches.active_branches[:10], 1):
            print(f"{i}. {branch.name.ljust(30)} {c('number', f'{branch.commits} commits')}")
            if not options.minimal and i <= 5:
                print(c("muted", f"   Last commit by {branch.last_author}"))


def fun_facts(report, options):
    """Short highlights derived from the other statistics."""
    facts = []
    basic = report.basic

    if options.year and basic.first_commit_date:
        if basic.first_commit_date.startswith(str(options.year)):
            facts.append(f"First commit of {options.year}!")

    if report.contributors:
        top = report.contributors[0]
        facts.append(f"MVP: {top.name} with {top.commits} commits")

    if report.lines.total_loc > 10000:
        facts.append(f"Over {report.lines.total_loc / 1000:.0f}K lines of code!")

    total = basic.num_commits or 1
    late_night = report.time.time_blocks.get("Late Night", 0) / total
    if late_night > 0.2:
        facts.append(f"Night owl - {late_night * 100:.0f}% commits after midnight")
    early_morning = report.time.time_blocks.get("Early Morning", 0) / total
    if early_morning > 0.15:
        facts.append(f"Early bird - {early_morning * 100:.0f}% commits before 8 AM")

    return facts


def render_fun_facts(report, options):
    facts = fun_facts(report, options)
    if not facts:
        return
    render_section("FUN FACTS & ACHIEVEMENTS", "🎉", options)
    for fact in facts:
        print(c("highlight", f"  {fact}"))


def render_footer():
    print()
    print(c("muted", "═" * RULE_WIDTH))
    print(c("title", "Thank you for using git-wrapped!".rjust(46)))
    print()


def render_report(report, options):
    """Print the full text report."""
    render_banner(report.repository)
    render_repository_overview(report.basic, options)
    render_timeline(report.basic, options)
    render_contributors(report.contributors, options)
    render_code_stats(report.lines, report.languages, options)
    render_commit_frequency(report.frequency, options)
    render_time_analysis(report.time, options)
    render_streaks(report.streaks, report.commits_by_day, options)
    render_commit_size(report.commit_size, options)
    render_file_churn(report.file_churn, options)
    render_branch_stats(report.branches, options)
    if not options.minimal:
        render_fun_facts(report, options)
    render_footer()


def render_json(report):
    data = asdict(report)
    data["version"] = __version__
    print(json.dumps(data, indent=2))
