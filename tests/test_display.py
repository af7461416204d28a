import json

from git_wrapped.display import (
    fun_facts,
    render_branch_stats,
    render_code_stats,
    render_commit_frequency,
    render_commit_size,
    render_contributors,
    render_file_churn,
    render_json,
    render_report,
    render_repository_overview,
    render_section,
    render_streaks,
    render_time_analysis,
    render_timeline,
)
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
    Options,
    PeriodCount,
    Report,
    StreakStats,
    TimeStats,
)


# --- Helpers ---

def make_report(**overrides):
    fields = dict(
        repository="hello-world",
        basic=BasicStats(
            first_commit_date="2024-01-01 09:00:00 +0000",
            last_commit_date="2024-04-01 09:00:00 +0000",
            num_commits=10,
            num_branches=2,
            num_pull_requests=1,
            num_contributors=2,
        ),
        lines=LineStats(total_loc=12345, largest_files=[FileLines("src/main.py", 900)]),
        languages=LanguageStats([LanguageCount("Python", 3)], total_files=4),
        contributors=[Contributor("Alice", 7), Contributor("Bob", 3)],
        frequency=FrequencyStats(
            max_day=PeriodCount("2024-01-08", 3),
            max_month=PeriodCount("2024-01", 6),
            max_year=PeriodCount("2024", 10),
            avg_commits_per_month=10 / 3,
            avg_commits_per_day=1.25,
        ),
        time=TimeStats(
            most_active_hour=HourCount(2, 4),
            weekday_commits={"Monday": 6, "Friday": 4},
            hourly_commits={2: 4, 10: 6},
            time_blocks={"Late Night": 4, "Morning": 6},
            weekend=0,
            weekday=10,
        ),
        streaks=StreakStats(
            current_streak=0,
            longest_streak=8,
            longest_streak_start="2024-01-01",
            longest_streak_end="2024-01-08",
            total_active_days=9,
            streak_milestones=["Week Warrior"],
        ),
        commit_size=CommitSizeStats(2, 5.5, 1),
        file_churn=[FileChurn("src/main.py", 9)],
        branches=BranchStats(2, [BranchActivity("main", 10, "Alice")]),
        commits_by_day={"2024-01-08": 3},
    )
    fields.update(overrides)
    return Report(**fields)


class TestSections:
    def test_section_with_emoji(self, capsys):
        render_section("TIMELINE", "🗓️", Options())
        assert "🗓️ TIMELINE" in capsys.readouterr().out

    def test_section_without_emoji(self, capsys):
        render_section("TIMELINE", "🗓️", Options(no_emoji=True))
        out = capsys.readouterr().out
        assert "TIMELINE" in out
        assert "🗓️" not in out

    def test_repository_overview(self, capsys):
        render_repository_overview(make_report().basic, Options())
        out = capsys.readouterr().out
        assert "Total Commits" in out
        assert "3 months" in out

    def test_overview_of_empty_repository(self, capsys):
        render_repository_overview(BasicStats(), Options())
        out = capsys.readouterr().out
        assert "Repository Age" not in out
        assert "Pull Requests" in out

    def test_timeline(self, capsys):
        render_timeline(make_report().basic, Options())
        out = capsys.readouterr().out
        assert "Monday, January 1, 2024 at 09:00:00 AM" in out
        assert "3 months, 1 day" in out

    def test_timeline_of_empty_repository(self, capsys):
        render_timeline(BasicStats(), Options())
        out = capsys.readouterr().out
        assert "TIMELINE" in out
        assert "No commits" in out
        assert "0 seconds" in out

    def test_contributors_skipped_when_empty(self, capsys):
        render_contributors([], Options())
        assert capsys.readouterr().out == ""

    def test_contributors_ranked(self, capsys):
        render_contributors(make_report().contributors, Options())
        out = capsys.readouterr().out
        assert "1. Alice" in out
        assert "2. Bob" in out

    def test_code_stats_share(self, capsys):
        report = make_report()
        render_code_stats(report.lines, report.languages, Options())
        out = capsys.readouterr().out
        assert "12,345" in out
        assert "(75.0%)" in out
        assert "src/main.py" in out

    def test_frequency_uses_two_decimals(self, capsys):
        render_commit_frequency(make_report().frequency, Options())
        out = capsys.readouterr().out
        assert "3.33" in out
        assert "1.25" in out
        assert "January 2024" in out
        assert "Monday, January 8, 2024" in out

    def test_weekend_share(self, capsys):
        render_time_analysis(make_report().time, Options())
        out = capsys.readouterr().out
        assert "0.0%" in out
        assert "02:00" in out
        assert "Late Night (00:00-03:59)" in out

    def test_streaks(self, capsys):
        report = make_report()
        render_streaks(report.streaks, report.commits_by_day, Options(minimal=True))
        out = capsys.readouterr().out
        assert "8 days" in out
        assert "2024-01-01 to 2024-01-08" in out
        assert "Week Warrior" in out
        assert "Weeks" not in out

    def test_commit_size(self, capsys):
        render_commit_size(make_report().commit_size, Options())
        out = capsys.readouterr().out
        assert "2.00" in out
        assert "+5.50" in out
        assert "-1.00" in out

    def test_file_churn_skipped_when_empty(self, capsys):
        render_file_churn([], Options())
        assert capsys.readouterr().out == ""

    def test_file_churn_long_paths(self, capsys):
        render_file_churn([FileChurn("a" * 60 + "/file.py", 5)], Options())
        assert "..." in capsys.readouterr().out

    def test_branch_stats_skipped_when_empty(self, capsys):
        render_branch_stats(BranchStats(), Options())
        assert capsys.readouterr().out == ""

    def test_branch_authors_hidden_in_minimal_mode(self, capsys):
        branches = make_report().branches
        render_branch_stats(branches, Options())
        assert "Last commit by Alice" in capsys.readouterr().out
        render_branch_stats(branches, Options(minimal=True))
        assert "Last commit by" not in capsys.readouterr().out


class TestFunFacts:
    def test_facts(self):
        facts = fun_facts(make_report(), Options(year=2024))
        assert "First commit of 2024!" in facts
        assert "MVP: Alice with 7 commits" in facts
        assert "Over 12K lines of code!" in facts
        assert "Night owl - 40% commits after midnight" in facts

    def test_no_facts_for_empty_repository(self):
        report = make_report(
            basic=BasicStats(),
            lines=LineStats(),
            contributors=[],
            time=TimeStats(),
        )
        assert fun_facts(report, Options()) == []


class TestReport:
    def test_full_report(self, capsys):
        render_report(make_report(), Options())
        out = capsys.readouterr().out
        assert "Repository: hello-world" in out
        assert "FUN FACTS" in out
        assert "BRANCH STATISTICS" in out

    def test_minimal_report(self, capsys):
        render_report(make_report(), Options(minimal=True))
        assert "FUN FACTS" not in capsys.readouterr().out

    def test_json(self, capsys):
        render_json(make_report())
        data = json.loads(capsys.readouterr().out)
        assert data["repository"] == "hello-world"
        assert data["streaks"]["longest_streak"] == 8
        assert data["contributors"][0] == {"name": "Alice", "commits": 7}
        assert "version" in data
