import logging
import os
import re
import subprocess
from collections import namedtuple
from datetime import date, datetime, timedelta

logger = logging.getLogger("git-wrapped")

COLORS = {
    "reset": "\033[0m",
    "title": "\033[1;36m",
    "date": "\033[0;32m",
    "number": "\033[0;33m",
    "bar": "\033[0;34m",
    "alert": "\033[0;31m",
    "muted": "\033[0;90m",
    "highlight": "\033[1;33m",
}


class GitWrappedError(Exception):
    """Base class for all git-wrapped errors."""


class CommandFailure(GitWrappedError):
    """A git command could not provide usable output."""

    def __init__(self, command, reason):
        super().__init__(f"{reason} ({command})")
        self.command = command
        self.reason = reason


class EmptyOutputError(CommandFailure):
    def __init__(self, command):
        super().__init__(command, "No output returned.")


class ExecutionError(CommandFailure):
    pass


def run_command(command, strict=False):
    """Run a shell command and return its stripped stdout, or None on failure.

    With strict=True the CommandFailure is raised instead of swallowed.
    """
    try:
        try:
            result = subprocess.run(
                command,
                shell=True,
                capture_output=True,
                text=True,
                check=True,
            )
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or "").strip()
            raise ExecutionError(
                command, stderr or f"exited with status {e.returncode}"
            ) from e
        except OSError as e:
            raise ExecutionError(command, str(e)) from e

        output = result.stdout.rstrip()
        logger.debug("Command: %s", command)
        logger.debug("Output: %s", output)
        if not output:
            raise EmptyOutputError(command)
        return output
    except CommandFailure as e:
        logger.debug("Error executing command: %s", command)
        logger.debug("Error message: %s", e.reason)
        if strict:
            raise
        return None


# --- Line grammar ---

ParseResult = namedtuple("ParseResult", ["records", "dropped"])

COUNT_LINE = re.compile(r"^\s*(\d+)\s+(.+?)\s*$")


def parse_count_line(line):
    """Parse a '<count> <whitespace> <name>' line into (count, name)."""
    match = COUNT_LINE.match(line)
    if not match:
        return None
    return int(match.group(1)), match.group(2)


def parse_lines(text, parse_line):
    """Apply parse_line to every non-blank line of text.

    Lines for which parse_line returns None are dropped and counted.
    """
    records = []
    dropped = 0
    if not text:
        return ParseResult(records, dropped)
    for line in text.splitlines():
        if not line.strip():
            continue
        record = parse_line(line)
        if record is None:
            dropped += 1
            continue
        records.append(record)
    if dropped:
        logger.debug("Dropped %d unparsable line(s)", dropped)
    return ParseResult(records, dropped)


def parse_count(text):
    """Parse a single integer (e.g. 'wc -l' output), 0 on failure."""
    if not text:
        return 0
    try:
        return int(text.strip())
    except ValueError:
        logger.debug("Expected a number, got %r", text)
        return 0


# --- Dates and durations ---

def parse_timestamp(date_str):
    """Parse the date formats git prints (%ai, %aI, plain days)."""
    if isinstance(date_str, datetime):
        return date_str
    if isinstance(date_str, date):
        return datetime(date_str.year, date_str.month, date_str.day)
    if not date_str:
        return None
    date_str = date_str.strip()
    for fmt in ("%Y-%m-%d %H:%M:%S %z", "%Y-%m-%d %H:%M:%S"):
        try:
            return datetime.strptime(date_str, fmt)
        except ValueError:
            pass
    try:
        return datetime.fromisoformat(date_str)
    except ValueError:
        return None


def format_date(date_str):
    """Format a date as e.g. 'Wednesday, January 10, 2024 at 02:03:22 PM'."""
    dt = parse_timestamp(date_str)
    if dt is None:
        return "Invalid Date"
    return (
        f"{dt.strftime('%A, %B')} {dt.day}, {dt.year} "
        f"at {dt.strftime('%I:%M:%S %p')}"
    )


def format_month(month_key):
    """'2024-01' -> 'January 2024'."""
    dt = parse_timestamp(f"{month_key}-01")
    if dt is None:
        return month_key
    return dt.strftime("%B %Y")


SECOND = 1000
MINUTE = SECOND * 60
HOUR = MINUTE * 60
DAY = HOUR * 24
WEEK = DAY * 7
MONTH = DAY * 30
YEAR = DAY * 365

DURATION_UNITS = [
    ("year", YEAR),
    ("month", MONTH),
    ("week", WEEK),
    ("day", DAY),
    ("hour", HOUR),
    ("minute", MINUTE),
    ("second", SECOND),
]


def format_duration(start, end):
    """Break end - start into fixed-length units, largest first."""
    start, end = parse_timestamp(start), parse_timestamp(end)
    if start is None or end is None:
        return "0 seconds"
    if (start.tzinfo is None) != (end.tzinfo is None):
        start, end = start.replace(tzinfo=None), end.replace(tzinfo=None)
    total_millis = (end - start) // timedelta(milliseconds=1)

    parts = []
    remaining = total_millis
    for name, length in DURATION_UNITS:
        value, remaining = divmod(remaining, length)
        if value:
            parts.append(f"{value} {name}{'s' if value > 1 else ''}")

    return ", ".join(parts) or "0 seconds"


def format_average(value):
    return f"{value:.2f}"


def format_percentage(part, whole):
    """Share of part in whole with one decimal, '0.0' for an empty whole."""
    if not whole:
        return "0.0"
    return f"{part / whole * 100:.1f}"


# --- Repository helpers ---

def repository_name(remote_url):
    """Extract the repository name from an SSH or HTTPS remote URL."""
    if not remote_url:
        return "unknown"
    match = re.search(r"[/:]([^/:]+?)(?:\.git)?/?$", remote_url.strip())
    if match:
        return match.group(1)
    logger.debug("Failed to parse repository name from %r", remote_url)
    return "unknown"


def get_date_filter(options):
    """Build the --since/--until flags for git commands."""
    if options.year:
        return f'--since="{options.year}-01-01" --until="{options.year}-12-31 23:59:59"'
    parts = []
    if options.since:
        parts.append(f'--since="{options.since}"')
    if options.until:
        parts.append(f'--until="{options.until}"')
    return " ".join(parts)


def get_branch_filter(options):
    return "--all" if options.all_branches else ""


# --- Languages ---

LANGUAGES = {
    "js": "JavaScript",
    "jsx": "JavaScript",
    "ts": "TypeScript",
    "tsx": "TypeScript",
    "py": "Python",
    "java": "Java",
    "cpp": "C++",
    "c": "C",
    "h": "C/C++ Header",
    "hpp": "C++ Header",
    "cs": "C#",
    "rb": "Ruby",
    "go": "Go",
    "rs": "Rust",
    "php": "PHP",
    "swift": "Swift",
    "kt": "Kotlin",
    "scala": "Scala",
    "html": "HTML",
    "css": "CSS",
    "scss": "SCSS",
    "sass": "Sass",
    "less": "Less",
    "vue": "Vue",
    "svelte": "Svelte",
    "json": "JSON",
    "xml": "XML",
    "yaml": "YAML",
    "yml": "YAML",
    "md": "Markdown",
    "sql": "SQL",
    "sh": "Shell",
    "bash": "Bash",
    "zsh": "Zsh",
    "fish": "Fish",
    "r": "R",
    "m": "Objective-C",
    "mm": "Objective-C++",
    "dart": "Dart",
    "lua": "Lua",
    "pl": "Perl",
    "ex": "Elixir",
    "exs": "Elixir",
    "erl": "Erlang",
    "clj": "Clojure",
    "elm": "Elm",
    "hs": "Haskell",
    "ml": "OCaml",
    "vb": "Visual Basic",
}


def get_file_extension(path):
    """Lower-cased extension of path without the dot, '' if there is none."""
    ext = os.path.splitext(os.path.basename(path))[1]
    return ext[1:].lower()


def extension_to_language(ext):
    return LANGUAGES.get(ext.lower(), ext.upper())
