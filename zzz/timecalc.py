import subprocess
import time
from datetime import datetime
from typing import Callable, Optional

from .errors import ResolutionFailure


def _parse_iso_local(text: str) -> Optional[datetime]:
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        # local time with the DST rules of that date, not of today
        return parsed.astimezone()
    return parsed


def format_hms_seconds(seconds: int) -> str:
    total = max(0, int(seconds))
    hours = total // 3600
    minutes = (total % 3600) // 60
    secs = total % 60
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def format_percent(elapsed: int, duration: int) -> str:
    """One-decimal percentage using integer arithmetic only; tenths are truncated."""
    if duration <= 0:
        return "100.0"
    scaled = elapsed * 1000 // duration
    return f"{scaled // 10}.{scaled % 10}"


def count_blips(elapsed: int, duration: int, barlen: int) -> int:
    if duration <= 0:
        return barlen
    percent = elapsed * 100 // duration
    return percent * barlen // 100


def compute_deadline(duration: int, clock: Optional[Callable[[], float]] = None) -> float:
    clock = clock or time.time
    return clock() + duration


def _date_command(text: str) -> float:
    try:
        result = subprocess.run(
            ["date", "-d", text, "+%s"],
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as exc:
        raise ResolutionFailure(f"Could not run `date` to resolve {text!r}: {exc}") from exc
    if result.returncode != 0:
        detail = result.stderr.strip() or f"exit status {result.returncode}"
        raise ResolutionFailure(f"Could not understand the time {text!r} ({detail})")
    try:
        return float(result.stdout.strip())
    except ValueError as exc:
        raise ResolutionFailure(f"Unexpected output from `date` for {text!r}: {result.stdout!r}") from exc


def resolve_absolute_time(text: str) -> float:
    """Turn free-form text into epoch seconds in the local timezone.

    ISO-8601 text is handled directly; anything else goes through the
    system ``date -d`` parser, which understands phrases such as
    ``4:37pm tomorrow`` or ``next friday 09:00``.
    """
    text = text.strip()
    if not text:
        raise ResolutionFailure("No time given after '@'")
    parsed = _parse_iso_local(text)
    if parsed is not None:
        return parsed.timestamp()
    return _date_command(text)
