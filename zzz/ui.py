import curses
from dataclasses import dataclass
from typing import Optional, TextIO

from . import timecalc

MIN_COLORS = 8
GROUPING_THRESHOLD = 9999
NO_TAB_THRESHOLD = 999999
TAB_SWITCH_BLANKS = 33
CLEAR_WIDTH = 78

# terminfo colour numbers, same as `tput setaf N`
YELLOW = 3
GREEN = 2
CYAN = 6


@dataclass(frozen=True)
class Style:
    normal: str = ""
    bold: str = ""
    yellow: str = ""
    green: str = ""
    cyan: str = ""


PLAIN = Style()


def _isatty(stream: TextIO) -> bool:
    try:
        return stream.isatty()
    except (AttributeError, ValueError):
        return False


def _tigetstr(name: str) -> str:
    cap = curses.tigetstr(name)
    return cap.decode("latin-1") if cap else ""


def _setaf(color: int) -> str:
    cap = curses.tigetstr("setaf")
    if not cap:
        return ""
    return curses.tparm(cap, color).decode("latin-1")


def _setup_terminal(stream: TextIO) -> bool:
    try:
        curses.setupterm(fd=stream.fileno())
    except (curses.error, AttributeError, ValueError, OSError):
        return False
    return True


def terminal_supports_color(stream: TextIO) -> bool:
    if not _isatty(stream):
        return False
    if not _setup_terminal(stream):
        return False
    return curses.tigetnum("colors") >= MIN_COLORS


def load_style(stream: TextIO) -> Style:
    if not terminal_supports_color(stream):
        return PLAIN
    try:
        return Style(
            normal=_tigetstr("sgr0"),
            bold=_tigetstr("bold"),
            yellow=_setaf(YELLOW),
            green=_setaf(GREEN),
            cyan=_setaf(CYAN),
        )
    except curses.error:
        return PLAIN


def format_remaining(remaining: int) -> str:
    if remaining > GROUPING_THRESHOLD:
        return f"{remaining:,}"
    return str(remaining)


class StatusLine:
    """Single status line redrawn in place with a carriage return."""

    def __init__(self, stream: TextIO, style: Style = PLAIN, barlen: int = 40) -> None:
        self.stream = stream
        self.style = style
        self.barlen = barlen
        self.last_remaining: Optional[int] = None

    def _progress(self, elapsed: int, duration: int) -> str:
        s = self.style
        blips = timecalc.count_blips(elapsed, duration, self.barlen)
        bar = "#" * blips + " " * (self.barlen - blips)
        percent = timecalc.format_percent(elapsed, duration)
        return (
            f"{s.bold}{s.yellow}[{s.normal}{s.yellow}{bar}{s.bold}]{s.normal}"
            f"{s.bold}{s.yellow} <{s.normal}{s.yellow}{percent}%{s.bold}>{s.normal}"
        )

    def render(self, duration: int, remaining: int) -> str:
        s = self.style
        clock = f"{s.cyan}{timecalc.format_hms_seconds(remaining)}{s.normal}"
        countdown = f"{s.bold}{s.green}({s.normal}{s.green}{format_remaining(remaining)}sec{s.bold}){s.normal}"
        # the thousands separator pushes the line past 80 columns
        indent = "" if remaining > GROUPING_THRESHOLD else "  "
        tab = "" if remaining > NO_TAB_THRESHOLD else "\t"
        progress = self._progress(duration - remaining, duration)
        return f"{indent}{clock}  {countdown} {tab}{progress}  \r"

    def draw(self, duration: int, remaining: int) -> None:
        last = self.last_remaining
        if last is not None and last > NO_TAB_THRESHOLD >= remaining:
            # the tab comes back here and would skip over the old ")"
            self.stream.write(" " * TAB_SWITCH_BLANKS + "\r")
        self.last_remaining = remaining
        self.stream.write(self.render(duration, remaining))
        self.stream.flush()

    def clear(self) -> None:
        self.stream.write(" " * CLEAR_WIDTH + "\r\r")
        self.stream.flush()


def make_status_line(stream: TextIO, barlen: int, style: Optional[Style] = None) -> StatusLine:
    if style is None:
        style = load_style(stream)
    return StatusLine(stream, style=style, barlen=barlen)
