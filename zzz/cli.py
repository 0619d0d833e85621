import argparse
import re
import shutil
import subprocess
import sys
from typing import List, Optional, TextIO

from . import __version__
from .config import get_barlen, get_debug, get_freq, get_skew_check, load_config
from .countdown import Countdown
from .errors import UsageError
from .log import configure_logging
from .resolve import resolve_duration
from .timecalc import compute_deadline
from .ui import make_status_line

EXIT_INTERRUPTED = 130

# only the first argument is checked, and any word starting with -h counts
HELP_PATTERN = re.compile(r"^(-h|--help)")

DESCRIPTION = (
    "Sleep for a while, like `sleep`, but show a countdown clock and a "
    "progress bar while waiting."
)

EPILOG = """\
    Time can be specified as one total value or as any combination
    across several arguments that will be summed.  (Examples below.)

    Allowable units for each argument are any one of these with any
    combination of upper or lower-case letters and with no space
    between the number and the string:

           s, sec, second, seconds
           m, min, minute, minutes
           h, hr, hour, hours

    Alternately, if the first argument begins with '@', all arguments
    are read as one date string, the same as the -d option of `date`.
    (See: "DATE STRING" section of the `date` man page for details.)

    A range can be defined to sleep a random number of seconds.  Use
    only two arguments.  One must begin with a minus (-) to set the
    minimum value, and the other must start with plus (+) to set the
    maximum value.  This mode does not support parsing units and the
    arguments must be specified in seconds.  Order does not matter.

    Examples:  zzz 60
               zzz 1h 2m 3s
               zzz 4min 5 6HOURS 7s 8MiNuTe 9sec
               zzz @4:37pm tomorrow
               zzz -60 +120
"""

COW_SAYS = "ZzzZzZzZZzz...."
COW_INDENT = " " * 20


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="zzz",
        description=DESCRIPTION,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )
    parser.add_argument("time", nargs="*", metavar="TIME", help="seconds, unit values, @date or a -min +max range")
    parser.add_argument("-h", "--help", action="store_true", help="show this help message and exit")
    parser.add_argument("--debug", action="store_true", help="print drift corrections and a finish report")
    parser.add_argument("--version", action="version", version=f"zzz {__version__}")
    return parser


def parse_args(argv=None):
    return build_parser().parse_intermixed_args(argv)


def _sleepy_cow() -> str:
    if shutil.which("cowsay") is None:
        return ""
    result = subprocess.run(["cowsay", "-d", COW_SAYS], capture_output=True, text=True, check=False)
    if result.returncode != 0:
        return ""
    return "".join(f"{COW_INDENT}{line}\n" for line in result.stdout.splitlines())


def print_help(out: Optional[TextIO] = None) -> None:
    out = out or sys.stdout
    out.write(build_parser().format_help())
    cow = _sleepy_cow()
    if not cow:
        return
    out.flush()
    if shutil.which("lolcat") is not None and out is sys.stdout:
        subprocess.run(["lolcat", "-a"], input=cow, text=True, check=False)
    else:
        out.write(cow)
    out.write("\n")


def _fail(message: str, code: int) -> int:
    print(f"\nERROR: {message}", file=sys.stderr)
    print_help(sys.stderr)
    return code


def _wants_help(argv: List[str]) -> bool:
    return bool(argv) and HELP_PATTERN.match(argv[0]) is not None


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    if _wants_help(argv):
        print_help()
        return 0

    args = parse_args(argv)
    if args.help:
        # -h after the time is a malformed time token, not a help request
        return _fail("The arguments could not be parsed.  Please check formatting.", 2)

    config = load_config()
    configure_logging(level="debug" if args.debug or get_debug(config) else "warning")

    if not args.time:
        return _fail("Must specify a period of time to sleep!", 1)

    try:
        resolution = resolve_duration(args.time)
    except UsageError as exc:
        return _fail(str(exc), exc.exit_code)
    if resolution.warning is not None:
        print(resolution.warning, file=sys.stderr)

    status = make_status_line(sys.stdout, barlen=get_barlen(config))
    countdown = Countdown(
        resolution.seconds,
        compute_deadline(resolution.seconds),
        freq=get_freq(config),
        skew_check=get_skew_check(config),
        status=status,
    )
    try:
        countdown.run()
    except KeyboardInterrupt:
        status.clear()
        return EXIT_INTERRUPTED
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
