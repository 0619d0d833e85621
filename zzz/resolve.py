"""Turn the command-line time tokens into a number of seconds.

Three grammars are supported and tried in a fixed order:

* ``@<when>``   an absolute point in time, e.g. ``@4:37pm tomorrow``
* ``-N +M``     a random whole number of seconds in ``[N, M]``
* ``1h 2m 3s``  a sum of numbers, each with an optional unit suffix

Each resolver returns ``None`` when the tokens are not in its grammar and
raises :class:`UsageError` when they are but cannot be parsed.
"""

import math
import random
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence, Tuple

import structlog

from . import timecalc
from .errors import StaleDeadlineWarning, UsageError

log = structlog.get_logger(__name__)

# longest suffix first within each family
UNIT_FAMILIES: Tuple[Tuple[str, Tuple[str, ...], int], ...] = (
    ("hours", ("hours", "hour", "hr", "h"), 3600),
    ("minutes", ("minutes", "minute", "min", "m"), 60),
    ("seconds", ("seconds", "second", "sec", "s"), 1),
)

PROG = "zzz"


@dataclass
class Resolution:
    seconds: int
    mode: str
    warning: Optional[StaleDeadlineWarning] = None


def _malformed(token: str) -> UsageError:
    return UsageError(f"The arguments could not be parsed.  Please check formatting. ({token!r})")


def parse_unit_token(token: str) -> Tuple[str, int]:
    """Split one token into its unit family name and its count."""
    lowered = token.lower()
    for family, suffixes, _ in UNIT_FAMILIES:
        for suffix in suffixes:
            if lowered.endswith(suffix):
                number = lowered[: -len(suffix)]
                if not number.isdigit():
                    raise _malformed(token)
                return family, int(number)
    if lowered.isdigit():
        return "seconds", int(lowered)
    raise _malformed(token)


def parse_units(tokens: Sequence[str]) -> int:
    totals: Dict[str, int] = {family: 0 for family, _, _ in UNIT_FAMILIES}
    for token in tokens:
        family, count = parse_unit_token(token)
        totals[family] += count
    return totals["hours"] * 3600 + totals["minutes"] * 60 + totals["seconds"]


def _range_bound(token: str) -> int:
    digits = token[1:]
    if not digits.isdigit():
        raise UsageError(f"Range bounds must be whole seconds, got {token!r}")
    return int(digits)


def resolve_range(tokens: Sequence[str], rng: Optional[random.Random] = None) -> Optional[int]:
    if len(tokens) != 2:
        return None
    lower: Optional[int] = None
    upper: Optional[int] = None
    for token in tokens:
        if token.startswith("-"):
            lower = _range_bound(token)
        elif token.startswith("+"):
            upper = _range_bound(token)
    if lower is None or upper is None:
        return None
    if lower == upper:
        return lower
    if upper < lower:
        lower, upper = upper, lower
    rng = rng or random.Random()
    seconds = rng.randint(lower, upper)
    log.debug("random range", lower=lower, upper=upper, seconds=seconds)
    return seconds


def resolve_absolute(
    tokens: Sequence[str],
    now: Optional[float] = None,
    resolver: Optional[Callable[[str], float]] = None,
) -> Optional[Resolution]:
    if not tokens or not tokens[0].startswith("@"):
        return None
    resolver = resolver or timecalc.resolve_absolute_time
    phrase = " ".join(tokens)[1:]
    timestamp = resolver(phrase)
    if now is None:
        now = time.time()
    seconds = math.floor(timestamp - now)
    if seconds >= 0:
        return Resolution(seconds=seconds, mode="absolute")

    given = " ".join(tokens)
    warning = StaleDeadlineWarning(given, f"{PROG} {given} tomorrow")
    log.debug("stale deadline", given=given, overdue=-seconds)
    return Resolution(seconds=0, mode="absolute", warning=warning)


def resolve_duration(
    tokens: Sequence[str],
    rng: Optional[random.Random] = None,
    now: Optional[float] = None,
    resolver: Optional[Callable[[str], float]] = None,
) -> Resolution:
    if not tokens:
        raise UsageError("Must specify a period of time to sleep!", exit_code=1)

    absolute = resolve_absolute(tokens, now=now, resolver=resolver)
    if absolute is not None:
        return absolute

    ranged = resolve_range(tokens, rng=rng)
    if ranged is not None:
        return Resolution(seconds=ranged, mode="range")

    return Resolution(seconds=parse_units(tokens), mode="units")
