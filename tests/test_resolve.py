import random

import pytest

from zzz.errors import ResolutionFailure, StaleDeadlineWarning, UsageError
from zzz.resolve import (
    parse_unit_token,
    parse_units,
    resolve_absolute,
    resolve_duration,
    resolve_range,
)


class NoRandom(random.Random):
    def randint(self, a, b):
        raise AssertionError("randint should not be called")


@pytest.mark.parametrize(
    "token, expected",
    [
        ("2hours", ("hours", 2)),
        ("2HOUR", ("hours", 2)),
        ("3hr", ("hours", 3)),
        ("4h", ("hours", 4)),
        ("5Minutes", ("minutes", 5)),
        ("6minute", ("minutes", 6)),
        ("7MIN", ("minutes", 7)),
        ("8m", ("minutes", 8)),
        ("9seconds", ("seconds", 9)),
        ("10second", ("seconds", 10)),
        ("11sec", ("seconds", 11)),
        ("12S", ("seconds", 12)),
        ("13", ("seconds", 13)),
        ("0", ("seconds", 0)),
    ],
)
def test_parse_unit_token(token, expected):
    assert parse_unit_token(token) == expected


@pytest.mark.parametrize("token", ["abc", "1.5h", "h", "10x", "1d", "ms", "1h30m", "-5", "+5", ""])
def test_parse_unit_token_rejects_malformed(token):
    with pytest.raises(UsageError) as excinfo:
        parse_unit_token(token)
    assert excinfo.value.exit_code == 2
    assert repr(token) in str(excinfo.value)


def test_units_are_summed_in_any_order():
    assert parse_units(["1h", "2m", "3s"]) == 3723
    assert parse_units(["3s", "1h", "2m"]) == 3723


def test_units_repeat_and_accumulate():
    assert parse_units(["1h", "30m", "1h"]) == 2 * 3600 + 30 * 60
    assert parse_units(["4min", "5", "6HOURS", "7s", "8MiNuTe", "9sec"]) == 6 * 3600 + 12 * 60 + 21


def test_units_abort_on_first_bad_token():
    with pytest.raises(UsageError, match="'nope'"):
        parse_units(["1h", "nope", "2m"])


@pytest.mark.parametrize("tokens", [["10"], ["1", "2", "3"], ["-5", "-10"], ["+5", "+10"], ["5", "+10"]])
def test_range_declines_other_shapes(tokens):
    assert resolve_range(tokens) is None


def test_range_equal_bounds_skip_random():
    assert resolve_range(["-42", "+42"], rng=NoRandom()) == 42


def test_range_samples_full_inclusive_set():
    rng = random.Random(1234)
    seen = {resolve_range(["-5", "+10"], rng=rng) for _ in range(500)}
    assert seen == {5, 6, 7, 8, 9, 10}


def test_range_order_does_not_matter():
    rng = random.Random(99)
    for _ in range(200):
        assert 45 <= resolve_range(["+60", "-45"], rng=rng) <= 60


def test_range_swaps_inverted_bounds():
    rng = random.Random(7)
    for _ in range(200):
        assert 3 <= resolve_range(["-9", "+3"], rng=rng) <= 9


def test_range_wider_than_legacy_random_cap():
    rng = random.Random(5)
    samples = [resolve_range(["-0", "+10000000"], rng=rng) for _ in range(200)]
    assert all(0 <= s <= 10_000_000 for s in samples)
    assert max(samples) > 32767


def test_range_rejects_non_numeric_bounds():
    with pytest.raises(UsageError):
        resolve_range(["-5m", "+10"])


def test_absolute_declines_without_at_sign():
    assert resolve_absolute(["4pm"], now=0.0, resolver=lambda text: 0.0) is None


def test_absolute_joins_tokens_and_strips_at():
    seen = []

    def resolver(text):
        seen.append(text)
        return 1_000.0 + 90

    resolution = resolve_absolute(["@4:37pm", "tomorrow"], now=1_000.0, resolver=resolver)
    assert seen == ["4:37pm tomorrow"]
    assert resolution.seconds == 90
    assert resolution.mode == "absolute"
    assert resolution.warning is None


def test_absolute_in_the_past_clamps_to_zero_with_warning():
    resolution = resolve_absolute(["@9am"], now=5_000.0, resolver=lambda text: 4_000.0)
    assert resolution.seconds == 0
    assert isinstance(resolution.warning, StaleDeadlineWarning)
    assert "zzz @9am tomorrow" in str(resolution.warning)
    assert '"@9am"' in str(resolution.warning)


def test_absolute_resolution_failure_propagates():
    def resolver(text):
        raise ResolutionFailure("nope")

    with pytest.raises(UsageError):
        resolve_absolute(["@gibberish"], now=0.0, resolver=resolver)


def test_chain_prefers_absolute_over_range():
    resolution = resolve_duration(["@-5", "+10"], now=0.0, resolver=lambda text: 30.0)
    assert resolution.mode == "absolute"
    assert resolution.seconds == 30


def test_chain_range_then_units():
    assert resolve_duration(["-7", "+7"]).mode == "range"
    resolution = resolve_duration(["1m"])
    assert resolution.mode == "units"
    assert resolution.seconds == 60


def test_chain_without_tokens_is_usage_error():
    with pytest.raises(UsageError) as excinfo:
        resolve_duration([])
    assert excinfo.value.exit_code == 1


def test_absolute_just_past_still_warns():
    resolution = resolve_absolute(["@noon"], now=1_000.5, resolver=lambda text: 1_000.0)
    assert resolution.seconds == 0
    assert isinstance(resolution.warning, StaleDeadlineWarning)


def test_absolute_fraction_ahead_rounds_down():
    resolution = resolve_absolute(["@noon"], now=1_000.0, resolver=lambda text: 1_010.9)
    assert resolution.seconds == 10
    assert resolution.warning is None
