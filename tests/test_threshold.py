import itertools

import pytest

from core.config import ThresholdSchedule
from engine.threshold import (
    BreachFlags,
    build_breach_sentence,
    classify_breaches,
    resolve_threshold,
)


@pytest.mark.parametrize(
    "year, value, year_used, held",
    [
        (2020, 2_200_000, 2026, False),
        (2026, 2_200_000, 2026, False),
        (2027, 2_400_000, 2027, False),
        (2028, 2_600_000, 2028, False),
        (2029, 2_800_000, 2029, False),
        (2030, 2_800_000, 2029, True),
        (2055, 2_800_000, 2029, True),
    ],
)
def test_resolve_threshold(year, value, year_used, held):
    meta = resolve_threshold(year)
    assert meta.value == value
    assert meta.year_used == year_used
    assert meta.held_constant is held


def test_custom_schedule():
    schedule = ThresholdSchedule(steps=((2000, 1_000_000.0),))
    meta = resolve_threshold(2010, schedule)
    assert meta.value == 1_000_000
    assert meta.held_constant is True


def test_schedule_lookup_clamps_to_its_ends():
    schedule = ThresholdSchedule(steps=((2010, 1.0), (2015, 2.0)))
    assert schedule.lookup(2000) == (2010, 1.0)
    assert schedule.lookup(2014) == (2010, 1.0)
    assert schedule.lookup(2099) == (2015, 2.0)
    assert schedule.last_year == 2015
    assert not hasattr(schedule, "first_year")


def test_classify_breaches_is_strictly_greater():
    flags = classify_breaches(
        current_pot=2_200_001, max_pot=2_200_000, required_pot=100, threshold=2_200_000
    )
    assert flags == BreachFlags(current=True, max=False, required=False)
    assert flags.any is True
    assert flags.labels() == ("Current",)


def test_no_breach_means_no_sentence():
    flags = BreachFlags(current=False, max=False, required=False)
    assert flags.any is False
    assert build_breach_sentence(flags, resolve_threshold(2028)) == ""


def test_every_combination_has_its_own_sentence():
    meta = resolve_threshold(2028)
    sentences = set()
    for combo in itertools.product((False, True), repeat=3):
        if not any(combo):
            continue
        sentence = build_breach_sentence(BreachFlags(*combo), meta)
        assert sentence.endswith("the Standard Fund Threshold (SFT) of €2.6m for 2028.")
        sentences.add(sentence)
    assert len(sentences) == 7


def test_current_only_wording():
    sentence = build_breach_sentence(
        BreachFlags(current=True, max=False, required=False), resolve_threshold(2027)
    )
    assert sentence == (
        "Based on your current contribution path, the projected fund at retirement "
        "may exceed the Standard Fund Threshold (SFT) of €2.4m for 2027."
    )


def test_held_constant_adds_disclaimer():
    sentence = build_breach_sentence(
        BreachFlags(current=False, max=True, required=True), resolve_threshold(2040)
    )
    assert sentence.startswith("The maximised projection and the pot required")
    assert "of €2.8m for 2029 (held at the 2029 level; future indexation isn’t modelled)." in sentence
    assert sentence.endswith("held the threshold constant beyond 2029.")
