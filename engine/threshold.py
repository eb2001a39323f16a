"""
Standard Fund Threshold (SFT) resolution, breach classification and the
narrative sentence shown under the pension outputs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

from core.config import IRISH_SFT_SCHEDULE, ThresholdSchedule
from core.formatting import format_euro_compact


@dataclass(frozen=True)
class ThresholdMeta:
    value: float
    year_used: int
    held_constant: bool


@dataclass(frozen=True)
class BreachFlags:
    current: bool
    max: bool
    required: bool

    @property
    def any(self) -> bool:
        return self.current or self.max or self.required

    def labels(self) -> Tuple[str, ...]:
        named = (("Current", self.current), ("Max", self.max), ("Required", self.required))
        return tuple(name for name, flag in named if flag)


def resolve_threshold(
    retirement_year: int,
    schedule: ThresholdSchedule = IRISH_SFT_SCHEDULE,
) -> ThresholdMeta:
    """
    Threshold applying in the retirement year. Years past the last scheduled
    step reuse its value with held_constant=True; later indexation is not
    modelled.
    """
    year_used, value = schedule.lookup(retirement_year)
    return ThresholdMeta(
        value=value,
        year_used=year_used,
        held_constant=retirement_year > schedule.last_year,
    )


def classify_breaches(
    *,
    current_pot: float,
    max_pot: float,
    required_pot: float,
    threshold: float,
) -> BreachFlags:
    return BreachFlags(
        current=current_pot > threshold,
        max=max_pot > threshold,
        required=required_pot > threshold,
    )


_SFT_CLAUSE = "the Standard Fund Threshold (SFT) of {sft} for {year}{suffix}"

# keyed by (current, max, required)
_BREACH_TEMPLATES: Dict[Tuple[bool, bool, bool], str] = {
    (True, False, False): (
        "Based on your current contribution path, the projected fund at "
        "retirement may exceed " + _SFT_CLAUSE
    ),
    (False, True, False): (
        "If you maximise personal contributions within Irish limits, the "
        "projected fund at retirement may exceed " + _SFT_CLAUSE
    ),
    (True, True, False): (
        "Both the current and maximised contribution projections suggest the "
        "fund at retirement may exceed " + _SFT_CLAUSE
    ),
    (False, False, True): (
        "To fund the target retirement income on these assumptions, the "
        "required pot at retirement may exceed " + _SFT_CLAUSE
    ),
    (True, False, True): (
        "Your current projection and the pot required to meet the target "
        "income may exceed " + _SFT_CLAUSE
    ),
    (False, True, True): (
        "The maximised projection and the pot required to meet the target "
        "income may exceed " + _SFT_CLAUSE
    ),
    (True, True, True): (
        "Across both projections and the pot required to meet the target "
        "income, the fund at retirement may exceed " + _SFT_CLAUSE
    ),
}

_HELD_SUFFIX = " (held at the {year} level; future indexation isn’t modelled)."
_HELD_DISCLAIMER = (
    " Future SFT increases may apply but aren’t predictable, so we’ve held "
    "the threshold constant beyond {year}."
)


def build_breach_sentence(flags: BreachFlags, meta: ThresholdMeta) -> str:
    """Narrative for the flag combination; empty when nothing breaches."""
    if not flags.any:
        return ""
    template = _BREACH_TEMPLATES[(flags.current, flags.max, flags.required)]
    suffix = _HELD_SUFFIX.format(year=meta.year_used) if meta.held_constant else "."
    sentence = template.format(
        sft=format_euro_compact(meta.value),
        year=meta.year_used,
        suffix=suffix,
    )
    if meta.held_constant:
        sentence += _HELD_DISCLAIMER.format(year=meta.year_used)
    return sentence
