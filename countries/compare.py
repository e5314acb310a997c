from decimal import ROUND_HALF_UP, Decimal
from typing import NamedTuple

from .models import CountryRecord


class Verdict(NamedTuple):
    is_larger: bool
    ratio: float
    summary: str


def round_half_up(x: float, digits: int = 0) -> Decimal:
    # round() and format specs round halves to even
    return Decimal(str(x)).quantize(Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP)


def compare_verdict(subject: CountryRecord, reference: CountryRecord) -> Verdict:
    """Population-based bigger/smaller judgment with a one-line summary."""
    ratio = subject.population.value / reference.population.value

    if ratio >= 2:
        summary = f"{round_half_up(ratio, 1)}× the population"
    elif ratio >= 1:
        pct = round_half_up((ratio - 1) * 100)
        summary = "about the same population" if pct == 0 else f"{pct}% more people"
    elif ratio >= 0.5:
        summary = f"{round_half_up((1 - ratio) * 100)}% fewer people"
    else:
        summary = f"{round_half_up(ratio * 100)}% of the population"

    return Verdict(is_larger=ratio >= 1, ratio=ratio, summary=summary)


def format_ratio(value: float, reference_value: float) -> str:
    ratio = value / reference_value
    if ratio >= 1:
        return f"{round_half_up(ratio, 1)}×"
    return f"{round_half_up(ratio * 100)}%"
