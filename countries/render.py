"""
HTML rendering for the home listing, comparison page and not-found page.

Every function here is pure: output depends only on its arguments (and the
templates), so rendering the same record twice gives identical bytes.
"""
from typing import NamedTuple

from django.template.loader import render_to_string

from .compare import compare_verdict, format_ratio, round_half_up
from .data import display_name
from .models import CountryRecord, Dataset, Metric

SITE_NAMES = {
    "bigger": "Bigger Than Cali",
    "smaller": "Smaller Than Cali",
}

# Wikimedia Commons, public domain
REFERENCE_FLAG_URL = "https://upload.wikimedia.org/wikipedia/commons/thumb/0/01/Flag_of_California.svg/40px-Flag_of_California.svg.png"

# (label, attribute, display pattern, decimals below 1000)
METRIC_ROWS = (
    ("Population", "population", "{}M", 1),
    ("GDP", "gdp", "${}B", 1),
    ("GDP per Capita", "gdp_per_capita", "${}", 0),
    ("Land Area", "area", "{} km²", 0),
)


class MetricCell(NamedTuple):
    metric: Metric
    text: str


class MetricRow(NamedTuple):
    label: str
    subject: MetricCell
    reference: MetricCell
    ratio: str


def format_number(n: float, decimals: int = 1) -> str:
    if n >= 1000:
        return f"{round_half_up(n):,.0f}"
    return f"{round_half_up(n, decimals):,.{decimals}f}"


def metric_rows(subject: CountryRecord, reference: CountryRecord):
    rows = []
    for label, attr, pattern, decimals in METRIC_ROWS:
        ours, theirs = getattr(subject, attr), getattr(reference, attr)
        rows.append(MetricRow(
            label=label,
            subject=MetricCell(ours, pattern.format(format_number(ours.value, decimals))),
            reference=MetricCell(theirs, pattern.format(format_number(theirs.value, decimals))),
            ratio=format_ratio(ours.value, theirs.value),
        ))
    return rows


def _site_context(mode):
    return {"site_name": SITE_NAMES.get(mode, SITE_NAMES["bigger"]), "mode": mode}


def render_home(dataset: Dataset, mode: str = "bigger") -> str:
    countries = [
        {"name": c.name, "display_name": display_name(c.name), "code": c.code}
        for c in sorted(dataset.countries, key=lambda c: c.name)
    ]
    context = {
        **_site_context(mode),
        "countries": countries,
        "reference_name": dataset.reference.name,
        "generated": dataset.generated,
    }
    return render_to_string("countries/home.html", context)


def render_comparison(subject: CountryRecord, reference: CountryRecord, mode: str = "bigger") -> str:
    context = {
        **_site_context(mode),
        "name": display_name(subject.name),
        "code": subject.code,
        "reference_name": reference.name,
        "reference_flag": REFERENCE_FLAG_URL,
        "verdict": compare_verdict(subject, reference),
        "rows": metric_rows(subject, reference),
    }
    return render_to_string("countries/comparison.html", context)


def render_not_found(raw_query: str, mode: str = "bigger") -> str:
    return render_to_string("countries/not_found.html", {**_site_context(mode), "query": raw_query})


def render_server_error(mode: str = "bigger") -> str:
    return render_to_string("countries/server_error.html", _site_context(mode))
