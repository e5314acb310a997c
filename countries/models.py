from dataclasses import dataclass
from typing import Optional, Tuple

# No database: records are loaded from the static dataset JSON and never saved.


@dataclass(frozen=True)
class Metric:
    value: float
    source: str
    # year/url may be missing only for static figures (e.g. California land area)
    year: Optional[int] = None
    url: Optional[str] = None

    @property
    def title(self):
        """Tooltip text shown on the metric link."""
        if self.year:
            return f"Source: {self.source} ({self.year})"
        return f"Source: {self.source}"


@dataclass(frozen=True)
class CountryRecord:
    name: str
    # ISO 3166-1 alpha-2, or a custom code such as "US-CA" for the reference region
    code: str
    population: Metric      # millions
    gdp: Metric             # billions USD
    gdp_per_capita: Metric  # USD per person
    area: Metric            # km²

    def __str__(self):
        return self.name


@dataclass(frozen=True)
class Dataset:
    generated: str
    reference: CountryRecord
    countries: Tuple[CountryRecord, ...]

    def __len__(self):
        return len(self.countries)
