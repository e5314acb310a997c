"""
Dataset loading and country-name normalization.

The dataset is a static JSON file produced by ``manage.py refresh_dataset``.
It is loaded once per process and never mutated afterwards, so the index and
the dataset can be shared across requests without locking.
"""
import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, Optional

from django.conf import settings

from .models import CountryRecord, Dataset
from .serializers import CountryRecordSerializer, ReferenceRecordSerializer

logger = logging.getLogger(__name__)


class DatasetError(Exception):
    """The dataset file is missing, unreadable, or has no usable reference region."""


# (alias, canonical World Bank name) pairs, matched case-insensitively
ALIASES = (
    # USA
    ("us", "united states"),
    ("usa", "united states"),
    ("america", "united states"),
    ("united states of america", "united states"),
    # UK
    ("uk", "united kingdom"),
    ("britain", "united kingdom"),
    ("great britain", "united kingdom"),
    ("england", "united kingdom"),
    # Korea
    ("south korea", "korea, rep."),
    ("korea", "korea, rep."),
    # Netherlands
    ("the netherlands", "netherlands"),
    ("holland", "netherlands"),
    ("ivory coast", "cote d'ivoire"),
    ("burma", "myanmar"),
    ("east timor", "timor-leste"),
    ("cape verde", "cabo verde"),
    ("swaziland", "eswatini"),
    ("democratic republic of the congo", "congo, dem. rep."),
    ("drc", "congo, dem. rep."),
    ("dr congo", "congo, dem. rep."),
    ("congo-kinshasa", "congo, dem. rep."),
    ("republic of the congo", "congo, rep."),
    ("congo", "congo, rep."),
    ("congo-brazzaville", "congo, rep."),
    ("russia", "russian federation"),
    ("vietnam", "viet nam"),
    ("iran", "iran, islamic rep."),
    ("syria", "syrian arab republic"),
    ("venezuela", "venezuela, rb"),
    ("egypt", "egypt, arab rep."),
    ("laos", "lao pdr"),
    ("slovakia", "slovak republic"),
    ("czechia", "czech republic"),
    ("turkey", "turkiye"),
    ("uae", "united arab emirates"),
    ("hong kong", "hong kong sar, china"),
    ("gambia", "gambia, the"),
    ("bahamas", "bahamas, the"),
    ("kyrgyzstan", "kyrgyz republic"),
    ("saint lucia", "st. lucia"),
    ("saint kitts and nevis", "st. kitts and nevis"),
    ("saint vincent and the grenadines", "st. vincent and the grenadines"),
    ("micronesia", "micronesia, fed. sts."),
)

# Official World Bank names -> common display names
DISPLAY_NAMES = {
    "Hong Kong SAR, China": "Hong Kong",
    "Viet Nam": "Vietnam",
    "Korea, Rep.": "South Korea",
    "Korea, Dem. People's Rep.": "North Korea",
    "Iran, Islamic Rep.": "Iran",
    "Egypt, Arab Rep.": "Egypt",
    "Yemen, Rep.": "Yemen",
    "Syrian Arab Republic": "Syria",
    "Venezuela, RB": "Venezuela",
    "Russian Federation": "Russia",
    "Czech Republic": "Czechia",
    "Slovak Republic": "Slovakia",
    "Lao PDR": "Laos",
    "Kyrgyz Republic": "Kyrgyzstan",
    "Turkiye": "Turkey",
    "Gambia, The": "Gambia",
    "Bahamas, The": "Bahamas",
    "Congo, Rep.": "Congo",
    "Congo, Dem. Rep.": "DR Congo",
    "Micronesia, Fed. Sts.": "Micronesia",
    "St. Lucia": "Saint Lucia",
    "St. Kitts and Nevis": "Saint Kitts and Nevis",
    "St. Vincent and the Grenadines": "Saint Vincent and the Grenadines",
}


def normalize(name: str) -> str:
    return name.strip().lower()


def display_name(canonical: str) -> str:
    return DISPLAY_NAMES.get(canonical, canonical)


def flag_url(code: str, size: int = 24) -> str:
    return f"https://flagcdn.com/w{size}/{code.lower()}.png"


class NameIndex:
    """
    Case-insensitive exact-match index over canonical names and aliases.

    Alias keys point at the same record object as their canonical key.
    On a key collision the first registration wins: canonical names are
    inserted before any alias, and a later alias never replaces an earlier one.
    """

    def __init__(self, records: Iterable[CountryRecord], aliases=ALIASES):
        self._by_name: Dict[str, CountryRecord] = {}
        for record in records:
            self._register(normalize(record.name), record)
        for alias, canonical in aliases:
            record = self._by_name.get(normalize(canonical))
            if record is None:
                # dangling alias: target not in this dataset
                continue
            self._register(normalize(alias), record)

    def _register(self, key: str, record: CountryRecord):
        existing = self._by_name.get(key)
        if existing is not None:
            if existing is not record:
                logger.debug("Name %r already maps to %s, ignoring %s", key, existing.name, record.name)
            return
        self._by_name[key] = record

    def lookup(self, query: str) -> Optional[CountryRecord]:
        return self._by_name.get(normalize(query))

    def __contains__(self, query):
        return self.lookup(query) is not None

    def __len__(self):
        return len(self._by_name)


def build_index(records: Iterable[CountryRecord]) -> NameIndex:
    return NameIndex(records)


def parse_dataset(raw: dict) -> Dataset:
    """
    Build a Dataset from the decoded JSON document.

    Country records that fail validation (e.g. a missing metric) are dropped,
    matching the filtering done when the file is generated. A bad reference
    region is fatal since every comparison divides by it.
    """
    if not isinstance(raw, dict):
        raise DatasetError("Dataset must be a JSON object")

    reference_serializer = ReferenceRecordSerializer(data=raw.get("california"))
    if not reference_serializer.is_valid():
        raise DatasetError(f"Invalid reference region: {reference_serializer.errors}")
    reference = reference_serializer.save()

    countries = []
    for item in raw.get("countries") or []:
        serializer = CountryRecordSerializer(data=item)
        if not serializer.is_valid():
            name = item.get("name") if isinstance(item, dict) else None
            logger.debug("Dropping incomplete record %r: %s", name, serializer.errors)
            continue
        countries.append(serializer.save())

    countries.sort(key=lambda c: c.name)
    return Dataset(
        generated=str(raw.get("generated") or ""),
        reference=reference,
        countries=tuple(countries),
    )


def load_dataset(path) -> Dataset:
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise DatasetError(f"Dataset file not found: {path}")
    except (OSError, ValueError) as e:
        raise DatasetError(f"Could not read dataset {path}: {e}")

    dataset = parse_dataset(raw)
    logger.info("Loaded %d countries from %s (generated %s)", len(dataset), path, dataset.generated)
    return dataset


@lru_cache()
def get_dataset() -> Dataset:
    return load_dataset(settings.DATASET_PATH)


@lru_cache()
def get_index() -> NameIndex:
    return build_index(get_dataset().countries)


def lookup_country(name: str) -> Optional[CountryRecord]:
    return get_index().lookup(name)
