from pathlib import Path

import pytest

from countries import data
from countries.models import CountryRecord, Metric

FIXTURE_DATASET = Path(__file__).parent / "fixtures" / "countries.json"


@pytest.fixture(autouse=True)
def fixture_dataset(settings):
    """Point the app at the test dataset and rebuild the cached singletons around each test."""
    settings.DATASET_PATH = str(FIXTURE_DATASET)
    data.get_dataset.cache_clear()
    data.get_index.cache_clear()
    yield
    data.get_dataset.cache_clear()
    data.get_index.cache_clear()


@pytest.fixture
def dataset():
    return data.get_dataset()


@pytest.fixture
def index():
    return data.get_index()


@pytest.fixture
def california(dataset):
    return dataset.reference


def make_record(name="Testland", code="TL", population=1.0, gdp=10.0, gdp_per_capita=1000.0, area=500.0):
    def metric(value):
        return Metric(value=value, source="World Bank", year=2023, url="https://data.worldbank.org/")

    return CountryRecord(
        name=name,
        code=code,
        population=metric(population),
        gdp=metric(gdp),
        gdp_per_capita=metric(gdp_per_capita),
        area=metric(area),
    )
