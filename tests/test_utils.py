import json
from datetime import datetime, timezone
from unittest import mock

import pytest
import requests
from django.core.management import call_command
from django.core.management.base import CommandError

from countries import utils
from countries.data import load_dataset


def fake_response(payload=None, text=None, status=200):
    resp = mock.Mock()
    resp.status_code = status
    resp.json.return_value = payload
    resp.text = text
    if status >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status} error")
    else:
        resp.raise_for_status.return_value = None
    return resp


WB_COUNTRIES = [
    {"page": 1},
    [
        {"id": "USA", "iso2Code": "US", "name": "United States", "region": {"value": "North America"}},
        {"id": "KOR", "iso2Code": "KR", "name": "Korea, Rep.", "region": {"value": "East Asia & Pacific"}},
        {"id": "XNA", "iso2Code": "XN", "name": "Narnia", "region": {"value": "Europe & Central Asia"}},
        {"id": "WLD", "iso2Code": "1W", "name": "World", "region": {"value": "Aggregates"}},
    ],
]


def indicator_payload(values):
    rows = []
    for iso3, date, value in values:
        rows.append({"countryiso3code": iso3, "date": str(date), "value": value, "country": {"id": iso3[:2]}})
    return [{"page": 1}, rows]


INDICATOR_PAYLOADS = {
    "SP.POP.TOTL": indicator_payload([
        ("USA", 2023, 334914895), ("USA", 2022, 333271411), ("USA", 2024, None),
        ("KOR", 2023, 51712619), ("XNA", 2023, 1500000),
    ]),
    "NY.GDP.MKTP.CD": indicator_payload([("USA", 2023, 27360935000000), ("KOR", 2023, 1712792854202.18)]),
    "NY.GDP.PCAP.CD": indicator_payload([("USA", 2023, 80706.4), ("KOR", 2023, 33121.4)]),
    "AG.LND.TOTL.K2": indicator_payload([("USA", 2022, 9147420), ("KOR", 2022, 97600.0)]),
}

CENSUS_CSV = (
    "SUMLEV,REGION,DIVISION,STATE,NAME,ESTIMATESBASE2020,POPESTIMATE2023\n"
    "040,4,9,06,California,39538245,38965193\n"
    "040,4,9,41,Oregon,4237291,4233358\n"
)

FRED_CSV = "observation_date,CANGSP\n2022-01-01,3641643.0\n2023-01-01,3987010.2\n2024-01-01,.\n"


def fake_get(url, timeout=None):
    if "/country?format=json" in url:
        return fake_response(WB_COUNTRIES)
    for indicator, payload in INDICATOR_PAYLOADS.items():
        if f"/indicator/{indicator}?" in url:
            return fake_response(payload)
    if "NST-EST2023" in url:
        return fake_response(text=CENSUS_CSV)
    if "census.gov" in url:
        return fake_response(status=404)
    if "fred.stlouisfed.org" in url:
        return fake_response(text=FRED_CSV)
    raise AssertionError(f"unexpected url {url}")


@pytest.fixture
def mock_get():
    with mock.patch("countries.utils.requests.get", side_effect=fake_get) as patched:
        yield patched


def test_fetch_countries_skips_aggregates(mock_get):
    countries = utils.fetch_countries()
    assert set(countries) == {"US", "KR", "XN"}
    assert countries["US"] == {"name": "United States", "code": "US", "iso3": "USA"}


def test_fetch_indicator_keeps_latest_non_null(mock_get):
    population = utils.fetch_indicator("SP.POP.TOTL")
    assert population["USA"] == {"value": 334914895, "year": 2023}
    assert population["KOR"]["year"] == 2023


def test_fetch_california_population_falls_back_a_year(mock_get):
    assert utils.fetch_california_population() == {"value": 38965193, "year": 2023}


def test_fetch_california_population_unavailable():
    with mock.patch("countries.utils.requests.get", return_value=fake_response(status=503)):
        assert utils.fetch_california_population() is None


def test_fetch_california_gdp_skips_missing_observations(mock_get):
    assert utils.fetch_california_gdp() == {"value": 3987, "year": 2023}


def test_build_country_record_requires_every_metric():
    info = {"name": "Narnia", "code": "XN", "iso3": "XNA"}
    obs = {"value": 1, "year": 2023}
    assert utils.build_country_record(info, obs, obs, obs, None) is None


def test_build_country_record_units():
    info = {"name": "Korea, Rep.", "code": "KR", "iso3": "KOR"}
    record = utils.build_country_record(
        info,
        {"value": 51712619, "year": 2023},
        {"value": 1712792854202.18, "year": 2023},
        {"value": 33121.4, "year": 2023},
        {"value": 97600.0, "year": 2022},
    )
    assert record["population"]["value"] == 51.7
    assert record["gdp"]["value"] == 1713
    assert record["gdpPerCapita"]["value"] == 33121
    assert record["area"] == {
        "value": 97600,
        "year": 2022,
        "source": "World Bank",
        "url": "https://data.worldbank.org/indicator/AG.LND.TOTL.K2?locations=KR",
    }


def test_build_california_record():
    record = utils.build_california_record({"value": 39000000, "year": 2024}, {"value": 3900, "year": 2023})
    assert record["population"]["value"] == 39.0
    assert record["gdpPerCapita"]["value"] == 100000
    assert record["area"]["value"] == 423970
    assert "year" not in record["area"]


def test_refresh_dataset_command(mock_get, tmp_path):
    output = tmp_path / "countries.json"
    now = datetime(2025, 3, 1, tzinfo=timezone.utc)
    with mock.patch("countries.utils.get_now", return_value=now):
        call_command("refresh_dataset", output=str(output))

    payload = json.loads(output.read_text(encoding="utf-8"))
    assert payload["generated"] == "2025-03-01T00:00:00+00:00"
    assert [c["name"] for c in payload["countries"]] == ["Korea, Rep.", "United States"]
    assert payload["california"]["population"] == {
        "value": 39.0,
        "year": 2023,
        "source": "US Census Bureau",
        "url": "https://www.census.gov/quickfacts/CA",
    }

    dataset = load_dataset(output)
    assert len(dataset) == 2
    assert dataset.reference.gdp.value == 3987


def test_refresh_dataset_command_world_bank_down(tmp_path):
    with mock.patch("countries.utils.requests.get", return_value=fake_response(status=500)):
        with pytest.raises(CommandError):
            call_command("refresh_dataset", output=str(tmp_path / "countries.json"))
    assert not (tmp_path / "countries.json").exists()
