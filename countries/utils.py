import csv
import io
import logging
from datetime import datetime, timezone

import requests
from django.conf import settings

logger = logging.getLogger(__name__)

WORLD_BANK_API = 'https://api.worldbank.org/v2'
CENSUS_POPEST_CSV = 'https://www2.census.gov/programs-surveys/popest/datasets/2020-{year}/state/totals/NST-EST{year}-ALLDATA.csv'
FRED_CA_GDP_CSV = 'https://fred.stlouisfed.org/graph/fredgraph.csv?id=CANGSP'

# World Bank indicator codes
INDICATORS = {
    "population": "SP.POP.TOTL",
    "gdp": "NY.GDP.MKTP.CD",
    "gdp_per_capita": "NY.GDP.PCAP.CD",
    "area": "AG.LND.TOTL.K2",
}

# Census publishes one vintage per year; newest first
CENSUS_YEARS = (2024, 2023, 2022)
CALIFORNIA_LAND_AREA_KM2 = 423970


def world_bank_url(indicator, iso2):
    return f"https://data.worldbank.org/indicator/{indicator}?locations={iso2}"


def get_json(url):
    resp = requests.get(url, timeout=settings.FETCH_TIMEOUT)
    resp.raise_for_status()
    return resp.json()


def get_text(url):
    resp = requests.get(url, timeout=settings.FETCH_TIMEOUT)
    resp.raise_for_status()
    return resp.text


def fetch_countries():
    """
    Return {iso2: {"name", "code", "iso3"}} for every World Bank economy,
    skipping aggregates (regions, income groups, ...).
    """
    _, countries = get_json(f"{WORLD_BANK_API}/country?format=json&per_page=300")
    result = {}
    for item in countries or []:
        if (item.get("region") or {}).get("value") == "Aggregates":
            continue
        iso2 = item.get("iso2Code")
        if not iso2:
            continue
        result[iso2] = {"name": item["name"], "code": iso2, "iso3": item.get("id")}
    logger.info("Found %d countries", len(result))
    return result


def fetch_indicator(indicator):
    """Return {iso3: {"value", "year"}} holding the most recent non-null observation."""
    url = f"{WORLD_BANK_API}/country/all/indicator/{indicator}?format=json&per_page=20000&date=2019:2024"
    _, values = get_json(url)
    result = {}
    for item in values or []:
        if item.get("value") is None:
            continue
        code = item.get("countryiso3code")
        year = int(item["date"])
        if code and (code not in result or year > result[code]["year"]):
            result[code] = {"value": item["value"], "year": year}
    logger.info("Got %s data for %d entries", indicator, len(result))
    return result


def fetch_california_population():
    """Try the newest Census estimates file first, falling back a year at a time."""
    for year in CENSUS_YEARS:
        try:
            text = get_text(CENSUS_POPEST_CSV.format(year=year))
        except requests.RequestException as e:
            logger.warning("Census %d estimates unavailable: %s", year, e)
            continue
        for row in csv.DictReader(io.StringIO(text)):
            if row.get("NAME") == "California" and row.get(f"POPESTIMATE{year}"):
                population = int(row[f"POPESTIMATE{year}"])
                logger.info("Got California population: %s (%d)", f"{population:,}", year)
                return {"value": population, "year": year}
    return None


def fetch_california_gdp():
    """
    Latest California nominal GDP from FRED series CANGSP.
    The CSV is (observation_date, CANGSP) in millions of dollars.
    """
    rows = list(csv.reader(io.StringIO(get_text(FRED_CA_GDP_CSV))))
    for date, value, *_ in reversed([r for r in rows[1:] if len(r) >= 2]):
        try:
            millions = float(value)
        except ValueError:
            # FRED marks missing observations with "."
            continue
        return {"value": round(millions / 1000), "year": int(date.split("-")[0])}
    return None


def build_country_record(info, population, gdp, gdp_per_capita, area):
    """Dataset record for one economy, or None when any metric is missing."""
    if not (population and gdp and gdp_per_capita and area):
        return None
    iso2 = info["code"]

    def metric(value, observation, indicator):
        return {
            "value": value,
            "year": observation["year"],
            "source": "World Bank",
            "url": world_bank_url(INDICATORS[indicator], iso2),
        }

    return {
        "name": info["name"],
        "code": iso2,
        "population": metric(round(population["value"] / 1_000_000, 1), population, "population"),
        "gdp": metric(round(gdp["value"] / 1_000_000_000), gdp, "gdp"),
        "gdpPerCapita": metric(round(gdp_per_capita["value"]), gdp_per_capita, "gdp_per_capita"),
        "area": metric(round(area["value"]), area, "area"),
    }


def build_california_record(population, gdp):
    """population is a head count, gdp is in billions of dollars."""
    return {
        "name": "California",
        "code": "US-CA",
        "population": {
            "value": round(population["value"] / 1_000_000, 1),
            "year": population["year"],
            "source": "US Census Bureau",
            "url": "https://www.census.gov/quickfacts/CA",
        },
        "gdp": {
            "value": gdp["value"],
            "year": gdp["year"],
            "source": "FRED (Federal Reserve Economic Data)",
            "url": "https://fred.stlouisfed.org/series/CANGSP",
        },
        "gdpPerCapita": {
            "value": round(gdp["value"] * 1_000_000_000 / population["value"]),
            "year": gdp["year"],
            "source": "FRED / Census Bureau (calculated)",
            "url": "https://fred.stlouisfed.org/series/CANGSP",
        },
        # Land area is fixed; no year to report
        "area": {
            "value": CALIFORNIA_LAND_AREA_KM2,
            "source": "US Census Bureau",
            "url": "https://www.census.gov/geographies/reference-files/2010/geo/state-area.html",
        },
    }


def build_country_records(countries, indicators):
    """
    Join the country list with the per-indicator maps (keyed by ISO3).
    Returns (records sorted by name, names skipped for missing data).
    """
    records, skipped = [], []
    for info in countries.values():
        iso3 = info.get("iso3")
        observations = {key: indicators[key].get(iso3) for key in INDICATORS}
        record = build_country_record(info, **observations) if iso3 else None
        if record is None:
            missing = [key for key, obs in observations.items() if not obs]
            logger.info("Skipping %s - missing data (%s)", info["name"], ", ".join(missing) or "iso3")
            skipped.append(info["name"])
            continue
        records.append(record)
    records.sort(key=lambda r: r["name"])
    return records, skipped


def build_dataset_payload(california, countries):
    return {
        "generated": get_now().isoformat(),
        "california": california,
        "countries": countries,
    }


def get_now():
    """Return current UTC datetime (aware)."""
    return datetime.now(timezone.utc)
