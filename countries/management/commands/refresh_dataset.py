import json
import time
from pathlib import Path

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from requests.exceptions import RequestException

from countries import utils
from countries.serializers import DatasetSerializer


class Command(BaseCommand):
    help = (
        "Fetch country metrics from the World Bank and California figures from the "
        "Census Bureau and FRED, then write the comparison dataset JSON."
    )

    def add_arguments(self, parser):
        parser.add_argument(
            "--output",
            help="Where to write the dataset (defaults to settings.DATASET_PATH).",
        )

    def handle(self, *args, **options):
        start_time = time.time()
        output = Path(options["output"] or settings.DATASET_PATH)

        # Step 1: World Bank economies and indicators
        try:
            countries = utils.fetch_countries()
            indicators = {}
            for key, indicator in utils.INDICATORS.items():
                self.stdout.write(f"Fetching {key} ({indicator})...")
                indicators[key] = utils.fetch_indicator(indicator)
        except RequestException as e:
            raise CommandError(f"World Bank API unavailable: {e}")

        records, skipped = utils.build_country_records(countries, indicators)

        # Step 2: California from official US sources
        population = utils.fetch_california_population()
        if population is None:
            raise CommandError("Could not fetch California population from Census Bureau")
        try:
            gdp = utils.fetch_california_gdp()
        except RequestException as e:
            raise CommandError(f"FRED unavailable: {e}")
        if gdp is None:
            raise CommandError("Could not fetch California GDP from FRED")
        california = utils.build_california_record(population, gdp)

        # Step 3: validate the whole file before replacing the old one
        payload = utils.build_dataset_payload(california, records)
        serializer = DatasetSerializer(data=payload)
        if not serializer.is_valid():
            raise CommandError(f"Generated dataset failed validation: {serializer.errors}")

        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")

        duration = round(time.time() - start_time, 2)
        self.stdout.write(self.style.SUCCESS(
            f"Wrote {len(records)} countries to {output} "
            f"({len(skipped)} skipped, {duration}s)"
        ))
