from rest_framework import serializers
from .models import CountryRecord, Dataset, Metric

METRIC_FIELDS = ("population", "gdp", "gdp_per_capita", "area")


class MetricSerializer(serializers.Serializer):
    value = serializers.FloatField()
    year = serializers.IntegerField(required=False, allow_null=True)
    source = serializers.CharField()
    url = serializers.CharField(required=False, allow_null=True, allow_blank=True)

    def create(self, validated_data):
        return Metric(
            value=validated_data["value"],
            source=validated_data["source"],
            year=validated_data.get("year"),
            url=validated_data.get("url") or None,
        )


class CountryRecordSerializer(serializers.Serializer):
    name = serializers.CharField()
    code = serializers.CharField(max_length=10)
    population = MetricSerializer()
    gdp = MetricSerializer()
    gdpPerCapita = MetricSerializer(source="gdp_per_capita")
    area = MetricSerializer()

    def validate(self, data):
        """
        Validation rules for a dataset record:
        - name and code are required and non-blank
        - all four metrics are required (enforced by the nested fields)
        """
        errors = {}
        if not data.get("name", "").strip():
            errors["name"] = "is required"
        if not data.get("code", "").strip():
            errors["code"] = "is required"
        if errors:
            raise serializers.ValidationError({
                "error": "Validation failed",
                "details": errors
            })
        return data

    def create(self, validated_data):
        metric_serializer = MetricSerializer()
        metrics = {field: metric_serializer.create(validated_data[field]) for field in METRIC_FIELDS}
        return CountryRecord(
            name=validated_data["name"].strip(),
            code=validated_data["code"].strip(),
            **metrics,
        )


class ReferenceRecordSerializer(CountryRecordSerializer):
    """The reference region is the denominator of every ratio, so its metrics must be non-zero."""

    def validate(self, data):
        data = super().validate(data)
        errors = {
            ("gdpPerCapita" if field == "gdp_per_capita" else field): "must be greater than zero"
            for field in METRIC_FIELDS
            if data[field]["value"] <= 0
        }
        if errors:
            raise serializers.ValidationError({
                "error": "Validation failed",
                "details": errors
            })
        return data


class DatasetSerializer(serializers.Serializer):
    """Strict shape of the whole dataset file, used when writing a freshly fetched one."""
    generated = serializers.CharField()
    california = ReferenceRecordSerializer()
    countries = CountryRecordSerializer(many=True)


class StatusSerializer(serializers.Serializer):
    total_countries = serializers.IntegerField()
    reference = serializers.CharField()
    generated = serializers.CharField()

    @classmethod
    def from_dataset(cls, dataset: Dataset):
        return cls({
            "total_countries": len(dataset),
            "reference": dataset.reference.name,
            "generated": dataset.generated,
        })
