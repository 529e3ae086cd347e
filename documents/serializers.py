from rest_framework import serializers

from .models import Document, Fund


class FundSerializer(serializers.ModelSerializer):
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Fund
        fields = ["id", "name", "code", "createdAt"]
        read_only_fields = fields


class FundRefSerializer(serializers.ModelSerializer):
    class Meta:
        model = Fund
        fields = ["id", "name", "code"]
        read_only_fields = fields


class DocumentSerializer(serializers.ModelSerializer):
    fund = FundRefSerializer(read_only=True)
    fundId = serializers.UUIDField(source="fund_id", read_only=True)
    periodStart = serializers.DateTimeField(source="period_start", read_only=True)
    periodEnd = serializers.DateTimeField(source="period_end", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Document
        fields = [
            "id",
            "title",
            "fund",
            "fundId",
            "type",
            "status",
            "periodStart",
            "periodEnd",
            "description",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields
