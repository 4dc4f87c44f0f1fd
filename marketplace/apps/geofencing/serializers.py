from rest_framework import serializers

from .models import ServiceArea, ServiceAreaStatus


class ServiceAreaSerializer(serializers.ModelSerializer):
    class Meta:
        model = ServiceArea
        fields = [
            "id",
            "name",
            "city",
            "state",
            "boundary",
            "pincodes",
            "status",
            "center_latitude",
            "center_longitude",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ServiceAreaWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    city = serializers.CharField(max_length=100)
    state = serializers.CharField(max_length=100)
    boundary = serializers.JSONField()
    pincodes = serializers.ListField(child=serializers.CharField(), required=False, default=list)
    status = serializers.ChoiceField(choices=ServiceAreaStatus.choices, required=False)


class ServiceabilityQuerySerializer(serializers.Serializer):
    lat = serializers.FloatField(min_value=-90, max_value=90)
    lng = serializers.FloatField(min_value=-180, max_value=180)
