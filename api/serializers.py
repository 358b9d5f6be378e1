# api/serializers.py - DONOR MATCHING RESPONSES

from rest_framework import serializers

from donors.serializers import DonorSerializer, EligibilitySerializer


class MatchedDonorSerializer(serializers.BaseSerializer):
    """
    Serializer for algorithms.matching.MatchResult

    Renders the donor fields plus eligibility, matchScore and distance (km).
    """

    def to_representation(self, instance):
        data = DonorSerializer(instance.donor, context=self.context).data
        data['eligibility'] = EligibilitySerializer(instance.eligibility).data
        data['matchScore'] = round(instance.match_score, 2)
        data['distance'] = round(instance.distance_km, 2) if instance.distance_km is not None else None
        return data


class MatchQuerySerializer(serializers.Serializer):
    """Query parameters of the matched-donors endpoint"""
    latitude = serializers.FloatField(required=False, min_value=-90, max_value=90)
    longitude = serializers.FloatField(required=False, min_value=-180, max_value=180)
    limit = serializers.IntegerField(required=False, min_value=1)

    def validate(self, attrs):
        if ('latitude' in attrs) != ('longitude' in attrs):
            raise serializers.ValidationError('latitude and longitude must be given together')
        return attrs
