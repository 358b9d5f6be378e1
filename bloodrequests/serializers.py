# bloodrequests/serializers.py
from rest_framework import serializers
from .models import BloodRequest


class BloodRequestSerializer(serializers.ModelSerializer):
    requested_by_name = serializers.CharField(source='requested_by.username', read_only=True)
    fulfilled_by_name = serializers.CharField(source='fulfilled_by.username', read_only=True, default=None)

    # Alias for 'urgency_level' (for frontend)
    urgency = serializers.CharField(source='urgency_level', read_only=True)

    class Meta:
        model = BloodRequest
        fields = [
            'id',
            'requested_by',
            'requested_by_name',
            'blood_type',
            'units_needed',
            'urgency_level',
            'urgency',
            'location',
            'city',
            'hospital',
            'contact',
            'description',
            'latitude',
            'longitude',
            'status',
            'fulfilled_by',
            'fulfilled_by_name',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['requested_by', 'status', 'fulfilled_by', 'created_at', 'updated_at']
