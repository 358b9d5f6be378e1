# donors/serializers.py
from django.db import transaction
from rest_framework import serializers
from .models import DonorProfile, DonationHistory


class DonorSerializer(serializers.ModelSerializer):
    email = serializers.SerializerMethodField()

    class Meta:
        model = DonorProfile
        fields = [
            'id', 'full_name', 'email', 'phone', 'blood_type',
            'address', 'city', 'latitude', 'longitude', 'donation_count',
            'last_donation_date', 'is_available', 'created_at', 'updated_at', 'can_donate'
        ]

    def get_email(self, obj):
        return obj.user.email if obj.user else "N/A"


class EligibilitySerializer(serializers.Serializer):
    """Renders algorithms.eligibility.Eligibility"""
    eligible = serializers.BooleanField()
    daysUntilEligible = serializers.IntegerField(source='days_until_eligible')
    nextEligibleDate = serializers.DateTimeField(source='next_eligible_date')
    daysSinceLastDonation = serializers.IntegerField(source='days_since_last_donation')


class DonationHistorySerializer(serializers.ModelSerializer):
    donor_name = serializers.CharField(source='donor.full_name', read_only=True)
    blood_type = serializers.CharField(source='donor.blood_type', read_only=True)
    date_donated = serializers.DateTimeField(required=False)
    location = serializers.CharField(required=False, allow_blank=True)

    class Meta:
        model = DonationHistory
        fields = [
            'id', 'donor', 'donor_name', 'blood_type', 'date_donated',
            'location', 'hospital', 'units_donated', 'notes', 'created_at',
        ]
        read_only_fields = ['donor', 'created_at']

    def create(self, validated_data):
        donor = validated_data.pop('donor')
        return donor.record_donation(
            date_donated=validated_data.get('date_donated'),
            location=validated_data.get('location', ''),
            hospital=validated_data.get('hospital', ''),
            units=validated_data.get('units_donated', 1),
            notes=validated_data.get('notes', ''),
        )

    def update(self, instance, validated_data):
        if 'location' in validated_data:
            validated_data['location'] = validated_data['location'] or 'Not specified'
        with transaction.atomic():
            donation = super().update(instance, validated_data)
            donation.donor.refresh_donation_stats()
        return donation
