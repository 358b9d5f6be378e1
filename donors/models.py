from django.db import models, transaction
from django.db.models import Max, Sum
from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.utils import timezone

from algorithms.blood_compatibility import BLOOD_TYPES
from algorithms.eligibility import check_eligibility

BLOOD_TYPE_CHOICES = [(blood_type, blood_type) for blood_type in BLOOD_TYPES]


# ---------------------------
# Donor Profile
# ---------------------------
class DonorProfile(models.Model):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='donor_profile'
    )

    full_name = models.CharField(max_length=200)
    phone = models.CharField(max_length=20, db_index=True)
    blood_type = models.CharField(max_length=3, choices=BLOOD_TYPE_CHOICES)
    address = models.TextField(blank=True)
    city = models.CharField(max_length=100, blank=True)

    # Geolocation (optional)
    latitude = models.FloatField(
        null=True, blank=True,
        validators=[MinValueValidator(-90), MaxValueValidator(90)]
    )
    longitude = models.FloatField(
        null=True, blank=True,
        validators=[MinValueValidator(-180), MaxValueValidator(180)]
    )

    # Donation tracking
    donation_count = models.PositiveIntegerField(default=0)
    last_donation_date = models.DateTimeField(null=True, blank=True)
    is_available = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def eligibility(self, now=None):
        return check_eligibility(self.last_donation_date, now=now or timezone.now())

    @property
    def can_donate(self) -> bool:
        """Donors can donate every 56 days"""
        return self.eligibility().eligible

    def record_donation(self, date_donated=None, location='', hospital='', units=1, notes=''):
        """
        Store a donation and update the donor's count and last donation date.

        The profile row is re-read under a lock, so concurrent writers holding
        stale instances do not lose updates.

        Returns:
            DonationHistory: the new record
        """
        date_donated = date_donated or timezone.now()

        with transaction.atomic():
            donor = DonorProfile.objects.select_for_update().get(pk=self.pk)
            donation = DonationHistory.objects.create(
                donor=donor,
                date_donated=date_donated,
                location=location or 'Not specified',
                hospital=hospital,
                units_donated=units,
                notes=notes,
            )
            donor.donation_count += units
            if donor.last_donation_date is None or date_donated > donor.last_donation_date:
                donor.last_donation_date = date_donated
            donor.save(update_fields=['donation_count', 'last_donation_date', 'updated_at'])

        self.donation_count = donor.donation_count
        self.last_donation_date = donor.last_donation_date
        return donation

    def refresh_donation_stats(self):
        """Recompute donation count and last donation date from the history"""
        with transaction.atomic():
            DonorProfile.objects.select_for_update().get(pk=self.pk)
            stats = self.donation_history.aggregate(
                total=Sum('units_donated'),
                latest=Max('date_donated'),
            )
            self.donation_count = stats['total'] or 0
            self.last_donation_date = stats['latest']
            self.save(update_fields=['donation_count', 'last_donation_date', 'updated_at'])

    def remove_donation(self, donation):
        with transaction.atomic():
            donation.delete()
            self.refresh_donation_stats()

    def __str__(self):
        return f"{self.full_name} ({self.blood_type})"

    class Meta:
        verbose_name = "Donor Profile"
        verbose_name_plural = "Donor Profiles"
        ordering = ['-created_at']


class DonationHistory(models.Model):
    donor = models.ForeignKey(
        DonorProfile,
        on_delete=models.CASCADE,
        related_name='donation_history'
    )

    date_donated = models.DateTimeField()
    location = models.CharField(max_length=255)
    hospital = models.CharField(max_length=200, blank=True)
    units_donated = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.donor.full_name} | {self.date_donated:%Y-%m-%d}"

    class Meta:
        ordering = ['-date_donated']
        verbose_name = "Donation History"
        verbose_name_plural = "Donation Histories"
        indexes = [
            models.Index(fields=['donor', '-date_donated'], name='donation_donor_date_idx'),
        ]
