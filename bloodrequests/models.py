# bloodrequests/models.py
from django.db import models
from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator

from algorithms.blood_compatibility import BLOOD_TYPES
from algorithms.matching import Location


class BloodRequest(models.Model):
    URGENCY_CHOICES = [
        ('normal', 'Normal'),
        ('urgent', 'Urgent'),
        ('emergency', 'Emergency'),
    ]

    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('fulfilled', 'Fulfilled'),
        ('cancelled', 'Cancelled'),
    ]

    BLOOD_TYPE_CHOICES = [(blood_type, blood_type) for blood_type in BLOOD_TYPES]

    requested_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='blood_requests'
    )
    blood_type = models.CharField(max_length=3, choices=BLOOD_TYPE_CHOICES)
    units_needed = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    urgency_level = models.CharField(max_length=10, choices=URGENCY_CHOICES, default='normal')

    location = models.CharField(max_length=255)
    city = models.CharField(max_length=100, blank=True)
    hospital = models.CharField(max_length=200, blank=True)
    contact = models.CharField(max_length=50)
    description = models.TextField(blank=True)

    # Requester geolocation (optional), used for distance scoring
    latitude = models.FloatField(
        null=True, blank=True,
        validators=[MinValueValidator(-90), MaxValueValidator(90)]
    )
    longitude = models.FloatField(
        null=True, blank=True,
        validators=[MinValueValidator(-180), MaxValueValidator(180)]
    )

    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='pending')
    fulfilled_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='fulfilled_requests'
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.location} - {self.blood_type} ({self.urgency_level})"

    @property
    def requester_location(self):
        """Coordinates of the request, or None when not geocoded"""
        if self.latitude is None or self.longitude is None:
            return None
        return Location(self.latitude, self.longitude)

    def save(self, *args, **kwargs):
        if not self.city:
            self.city = self.location
        super().save(*args, **kwargs)

    class Meta:
        ordering = ['-created_at']
        verbose_name = 'Blood Request'
        verbose_name_plural = 'Blood Requests'
