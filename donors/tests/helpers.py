from datetime import timedelta

from django.contrib.auth import get_user_model
from django.utils import timezone

from donors.models import DonorProfile

User = get_user_model()


def make_user(username, **extra):
    return User.objects.create_user(
        username=username,
        email=f'{username}@example.com',
        password='donate-blood-123',
        **extra
    )


def make_donor(username, blood_type, donated_days_ago=None, user_extra=None, **fields):
    """Donor profile, with one donation record when donated_days_ago is given"""
    user = make_user(username, **(user_extra or {}))
    fields.setdefault('full_name', username.title())
    fields.setdefault('phone', '9800000000')
    donor = DonorProfile.objects.create(user=user, blood_type=blood_type, **fields)
    if donated_days_ago is not None:
        donor.record_donation(
            date_donated=timezone.now() - timedelta(days=donated_days_ago),
            location='Kathmandu',
        )
    return donor
