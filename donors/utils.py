import logging

from django.db.models import Q

from algorithms.blood_compatibility import compatible_donor_groups
from donors.models import DonorProfile

# Logger setup
logger = logging.getLogger(__name__)


def admin_account_filter():
    """Q object matching donor profiles that belong to admin accounts"""
    return (
        Q(user__user_type='admin') |
        Q(user__is_staff=True) |
        Q(user__is_superuser=True)
    )


def get_candidate_donors(blood_type=None):
    """
    Donor pool for matching.

    Criteria:
    - Donor has at least one donation record
    - Donor account is not an admin account
    - When blood_type (the recipient's) is given, only donor groups that can
      give to it

    Args:
        blood_type: Recipient blood type, or None for every group

    Returns:
        QuerySet of DonorProfile
    """
    queryset = (
        DonorProfile.objects
        .filter(donation_history__isnull=False)
        .exclude(admin_account_filter())
        .select_related('user')
        .distinct()
    )

    if blood_type:
        queryset = queryset.filter(blood_type__in=compatible_donor_groups(blood_type))

    return queryset


def search_donors(queryset, blood_type=None, city=None, search=None):
    """Apply the donor list filters (blood type, location, free text)"""
    if blood_type and blood_type != 'all':
        queryset = queryset.filter(blood_type=blood_type)

    if city:
        queryset = queryset.filter(Q(city__icontains=city) | Q(address__icontains=city))

    if search:
        queryset = queryset.filter(
            Q(full_name__icontains=search) |
            Q(city__icontains=search) |
            Q(address__icontains=search)
        )

    return queryset
