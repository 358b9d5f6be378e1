from django.test import TestCase

from donors.models import DonorProfile
from donors.tests.helpers import make_donor
from donors.utils import get_candidate_donors, search_donors


class CandidateDonorTests(TestCase):
    def setUp(self):
        self.with_history = make_donor('asha', 'O-', donated_days_ago=100, city='Kathmandu')
        self.no_history = make_donor('bikash', 'O-')
        self.admin_type = make_donor('chandra', 'O-', donated_days_ago=100, user_extra={'user_type': 'admin'})
        self.staff = make_donor('deepak', 'O-', donated_days_ago=100, user_extra={'is_staff': True})
        self.b_positive = make_donor('elina', 'B+', donated_days_ago=100, city='Pokhara')

    def test_only_donors_with_history_and_no_admins(self):
        candidates = set(get_candidate_donors())

        self.assertEqual(candidates, {self.with_history, self.b_positive})

    def test_multiple_donations_listed_once(self):
        self.with_history.record_donation(location='Lalitpur')

        self.assertEqual(list(get_candidate_donors()).count(self.with_history), 1)

    def test_narrowed_to_compatible_groups(self):
        self.assertEqual(list(get_candidate_donors('A-')), [self.with_history])
        self.assertEqual(set(get_candidate_donors('AB+')), {self.with_history, self.b_positive})

    def test_unknown_recipient_group_has_no_candidates(self):
        self.assertEqual(list(get_candidate_donors('Q+')), [])

    def test_search_filters(self):
        queryset = DonorProfile.objects.all()

        self.assertEqual(list(search_donors(queryset, blood_type='B+')), [self.b_positive])
        self.assertEqual(list(search_donors(queryset, city='pokhara')), [self.b_positive])
        self.assertEqual(list(search_donors(queryset, search='asha')), [self.with_history])
        self.assertEqual(search_donors(queryset, blood_type='all').count(), 5)
