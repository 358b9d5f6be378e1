from datetime import timedelta

from django.test import override_settings
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from bloodrequests.models import BloodRequest
from donors.models import DonationHistory
from donors.tests.helpers import make_donor, make_user


class MatchedDonorsTests(APITestCase):
    def setUp(self):
        self.requester = make_user('requester', user_type='requester')
        self.client.force_authenticate(self.requester)

        self.blood_request = BloodRequest.objects.create(
            requested_by=self.requester,
            blood_type='A+',
            units_needed=2,
            urgency_level='emergency',
            location='Bir Hospital, Kathmandu',
            contact='9800000001',
        )

        # A+ request: O- and A- can give, B+ cannot
        self.universal = make_donor('universal', 'O-', donated_days_ago=100, is_available=True,
                                    latitude=27.7050, longitude=85.3130)
        self.negative = make_donor('negative', 'A-', donated_days_ago=10, is_available=False)
        self.incompatible = make_donor('incompatible', 'B+', donated_days_ago=100, is_available=True)
        self.admin = make_donor('admin', 'O-', donated_days_ago=100, is_available=True,
                                user_extra={'user_type': 'admin'})
        self.no_history = make_donor('newcomer', 'O-', is_available=True)

        self.url = f'/api/blood-requests/{self.blood_request.id}/matched-donors/'

    def test_returns_ranked_compatible_donors(self):
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.json()
        self.assertEqual(data['bloodGroup'], 'A+')
        self.assertEqual(data['urgency'], 'emergency')
        self.assertEqual(data['location'], 'Bir Hospital, Kathmandu')
        self.assertEqual(data['count'], 2)
        self.assertEqual([d['id'] for d in data['donors']], [self.universal.id, self.negative.id])

        scores = [d['matchScore'] for d in data['donors']]
        self.assertEqual(scores, sorted(scores, reverse=True))
        self.assertTrue(all(score > 0 for score in scores))

    def test_donor_annotations(self):
        data = self.client.get(self.url).json()
        universal, negative = data['donors']

        # 40 + 5 universal + 20 available + 10 unknown distance + 10 eligible + 5 history
        self.assertEqual(universal['matchScore'], 90)
        self.assertIsNone(universal['distance'])
        self.assertTrue(universal['eligibility']['eligible'])
        self.assertEqual(universal['eligibility']['daysUntilEligible'], 0)

        self.assertFalse(negative['eligibility']['eligible'])
        self.assertEqual(negative['eligibility']['daysUntilEligible'], 46)
        self.assertEqual(negative['eligibility']['daysSinceLastDonation'], 10)
        self.assertIn('nextEligibleDate', negative['eligibility'])

    def test_requester_location_from_query(self):
        data = self.client.get(self.url, {'latitude': 27.7050, 'longitude': 85.3130}).json()
        universal = data['donors'][0]

        self.assertEqual(universal['distance'], 0)
        self.assertEqual(universal['matchScore'], 100)

    def test_requester_location_from_request(self):
        self.blood_request.latitude = 27.7050
        self.blood_request.longitude = 85.3130
        self.blood_request.save()

        universal = self.client.get(self.url).json()['donors'][0]

        self.assertEqual(universal['distance'], 0)

    def test_limit(self):
        data = self.client.get(self.url, {'limit': 1}).json()

        self.assertEqual(data['count'], 1)
        self.assertEqual(data['donors'][0]['id'], self.universal.id)

    @override_settings(DONOR_MATCH_LIMIT=1)
    def test_default_limit_from_settings(self):
        self.assertEqual(self.client.get(self.url).json()['count'], 1)

    def test_malformed_query_is_rejected(self):
        for params in ({'latitude': 'north', 'longitude': 85.3}, {'latitude': 27.7}, {'limit': 'many'}):
            with self.subTest(params=params):
                response = self.client.get(self.url, params)
                self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
                self.assertFalse(response.json()['success'])
                self.assertTrue(response.json()['message'])

    def test_unknown_request(self):
        response = self.client.get('/api/blood-requests/9999/matched-donors/')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_requires_authentication(self):
        self.client.force_authenticate(None)

        response = self.client.get(self.url)

        self.assertIn(response.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))


class BloodRequestApiTests(APITestCase):
    def setUp(self):
        self.user = make_user('patient_family', user_type='requester')
        self.client.force_authenticate(self.user)

    def create_request(self, **overrides):
        payload = {
            'blood_type': 'O+',
            'units_needed': 1,
            'location': 'Patan Hospital',
            'contact': '9800000002',
        }
        payload.update(overrides)
        return self.client.post('/api/blood-requests/', payload, format='json')

    def test_create_sets_requester_and_defaults(self):
        response = self.create_request()

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        blood_request = BloodRequest.objects.get(id=response.json()['id'])
        self.assertEqual(blood_request.requested_by, self.user)
        self.assertEqual(blood_request.urgency_level, 'normal')
        self.assertEqual(blood_request.status, 'pending')
        self.assertEqual(blood_request.city, 'Patan Hospital')

    def test_create_rejects_unknown_blood_type(self):
        response = self.create_request(blood_type='C+')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_list_filters(self):
        self.create_request(blood_type='A+', urgency_level='urgent')
        self.create_request(blood_type='B-')

        data = self.client.get('/api/blood-requests/', {'urgency': 'urgent'}).json()

        self.assertEqual(len(data), 1)
        self.assertEqual(data[0]['blood_type'], 'A+')

    def test_fulfill_once(self):
        request_id = self.create_request().json()['id']
        url = f'/api/blood-requests/{request_id}/fulfill/'

        first = self.client.post(url)
        second = self.client.post(url)

        self.assertEqual(first.status_code, status.HTTP_200_OK)
        self.assertEqual(first.json()['request']['status'], 'fulfilled')
        self.assertEqual(first.json()['request']['fulfilled_by'], self.user.id)
        self.assertEqual(second.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(second.json()['message'], 'Request already fulfilled')

    def test_only_owner_deletes(self):
        request_id = self.create_request().json()['id']
        self.client.force_authenticate(make_user('stranger'))

        response = self.client.delete(f'/api/blood-requests/{request_id}/')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(BloodRequest.objects.filter(id=request_id).exists())

    def test_mine(self):
        self.create_request()
        other = make_user('other')
        BloodRequest.objects.create(requested_by=other, blood_type='A-', location='Dharan', contact='1')

        data = self.client.get('/api/blood-requests/mine/').json()

        self.assertEqual(len(data), 1)
        self.assertEqual(data[0]['requested_by'], self.user.id)


class DonorApiTests(APITestCase):
    def setUp(self):
        self.donor = make_donor('sunita', 'B+', donated_days_ago=30, city='Lalitpur')
        self.newcomer = make_donor('prakash', 'O+')
        self.client.force_authenticate(self.donor.user)

    def test_list_only_donors_with_history(self):
        data = self.client.get('/api/donors/').json()

        self.assertEqual([d['id'] for d in data], [self.donor.id])

    def test_eligibility(self):
        data = self.client.get(f'/api/donors/{self.donor.id}/eligibility/').json()

        self.assertEqual(data['bloodGroup'], 'B+')
        self.assertFalse(data['eligibility']['eligible'])
        self.assertEqual(data['eligibility']['daysUntilEligible'], 26)

    def test_eligibility_of_donor_without_history(self):
        data = self.client.get(f'/api/donors/{self.newcomer.id}/eligibility/').json()

        self.assertTrue(data['eligibility']['eligible'])

    def test_record_donation(self):
        donated_at = (timezone.now() - timedelta(days=1)).isoformat()

        response = self.client.post('/api/donors/me/donations/', {
            'date_donated': donated_at,
            'hospital': 'Teaching Hospital',
            'units_donated': 1,
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.json()['donor']['donation_count'], 2)
        self.assertEqual(DonationHistory.objects.filter(donor=self.donor).count(), 2)

    def test_list_my_donations(self):
        data = self.client.get('/api/donors/me/donations/').json()

        self.assertEqual(data['totalDonations'], 1)
        self.assertEqual(len(data['donations']), 1)

    def test_delete_donation_restores_eligibility(self):
        donation = self.donor.donation_history.get()

        response = self.client.delete(f'/api/donors/me/donations/{donation.id}/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['donor']['donation_count'], 0)
        self.assertIsNone(response.json()['donor']['last_donation_date'])
        self.assertFalse(DonationHistory.objects.exists())

    def test_correct_donation_date(self):
        donation = self.donor.donation_history.get()
        corrected = (timezone.now() - timedelta(days=90)).isoformat()

        response = self.client.patch(
            f'/api/donors/me/donations/{donation.id}/',
            {'date_donated': corrected, 'units_donated': 2},
            format='json',
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['donor']['donation_count'], 2)
        self.assertTrue(response.json()['donor']['can_donate'])

    def test_cannot_delete_another_donors_donation(self):
        other = make_donor('anil', 'A+', donated_days_ago=5)

        response = self.client.delete(f'/api/donors/me/donations/{other.donation_history.get().id}/')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertTrue(other.donation_history.exists())

    def test_record_donation_requires_profile(self):
        self.client.force_authenticate(make_user('no_profile', user_type='requester'))

        response = self.client.get('/api/donors/me/donations/')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class CompatibilityApiTests(APITestCase):
    def setUp(self):
        self.client.force_authenticate(make_user('viewer'))

    def test_compatibility(self):
        data = self.client.get('/api/compatibility/A%2B/').json()

        self.assertEqual(data['bloodGroup'], 'A+')
        self.assertEqual(data['canReceiveFrom'], ['O+', 'O-', 'A+', 'A-'])
        self.assertEqual(data['canDonateTo'], ['A+', 'AB+'])

    def test_unknown_group(self):
        response = self.client.get('/api/compatibility/Q-/')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
