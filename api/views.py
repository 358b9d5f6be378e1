# api/views.py - DONOR MATCHING API
import logging

from django.conf import settings
from django.http import Http404
from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action, api_view
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response

from algorithms.blood_compatibility import (
    BLOOD_TYPES,
    compatible_donor_groups,
    compatible_recipient_groups,
)
from algorithms.exceptions import InvalidInput
from algorithms.matching import Location, rank_donors
from bloodrequests.models import BloodRequest
from bloodrequests.serializers import BloodRequestSerializer
from donors.models import DonorProfile
from donors.serializers import DonationHistorySerializer, DonorSerializer, EligibilitySerializer
from donors.utils import admin_account_filter, get_candidate_donors, search_donors
from .serializers import MatchedDonorSerializer, MatchQuerySerializer

# Newest requests returned by the list endpoint
REQUEST_LIST_LIMIT = 50

logger = logging.getLogger(__name__)


def format_errors(errors):
    """Flatten serializer errors into one message"""
    parts = []
    for field, messages in errors.items():
        prefix = '' if field == 'non_field_errors' else f"{field}: "
        parts.append(prefix + ' '.join(str(m) for m in messages))
    return '; '.join(parts)


class DonorViewSet(viewsets.ReadOnlyModelViewSet):
    """
    API endpoint for viewing donors

    The list only shows donors with donation history and no admin accounts.
    """
    serializer_class = DonorSerializer

    def get_queryset(self):
        if self.action == 'list':
            return search_donors(
                get_candidate_donors(),
                blood_type=self.request.query_params.get('blood_type'),
                city=self.request.query_params.get('city'),
                search=self.request.query_params.get('search'),
            )
        return DonorProfile.objects.exclude(admin_account_filter()).select_related('user')

    @action(detail=True, methods=['get'])
    def eligibility(self, request, pk=None):
        """Can this donor give blood now, and if not, when"""
        donor = self.get_object()
        return Response({
            'donor': donor.id,
            'bloodGroup': donor.blood_type,
            'eligibility': EligibilitySerializer(donor.eligibility(now=timezone.now())).data,
        })

    @action(detail=False, methods=['get', 'post'], url_path='me/donations')
    def my_donations(self, request):
        """List or record donations of the current user's donor profile"""
        donor = get_object_or_404(DonorProfile, user=request.user)

        if request.method == 'POST':
            serializer = DonationHistorySerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            donation = serializer.save(donor=donor)
            donor.refresh_from_db()
            logger.info(f"Donation recorded for donor {donor.id} ({donation.units_donated} unit(s))")
            return Response({
                'success': True,
                'message': 'Donation recorded successfully',
                'donation': DonationHistorySerializer(donation).data,
                'donor': DonorSerializer(donor).data,
            }, status=status.HTTP_201_CREATED)

        donations = donor.donation_history.all()
        return Response({
            'success': True,
            'donations': DonationHistorySerializer(donations, many=True).data,
            'totalDonations': donor.donation_count,
            'lastDonationDate': donor.last_donation_date,
        })

    @action(detail=False, methods=['put', 'patch', 'delete'], url_path=r'me/donations/(?P<donation_id>[0-9]+)')
    def my_donation(self, request, donation_id=None):
        """Correct or delete one of the current user's donations"""
        donor = get_object_or_404(DonorProfile, user=request.user)
        donation = get_object_or_404(donor.donation_history.all(), pk=donation_id)

        if request.method == 'DELETE':
            donor.remove_donation(donation)
            logger.info(f"Donation {donation_id} deleted for donor {donor.id}")
            return Response({
                'success': True,
                'message': 'Donation deleted successfully',
                'donor': DonorSerializer(donor).data,
            })

        serializer = DonationHistorySerializer(donation, data=request.data, partial=request.method == 'PATCH')
        serializer.is_valid(raise_exception=True)
        donation = serializer.save()
        donor.refresh_from_db()
        logger.info(f"Donation {donation.id} updated for donor {donor.id}")
        return Response({
            'success': True,
            'message': 'Donation updated successfully',
            'donation': DonationHistorySerializer(donation).data,
            'donor': DonorSerializer(donor).data,
        })


class BloodRequestViewSet(mixins.CreateModelMixin,
                          mixins.ListModelMixin,
                          mixins.RetrieveModelMixin,
                          mixins.DestroyModelMixin,
                          viewsets.GenericViewSet):
    """API endpoint for managing blood requests"""
    queryset = BloodRequest.objects.all().select_related('requested_by', 'fulfilled_by').order_by('-created_at')
    serializer_class = BloodRequestSerializer

    def get_queryset(self):
        queryset = super().get_queryset()
        if self.action != 'list':
            return queryset

        params = self.request.query_params
        blood_type = params.get('blood_type')
        if blood_type and blood_type != 'all':
            queryset = queryset.filter(blood_type=blood_type)
        urgency = params.get('urgency')
        if urgency and urgency != 'all':
            queryset = queryset.filter(urgency_level=urgency)
        status_filter = params.get('status')
        if status_filter and status_filter != 'all':
            queryset = queryset.filter(status=status_filter)
        return queryset[:REQUEST_LIST_LIMIT]

    def perform_create(self, serializer):
        blood_request = serializer.save(requested_by=self.request.user)
        logger.info(f"Blood request {blood_request.id} created for {blood_request.blood_type} by {self.request.user.username}")

    def perform_destroy(self, instance):
        if instance.requested_by_id != self.request.user.id and not self.request.user.is_staff:
            raise PermissionDenied('Not authorized to delete this request')
        instance.delete()

    @action(detail=False, methods=['get'])
    def mine(self, request):
        """Requests created by the current user"""
        queryset = self.get_queryset().filter(requested_by=request.user)
        return Response(self.get_serializer(queryset, many=True).data)

    @action(detail=True, methods=['post'])
    def fulfill(self, request, pk=None):
        blood_request = self.get_object()

        if blood_request.status == 'fulfilled':
            return Response({
                'success': False,
                'message': 'Request already fulfilled',
            }, status=status.HTTP_400_BAD_REQUEST)

        blood_request.status = 'fulfilled'
        blood_request.fulfilled_by = request.user
        blood_request.save(update_fields=['status', 'fulfilled_by', 'updated_at'])

        return Response({
            'success': True,
            'message': 'Request marked as fulfilled',
            'request': self.get_serializer(blood_request).data,
        })

    @action(detail=True, methods=['get'], url_path='matched-donors')
    def matched_donors(self, request, pk=None):
        """
        Rank compatible donors for this request

        Query params:
            latitude, longitude: requester location (defaults to the request's)
            limit: maximum number of donors (defaults to DONOR_MATCH_LIMIT)
        """
        blood_request = self.get_object()

        query = MatchQuerySerializer(data=request.query_params)
        if not query.is_valid():
            raise InvalidInput(format_errors(query.errors))
        params = query.validated_data

        if 'latitude' in params:
            requester_location = Location(params['latitude'], params['longitude'])
        else:
            requester_location = blood_request.requester_location

        matches = rank_donors(
            get_candidate_donors(blood_request.blood_type),
            blood_request,
            requester_location=requester_location,
            limit=params.get('limit', settings.DONOR_MATCH_LIMIT),
            now=timezone.now(),
        )

        logger.info(f"{len(matches)} donors matched for blood request {blood_request.id}")

        return Response({
            'success': True,
            'bloodGroup': blood_request.blood_type,
            'urgency': blood_request.urgency_level,
            'location': blood_request.location,
            'count': len(matches),
            'donors': MatchedDonorSerializer(matches, many=True).data,
        })


@api_view(['GET'])
def blood_compatibility(request, blood_group):
    """Which groups a blood group can receive from and donate to"""
    if blood_group not in BLOOD_TYPES:
        raise Http404(f"Unknown blood group {blood_group}")

    return Response({
        'bloodGroup': blood_group,
        'canReceiveFrom': [g for g in BLOOD_TYPES if g in compatible_donor_groups(blood_group)],
        'canDonateTo': [g for g in BLOOD_TYPES if g in compatible_recipient_groups(blood_group)],
    })
