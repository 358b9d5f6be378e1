# api/urls.py - COMPLETE URL CONFIGURATION

from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

# Create router and register viewsets
router = DefaultRouter()
router.register(r'donors', views.DonorViewSet, basename='donor')
router.register(r'blood-requests', views.BloodRequestViewSet, basename='blood-request')

app_name = 'api'

urlpatterns = [
    # Router URLs
    path('', include(router.urls)),

    # Custom endpoints
    path('compatibility/<str:blood_group>/', views.blood_compatibility, name='blood-compatibility'),
]

# Available endpoints:
# GET    /api/donors/                                  - Donors with donation history (no admins)
# GET    /api/donors/{id}/                             - Get specific donor
# GET    /api/donors/{id}/eligibility/                 - Donation eligibility window
# GET    /api/donors/me/donations/                     - Current donor's donations
# POST   /api/donors/me/donations/                     - Record a donation
# PUT    /api/donors/me/donations/{id}/                - Correct a donation
# DELETE /api/donors/me/donations/{id}/                - Delete a donation
#
# GET    /api/blood-requests/                          - Newest 50 blood requests
# POST   /api/blood-requests/                          - Create a blood request
# GET    /api/blood-requests/mine/                     - Current user's requests
# GET    /api/blood-requests/{id}/                     - Get specific request
# DELETE /api/blood-requests/{id}/                     - Delete own request
# POST   /api/blood-requests/{id}/fulfill/             - Mark request as fulfilled
# GET    /api/blood-requests/{id}/matched-donors/      - Ranked compatible donors
#
# GET    /api/compatibility/{blood_group}/             - Compatible donor/recipient groups
