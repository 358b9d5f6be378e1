# bloodrequests/admin.py
from django.contrib import admin
from django.utils.html import format_html, format_html_join

from algorithms.matching import rank_donors
from donors.utils import get_candidate_donors
from .models import BloodRequest

TOP_MATCHES_SHOWN = 10


@admin.register(BloodRequest)
class BloodRequestAdmin(admin.ModelAdmin):
    list_display = [
        'id',
        'location',
        'blood_type',
        'units_needed',
        'urgency_level',
        'status',
        'requested_by',
        'created_at',
    ]
    list_filter = ['status', 'urgency_level', 'blood_type', 'created_at']
    search_fields = ['location', 'city', 'hospital', 'requested_by__username']
    readonly_fields = ['created_at', 'updated_at', 'matched_donors_display']

    fieldsets = (
        ('Request Information', {
            'fields': ('requested_by', 'blood_type', 'units_needed', 'urgency_level',
                       'location', 'city', 'hospital', 'contact', 'description', 'status', 'fulfilled_by')
        }),
        ('Location', {
            'fields': ('latitude', 'longitude')
        }),
        ('Donor Matching', {
            'fields': ('matched_donors_display',),
            'description': 'Best matching donors, highest score first'
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    actions = ['mark_fulfilled', 'mark_cancelled']

    @admin.display(description='Top Matches')
    def matched_donors_display(self, obj):
        if obj.pk is None:
            return '-'

        matches = rank_donors(
            get_candidate_donors(obj.blood_type),
            obj,
            requester_location=obj.requester_location,
            limit=TOP_MATCHES_SHOWN,
        )
        if not matches:
            return 'No compatible donors found'

        return format_html(
            '<ol>{}</ol>',
            format_html_join(
                '',
                '<li>{} ({}) - score {}, {}</li>',
                (
                    (
                        m.donor.full_name,
                        m.donor.blood_type,
                        round(m.match_score, 1),
                        f'{m.distance_km:.2f} km' if m.distance_km is not None else 'distance unknown',
                    )
                    for m in matches
                ),
            ),
        )

    @admin.action(description='Mark selected requests as fulfilled')
    def mark_fulfilled(self, request, queryset):
        updated = queryset.filter(status='pending').update(status='fulfilled', fulfilled_by=request.user)
        self.message_user(request, f'{updated} request(s) marked as fulfilled.')

    @admin.action(description='Mark selected requests as cancelled')
    def mark_cancelled(self, request, queryset):
        updated = queryset.filter(status='pending').update(status='cancelled')
        self.message_user(request, f'{updated} request(s) cancelled.')
