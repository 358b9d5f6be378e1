from django.contrib import admin
from .models import DonorProfile, DonationHistory


@admin.register(DonorProfile)
class DonorProfileAdmin(admin.ModelAdmin):
    list_display   = ['full_name', 'blood_type', 'city', 'donation_count', 'is_available', 'can_donate_display']
    list_filter    = ['blood_type', 'is_available']
    search_fields  = ['full_name', 'user__username', 'phone', 'city']
    ordering       = ['-donation_count']
    readonly_fields = ['donation_count', 'last_donation_date', 'created_at', 'updated_at']

    fieldsets = (
        ('Personal Info', {
            'fields': ('user', 'full_name', 'phone', 'blood_type', 'address', 'city')
        }),
        ('Location', {
            'fields': ('latitude', 'longitude')
        }),
        ('Donation Stats', {
            'fields': ('donation_count', 'last_donation_date', 'is_available')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    @admin.display(boolean=True, description='Can Donate Now')
    def can_donate_display(self, obj):
        return obj.can_donate


@admin.register(DonationHistory)
class DonationHistoryAdmin(admin.ModelAdmin):
    list_display  = ['donor', 'hospital', 'location', 'date_donated', 'units_donated']
    list_filter   = ['date_donated']
    search_fields = ['donor__full_name', 'hospital', 'location']
    ordering      = ['-date_donated']
    readonly_fields = ['created_at']
