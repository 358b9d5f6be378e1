# donors/management/commands/clear_donations.py
"""
Delete every donation record and reset donor counters
Usage: python manage.py clear_donations --yes
"""

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from donors.models import DonationHistory, DonorProfile


class Command(BaseCommand):
    help = 'Delete all donation records and reset donation counts and last donation dates'

    def add_arguments(self, parser):
        parser.add_argument('--yes', action='store_true', help='Confirm deleting every donation record')

    def handle(self, *args, **options):
        if not options['yes']:
            raise CommandError('Refusing to delete donation records without --yes')

        donation_count = DonationHistory.objects.count()
        self.stdout.write(f'Found {donation_count} donation records')

        if donation_count == 0:
            self.stdout.write('No donations to clear')
            return

        with transaction.atomic():
            deleted, _ = DonationHistory.objects.all().delete()
            reset = DonorProfile.objects.update(donation_count=0, last_donation_date=None)

        self.stdout.write(self.style.SUCCESS(
            f'Deleted {deleted} donation records, reset {reset} donor profiles'
        ))
