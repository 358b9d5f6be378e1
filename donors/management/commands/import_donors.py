# donors/management/commands/import_donors.py
"""
Django management command to import donor data from Excel or CSV
Usage: python manage.py import_donors path/to/donors.xlsx
"""

from pathlib import Path

import pandas as pd
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import IntegrityError, transaction
from django.utils import timezone

from algorithms.blood_compatibility import BLOOD_TYPES
from donors.models import DonorProfile

User = get_user_model()

DEFAULT_PASSWORD = 'ChangeMe123!'


class RowError(ValueError):
    pass


def cell(row, *names, default=None):
    """First non-empty value among the given column names (blank cells read as NaN)"""
    for name in names:
        value = row.get(name)
        if value is None or pd.isna(value):
            continue
        if str(value).strip() != '':
            return value
    return default


def parse_coordinate(value, name, low, high):
    if value is None:
        return None
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise RowError(f'Invalid {name} {value!r}')
    if not low <= value <= high:
        raise RowError(f'{name.capitalize()} {value} out of range ({low} to {high})')
    return value


def parse_donation_date(value):
    if value is None:
        return None
    try:
        parsed = pd.to_datetime(value).to_pydatetime()
    except (TypeError, ValueError) as e:
        raise RowError(f'Invalid date {value!r}: {e}')
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed)
    return parsed


def parse_bool(value, default=True):
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'yes', 'y')
    return bool(value)


def read_table(path):
    if path.suffix.lower() == '.csv':
        return pd.read_csv(path, dtype=str)
    return pd.read_excel(path, dtype=str)


class Command(BaseCommand):
    help = 'Import donors (and their last donation) from an Excel or CSV file'

    def add_arguments(self, parser):
        parser.add_argument('file', type=str, help='Path to the .xlsx or .csv file')
        parser.add_argument(
            '--password',
            default=DEFAULT_PASSWORD,
            help='Initial password for newly created donor accounts',
        )

    def handle(self, *args, **options):
        path = Path(options['file'])

        self.stdout.write(self.style.WARNING(f'Starting import from {path}...'))

        try:
            df = read_table(path)
        except FileNotFoundError:
            raise CommandError(f'File not found: {path}')
        except (ValueError, ImportError) as e:
            raise CommandError(f'Could not read {path}: {e}')

        self.stdout.write(f'Found {len(df)} rows in file')

        imported_count = 0
        updated_count = 0
        skipped_count = 0

        for index, row in enumerate(df.to_dict('records')):
            line = index + 2  # header is line 1
            try:
                with transaction.atomic():
                    created = self.import_row(row, options['password'])
            except (RowError, IntegrityError) as e:
                skipped_count += 1
                self.stdout.write(self.style.WARNING(f'Skipping row {line}: {e}'))
                continue

            if created:
                imported_count += 1
            else:
                updated_count += 1

        self.stdout.write(
            self.style.SUCCESS(
                f'Import complete! '
                f'Created: {imported_count}, '
                f'Updated: {updated_count}, '
                f'Skipped: {skipped_count}'
            )
        )

        if imported_count > 0:
            self.stdout.write(
                self.style.WARNING(
                    'New donor accounts use the initial password given with --password. '
                    'Donors should change it on first login.'
                )
            )

    def import_row(self, row, password):
        full_name = cell(row, 'full_name', 'name')
        if not full_name:
            raise RowError('Missing name')
        full_name = str(full_name).strip()

        blood_type = str(cell(row, 'blood_group', 'blood_type', default='')).strip().upper()
        if blood_type not in BLOOD_TYPES:
            raise RowError(f'Invalid blood type {blood_type!r}')

        email = cell(row, 'email')
        if not email:
            raise RowError('Missing email')
        email = str(email).strip().lower()

        latitude = parse_coordinate(cell(row, 'latitude'), 'latitude', -90, 90)
        longitude = parse_coordinate(cell(row, 'longitude'), 'longitude', -180, 180)
        last_donation = parse_donation_date(cell(row, 'last_donation_date'))

        try:
            donation_count = int(float(cell(row, 'donation_count', default=0)))
        except (TypeError, ValueError):
            raise RowError('Invalid donation count')
        if donation_count < 0:
            raise RowError('Donation count must not be negative')
        if donation_count > 0 and last_donation is None:
            raise RowError('Donation count given without a last donation date')

        username = email.split('@')[0].replace(' ', '_')[:150]
        user, user_created = User.objects.get_or_create(
            email=email,
            defaults={
                'username': username,
                'user_type': 'donor',
                'is_active': True,
            }
        )
        if user_created:
            user.set_password(password)
            user.save(update_fields=['password'])
        elif user.is_admin_account:
            raise RowError(f'{email} belongs to an admin account')

        donor, created = DonorProfile.objects.update_or_create(
            user=user,
            defaults={
                'full_name': full_name,
                'phone': str(cell(row, 'phone_number', 'phone', default='')).strip(),
                'blood_type': blood_type,
                'address': str(cell(row, 'address', default='')).strip(),
                'city': str(cell(row, 'city', default='')).strip(),
                'latitude': latitude,
                'longitude': longitude,
                'is_available': parse_bool(cell(row, 'is_available')),
            }
        )

        if last_donation is not None and (
            donor.last_donation_date is None or last_donation > donor.last_donation_date
        ):
            # One history row carrying the donations not yet on record
            donor.record_donation(
                date_donated=last_donation,
                location=donor.city or 'Imported',
                units=max(1, donation_count - donor.donation_count),
                notes='Imported donation history',
            )

        if created:
            self.stdout.write(f'Created: {donor.full_name} ({donor.blood_type}) - {user.email}')
        else:
            self.stdout.write(f'Updated: {donor.full_name} ({donor.blood_type})')

        return created
