"""
Management command to create sample data for trying out the API.

Usage:
    python manage.py create_sample_inspections
    python manage.py create_sample_inspections --clear --days 14

This creates:
- 2 inspector accounts (admin, alice)
- 3 stores
- One daily walk per store per day, the most recent one left as a draft
"""

from datetime import datetime, time, timedelta
import random

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from apps.accounts.models import User
from apps.accounts.session import SessionUser
from apps.inspections.checklist import initialize_checklist_items
from apps.inspections.models import Inspection, InspectionStatus, Store
from apps.inspections.services import create_inspection


STORES = [
    {'id': 'store-123', 'name': 'Store #123', 'location': 'Main Street'},
    {'id': 'store-245', 'name': 'Store #245', 'location': 'Oak Avenue'},
    {'id': 'store-310', 'name': 'Store #310', 'location': 'Harbor Road'},
]


class Command(BaseCommand):
    help = 'Create sample stores and daily walk inspections'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Delete existing stores and inspections first',
        )
        parser.add_argument(
            '--days',
            type=int,
            default=7,
            help='Number of past days to create walks for (default: 7)',
        )
        parser.add_argument(
            '--seed',
            type=int,
            default=None,
            help='Random seed for reproducible answers',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing existing data...')
            Inspection.objects.all().delete()
            Store.objects.all().delete()

        rng = random.Random(options['seed'])

        self.stdout.write('Creating sample data...')
        users = self.create_users()
        stores = self.create_stores()
        count = self.create_inspections(users, stores, options['days'], rng)

        self.stdout.write(self.style.SUCCESS(f'Created {count} inspections across {len(stores)} stores.'))
        self.stdout.write('')
        self.stdout.write('Test accounts:')
        self.stdout.write('  admin@example.com / admin123 (superuser)')
        self.stdout.write('  alice@example.com / password123')

    def create_users(self):
        self.stdout.write('  Creating users...')

        admin, created = User.objects.get_or_create(
            email='admin@example.com',
            defaults={'display_name': 'Admin', 'is_staff': True, 'is_superuser': True},
        )
        if created:
            admin.set_password('admin123')
            admin.save()

        alice, created = User.objects.get_or_create(
            email='alice@example.com',
            defaults={'display_name': 'Alice Walker', 'store_id': STORES[0]['id']},
        )
        if created:
            alice.set_password('password123')
            alice.save()

        return [admin, alice]

    def create_stores(self):
        self.stdout.write('  Creating stores...')
        stores = []
        for data in STORES:
            store, _ = Store.objects.update_or_create(
                id=data['id'],
                defaults={'name': data['name'], 'location': data['location']},
            )
            stores.append(store)
        return stores

    def create_inspections(self, users, stores, days, rng):
        self.stdout.write('  Creating inspections...')
        today = timezone.localdate()
        count = 0

        for offset in range(days, -1, -1):
            day = today - timedelta(days=offset)
            for store in stores:
                inspector = rng.choice(users)
                items = self.answer_items(rng)
                status = InspectionStatus.DRAFT if offset == 0 else InspectionStatus.COMPLETED
                inspection = create_inspection(
                    session=SessionUser.from_user(inspector),
                    store_id=store.id,
                    date=day,
                    time=time(hour=rng.randint(6, 11), minute=rng.choice([0, 15, 30, 45])),
                    items=items,
                    status=status,
                    corrected_by=inspector.get_display_name() if any(i['fixed'] for i in items) else None,
                )
                # Spread creation times so newest-first ordering follows the walk date
                Inspection.objects.filter(id=inspection.id).update(
                    created_at=timezone.make_aware(datetime.combine(day, inspection.time))
                )
                count += 1

        return count

    def answer_items(self, rng):
        items = initialize_checklist_items()
        for item in items:
            roll = rng.random()
            if roll < 0.8:
                item['passed'] = True
            else:
                item['passed'] = False
                item['fixed'] = rng.random() < 0.6
                item['comments'] = 'Fixed on the spot' if item['fixed'] else 'Reported to manager'
        return items
