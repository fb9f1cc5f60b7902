"""
Django Management Command: Seed Demo Data

Creates a demo farmer with one farm and realistic records across every
module: suppliers, batches, mortality, weights, eggs, feed stock and
usage, vaccinations, treatments, customers, sales, expenses and a saved
report. Quantities go through the same services as the API, so batch and
feed stock stay consistent.

Usage:
    python manage.py seed_demo_data
    python manage.py seed_demo_data --clear  # Remove the demo farmer first
    python manage.py seed_demo_data --email demo@example.com --password secret
"""

from datetime import date, timedelta
from decimal import Decimal
import random

from django.core.management.base import BaseCommand
from django.db import transaction

from accounts.models import User, UserSettings
from dashboards.models import ReportConfig
from expenses.models import Expense
from farms.services import create_farm
from feed_inventory.models import FeedInventory
from feed_inventory.services import create_feed_record
from livestock.models import Batch, EggRecord, WaterQualityRecord, WeightSample
from livestock.services import record_mortality
from medication_management.models import TreatmentRecord, VaccinationRecord
from procurement.models import Supplier
from sales_revenue.models import Customer
from sales_revenue.services import create_sale


DEMO_EMAIL = 'demo@farmrecords.local'
DEMO_PASSWORD = 'demo12345'


class Command(BaseCommand):
    help = 'Seed a demo farmer and farm with realistic records'

    def add_arguments(self, parser):
        parser.add_argument('--email', default=DEMO_EMAIL, help='Email of the demo user')
        parser.add_argument('--password', default=DEMO_PASSWORD, help='Password of the demo user')
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Delete the demo user and its farms before seeding',
        )
        parser.add_argument('--seed', type=int, default=42, help='Random seed for repeatable data')

    def handle(self, *args, **options):
        random.seed(options['seed'])
        email = options['email']

        if options['clear']:
            self.clear_data(email)
        elif User.objects.filter(email=email).exists():
            self.stdout.write(self.style.WARNING(f'{email} already exists. Use --clear to reseed.'))
            return

        with transaction.atomic():
            user = self.create_user(email, options['password'])
            farm = create_farm(
                user,
                name='Green Valley Farm',
                location='Kumasi, Ashanti',
                farm_type='mixed',
            )
            suppliers = self.create_suppliers(farm)
            batches = self.create_batches(farm, suppliers)
            self.create_mortality(batches)
            self.create_weights(batches)
            self.create_eggs(batches['layers'])
            self.create_feed(farm, batches)
            self.create_health_records(batches)
            self.create_sales(farm, batches)
            self.create_expenses(farm, batches, suppliers)
            ReportConfig.objects.create(farm=farm, name='Monthly P&L', report_type='profit_loss')

        self.stdout.write(self.style.SUCCESS(f'Seeded demo farm "{farm.name}" for {email}'))

    # =========================================================================
    # BASE DATA
    # =========================================================================

    def clear_data(self, email):
        user = User.objects.filter(email=email).first()
        if user is None:
            return
        # Sales and expenses first: expenses protect their suppliers
        for farm in user.owned_farms.all():
            farm.sales.all().delete()
            farm.expenses.all().delete()
            farm.delete()
        user.delete()
        self.stdout.write(self.style.WARNING(f'Removed {email} and its farms'))

    def create_user(self, email, password):
        user = User.objects.create_user(
            username=email.split('@')[0],
            email=email,
            password=password,
            first_name='Demo',
            last_name='Farmer',
        )
        settings = UserSettings.for_user(user)
        settings.currency_code = 'GHS'
        settings.currency_symbol = 'GH₵'
        settings.save()
        return user

    def create_suppliers(self, farm):
        rows = [
            ('hatchery', 'Sunrise Hatchery', ['Day-old chicks', 'Point-of-lay pullets']),
            ('feed_mill', 'Agro Feeds Ltd', ['Starter', 'Grower', 'Layer Mash', 'Fish Feed']),
            ('pharmacy', 'VetCare Pharmacy', ['Vaccines', 'Antibiotics', 'Vitamins']),
            ('fingerlings', 'Lake Volta Fingerlings', ['Tilapia fingerlings', 'Catfish fingerlings']),
        ]
        return {
            supplier_type: Supplier.objects.create(
                farm=farm,
                name=name,
                supplier_type=supplier_type,
                products=products,
                phone=f'024{random.randint(1000000, 9999999)}',
            )
            for supplier_type, name, products in rows
        }

    def create_batches(self, farm, suppliers):
        today = date.today()
        rows = {
            'broilers': dict(livestock_type='poultry', species='Broiler', breed='Cobb 500',
                             initial_quantity=500, cost_per_unit=Decimal('8.50'),
                             acquisition_date=today - timedelta(days=35), supplier=suppliers['hatchery']),
            'layers': dict(livestock_type='poultry', species='Layer', breed='Isa Brown',
                           initial_quantity=300, cost_per_unit=Decimal('25.00'),
                           acquisition_date=today - timedelta(days=180), supplier=suppliers['hatchery']),
            'tilapia': dict(livestock_type='fish', species='Tilapia',
                            initial_quantity=2000, cost_per_unit=Decimal('0.80'),
                            acquisition_date=today - timedelta(days=90), supplier=suppliers['fingerlings']),
        }
        return {
            key: Batch.objects.create(farm=farm, batch_name=key.title(), **fields)
            for key, fields in rows.items()
        }

    # =========================================================================
    # LIVESTOCK RECORDS
    # =========================================================================

    def create_mortality(self, batches):
        today = date.today()
        causes = ['disease', 'unknown', 'predator', 'weather']
        for batch in batches.values():
            for days_ago in range(30, 0, -6):
                record_mortality(
                    batch.id,
                    quantity=max(1, batch.initial_quantity // 200 + random.randint(0, 3)),
                    date=today - timedelta(days=days_ago),
                    cause=random.choice(causes),
                )

    def create_weights(self, batches):
        today = date.today()
        broilers = batches['broilers']
        for week in range(1, 6):
            average = Decimal('0.2') * week * week + Decimal('0.1')
            WeightSample.objects.create(
                batch=broilers,
                date=broilers.acquisition_date + timedelta(days=week * 7),
                sample_size=20,
                average_weight_kg=average,
                min_weight_kg=average * Decimal('0.85'),
                max_weight_kg=average * Decimal('1.15'),
            )
        tilapia = batches['tilapia']
        WeightSample.objects.create(batch=tilapia, date=today - timedelta(days=30), sample_size=30,
                                    average_weight_kg=Decimal('0.180'))
        WeightSample.objects.create(batch=tilapia, date=today, sample_size=30,
                                    average_weight_kg=Decimal('0.310'))
        WaterQualityRecord.objects.create(batch=tilapia, date=today, ph=Decimal('7.20'),
                                          temperature_celsius=Decimal('27.50'),
                                          dissolved_oxygen_mg_l=Decimal('6.50'),
                                          ammonia_mg_l=Decimal('0.020'))

    def create_eggs(self, layers):
        today = date.today()
        layers.refresh_from_db()
        for days_ago in range(14, -1, -1):
            collected = int(layers.current_quantity * random.uniform(0.75, 0.9))
            EggRecord.objects.create(
                batch=layers,
                date=today - timedelta(days=days_ago),
                quantity_collected=collected,
                quantity_broken=random.randint(0, 6),
                quantity_sold=int(collected * 0.8),
            )

    # =========================================================================
    # FEED AND HEALTH
    # =========================================================================

    def create_feed(self, farm, batches):
        today = date.today()
        stock = {
            'grower': FeedInventory.objects.create(farm=farm, feed_type='grower', quantity_kg=Decimal('900'),
                                                   min_threshold_kg=Decimal('200')),
            'layer_mash': FeedInventory.objects.create(farm=farm, feed_type='layer_mash',
                                                       quantity_kg=Decimal('400'),
                                                       min_threshold_kg=Decimal('300')),
            'fish_feed': FeedInventory.objects.create(farm=farm, feed_type='fish_feed',
                                                      quantity_kg=Decimal('600'),
                                                      min_threshold_kg=Decimal('100')),
        }
        plan = [('broilers', 'grower', Decimal('60')), ('layers', 'layer_mash', Decimal('35')),
                ('tilapia', 'fish_feed', Decimal('40'))]
        for key, feed_type, quantity in plan:
            for days_ago in (21, 14, 7, 1):
                create_feed_record(
                    batch=batches[key],
                    inventory=stock[feed_type],
                    feed_type=feed_type,
                    quantity_kg=quantity,
                    cost=quantity * Decimal('4.20'),
                    date=today - timedelta(days=days_ago),
                )

    def create_health_records(self, batches):
        today = date.today()
        broilers = batches['broilers']
        VaccinationRecord.objects.create(
            batch=broilers, vaccine_name='Newcastle (Lasota)', dosage='1 drop/bird',
            date_administered=broilers.acquisition_date + timedelta(days=7),
            next_due_date=today + timedelta(days=3),
        )
        VaccinationRecord.objects.create(
            batch=broilers, vaccine_name='Gumboro', dosage='In water',
            date_administered=broilers.acquisition_date + timedelta(days=14),
        )
        VaccinationRecord.objects.create(
            batch=batches['layers'], vaccine_name='Fowl Pox', dosage='Wing web',
            date_administered=today - timedelta(days=60),
            next_due_date=today - timedelta(days=2),
        )
        TreatmentRecord.objects.create(
            batch=batches['layers'], medication_name='Oxytetracycline', reason='Respiratory signs',
            dosage='1g/L', date=today - timedelta(days=3), withdrawal_days=7,
        )

    # =========================================================================
    # MONEY
    # =========================================================================

    def create_sales(self, farm, batches):
        today = date.today()
        customers = [
            Customer.objects.create(farm=farm, name='Mama Ama Chop Bar', customer_type='restaurant',
                                    phone='0244000001', location='Adum'),
            Customer.objects.create(farm=farm, name='Kejetia Traders', customer_type='wholesaler',
                                    phone='0244000002', location='Kejetia'),
            Customer.objects.create(farm=farm, name='Kofi Mensah', customer_type='individual',
                                    phone='0244000003'),
        ]
        create_sale(farm=farm, batch=batches['broilers'], customer=customers[1], livestock_type='poultry',
                    quantity=120, unit_type='bird', unit_price=Decimal('45.00'),
                    date=today - timedelta(days=2), payment_method='transfer')
        create_sale(farm=farm, batch=batches['broilers'], customer=customers[0], livestock_type='poultry',
                    quantity=40, unit_type='bird', unit_price=Decimal('48.00'),
                    date=today - timedelta(days=1), payment_status='pending', payment_method='credit')
        for days_ago in (12, 5):
            create_sale(farm=farm, batch=batches['layers'], customer=random.choice(customers),
                        livestock_type='eggs', quantity=30, unit_type='crate', unit_price=Decimal('52.00'),
                        date=today - timedelta(days=days_ago), payment_method='cash')
        create_sale(farm=farm, batch=batches['tilapia'], customer=customers[2], livestock_type='fish',
                    quantity=150, unit_type='kg', unit_price=Decimal('28.00'), date=today,
                    payment_status='partial', payment_method='cash')

    def create_expenses(self, farm, batches, suppliers):
        today = date.today()
        rows = [
            ('livestock', Decimal('4250.00'), batches['broilers'], suppliers['hatchery'], 35, 'Day-old chicks'),
            ('feed', Decimal('3780.00'), None, suppliers['feed_mill'], 20, 'Feed restock'),
            ('medicine', Decimal('420.00'), batches['broilers'], suppliers['pharmacy'], 28, 'Vaccines'),
            ('labor', Decimal('1500.00'), None, None, 10, 'Farm hand wages'),
            ('utilities', Decimal('310.00'), None, None, 8, 'Electricity and water'),
            ('transport', Decimal('180.00'), batches['broilers'], None, 2, 'Delivery to Kejetia'),
        ]
        for category, amount, batch, supplier, days_ago, description in rows:
            Expense.objects.create(
                farm=farm, batch=batch, supplier=supplier, category=category, amount=amount,
                date=today - timedelta(days=days_ago), description=description,
            )
