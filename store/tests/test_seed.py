from decimal import Decimal
from io import StringIO

from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase

from content.models import SiteSettings
from store.management.commands.seed_store import Command
from store.models import Category, Product


class SeedStoreCommandTests(TestCase):

    def setUp(self):
        cache.clear()

    def seed(self, *args):
        call_command('seed_store', *args, stdout=StringIO())

    def test_seed_is_idempotent(self):
        self.seed()
        self.seed()

        self.assertEqual(Category.objects.filter(slug='grown_plastic').count(), 1)
        self.assertEqual(Category.objects.count(), 7)
        self.assertEqual(Product.objects.count(), 6)
        self.assertTrue(SiteSettings.objects.filter(pk=SiteSettings.SINGLETON_PK).exists())

    def test_seeded_products_follow_price_law(self):
        self.seed()
        tank = Product.objects.get(name='Vertical Water Tank (Type A)')
        self.assertEqual(tank.price, Decimal('68.00'))
        self.assertEqual(tank.variants.count(), 3)
        self.assertEqual(tank.category.slug, 'all_accessories')

    def test_admin_account_is_created_with_hashed_password(self):
        self.seed('--admin-email', 'superadmin@admin.com', '--admin-password', 'Admin@123')
        admin = get_user_model().objects.get(email='superadmin@admin.com')
        self.assertTrue(admin.is_admin)
        self.assertTrue(admin.check_password('Admin@123'))
        self.assertNotEqual(admin.password, 'Admin@123')

    def test_admin_email_without_password_fails(self):
        with self.assertRaises(CommandError):
            self.seed('--admin-email', 'superadmin@admin.com')

    def test_categories_with_same_name_stay_distinct_per_brand(self):
        categories = Command(stdout=StringIO()).seed_categories()

        self.assertEqual(len(categories), Category.objects.count())
        self.assertEqual(categories['grown_plastic'].brand, 'grown')
        self.assertEqual(categories['diamond_plastic'].brand, 'diamond')
