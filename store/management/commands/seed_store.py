"""
Management command to seed the storefront catalog.
Run with: python manage.py seed_store [--admin-email EMAIL --admin-password PASSWORD]

Safe to run repeatedly: categories are matched by slug, products are only
seeded into an empty catalog and the admin account is created once.
"""
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from content.models import SiteSettings
from store.models import Category, Product
from store.services.category_service import build_category_slug
from store.services.product_service import ProductService, display_price

DEFAULT_CATEGORIES = [
    {'name': 'Plastic', 'brand': 'grown'},
    {'name': 'Stainless Steel', 'brand': 'grown'},
    {'name': 'Plastic', 'brand': 'diamond'},
    {'name': 'Stainless Steel', 'brand': 'diamond'},
    {'name': 'bottles', 'display_name': 'Bottles', 'brand': Category.GLOBAL_BRAND},
    {'name': 'dispensers', 'display_name': 'Dispensers', 'brand': Category.GLOBAL_BRAND},
    {'name': 'accessories', 'display_name': 'Accessories', 'brand': Category.GLOBAL_BRAND},
]

SEED_PRODUCTS = [
    {
        'name': 'Pure Life Pack',
        'description': 'Compact hydration options for events and meetings.',
        'price': '5.50',
        'image': 'https://picsum.photos/id/10/400/400',
        'category': 'all_bottles',
        'volume': 'Various Sizes',
        'variants': [
            {'name': '330ml x 24', 'price': '5.50', 'stock': 100, 'image': 'https://picsum.photos/id/10/400/400'},
            {'name': '500ml x 24', 'price': '6.00', 'stock': 85, 'image': 'https://picsum.photos/id/11/400/400'},
        ],
    },
    {
        'name': 'Family Size Pack',
        'description': 'Ideal for home dining and sharing.',
        'price': '7.20',
        'image': 'https://picsum.photos/id/12/400/400',
        'category': 'all_bottles',
        'volume': '1.5L x 12',
        'variants': [{'name': '1.5L x 12', 'price': '7.20', 'stock': 50, 'image': None}],
    },
    {
        'name': 'Vertical Water Tank (Type A)',
        'description': 'High durability stainless steel water tank. Type A Series.',
        'price': '68.00',
        'image': 'https://picsum.photos/id/13/400/400',
        'category': 'all_accessories',
        'volume': '100L - 2500L',
        'variants': [
            {'name': '500L (0.66m x 1.62m)', 'price': '68.00', 'stock': 10, 'image': 'https://picsum.photos/id/13/400/400'},
            {'name': '1000L (0.80m x 2.01m)', 'price': '100.00', 'stock': 5, 'image': 'https://picsum.photos/id/14/400/400'},
            {'name': '2000L (1.00m x 2.25m)', 'price': '170.00', 'stock': 2, 'image': 'https://picsum.photos/id/15/400/400'},
        ],
    },
    {
        'name': 'Premium Hot & Cold Dispenser',
        'description': 'Instant access to piping hot or ice-cold water. Energy efficient compressor.',
        'price': '145.00',
        'image': 'https://picsum.photos/id/20/400/400',
        'category': 'all_dispensers',
        'volume': None,
        'variants': [
            {'name': 'Standard White', 'price': '145.00', 'stock': 20, 'image': 'https://picsum.photos/id/20/400/400'},
            {'name': 'Matte Black', 'price': '155.00', 'stock': 15, 'image': 'https://picsum.photos/id/24/400/400'},
        ],
    },
    {
        'name': 'Ceramic Countertop Dispenser',
        'description': 'Elegant ceramic pot for room temperature dispensing. Includes wooden stand.',
        'price': '25.00',
        'image': 'https://picsum.photos/id/21/400/400',
        'category': 'all_dispensers',
        'volume': None,
        'variants': [{'name': 'Standard', 'price': '25.00', 'stock': 40, 'image': None}],
    },
    {
        'name': 'Manual Pump',
        'description': 'Simple, portable hand pump for 18.9L bottles. Great for camping.',
        'price': '5.00',
        'image': 'https://picsum.photos/id/22/400/400',
        'category': 'all_accessories',
        'volume': None,
        'variants': [{'name': 'Standard', 'price': '5.00', 'stock': 200, 'image': None}],
    },
]


class Command(BaseCommand):
    help = 'Seed default categories, catalog products, site settings and optionally an admin user'

    def add_arguments(self, parser):
        parser.add_argument('--admin-email', help='Email of an ADMIN account to create if missing')
        parser.add_argument('--admin-password', help='Password for the ADMIN account')

    def handle(self, *args, **options):
        admin_email = options.get('admin_email')
        admin_password = options.get('admin_password')
        if bool(admin_email) != bool(admin_password):
            raise CommandError('--admin-email and --admin-password must be given together')

        with transaction.atomic():
            categories = self.seed_categories()
            self.seed_products(categories)
            SiteSettings.load()
            self.stdout.write(self.style.SUCCESS('✓ Site settings ready'))

            if admin_email:
                self.seed_admin(admin_email, admin_password)

        self.stdout.write(self.style.SUCCESS('\n✓ Done! Store seeded.'))

    def seed_categories(self):
        created_count = 0
        categories = {}
        for category_data in DEFAULT_CATEGORIES:
            slug = build_category_slug(category_data['brand'], category_data['name'])
            category, created = Category.objects.get_or_create(
                slug=slug,
                defaults={
                    'name': category_data['name'],
                    'brand': category_data['brand'],
                    'display_name': category_data.get('display_name'),
                }
            )
            categories[slug] = category
            if created:
                created_count += 1
                self.stdout.write(self.style.SUCCESS(f'✓ Created category: {slug}'))
            else:
                self.stdout.write(self.style.WARNING(f'✓ Category already exists: {slug}'))

        self.stdout.write(self.style.SUCCESS(f'Categories created: {created_count}, total: {len(DEFAULT_CATEGORIES)}'))
        return categories

    def seed_products(self, categories):
        if Product.objects.exists():
            self.stdout.write(self.style.WARNING('✓ Catalog is not empty, skipping products'))
            return

        for product_data in SEED_PRODUCTS:
            variants = [
                {
                    'name': variant['name'],
                    'price': Decimal(variant['price']),
                    'stock': variant['stock'],
                    'sku': None,
                    'image': variant['image'],
                }
                for variant in product_data['variants']
            ]
            product = Product.objects.create(
                name=product_data['name'],
                description=product_data['description'],
                price=display_price(product_data['price'], [variant['price'] for variant in variants]),
                image=[product_data['image']],
                category=categories.get(product_data['category']),
                volume=product_data['volume'],
            )
            ProductService.sync_variants(product, variants)
            self.stdout.write(self.style.SUCCESS(f'✓ Created product: {product.name} ({len(variants)} variant(s))'))

    def seed_admin(self, email, password):
        User = get_user_model()
        if User.objects.filter(email__iexact=email).exists():
            self.stdout.write(self.style.WARNING(f'✓ Admin already exists: {email}'))
            return

        User.objects.create_user(
            email=email,
            password=password,
            full_name='Super Admin',
            role=User.Role.ADMIN,
            is_staff=True,
            is_superuser=True,
        )
        self.stdout.write(self.style.SUCCESS(f'✓ Created admin: {email}'))
