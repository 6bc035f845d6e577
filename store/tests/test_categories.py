from rest_framework import status
from rest_framework.test import APIClient, APITestCase
from django.test import SimpleTestCase, TestCase

from authentication.core.exceptions import SlugConflictException
from store.models import Category, Product
from store.services.category_service import CategoryService, build_category_slug
from .helpers import create_admin


class CategorySlugTests(SimpleTestCase):

    def test_slug_joins_brand_and_name(self):
        self.assertEqual(build_category_slug('grown', 'Stainless Steel'), 'grown_stainless_steel')

    def test_slug_collapses_punctuation(self):
        self.assertEqual(build_category_slug('Diamond', '  Hot & Cold -- Dispensers! '), 'diamond_hot_cold_dispensers')


class CategoryServiceTests(TestCase):

    def test_duplicate_brand_and_name_conflicts(self):
        CategoryService.create_category(name='Plastic', brand='grown')
        with self.assertRaises(SlugConflictException):
            CategoryService.create_category(name='plastic', brand='grown')
        self.assertEqual(Category.objects.count(), 1)

    def test_same_name_under_other_brand_is_allowed(self):
        CategoryService.create_category(name='Plastic', brand='grown')
        category = CategoryService.create_category(name='Plastic', brand='diamond')
        self.assertEqual(category.slug, 'diamond_plastic')

    def test_missing_brand_defaults_to_global(self):
        category = CategoryService.create_category(name='Bottles')
        self.assertEqual(category.brand, Category.GLOBAL_BRAND)
        self.assertEqual(category.slug, 'all_bottles')

    def test_update_without_name_or_brand_change_skips_check(self):
        category = CategoryService.create_category(name='Plastic', brand='grown')
        updated = CategoryService.update_category(category, name='Plastic', display_name='Plastic Tanks')
        self.assertEqual(updated.display_name, 'Plastic Tanks')
        self.assertEqual(updated.slug, 'grown_plastic')

    def test_rename_onto_existing_slug_conflicts(self):
        CategoryService.create_category(name='Plastic', brand='grown')
        steel = CategoryService.create_category(name='Steel', brand='grown')
        with self.assertRaises(SlugConflictException):
            CategoryService.update_category(steel, name='Plastic')
        steel.refresh_from_db()
        self.assertEqual(steel.slug, 'grown_steel')

    def test_rename_recomputes_slug(self):
        category = CategoryService.create_category(name='Steel', brand='grown')
        CategoryService.update_category(category, name='Stainless Steel', brand='diamond')
        category.refresh_from_db()
        self.assertEqual(category.slug, 'diamond_stainless_steel')


class CategoryApiTests(APITestCase):

    def setUp(self):
        self.client = APIClient()
        self.admin = create_admin()

    def test_create_requires_admin(self):
        resp = self.client.post('/api/categories/', {'name': 'Plastic', 'brand': 'grown'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_create_and_conflict(self):
        self.client.force_authenticate(user=self.admin)
        payload = {'name': 'Plastic', 'brand': 'grown', 'displayName': 'Plastic Tanks'}

        resp = self.client.post('/api/categories/', payload, format='json')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data['data']['slug'], 'grown_plastic')
        self.assertEqual(resp.data['data']['displayName'], 'Plastic Tanks')

        resp = self.client.post('/api/categories/', payload, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data['error_code'], 'slug_conflict')

    def test_missing_name_is_bad_request(self):
        self.client.force_authenticate(user=self.admin)
        resp = self.client.post('/api/categories/', {'brand': 'grown'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_brand_filter_includes_global_categories(self):
        CategoryService.create_category(name='Plastic', brand='grown')
        CategoryService.create_category(name='Plastic', brand='diamond')
        CategoryService.create_category(name='Bottles')

        resp = self.client.get('/api/categories/', {'brand': 'grown'})
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(sorted(c['slug'] for c in resp.data['data']), ['all_bottles', 'grown_plastic'])

    def test_update_and_delete(self):
        self.client.force_authenticate(user=self.admin)
        category = CategoryService.create_category(name='Plastic', brand='grown')
        product = Product.objects.create(name='Tank', price='10.00', category=category)

        resp = self.client.put(f'/api/categories/{category.id}/', {'displayName': 'Plastic Tanks'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data['data']['displayName'], 'Plastic Tanks')

        resp = self.client.delete(f'/api/categories/{category.id}/')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        product.refresh_from_db()
        self.assertIsNone(product.category)

    def test_unknown_category_is_not_found(self):
        self.client.force_authenticate(user=self.admin)
        resp = self.client.delete('/api/categories/999/')
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
