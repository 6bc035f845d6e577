import json
from decimal import Decimal
from unittest.mock import patch

from django.core.files.storage import default_storage
from django.test import SimpleTestCase
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from store.models import Category, Product, Variant
from store.services.product_service import display_price
from store.services.uploads import PRODUCTS_FOLDER, resolve_upload_path, save_upload
from .helpers import TempMediaMixin, create_admin, make_image


def stored(url):
    return default_storage.exists(resolve_upload_path(url, PRODUCTS_FOLDER))


class DisplayPriceTests(SimpleTestCase):

    def test_cheapest_positive_variant_wins(self):
        prices = [Decimal('12.00'), Decimal('9.50'), Decimal('15.00')]
        self.assertEqual(display_price(Decimal('20.00'), prices), Decimal('9.50'))

    def test_zero_priced_variants_are_ignored(self):
        self.assertEqual(display_price(Decimal('20.00'), [Decimal('0'), Decimal('14.00')]), Decimal('14.00'))

    def test_base_price_without_variants(self):
        self.assertEqual(display_price(Decimal('20.00'), []), Decimal('20.00'))
        self.assertEqual(display_price(Decimal('20.00'), [Decimal('0')]), Decimal('20.00'))


class ProductReadTests(APITestCase):

    def setUp(self):
        self.client = APIClient()
        self.grown = Category.objects.create(name='Plastic', brand='grown', slug='grown_plastic')
        self.steel = Category.objects.create(name='Stainless Steel', brand='grown', slug='grown_stainless_steel')
        self.tank = Product.objects.create(name='Plastic Tank', price='68.00', brand='grown', category=self.grown)
        self.steel_tank = Product.objects.create(name='Steel Tank', price='100.00', brand='Grown', category=self.steel)
        self.other = Product.objects.create(name='Diamond Pump', price='5.00', brand='diamond')
        Variant.objects.create(product=self.tank, name='500L', price='68.00', stock=3)

    def test_list_is_newest_first(self):
        resp = self.client.get('/api/products/')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual([p['id'] for p in resp.data['data']], [self.other.id, self.steel_tank.id, self.tank.id])

    def test_list_search(self):
        resp = self.client.get('/api/products/', {'search': 'pump'})
        self.assertEqual([p['id'] for p in resp.data['data']], [self.other.id])

    def test_detail_includes_variants(self):
        resp = self.client.get(f'/api/products/{self.tank.id}/')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data['data']['categoryId'], self.grown.id)
        self.assertEqual(len(resp.data['data']['variants']), 1)
        self.assertTrue(resp.data['data']['inStock'])

    def test_detail_unknown_id_is_not_found(self):
        resp = self.client.get('/api/products/9999/')
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        self.assertFalse(resp.data['success'])

    def test_brand_and_category(self):
        resp = self.client.get('/api/products/grown/grown_plastic/')
        self.assertEqual([p['id'] for p in resp.data['data']], [self.tank.id])

    def test_brand_with_all_categories(self):
        resp = self.client.get('/api/products/GROWN/all/')
        self.assertEqual(sorted(p['id'] for p in resp.data['data']), sorted([self.tank.id, self.steel_tank.id]))

    def test_all_brands_and_categories(self):
        resp = self.client.get('/api/products/all/all/')
        self.assertEqual(len(resp.data['data']), 3)


class ProductWriteTests(TempMediaMixin, APITestCase):

    def setUp(self):
        super().setUp()
        self.client = APIClient()
        self.admin = create_admin()
        self.client.force_authenticate(user=self.admin)
        self.category = Category.objects.create(name='Dispensers', brand='all', slug='all_dispensers')

    def test_writes_require_admin(self):
        self.client.force_authenticate(user=None)
        resp = self.client.post('/api/products/', {'name': 'Pump', 'price': '5.00'}, format='multipart')
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_create_with_images_and_variants(self):
        payload = {
            'name': 'Hot & Cold Dispenser',
            'description': 'Energy efficient compressor',
            'price': '200.00',
            'brand': 'grown',
            'categoryId': self.category.id,
            'variants': json.dumps([
                {'name': 'White', 'price': '12.00', 'stock': '4'},
                {'name': 'Black', 'price': '9.50', 'stock': ''},
                {'name': 'Steel', 'price': '15.00', 'stock': 2},
            ]),
            'images': [make_image('front.png'), make_image('side.png', color='red')],
        }
        resp = self.client.post('/api/products/', payload, format='multipart')

        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        data = resp.data['data']
        self.assertEqual(data['price'], Decimal('9.50'))
        self.assertEqual(len(data['image']), 2)
        self.assertTrue(data['image'][0].startswith('/uploads/products/front-'))
        self.assertEqual(data['primaryImage'], data['image'][0])
        self.assertEqual([v['stock'] for v in data['variants']], [4, 0, 2])
        self.assertTrue(all(stored(url) for url in data['image']))

    def test_create_requires_name_and_price(self):
        resp = self.client.post('/api/products/', {'description': 'no name'}, format='multipart')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('name', resp.data['error'])
        self.assertIn('price', resp.data['error'])

    def test_create_with_malformed_variants_stores_nothing(self):
        payload = {'name': 'Pump', 'price': '5.00', 'variants': '[{"name": ', 'images': [make_image()]}
        resp = self.client.post('/api/products/', payload, format='multipart')

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data['error_code'], 'malformed_payload')
        self.assertFalse(Product.objects.exists())
        self.assertFalse(default_storage.exists(PRODUCTS_FOLDER) and default_storage.listdir(PRODUCTS_FOLDER)[1])

    def test_failed_create_discards_uploaded_files(self):
        payload = {'name': 'Pump', 'price': '5.00', 'images': [make_image('pump.png')]}
        with patch('store.services.product_service.ProductService.sync_variants', side_effect=RuntimeError('db down')):
            resp = self.client.post('/api/products/', payload, format='multipart')

        self.assertEqual(resp.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertFalse(Product.objects.exists())
        self.assertEqual(default_storage.listdir(PRODUCTS_FOLDER)[1], [])

    def test_update_reconciles_gallery_and_deletes_orphans(self):
        kept = save_upload(make_image('kept.png'), PRODUCTS_FOLDER)
        dropped = save_upload(make_image('dropped.png'), PRODUCTS_FOLDER)
        product = Product.objects.create(name='Tank', price='68.00', image=[dropped, kept])

        payload = {
            'existingGallery': json.dumps([kept]),
            'images': [make_image('new.png')],
        }
        with self.captureOnCommitCallbacks(execute=True):
            resp = self.client.put(f'/api/products/{product.id}/', payload, format='multipart')

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        product.refresh_from_db()
        self.assertEqual(len(product.image), 2)
        self.assertEqual(product.image[0], kept)
        self.assertTrue(product.image[1].startswith('/uploads/products/new-'))
        self.assertTrue(stored(kept))
        self.assertTrue(stored(product.image[1]))
        self.assertFalse(stored(dropped))

    def test_update_without_gallery_keeps_images(self):
        kept = save_upload(make_image(), PRODUCTS_FOLDER)
        product = Product.objects.create(name='Tank', price='68.00', image=[kept])

        with self.captureOnCommitCallbacks(execute=True):
            resp = self.client.put(f'/api/products/{product.id}/', {'name': 'Big Tank'}, format='multipart')

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        product.refresh_from_db()
        self.assertEqual(product.name, 'Big Tank')
        self.assertEqual(product.image, [kept])
        self.assertTrue(stored(kept))

    def test_update_with_malformed_gallery_changes_nothing(self):
        current = save_upload(make_image(), PRODUCTS_FOLDER)
        product = Product.objects.create(name='Tank', price='68.00', image=[current])

        with self.captureOnCommitCallbacks(execute=True):
            resp = self.client.put(
                f'/api/products/{product.id}/',
                {'name': 'Renamed', 'existingGallery': 'not json'},
                format='multipart'
            )

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        product.refresh_from_db()
        self.assertEqual(product.name, 'Tank')
        self.assertEqual(product.image, [current])
        self.assertTrue(stored(current))

    def test_external_gallery_urls_are_left_alone(self):
        product = Product.objects.create(name='Pump', price='5.00', image=['https://picsum.photos/id/22/400/400'])

        with self.captureOnCommitCallbacks(execute=True):
            resp = self.client.put(f'/api/products/{product.id}/', {'existingGallery': []}, format='json')

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        product.refresh_from_db()
        self.assertEqual(product.image, [])

    def test_update_upserts_variants_and_applies_price_law(self):
        product = Product.objects.create(name='Tank', price='200.00')
        keep = Variant.objects.create(product=product, name='500L', price='68.00', stock=10)
        stale = Variant.objects.create(product=product, name='1000L', price='100.00', stock=5)

        variants = [
            {'id': keep.id, 'name': '500L (0.66m x 1.62m)', 'price': '12.00', 'stock': 7},
            {'name': '2000L', 'price': '9.50', 'stock': 2},
            {'name': '3000L', 'price': '15.00', 'stock': 1},
        ]
        resp = self.client.put(f'/api/products/{product.id}/', {'variants': variants}, format='json')

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data['data']['price'], Decimal('9.50'))
        product.refresh_from_db()
        self.assertEqual(product.price, Decimal('9.50'))

        keep.refresh_from_db()
        self.assertEqual(keep.name, '500L (0.66m x 1.62m)')
        self.assertEqual(keep.stock, 7)
        self.assertFalse(Variant.objects.filter(pk=stale.pk).exists())
        self.assertEqual(product.variants.count(), 3)

    def test_update_with_invalid_variant_is_rejected(self):
        product = Product.objects.create(name='Tank', price='20.00')
        Variant.objects.create(product=product, name='500L', price='20.00', stock=1)

        resp = self.client.put(
            f'/api/products/{product.id}/',
            {'variants': [{'name': '', 'price': '-1'}]},
            format='json'
        )

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(product.variants.count(), 1)

    def test_foreign_variant_id_creates_new_variant(self):
        product = Product.objects.create(name='Tank', price='20.00')
        other = Product.objects.create(name='Pump', price='5.00')
        foreign = Variant.objects.create(product=other, name='Standard', price='5.00', stock=1)

        resp = self.client.put(
            f'/api/products/{product.id}/',
            {'variants': [{'id': foreign.id, 'name': 'Hijack', 'price': '1.00'}]},
            format='json'
        )

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        foreign.refresh_from_db()
        self.assertEqual(foreign.name, 'Standard')
        self.assertEqual(product.variants.get().name, 'Hijack')

    def test_gallery_cannot_keep_another_products_image(self):
        owned = save_upload(make_image('owned.png'), PRODUCTS_FOLDER)
        owner = Product.objects.create(name='Tank', price='68.00', image=[owned])
        other = Product.objects.create(name='Pump', price='5.00')

        with self.captureOnCommitCallbacks(execute=True):
            resp = self.client.put(
                f'/api/products/{other.id}/',
                {'existingGallery': json.dumps([owned])},
                format='multipart'
            )

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data['error_code'], 'malformed_payload')
        other.refresh_from_db()
        self.assertEqual(other.image, [])
        owner.refresh_from_db()
        self.assertEqual(owner.image, [owned])
        self.assertTrue(stored(owned))

    def test_deleting_product_keeps_images_still_used_elsewhere(self):
        owned = save_upload(make_image('owned.png'), PRODUCTS_FOLDER)
        owner = Product.objects.create(name='Tank', price='68.00', image=[owned])

        resp = self.client.post(
            '/api/products/',
            {'name': 'Tank Copy', 'price': '68.00', 'image': json.dumps([owned])},
            format='multipart'
        )
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)

        with self.captureOnCommitCallbacks(execute=True):
            resp = self.client.delete(f"/api/products/{resp.data['data']['id']}/")

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        owner.refresh_from_db()
        self.assertEqual(owner.image, [owned])
        self.assertTrue(stored(owned))

    def test_blank_variants_field_clears_variants(self):
        product = Product.objects.create(name='Tank', price='20.00')
        Variant.objects.create(product=product, name='500L', price='12.00', stock=1)

        resp = self.client.put(f'/api/products/{product.id}/', {'variants': ''}, format='multipart')

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertFalse(product.variants.exists())
        product.refresh_from_db()
        self.assertEqual(product.price, Decimal('20.00'))

    def test_update_unknown_product_is_not_found(self):
        resp = self.client.put('/api/products/9999/', {'name': 'Ghost'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

    def test_delete_removes_row_variants_and_files(self):
        image = save_upload(make_image(), PRODUCTS_FOLDER)
        product = Product.objects.create(name='Tank', price='68.00', image=[image, 'https://picsum.photos/id/13/400/400'])
        Variant.objects.create(product=product, name='500L', price='68.00', stock=1)

        with self.captureOnCommitCallbacks(execute=True):
            resp = self.client.delete(f'/api/products/{product.id}/')

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertFalse(Product.objects.exists())
        self.assertFalse(Variant.objects.exists())
        self.assertFalse(stored(image))

    def test_delete_unknown_product_is_not_found(self):
        resp = self.client.delete('/api/products/9999/')
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)


class ReviewApiTests(APITestCase):

    def setUp(self):
        self.client = APIClient()
        self.product = Product.objects.create(name='Manual Pump', price='5.00')

    def test_post_and_list_reviews(self):
        resp = self.client.post(
            f'/api/products/{self.product.id}/reviews/',
            {'author': 'Dara', 'rating': 5, 'text': 'Works great'},
            format='json'
        )
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)

        resp = self.client.get(f'/api/products/{self.product.id}/reviews/')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data['data'][0]['author'], 'Dara')

    def test_rating_out_of_range_is_rejected(self):
        resp = self.client.post(
            f'/api/products/{self.product.id}/reviews/',
            {'author': 'Dara', 'rating': 6, 'text': 'Too good'},
            format='json'
        )
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_reviews_of_unknown_product_are_not_found(self):
        resp = self.client.get('/api/products/9999/reviews/')
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
