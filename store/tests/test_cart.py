"""
Tests for the in-memory shopper cart
"""
from decimal import Decimal

from django.test import SimpleTestCase

from store.cart import Cart
from store.models import Product, Variant


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


class CartTests(SimpleTestCase):

    def setUp(self):
        self.clock = FakeClock()
        self.cart = Cart(clock=self.clock)
        self.product = Product(id=7, name='Pure Life Pack', price=Decimal('5.50'), image=['/uploads/products/pack.png'])
        self.small = Variant(id=1, name='330ml x 24', price=Decimal('5.50'), stock=100, image=None)
        self.large = Variant(id=2, name='500ml x 24', price=Decimal('6.00'), stock=85, image='/uploads/products/large.png')

    def test_adding_same_product_twice_merges_into_one_line(self):
        self.cart.add(self.product)
        self.cart.add(self.product)

        self.assertEqual(len(self.cart.items), 1)
        self.assertEqual(self.cart.items[0].product_id, 7)
        self.assertEqual(self.cart.items[0].quantity, 2)

    def test_each_variant_gets_its_own_line(self):
        self.cart.add(self.product, self.small)
        self.cart.add(self.product, self.large)

        self.assertEqual([line.line_id for line in self.cart.items], ['7:1', '7:2'])
        self.assertEqual([line.quantity for line in self.cart.items], [1, 1])

    def test_variant_line_uses_variant_price_name_and_image(self):
        line = self.cart.add(self.product, self.large)
        self.assertEqual(line.name, 'Pure Life Pack (500ml x 24)')
        self.assertEqual(line.price, Decimal('6.00'))
        self.assertEqual(line.image, '/uploads/products/large.png')

    def test_variant_without_image_falls_back_to_primary_image(self):
        line = self.cart.add(self.product, self.small)
        self.assertEqual(line.image, '/uploads/products/pack.png')

    def test_merging_does_not_refresh_line_details(self):
        self.cart.add(self.product)
        self.product.price = Decimal('9.99')
        self.product.name = 'Renamed'
        line = self.cart.add(self.product)

        self.assertEqual(line.price, Decimal('5.50'))
        self.assertEqual(line.name, 'Pure Life Pack')
        self.assertEqual(line.quantity, 2)

    def test_decrement_to_zero_keeps_quantity(self):
        self.cart.add(self.product)
        line = self.cart.update_quantity('7', -1)

        self.assertEqual(line.quantity, 1)
        self.assertEqual(len(self.cart.items), 1)

    def test_update_quantity_applies_positive_result(self):
        self.cart.add(self.product, self.small)
        self.cart.update_quantity('7:1', 3)
        self.cart.update_quantity('7:1', -2)
        self.assertEqual(self.cart.get('7:1').quantity, 2)

    def test_update_quantity_on_unknown_line_is_noop(self):
        self.assertIsNone(self.cart.update_quantity('99', 1))
        self.assertTrue(self.cart.is_empty)

    def test_remove_targets_a_single_line(self):
        self.cart.add(self.product, self.small)
        self.cart.add(self.product, self.large)
        self.cart.remove('7:1')
        self.assertEqual([line.line_id for line in self.cart.items], ['7:2'])

    def test_remove_product_drops_every_variant(self):
        self.cart.add(self.product, self.small)
        self.cart.add(self.product, self.large)
        self.cart.remove_product(7)
        self.assertTrue(self.cart.is_empty)

    def test_remove_product_accepts_string_ids(self):
        self.cart.add(self.product, self.small)
        self.cart.add(self.product, self.large)
        self.cart.remove_product('7')
        self.assertTrue(self.cart.is_empty)

    def test_totals(self):
        self.cart.add(self.product, self.small)
        self.cart.add(self.product, self.small)
        self.cart.add(self.product, self.large)

        self.assertEqual(self.cart.total_quantity, 3)
        self.assertEqual(self.cart.subtotal, Decimal('17.00'))

    def test_checkout_clears_cart_and_confirmation_expires(self):
        self.cart.add(self.product)
        self.cart.checkout()

        self.assertEqual(self.cart.items, [])
        self.assertTrue(self.cart.show_success)

        self.clock.now += 2.9
        self.assertTrue(self.cart.show_success)

        self.clock.now += 0.2
        self.assertFalse(self.cart.show_success)

    def test_no_confirmation_before_checkout(self):
        self.assertFalse(self.cart.show_success)
