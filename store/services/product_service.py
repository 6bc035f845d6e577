import logging
from decimal import Decimal

from django.db import transaction
from rest_framework.exceptions import ValidationError

from authentication.core.exceptions import MalformedPayloadException
from authentication.core.task_dispatch import dispatch_on_commit
from store.models import Product, Variant
from store.serializers import ProductWriteSerializer, VariantInputSerializer
from store.tasks import delete_orphaned_uploads_task
from .gallery import reconcile_gallery
from .payloads import parse_json_list, parse_url_list
from .uploads import PRODUCTS_FOLDER, discard_uploads, save_uploads

logger = logging.getLogger(__name__)


def display_price(base_price, variant_prices):
    """Cheapest positive variant price, or the base price when there is none"""
    positive = [Decimal(price) for price in variant_prices if price is not None and Decimal(price) > 0]
    if positive:
        return min(positive)
    return Decimal(base_price)


def parse_variants(raw):
    """Decode and validate the `variants` form field into a list of dicts"""
    entries = parse_json_list(raw, 'variants')
    serializer = VariantInputSerializer(data=entries, many=True)
    if not serializer.is_valid():
        raise ValidationError({'variants': serializer.errors})
    return serializer.validated_data


class ProductService:
    """
    Product writes for the admin dashboard. A product row, its variants and its
    gallery are saved together; files that stop being referenced are removed
    only after the write has committed.
    """

    @staticmethod
    def sync_variants(product, variants_data):
        """
        Make the product's variants match `variants_data`: entries with the id
        of one of this product's variants update it in place, other entries
        are inserted and variants no longer listed are deleted.
        """
        existing = {variant.id: variant for variant in product.variants.all()}
        kept_ids = set()

        for entry in variants_data:
            fields = {key: value for key, value in entry.items() if key != 'id'}
            variant = existing.get(entry.get('id'))
            if variant is None or variant.id in kept_ids:
                variant = Variant.objects.create(product=product, **fields)
            else:
                for field, value in fields.items():
                    setattr(variant, field, value)
                variant.save()
            kept_ids.add(variant.id)

        stale_ids = [variant_id for variant_id in existing if variant_id not in kept_ids]
        if stale_ids:
            Variant.objects.filter(product=product, id__in=stale_ids).delete()

        logger.info(
            f"Variants synced for product {product.id}: "
            f"{len(kept_ids)} kept/created, {len(stale_ids)} removed"
        )
        return list(product.variants.all())

    @staticmethod
    def _apply_display_price(product, base_price):
        product.price = display_price(base_price, product.variants.values_list('price', flat=True))

    @staticmethod
    def create_product(data, files):
        serializer = ProductWriteSerializer(data=data)
        serializer.is_valid(raise_exception=True)

        variants_data = parse_variants(data['variants']) if data.get('variants') else []
        linked_images = parse_url_list(data['image'], 'image') if data.get('image') else []

        uploaded = save_uploads(files, PRODUCTS_FOLDER)
        try:
            with transaction.atomic():
                product = serializer.save(image=linked_images + uploaded)
                ProductService.sync_variants(product, variants_data)
                ProductService._apply_display_price(product, serializer.validated_data['price'])
                product.save(update_fields=['price', 'updated_at'])
        except Exception:
            logger.error(f"Product creation failed, discarding {len(uploaded)} stored upload(s)", exc_info=True)
            discard_uploads(uploaded, PRODUCTS_FOLDER)
            raise

        logger.info(f"Product created: {product.id} ({product.slug}) with {len(product.image)} image(s)")
        return product

    @staticmethod
    def update_product(product, data, files):
        """
        Partial update. `variants` and `existingGallery` are only reconciled
        when present in the payload; new `images` are appended after the kept
        gallery entries. Only images already in this product's gallery can be
        kept.
        """
        serializer = ProductWriteSerializer(product, data=data, partial=True)
        serializer.is_valid(raise_exception=True)

        current = list(product.image or [])
        variants_data = parse_variants(data['variants']) if 'variants' in data else None
        if 'existingGallery' in data:
            kept = parse_url_list(data['existingGallery'], 'existingGallery')
            foreign = [url for url in kept if url not in current]
            if foreign:
                raise MalformedPayloadException(
                    f"'existingGallery' can only keep images of this product; '{foreign[0]}' is not one of them."
                )
        else:
            kept = current

        uploaded = save_uploads(files, PRODUCTS_FOLDER)
        final_images, to_delete = reconcile_gallery(current, kept, uploaded)

        try:
            with transaction.atomic():
                base_price = serializer.validated_data.get('price', product.price)
                product = serializer.save(image=final_images)
                if variants_data is not None:
                    ProductService.sync_variants(product, variants_data)
                ProductService._apply_display_price(product, base_price)
                product.save(update_fields=['price', 'updated_at'])

                if to_delete:
                    dispatch_on_commit(delete_orphaned_uploads_task, to_delete, PRODUCTS_FOLDER)
        except Exception:
            logger.error(f"Product {product.id} update failed, discarding {len(uploaded)} stored upload(s)", exc_info=True)
            discard_uploads(uploaded, PRODUCTS_FOLDER)
            raise

        logger.info(
            f"Product updated: {product.id}, gallery {len(final_images)} image(s), "
            f"{len(to_delete)} queued for deletion"
        )
        return product

    @staticmethod
    def delete_product(product):
        gallery = list(product.image or [])
        product_id = product.id
        with transaction.atomic():
            product.delete()
            if gallery:
                dispatch_on_commit(delete_orphaned_uploads_task, gallery, PRODUCTS_FOLDER)
        logger.info(f"Product deleted: {product_id}, {len(gallery)} image(s) queued for deletion")
