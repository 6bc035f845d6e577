import logging
import re

from django.db import IntegrityError, transaction

from authentication.core.exceptions import SlugConflictException
from store.models import Category

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r'[^a-z0-9]+')


def slugify_value(value):
    """Lowercase and collapse every run of non-alphanumerics into one `_`"""
    return _NON_ALNUM.sub('_', (value or '').strip().lower()).strip('_')


def build_category_slug(brand, name):
    """`{brand}_{name}` in slug form, e.g. ("Grown", "Hot & Cold") -> "grown_hot_cold" """
    return f"{slugify_value(brand or Category.GLOBAL_BRAND)}_{slugify_value(name)}"


class CategoryService:
    """Create/update/delete categories while keeping brand+name slugs unique"""

    @staticmethod
    def _conflict(brand, name):
        return SlugConflictException(f"Category '{name}' already exists for brand '{brand}'.")

    @staticmethod
    def create_category(*, name, brand=None, display_name=None, image=None):
        brand = (brand or Category.GLOBAL_BRAND).strip()
        slug = build_category_slug(brand, name)

        if Category.objects.filter(slug=slug).exists():
            logger.warning(f"Rejected duplicate category slug: {slug}")
            raise CategoryService._conflict(brand, name)

        try:
            with transaction.atomic():
                category = Category.objects.create(
                    name=name,
                    brand=brand,
                    display_name=display_name or None,
                    image=image or None,
                    slug=slug,
                )
        except IntegrityError as exc:
            raise CategoryService._conflict(brand, name) from exc

        logger.info(f"Category created: {category.slug}")
        return category

    @staticmethod
    def update_category(category, *, name=None, brand=None, display_name=None, image=None):
        new_name = name if name is not None else category.name
        new_brand = (brand if brand is not None else category.brand).strip() or Category.GLOBAL_BRAND

        if new_name != category.name or new_brand != category.brand:
            slug = build_category_slug(new_brand, new_name)
            if slug != category.slug and Category.objects.filter(slug=slug).exclude(pk=category.pk).exists():
                logger.warning(f"Rejected category update {category.pk}: slug {slug} is taken")
                raise CategoryService._conflict(new_brand, new_name)
            category.slug = slug

        category.name = new_name
        category.brand = new_brand
        if display_name is not None:
            category.display_name = display_name or None
        if image is not None:
            category.image = image or None

        try:
            with transaction.atomic():
                category.save()
        except IntegrityError as exc:
            raise CategoryService._conflict(new_brand, new_name) from exc

        return category

    @staticmethod
    def delete_category(category):
        logger.info(f"Deleting category {category.slug}; its products become uncategorized")
        category.delete()
