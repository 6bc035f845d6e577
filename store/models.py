from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils.text import slugify


# ==========================================
# Category Model
# ==========================================
class Category(models.Model):
    """
    A named product grouping scoped to a brand. Categories with brand "all"
    are shown under every brand.
    """
    GLOBAL_BRAND = 'all'

    name = models.CharField(max_length=255)
    display_name = models.CharField(max_length=255, blank=True, null=True)
    brand = models.CharField(max_length=100, default=GLOBAL_BRAND, db_index=True)
    slug = models.SlugField(max_length=400, unique=True)
    image = models.CharField(max_length=500, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name_plural = "Categories"
        ordering = ['-created_at', '-id']

    @property
    def label(self):
        return self.display_name or self.name

    def __str__(self):
        return f"{self.label} ({self.brand})"


# ==========================================
# Product Model
# ==========================================
class Product(models.Model):
    category = models.ForeignKey(Category, on_delete=models.SET_NULL, null=True, blank=True, related_name='products')
    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=300, unique=True, blank=True)
    description = models.TextField(blank=True, default='')
    price = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    volume = models.CharField(max_length=255, blank=True, null=True)
    brand = models.CharField(max_length=100, blank=True, default='', db_index=True)
    image = models.JSONField(default=list, blank=True, help_text="Ordered gallery of image URLs; the first is the primary image")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-id']

    def save(self, *args, **kwargs):
        if not self.slug:
            base_slug = slugify(self.name) or 'product'
            slug = base_slug
            num = 1
            while Product.objects.filter(slug=slug).exclude(pk=self.pk).exists():
                slug = f"{base_slug}-{num}"
                num += 1
            self.slug = slug
        super().save(*args, **kwargs)

    @property
    def primary_image(self):
        """First gallery entry, or None for a product without images"""
        return self.image[0] if self.image else None

    @property
    def in_stock(self):
        return any(variant.stock > 0 for variant in self.variants.all())

    def __str__(self):
        return self.name


# ==========================================
# Variant Model
# ==========================================
class Variant(models.Model):
    """
    A purchasable option of a product (size, tank capacity, colour) with
    its own price and stock. Always edited through its parent product.
    """
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='variants')
    name = models.CharField(max_length=255)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    stock = models.PositiveIntegerField(default=0)
    sku = models.CharField(max_length=100, blank=True, null=True)
    image = models.CharField(max_length=500, blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['id']

    def __str__(self):
        return f"{self.product.name} ({self.name})"


# ==========================================
# Review Model
# ==========================================
class Review(models.Model):
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='reviews')
    author = models.CharField(max_length=150)
    rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    text = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"Review for {self.product.name} by {self.author}"
