from rest_framework import serializers
from .models import Category, Product, Variant, Review


# ---------------------------
# Category Serializers
# ---------------------------
class CategorySerializer(serializers.ModelSerializer):
    displayName = serializers.CharField(source='display_name', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Category
        fields = ['id', 'name', 'displayName', 'brand', 'slug', 'image', 'createdAt']
        read_only_fields = fields


class CategoryWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    displayName = serializers.CharField(source='display_name', max_length=255, required=False, allow_blank=True, allow_null=True)
    brand = serializers.CharField(max_length=100, required=False, allow_blank=True)
    image = serializers.CharField(max_length=500, required=False, allow_blank=True, allow_null=True)

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Name is required")
        return value


# ---------------------------
# Variant Serializers
# ---------------------------
class VariantSerializer(serializers.ModelSerializer):
    productId = serializers.IntegerField(source='product_id', read_only=True)

    class Meta:
        model = Variant
        fields = ['id', 'productId', 'name', 'price', 'stock', 'sku', 'image']
        read_only_fields = fields


class VariantInputSerializer(serializers.Serializer):
    """One entry of the `variants` JSON list submitted with a product form"""
    id = serializers.IntegerField(required=False, allow_null=True)
    name = serializers.CharField(max_length=255)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    stock = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    sku = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    image = serializers.CharField(max_length=500, required=False, allow_blank=True, allow_null=True)

    def to_internal_value(self, data):
        # HTML forms send "" for untouched numeric inputs
        if isinstance(data, dict):
            data = {key: (None if value == '' and key in ('id', 'stock') else value) for key, value in data.items()}
        return super().to_internal_value(data)

    def validate(self, attrs):
        attrs['stock'] = attrs.get('stock') or 0
        attrs['sku'] = attrs.get('sku') or None
        attrs['image'] = attrs.get('image') or None
        return attrs


# ---------------------------
# Review Serializer
# ---------------------------
class ReviewSerializer(serializers.ModelSerializer):
    productId = serializers.IntegerField(source='product_id', read_only=True)
    date = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Review
        fields = ['id', 'productId', 'author', 'rating', 'text', 'date']
        read_only_fields = ['id', 'productId', 'date']
        extra_kwargs = {'rating': {'min_value': 1, 'max_value': 5}}

    def validate_author(self, value):
        if not value.strip():
            raise serializers.ValidationError("Author is required")
        return value.strip()

    def validate_text(self, value):
        if not value.strip():
            raise serializers.ValidationError("Review text is required")
        return value.strip()


# ---------------------------
# Product Serializers
# ---------------------------
class ProductSerializer(serializers.ModelSerializer):
    categoryId = serializers.IntegerField(source='category_id', read_only=True)
    category = CategorySerializer(read_only=True)
    primaryImage = serializers.CharField(source='primary_image', read_only=True)
    inStock = serializers.BooleanField(source='in_stock', read_only=True)
    variants = VariantSerializer(many=True, read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Product
        fields = [
            'id', 'name', 'slug', 'description', 'price', 'volume', 'brand',
            'categoryId', 'category', 'image', 'primaryImage', 'inStock',
            'variants', 'createdAt', 'updatedAt'
        ]
        read_only_fields = fields


class ProductWriteSerializer(serializers.ModelSerializer):
    """Scalar product fields of the admin form; variants and images are handled by ProductService"""
    categoryId = serializers.PrimaryKeyRelatedField(
        source='category', queryset=Category.objects.all(), required=False, allow_null=True
    )
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)

    class Meta:
        model = Product
        fields = ['name', 'description', 'price', 'volume', 'brand', 'categoryId']
        extra_kwargs = {
            'description': {'required': False, 'allow_blank': True},
            'volume': {'required': False, 'allow_blank': True, 'allow_null': True},
            'brand': {'required': False, 'allow_blank': True},
        }
