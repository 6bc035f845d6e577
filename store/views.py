import logging

from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiExample
from rest_framework import generics, status
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from authentication.core.base_view import BaseAPIView
from authentication.core.permissions import IsAdminOrReadOnly
from authentication.core.response import standardized_response
from .filters import CategoryFilter, ProductFilter
from .models import Category, Product
from .serializers import (
    CategorySerializer, CategoryWriteSerializer, ProductSerializer,
    ProductWriteSerializer, ReviewSerializer
)
from .services.category_service import CategoryService
from .services.product_service import ProductService

logger = logging.getLogger(__name__)


def product_queryset():
    return Product.objects.select_related('category').prefetch_related('variants')


def uploaded_images(request):
    """Gallery files of a product form; browsers may post them as `images[]`"""
    return request.FILES.getlist('images') or request.FILES.getlist('images[]')


# ---------------------------
# Products List & Create
# ---------------------------
class ProductListCreateView(BaseAPIView, generics.ListAPIView):
    permission_classes = [IsAdminOrReadOnly]
    serializer_class = ProductSerializer
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    filterset_class = ProductFilter
    search_fields = ['name', 'description', 'brand']
    ordering_fields = ['price', 'name', 'created_at', 'id']

    def get_queryset(self):
        return product_queryset()

    @extend_schema(
        tags=["Products"],
        parameters=[
            OpenApiParameter(name='brand', description='Filter by brand (case-insensitive)', required=False, type=str),
            OpenApiParameter(name='category', description='Filter by category slug or id', required=False, type=str),
            OpenApiParameter(name='search', description='Search by name, description or brand', required=False, type=str),
            OpenApiParameter(name='ordering', description='Order by price, name, created_at or id', required=False, type=str),
        ],
        responses={200: ProductSerializer(many=True)},
        description="Retrieve the catalog, newest first. Supports filtering, search, and ordering."
    )
    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())
        serializer = self.get_serializer(queryset, many=True)
        return Response(standardized_response(data=serializer.data))

    @extend_schema(
        tags=["Products"],
        request={'multipart/form-data': ProductWriteSerializer},
        examples=[
            OpenApiExample(
                "Create product example",
                summary="Add a dispenser with two variants",
                value={
                    "name": "Pure Water Dispenser",
                    "description": "Hot & cold floor-standing dispenser",
                    "price": 199.0,
                    "brand": "grown",
                    "categoryId": 1,
                    "variants": '[{"name": "White", "price": 199, "stock": 5}]',
                }
            )
        ],
        responses={201: ProductSerializer, 400: {"description": "Invalid input"}},
        description="Create a product (admin only). Uploaded `images` become the gallery, the first being the primary image."
    )
    def post(self, request):
        product = ProductService.create_product(request.data, uploaded_images(request))
        return Response(
            standardized_response(
                message="Product created successfully",
                data=ProductSerializer(product_queryset().get(pk=product.pk)).data
            ),
            status=status.HTTP_201_CREATED
        )


# ---------------------------
# Product Detail, Update & Delete
# ---------------------------
class ProductDetailView(BaseAPIView):
    permission_classes = [IsAdminOrReadOnly]

    @extend_schema(
        tags=["Products"],
        responses={200: ProductSerializer, 404: {"description": "Product not found"}},
        description="Retrieve a single product with its variants"
    )
    def get(self, request, pk):
        product = get_object_or_404(product_queryset(), pk=pk)
        return Response(standardized_response(data=ProductSerializer(product).data))

    @extend_schema(
        tags=["Products"],
        request={'multipart/form-data': ProductWriteSerializer},
        responses={200: ProductSerializer, 400: {"description": "Invalid input"}, 404: {"description": "Product not found"}},
        description=(
            "Update a product (admin only). `existingGallery` (JSON list) lists the images to keep, "
            "new `images` are appended after them and `variants` (JSON list) replaces the variant set. "
            "Images dropped from the gallery are deleted from storage once the update is saved."
        )
    )
    def put(self, request, pk):
        product = get_object_or_404(Product, pk=pk)
        product = ProductService.update_product(product, request.data, uploaded_images(request))
        return Response(
            standardized_response(
                message="Product updated successfully",
                data=ProductSerializer(product_queryset().get(pk=product.pk)).data
            )
        )

    @extend_schema(
        tags=["Products"],
        responses={200: {"description": "Product deleted"}, 404: {"description": "Product not found"}},
        description="Delete a product, its variants and its gallery files (admin only)"
    )
    def delete(self, request, pk):
        product = get_object_or_404(Product, pk=pk)
        ProductService.delete_product(product)
        return Response(standardized_response(message="Product deleted"))


class ProductByBrandCategoryView(BaseAPIView, generics.ListAPIView):
    """Storefront browsing; `all` as brand or category disables that filter"""
    permission_classes = [AllowAny]
    serializer_class = ProductSerializer

    def get_queryset(self):
        queryset = product_queryset()
        brand = self.kwargs['brand']
        category = self.kwargs['category']
        if brand.lower() != Category.GLOBAL_BRAND:
            queryset = queryset.filter(brand__iexact=brand)
        if category.lower() != Category.GLOBAL_BRAND:
            queryset = queryset.filter(category__slug=category)
        return queryset

    @extend_schema(
        tags=["Products"],
        responses={200: ProductSerializer(many=True)},
        description="Products of a brand, optionally narrowed to one category slug"
    )
    def list(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_queryset(), many=True)
        return Response(standardized_response(data=serializer.data))


# ---------------------------
# Reviews
# ---------------------------
class ProductReviewListCreateView(BaseAPIView):
    permission_classes = [AllowAny]

    @extend_schema(
        tags=["Reviews"],
        responses={200: ReviewSerializer(many=True), 404: {"description": "Product not found"}},
        description="List a product's reviews, newest first"
    )
    def get(self, request, pk):
        product = get_object_or_404(Product, pk=pk)
        serializer = ReviewSerializer(product.reviews.all(), many=True)
        return Response(standardized_response(data=serializer.data))

    @extend_schema(
        tags=["Reviews"],
        request=ReviewSerializer,
        responses={201: ReviewSerializer, 400: {"description": "Invalid input"}, 404: {"description": "Product not found"}},
        description="Post a review for a product"
    )
    def post(self, request, pk):
        product = get_object_or_404(Product, pk=pk)
        serializer = ReviewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        review = serializer.save(product=product)
        logger.info(f"Review {review.id} added to product {product.id}")
        return Response(
            standardized_response(message="Review added successfully", data=ReviewSerializer(review).data),
            status=status.HTTP_201_CREATED
        )


# ---------------------------
# Categories
# ---------------------------
class CategoryListCreateView(BaseAPIView, generics.ListAPIView):
    permission_classes = [IsAdminOrReadOnly]
    serializer_class = CategorySerializer
    queryset = Category.objects.all()
    filter_backends = [DjangoFilterBackend]
    filterset_class = CategoryFilter

    @extend_schema(
        tags=["Categories"],
        parameters=[
            OpenApiParameter(name='brand', description='Brand whose categories to list; global categories are always included', required=False, type=str),
        ],
        responses={200: CategorySerializer(many=True)},
        description="List categories, newest first"
    )
    def list(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.filter_queryset(self.get_queryset()), many=True)
        return Response(standardized_response(data=serializer.data))

    @extend_schema(
        tags=["Categories"],
        request=CategoryWriteSerializer,
        responses={201: CategorySerializer, 400: {"description": "Invalid input or duplicate category"}},
        description="Create a category (admin only). The brand + name pair must be unique."
    )
    def post(self, request):
        serializer = CategoryWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        category = CategoryService.create_category(**serializer.validated_data)
        return Response(
            standardized_response(message="Category created successfully", data=CategorySerializer(category).data),
            status=status.HTTP_201_CREATED
        )


class CategoryDetailView(BaseAPIView):
    permission_classes = [IsAdminOrReadOnly]

    @extend_schema(tags=["Categories"], responses={200: CategorySerializer, 404: {"description": "Category not found"}})
    def get(self, request, pk):
        category = get_object_or_404(Category, pk=pk)
        return Response(standardized_response(data=CategorySerializer(category).data))

    @extend_schema(
        tags=["Categories"],
        request=CategoryWriteSerializer,
        responses={200: CategorySerializer, 400: {"description": "Invalid input or duplicate category"}, 404: {"description": "Category not found"}},
        description="Update a category (admin only)"
    )
    def put(self, request, pk):
        category = get_object_or_404(Category, pk=pk)
        serializer = CategoryWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        category = CategoryService.update_category(category, **serializer.validated_data)
        return Response(
            standardized_response(message="Category updated successfully", data=CategorySerializer(category).data)
        )

    @extend_schema(
        tags=["Categories"],
        responses={200: {"description": "Category deleted"}, 404: {"description": "Category not found"}},
        description="Delete a category (admin only); its products are kept without a category"
    )
    def delete(self, request, pk):
        category = get_object_or_404(Category, pk=pk)
        CategoryService.delete_category(category)
        return Response(standardized_response(message="Category deleted"))
