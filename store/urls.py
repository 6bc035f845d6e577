from django.urls import path

from .views import (
    CategoryDetailView,
    CategoryListCreateView,
    ProductByBrandCategoryView,
    ProductDetailView,
    ProductListCreateView,
    ProductReviewListCreateView,
)

urlpatterns = [
    # Products
    path('products/', ProductListCreateView.as_view(), name='product-list'),
    path('products/<int:pk>/', ProductDetailView.as_view(), name='product-detail'),
    path('products/<int:pk>/reviews/', ProductReviewListCreateView.as_view(), name='product-reviews'),
    path('products/<str:brand>/<str:category>/', ProductByBrandCategoryView.as_view(), name='product-by-brand-category'),

    # Categories
    path('categories/', CategoryListCreateView.as_view(), name='category-list'),
    path('categories/<int:pk>/', CategoryDetailView.as_view(), name='category-detail'),
]
