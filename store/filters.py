import django_filters
from django.db.models import Q

from .models import Category, Product


class ProductFilter(django_filters.FilterSet):
    brand = django_filters.CharFilter(field_name='brand', lookup_expr='iexact')
    category = django_filters.CharFilter(method='filter_category')
    min_price = django_filters.NumberFilter(field_name='price', lookup_expr='gte')
    max_price = django_filters.NumberFilter(field_name='price', lookup_expr='lte')

    class Meta:
        model = Product
        fields = ['brand', 'category', 'min_price', 'max_price']

    def filter_category(self, queryset, name, value):
        """Accept either a category slug or its numeric id"""
        if value.isdigit():
            return queryset.filter(category_id=int(value))
        return queryset.filter(category__slug=value)


class CategoryFilter(django_filters.FilterSet):
    brand = django_filters.CharFilter(method='filter_brand')

    class Meta:
        model = Category
        fields = ['brand']

    def filter_brand(self, queryset, name, value):
        """A brand's categories include the global ones"""
        return queryset.filter(Q(brand__iexact=value) | Q(brand=Category.GLOBAL_BRAND))
