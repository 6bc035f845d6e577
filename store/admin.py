from django.contrib import admin
from .models import Category, Product, Variant, Review


class VariantInline(admin.TabularInline):
    model = Variant
    extra = 0
    fields = ('name', 'price', 'stock', 'sku', 'image')


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ('name', 'display_name', 'brand', 'slug', 'created_at')
    list_filter = ('brand',)
    search_fields = ('name', 'display_name', 'slug')
    readonly_fields = ('slug', 'created_at')


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ('name', 'brand', 'category', 'price', 'in_stock', 'created_at')
    list_filter = ('brand', 'category', 'created_at')
    search_fields = ('name', 'description')
    readonly_fields = ('slug', 'created_at', 'updated_at')
    inlines = [VariantInline]
    fieldsets = (
        ('Basic Information', {
            'fields': ('name', 'slug', 'brand', 'category')
        }),
        ('Details', {
            'fields': ('description', 'price', 'volume', 'image')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ('product', 'author', 'rating', 'created_at')
    list_filter = ('rating', 'created_at')
    search_fields = ('product__name', 'author', 'text')
    readonly_fields = ('created_at',)
