from django.contrib import admin

from billing_core.models import Product

from .mixins import OwnerAdminMixin


# Register `Product` model
@admin.register(Product)
class ProductAdmin(OwnerAdminMixin, admin.ModelAdmin):
    list_display = ("id", "owner", "barcode", "name", "price", "vat_percent")
    search_fields = ("barcode", "name")
    list_filter = ("owner",)
