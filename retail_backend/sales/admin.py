# sales/admin.py

from django.contrib import admin

from sales.models import Sale, SaleLine


# ======================================================
# SALE ADMIN (VIEW-ONLY; sales come from checkout)
# ======================================================


class SaleLineInline(admin.TabularInline):
    model = SaleLine
    extra = 0
    can_delete = False
    readonly_fields = ("product", "quantity", "unit_price", "line_discount", "tax", "total")

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    list_display = (
        "invoice_number",
        "status",
        "payment_method",
        "total_amount",
        "cashier",
        "created_at",
    )
    readonly_fields = [f.name for f in Sale._meta.fields]
    search_fields = ("invoice_number", "customer_name")
    list_filter = ("status", "payment_method", "price_tier", "created_at")
    inlines = [SaleLineInline]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
