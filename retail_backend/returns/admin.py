# returns/admin.py

from django.contrib import admin

from returns.models import ReturnAuditEvent, ReturnLine, ReturnTransaction


# ======================================================
# RETURNS ADMIN (VIEW-ONLY; returns come from the writer)
# ======================================================


class ReturnLineInline(admin.TabularInline):
    model = ReturnLine
    extra = 0
    can_delete = False
    readonly_fields = (
        "sale_line",
        "product",
        "quantity",
        "unit_price",
        "line_refund",
        "reason_code",
        "restock",
    )

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(ReturnTransaction)
class ReturnTransactionAdmin(admin.ModelAdmin):
    list_display = (
        "receipt_id",
        "original_sale",
        "refund_method",
        "refund_total",
        "cashier",
        "manager",
        "created_at",
    )
    readonly_fields = [f.name for f in ReturnTransaction._meta.fields]
    search_fields = ("original_sale__invoice_number", "reason_summary", "terminal_name")
    list_filter = ("refund_method", "language", "created_at")
    inlines = [ReturnLineInline]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return request.method in ("GET", "HEAD")

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(ReturnLine)
class ReturnLineAdmin(admin.ModelAdmin):
    list_display = ("id", "return_transaction", "sale_line", "product", "quantity", "line_refund", "restock")
    list_filter = ("reason_code", "restock")
    readonly_fields = [f.name for f in ReturnLine._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return request.method in ("GET", "HEAD")

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(ReturnAuditEvent)
class ReturnAuditEventAdmin(admin.ModelAdmin):
    list_display = ("created_at", "action", "actor", "sale", "return_transaction")
    list_filter = ("action", "created_at")
    search_fields = ("sale__invoice_number",)
    readonly_fields = [f.name for f in ReturnAuditEvent._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return request.method in ("GET", "HEAD")

    def has_delete_permission(self, request, obj=None):
        return False
