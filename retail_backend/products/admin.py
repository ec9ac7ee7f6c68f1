# products/admin.py
"""
=====================================================
PATH: products/admin.py
=====================================================

Admin rules (audit-safe stock):

- Product is created once; stock_quantity is read-only here.
- Stock changes go through a "stock change" action that calls adjust_stock(),
  so every change writes an InventoryMovement row.
- InventoryMovement rows are immutable and cannot be edited or deleted.
"""

from __future__ import annotations

from django import forms
from django.contrib import admin, messages
from django.shortcuts import redirect, render

from products.models import InventoryMovement, Product
from products.services.stock import StockError, adjust_stock


# =====================================================
# STOCK CHANGE FORM
# =====================================================

class StockChangeForm(forms.Form):
    movement_type = forms.ChoiceField(
        choices=[
            (InventoryMovement.MovementType.RECEIVE, "Receive"),
            (InventoryMovement.MovementType.ADJUST, "Adjust"),
            (InventoryMovement.MovementType.WASTE, "Waste"),
        ]
    )
    quantity = forms.DecimalField(max_digits=14, decimal_places=3)
    note = forms.CharField(max_length=255, required=False)


# =====================================================
# PRODUCT
# =====================================================

@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = (
        "sku",
        "name_en",
        "unit",
        "unit_price",
        "stock_quantity",
        "is_active",
        "created_at",
    )
    list_filter = ("is_active", "unit", "created_at")
    search_fields = ("sku", "name_en", "name_si", "name_ta")
    ordering = ("name_en",)
    readonly_fields = ("stock_quantity", "created_at", "updated_at")
    actions = ["change_stock"]

    @admin.action(description="Record a stock change for one product")
    def change_stock(self, request, queryset):
        if queryset.count() != 1:
            self.message_user(request, "Select exactly one product.", level=messages.ERROR)
            return None

        product = queryset.first()

        if "apply" in request.POST:
            form = StockChangeForm(request.POST)
            if form.is_valid():
                try:
                    adjust_stock(
                        product=product,
                        movement_type=form.cleaned_data["movement_type"],
                        quantity=form.cleaned_data["quantity"],
                        user=request.user,
                        note=form.cleaned_data["note"],
                    )
                except StockError as exc:
                    self.message_user(request, str(exc), level=messages.ERROR)
                else:
                    self.message_user(request, f"Stock updated for {product.sku}.")
                return redirect(request.get_full_path())
        else:
            form = StockChangeForm()

        return render(
            request,
            "admin/products/stock_change.html",
            {"form": form, "product": product, "queryset": queryset, "opts": self.model._meta},
        )


# =====================================================
# INVENTORY MOVEMENT (VIEW-ONLY LIST)
# =====================================================

@admin.register(InventoryMovement)
class InventoryMovementAdmin(admin.ModelAdmin):
    """
    View-only ledger for audit visibility.
    """

    list_display = (
        "created_at",
        "product",
        "movement_type",
        "quantity",
        "return_line",
        "performed_by",
    )
    list_filter = ("movement_type", "created_at")
    search_fields = ("product__sku", "product__name_en", "note")
    ordering = ("-created_at",)

    readonly_fields = (
        "product",
        "movement_type",
        "quantity",
        "return_line",
        "performed_by",
        "note",
        "created_at",
    )

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
