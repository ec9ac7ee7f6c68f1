# sales/serializers/sale.py

from rest_framework import serializers

from sales.models import Sale

from .sale_line import SaleLineSerializer


class SaleSerializer(serializers.ModelSerializer):
    """
    Original sale as shown on the returns screen (read-only).
    """

    cashier_name = serializers.SerializerMethodField()
    lines = SaleLineSerializer(many=True, read_only=True)

    class Meta:
        model = Sale
        fields = [
            "id",
            "invoice_number",
            "created_at",
            "cashier",
            "cashier_name",
            "customer_name",
            "price_tier",
            "payment_method",
            "subtotal_amount",
            "discount_amount",
            "tax_amount",
            "total_amount",
            "language",
            "terminal_name",
            "status",
            "lines",
        ]
        read_only_fields = fields

    def get_cashier_name(self, obj) -> str:
        cashier = getattr(obj, "cashier", None)
        return cashier.display_name if cashier else ""
