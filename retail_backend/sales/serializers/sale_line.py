# sales/serializers/sale_line.py

from rest_framework import serializers

from sales.models import SaleLine


class SaleLineSerializer(serializers.ModelSerializer):
    """
    Sale line serializer (read-only).
    """

    sku = serializers.CharField(source="product.sku", read_only=True)
    product_name = serializers.CharField(source="product.name_en", read_only=True)

    class Meta:
        model = SaleLine
        fields = [
            "id",
            "product",
            "sku",
            "product_name",
            "quantity",
            "unit_price",
            "line_discount",
            "tax",
            "total",
        ]
        read_only_fields = fields
