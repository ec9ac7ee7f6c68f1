# returns/serializers/read.py

from rest_framework import serializers


class EligibilityReadSerializer(serializers.Serializer):
    allowed = serializers.BooleanField()
    reason = serializers.CharField(allow_null=True)


class ReturnableLineReadSerializer(serializers.Serializer):
    """
    Sale line as offered on the returns screen.
    """

    sale_line_id = serializers.IntegerField()
    product_id = serializers.IntegerField()
    sku = serializers.CharField()
    product_name = serializers.CharField()
    quantity_sold = serializers.DecimalField(max_digits=12, decimal_places=3)
    quantity_returned = serializers.DecimalField(max_digits=12, decimal_places=3)
    quantity_returnable = serializers.DecimalField(max_digits=12, decimal_places=3)
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2)
    line_discount = serializers.DecimalField(max_digits=12, decimal_places=2)
    tax = serializers.DecimalField(max_digits=12, decimal_places=2)


class ValidationReadSerializer(serializers.Serializer):
    ok = serializers.BooleanField()
    errors = serializers.ListField(child=serializers.CharField())


class RefundLineReadSerializer(serializers.Serializer):
    sale_line_id = serializers.IntegerField()
    product_id = serializers.IntegerField()
    qty = serializers.DecimalField(max_digits=12, decimal_places=3)
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2)
    line_refund = serializers.DecimalField(max_digits=12, decimal_places=2)


class RefundCalculationReadSerializer(serializers.Serializer):
    lines = RefundLineReadSerializer(many=True)
    total = serializers.DecimalField(max_digits=14, decimal_places=2)
    requires_manager_authorization = serializers.BooleanField()


class CommitResultReadSerializer(serializers.Serializer):
    return_id = serializers.IntegerField()
    receipt_id = serializers.CharField()
    refund_total = serializers.DecimalField(max_digits=14, decimal_places=2)
    lines_processed = serializers.IntegerField()
    inventory_updated = serializers.IntegerField()


class ReturnSummaryReadSerializer(serializers.Serializer):
    """
    Read-only row of the refund history list.
    """

    id = serializers.IntegerField()
    receipt_id = serializers.CharField()
    refund_datetime = serializers.DateTimeField()
    original_invoice = serializers.CharField()
    customer_name = serializers.CharField(allow_blank=True)
    cashier_name = serializers.CharField()
    manager_name = serializers.CharField(allow_null=True)
    terminal = serializers.CharField(allow_blank=True)
    method = serializers.CharField()
    restock_count = serializers.IntegerField()
    refund_net = serializers.DecimalField(max_digits=14, decimal_places=2)
    reason = serializers.CharField(allow_blank=True)
