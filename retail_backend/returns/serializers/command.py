# returns/serializers/command.py

from rest_framework import serializers

from returns.models import ReturnLine, ReturnTransaction


class ReturnItemSerializer(serializers.Serializer):
    """
    One requested line: {sale_line_id, qty}.

    Quantities are NOT range-checked here; the return validator owns the
    business messages (non-positive, over-return, ...).
    """

    sale_line_id = serializers.IntegerField()
    qty = serializers.DecimalField(max_digits=12, decimal_places=3)


class ReturnCommitLineSerializer(ReturnItemSerializer):
    reason_code = serializers.ChoiceField(
        choices=ReturnLine.ReasonCode.choices,
        required=False,
        default=ReturnLine.ReasonCode.OTHER,
    )
    restock = serializers.BooleanField(required=False, allow_null=True, default=None)


class ReturnItemsCommandSerializer(serializers.Serializer):
    """
    Command serializer for validate / calculate requests.

    This serializer does NOT touch the database.
    """

    sale_id = serializers.IntegerField()
    items = ReturnItemSerializer(many=True, allow_empty=True)


class RefundPaymentsSerializer(serializers.Serializer):
    cash = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, default=0)
    card = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, default=0)
    wallet = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, default=0)
    store_credit = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, default=0)


class ReturnCommitCommandSerializer(serializers.Serializer):
    """
    Command serializer for committing a return.

    manager_pin is verified by the view before the writer runs.
    """

    sale_id = serializers.IntegerField()
    lines = ReturnCommitLineSerializer(many=True, allow_empty=True)
    payments = RefundPaymentsSerializer()
    manager_pin = serializers.CharField(required=False, allow_blank=True, max_length=8)
    reason_summary = serializers.CharField(required=False, allow_blank=True, max_length=255, default="")
    language = serializers.ChoiceField(
        choices=ReturnTransaction.Language.choices,
        required=False,
        default=ReturnTransaction.Language.EN,
    )
    terminal_name = serializers.CharField(required=False, allow_blank=True, max_length=64, default="")
    refund_method = serializers.ChoiceField(
        choices=ReturnTransaction.RefundMethod.choices,
        required=False,
        allow_null=True,
        default=None,
    )
