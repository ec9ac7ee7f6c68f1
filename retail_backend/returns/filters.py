# returns/filters.py

"""
Refund history filters (django-filter).

date_from / date_to are whole days, both inclusive.
min_amount / max_amount compare against the annotated refund_net.
"""

from __future__ import annotations

import django_filters

from returns.models import ReturnTransaction


class ReturnTransactionFilter(django_filters.FilterSet):
    date_from = django_filters.DateFilter(field_name="created_at", lookup_expr="date__gte")
    date_to = django_filters.DateFilter(field_name="created_at", lookup_expr="date__lte")
    method = django_filters.ChoiceFilter(
        field_name="refund_method",
        choices=ReturnTransaction.RefundMethod.choices,
    )
    cashier = django_filters.UUIDFilter(field_name="cashier_id")
    min_amount = django_filters.NumberFilter(field_name="refund_net", lookup_expr="gte")
    max_amount = django_filters.NumberFilter(field_name="refund_net", lookup_expr="lte")

    class Meta:
        model = ReturnTransaction
        fields = ["date_from", "date_to", "method", "cashier", "min_amount", "max_amount"]
