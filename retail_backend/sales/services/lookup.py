# sales/services/lookup.py

"""
SALE LOOKUP

Purpose:
- Resolve what the cashier types or scans on the returns screen to a Sale.

Rules:
- Exact invoice_number match wins.
- Otherwise the digits of the reference are read as the sale id
  (receipt barcodes encode the id, e.g. "S-000042").
- Voided sales are never returned.
"""

from __future__ import annotations

import re
from typing import Optional

from sales.models import Sale

_NON_DIGITS = re.compile(r"\D")


def _returnable_sales():
    return Sale.objects.exclude(status=Sale.STATUS_VOIDED).select_related("cashier")


def find_sale_by_reference(reference) -> Optional[Sale]:
    ref = str(reference or "").strip()
    if not ref:
        return None

    sale = _returnable_sales().filter(invoice_number=ref).first()
    if sale is not None:
        return sale

    digits = _NON_DIGITS.sub("", ref)
    if not digits:
        return None

    return _returnable_sales().filter(pk=int(digits)).first()
