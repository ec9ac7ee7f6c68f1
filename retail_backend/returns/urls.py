# returns/urls.py

"""
RETURNS API URLS

Mounted at /api/returns/ by backend/urls.py.

    GET  sales/lookup/?reference=
    GET  sales/<id>/eligibility/
    GET  sales/<id>/lines/
    POST validate/
    POST calculate/
    POST ""                  (commit)
    GET  ""                  (history)
    GET  <id>/receipt/
    GET  reasons/
"""

from django.urls import path

from .views import (
    ReturnCalculateView,
    ReturnListCreateView,
    ReturnReasonsView,
    ReturnReceiptView,
    ReturnValidateView,
    SaleEligibilityView,
    SaleLookupView,
    SaleReturnableLinesView,
)

app_name = "returns"

urlpatterns = [
    # ---------------- ORIGINAL SALE ----------------
    path("sales/lookup/", SaleLookupView.as_view(), name="sale-lookup"),
    path("sales/<int:sale_id>/eligibility/", SaleEligibilityView.as_view(), name="sale-eligibility"),
    path("sales/<int:sale_id>/lines/", SaleReturnableLinesView.as_view(), name="sale-lines"),
    # ---------------- DRY RUNS ----------------
    path("validate/", ReturnValidateView.as_view(), name="validate"),
    path("calculate/", ReturnCalculateView.as_view(), name="calculate"),
    path("reasons/", ReturnReasonsView.as_view(), name="reasons"),
    # ---------------- COMMIT / HISTORY ----------------
    path("", ReturnListCreateView.as_view(), name="list-create"),
    path("<int:return_id>/receipt/", ReturnReceiptView.as_view(), name="receipt"),
]
