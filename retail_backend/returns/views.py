# returns/views.py

"""
======================================================
PATH: returns/views.py
======================================================
RETURNS & REFUNDS API

Thin HTTP layer over returns.services:
- command serializers validate the request shape only
- business rules live in the services
- every domain error maps to one canonical error envelope

Access:
- JWT authenticated
- CAP_POS_REFUND (cashier / manager / admin)
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from permissions.roles import CAP_POS_REFUND, CAP_REPORTS_VIEW_POS, HasAnyCapability, HasCapability
from returns.models import ReturnAuditEvent, ReturnLine
from returns.serializers import (
    CommitResultReadSerializer,
    EligibilityReadSerializer,
    RefundCalculationReadSerializer,
    ReturnableLineReadSerializer,
    ReturnCommitCommandSerializer,
    ReturnItemsCommandSerializer,
    ReturnSummaryReadSerializer,
    ValidationReadSerializer,
)
from returns.services import (
    ManagerAuthorizationError,
    ManagerAuthorizationRequired,
    ReturnNotFoundError,
    ReturnValidationError,
    ReturnWriteError,
    SaleNotFoundError,
    calculate_refund,
    can_refund,
    commit_return,
    format_return_receipt,
    list_refunds,
    record_event,
    returnable_lines,
    validate_return,
)
from sales.models import Sale
from sales.serializers import SaleSerializer
from sales.services.lookup import find_sale_by_reference
from users.services.pin import verify_manager_pin
from users.views import ManagerPinThrottle


# ======================================================
# API ERROR NORMALIZATION
# ======================================================

def error_response(*, code: str, message: str, http_status: int, **extra):
    """
    Canonical API error response.
    """
    body = {"code": code, "message": message}
    body.update(extra)
    return Response({"error": body}, status=http_status)


def domain_error_response(exc: Exception):
    """
    Maps a returns service error to its API error envelope.
    """
    if isinstance(exc, ReturnValidationError):
        return error_response(
            code="RETURN_INVALID",
            message=str(exc),
            http_status=status.HTTP_400_BAD_REQUEST,
            errors=exc.errors,
        )

    if isinstance(exc, SaleNotFoundError):
        return error_response(
            code="SALE_NOT_FOUND",
            message=str(exc),
            http_status=status.HTTP_404_NOT_FOUND,
        )

    if isinstance(exc, ReturnNotFoundError):
        return error_response(
            code="RETURN_NOT_FOUND",
            message=str(exc),
            http_status=status.HTTP_404_NOT_FOUND,
        )

    if isinstance(exc, ManagerAuthorizationRequired):
        return error_response(
            code="MANAGER_AUTHORIZATION_REQUIRED",
            message=str(exc),
            http_status=status.HTTP_403_FORBIDDEN,
            refund_total=str(exc.refund_total),
            threshold=str(exc.threshold),
        )

    if isinstance(exc, ManagerAuthorizationError):
        return error_response(
            code="MANAGER_NOT_AUTHORIZED",
            message=str(exc),
            http_status=status.HTTP_403_FORBIDDEN,
        )

    if isinstance(exc, ReturnWriteError):
        return error_response(
            code="RETURN_WRITE_FAILED",
            message=str(exc),
            http_status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    raise exc


def _load_sale(sale_id):
    sale = Sale.objects.filter(pk=sale_id).first()
    if sale is None:
        raise SaleNotFoundError()
    return sale


class RefundAPIView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_POS_REFUND


class RefundReadAPIView(APIView):
    """
    Read access to committed returns: till staff or report viewers.
    """

    permission_classes = [IsAuthenticated, HasAnyCapability]
    required_any_capabilities = {CAP_POS_REFUND, CAP_REPORTS_VIEW_POS}


# ======================================================
# SALE LOOKUP / ELIGIBILITY
# ======================================================

class SaleLookupView(RefundAPIView):
    @extend_schema(
        parameters=[
            OpenApiParameter(
                name="reference",
                type=OpenApiTypes.STR,
                required=True,
                description="Invoice number or scanned receipt barcode.",
            )
        ],
        responses={200: SaleSerializer},
    )
    def get(self, request):
        reference = (request.query_params.get("reference") or "").strip()
        if not reference:
            return error_response(
                code="REFERENCE_REQUIRED",
                message="reference is required",
                http_status=status.HTTP_400_BAD_REQUEST,
            )

        sale = find_sale_by_reference(reference)
        if sale is None:
            return domain_error_response(SaleNotFoundError())

        return Response(SaleSerializer(sale).data, status=status.HTTP_200_OK)


class SaleEligibilityView(RefundAPIView):
    @extend_schema(responses={200: EligibilityReadSerializer})
    def get(self, request, sale_id):
        result = can_refund(sale_id=sale_id)
        return Response(EligibilityReadSerializer(result).data, status=status.HTTP_200_OK)


class SaleReturnableLinesView(RefundAPIView):
    @extend_schema(responses={200: ReturnableLineReadSerializer(many=True)})
    def get(self, request, sale_id):
        try:
            lines = returnable_lines(sale_id=sale_id)
        except SaleNotFoundError as exc:
            return domain_error_response(exc)

        return Response(
            ReturnableLineReadSerializer(lines, many=True).data,
            status=status.HTTP_200_OK,
        )


# ======================================================
# VALIDATE / CALCULATE (no writes)
# ======================================================

class ReturnValidateView(RefundAPIView):
    @extend_schema(request=ReturnItemsCommandSerializer, responses={200: ValidationReadSerializer})
    def post(self, request):
        command = ReturnItemsCommandSerializer(data=request.data)
        command.is_valid(raise_exception=True)
        data = command.validated_data

        try:
            sale = _load_sale(data["sale_id"])
        except SaleNotFoundError as exc:
            return domain_error_response(exc)

        result = validate_return(sale=sale, items=data["items"])
        return Response(ValidationReadSerializer(result).data, status=status.HTTP_200_OK)


class ReturnCalculateView(RefundAPIView):
    @extend_schema(request=ReturnItemsCommandSerializer, responses={200: RefundCalculationReadSerializer})
    def post(self, request):
        command = ReturnItemsCommandSerializer(data=request.data)
        command.is_valid(raise_exception=True)
        data = command.validated_data

        try:
            sale = _load_sale(data["sale_id"])
            calc = calculate_refund(sale=sale, items=data["items"])
        except (SaleNotFoundError, ReturnValidationError) as exc:
            return domain_error_response(exc)

        return Response(RefundCalculationReadSerializer(calc).data, status=status.HTTP_200_OK)


# ======================================================
# COMMIT + HISTORY
# ======================================================

class ReturnListCreateView(RefundAPIView):
    """
    POST: commit a return (optionally authorized by manager_pin)
    GET:  refund history
    """

    required_any_capabilities = RefundReadAPIView.required_any_capabilities

    def get_permissions(self):
        if self.request.method == "GET":
            return [IsAuthenticated(), HasAnyCapability()]
        return super().get_permissions()

    def get_throttles(self):
        # PIN guessing is rate limited; plain commits are not
        data = self.request.data
        if self.request.method == "POST" and hasattr(data, "get") and data.get("manager_pin"):
            return [ManagerPinThrottle()]
        return super().get_throttles()

    @extend_schema(
        request=ReturnCommitCommandSerializer,
        responses={201: CommitResultReadSerializer},
    )
    def post(self, request):
        command = ReturnCommitCommandSerializer(data=request.data)
        command.is_valid(raise_exception=True)
        data = command.validated_data

        manager = None
        pin = (data.get("manager_pin") or "").strip()
        if pin:
            verification = verify_manager_pin(pin)
            record_event(
                action=(
                    ReturnAuditEvent.Action.PIN_VERIFY_OK
                    if verification.success
                    else ReturnAuditEvent.Action.PIN_VERIFY_FAIL
                ),
                actor=request.user,
                sale=Sale.objects.filter(pk=data["sale_id"]).first(),
                details={
                    "manager_id": str(verification.user_id) if verification.user_id else None,
                    "terminal_name": data.get("terminal_name", ""),
                },
            )
            if not verification.success:
                return error_response(
                    code="INVALID_MANAGER_PIN",
                    message="Invalid manager PIN",
                    http_status=status.HTTP_403_FORBIDDEN,
                )
            manager = get_user_model().objects.get(pk=verification.user_id)

        try:
            result = commit_return(
                sale_id=data["sale_id"],
                lines=data["lines"],
                payments=data["payments"],
                cashier=request.user,
                reason_summary=data.get("reason_summary", ""),
                language=data.get("language"),
                terminal_name=data.get("terminal_name", ""),
                manager=manager,
                refund_method=data.get("refund_method"),
            )
        except (
            SaleNotFoundError,
            ReturnValidationError,
            ManagerAuthorizationRequired,
            ManagerAuthorizationError,
            ReturnWriteError,
        ) as exc:
            return domain_error_response(exc)

        return Response(CommitResultReadSerializer(result).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        parameters=[
            OpenApiParameter(name="date_from", type=OpenApiTypes.DATE, required=False),
            OpenApiParameter(name="date_to", type=OpenApiTypes.DATE, required=False),
            OpenApiParameter(name="method", type=OpenApiTypes.STR, required=False),
            OpenApiParameter(name="cashier", type=OpenApiTypes.UUID, required=False),
            OpenApiParameter(name="min_amount", type=OpenApiTypes.DECIMAL, required=False),
            OpenApiParameter(name="max_amount", type=OpenApiTypes.DECIMAL, required=False),
        ],
        responses={200: ReturnSummaryReadSerializer(many=True)},
    )
    def get(self, request):
        try:
            rows = list_refunds(request.query_params.dict())
        except ReturnValidationError as exc:
            return domain_error_response(exc)

        return Response(ReturnSummaryReadSerializer(rows, many=True).data, status=status.HTTP_200_OK)


class ReturnReceiptView(RefundReadAPIView):
    @extend_schema(responses={200: OpenApiTypes.OBJECT})
    def get(self, request, return_id):
        try:
            receipt = format_return_receipt(return_id=return_id)
        except ReturnNotFoundError as exc:
            return domain_error_response(exc)

        return Response(receipt, status=status.HTTP_200_OK)


class ReturnReasonsView(RefundAPIView):
    @extend_schema(responses={200: OpenApiTypes.OBJECT})
    def get(self, request):
        return Response(
            [{"code": value, "label": label} for value, label in ReturnLine.ReasonCode.choices],
            status=status.HTTP_200_OK,
        )
