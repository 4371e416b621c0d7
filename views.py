import logging

from django.shortcuts import get_object_or_404
from rest_framework import permissions, status
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView

from stockledger import stock
from stockledger.adapters import get_invoice_extractor
from stockledger.exceptions import StockError
from stockledger.models import LowStockAlert, Product
from stockledger.protocols.invoice import InvoiceExtractionError
from stockledger.serializers import (
    AdjustmentCreateSerializer,
    InvoiceUploadSerializer,
    LowStockAlertSerializer,
    MovementFilterSerializer,
    PurchaseCreateSerializer,
    QuotationReservationSerializer,
    ReservationConvertSerializer,
    ReservationCreateSerializer,
    SaleCreateSerializer,
    StockMovementSerializer,
    serialize_invoice,
)
from stockledger.services.alerts import acknowledge

logger = logging.getLogger('stockledger')


ERROR_STATUS = {
    'NOT_FOUND': status.HTTP_404_NOT_FOUND,
    'ALREADY_RESERVED': status.HTTP_409_CONFLICT,
    'CONFLICT': status.HTTP_409_CONFLICT,
    'TRANSIENT': status.HTTP_503_SERVICE_UNAVAILABLE,
}


def error_response(exc: StockError) -> Response:
    return Response(exc.as_dict(), status=ERROR_STATUS.get(exc.code, status.HTTP_400_BAD_REQUEST))


def _user(request):
    return request.user if request.user.is_authenticated else None


class PurchaseView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        serializer = PurchaseCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            movement = stock.receive_purchase(
                data.pop('product_id'),
                data.pop('quantity'),
                data.pop('unit_cost'),
                user=_user(request),
                **data,
            )
        except StockError as e:
            return error_response(e)

        return Response(StockMovementSerializer(movement).data, status=status.HTTP_201_CREATED)


class AdjustView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        serializer = AdjustmentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            movement = stock.apply_adjustment(
                data['product_id'],
                data['type'],
                data['quantity'],
                data['reason'],
                notes=data['notes'],
                serial_numbers=data['serial_numbers'],
                user=_user(request),
            )
        except StockError as e:
            return error_response(e)

        return Response(StockMovementSerializer(movement).data, status=status.HTTP_201_CREATED)


class SaleView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        serializer = SaleCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            movement = stock.sell(
                data['product_id'],
                data['quantity'],
                reference_type=data['reference_type'],
                reference_id=data['reference_id'],
                user=_user(request),
            )
        except StockError as e:
            return error_response(e)

        return Response(StockMovementSerializer(movement).data, status=status.HTTP_201_CREATED)


class InvoiceExtractView(APIView):
    permission_classes = [permissions.IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request):
        serializer = InvoiceUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        upload = serializer.validated_data['file']

        try:
            invoice = get_invoice_extractor().extract(
                upload.read(),
                getattr(upload, 'content_type', None) or 'application/pdf',
            )
        except InvoiceExtractionError as e:
            logger.warning("stock.invoice.extract_failed", extra={"file_name": upload.name, "detail": str(e)})
            return Response({"detail": str(e)}, status=status.HTTP_422_UNPROCESSABLE_ENTITY)

        return Response(serialize_invoice(invoice))


class ReservationListCreateView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        reservations = stock.reservations(
            quotation_id=request.query_params.get('quotation_id'),
            active_only=request.query_params.get('active') in ('1', 'true'),
        )
        return Response(QuotationReservationSerializer(reservations, many=True).data)

    def post(self, request):
        serializer = ReservationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            reservation = stock.reserve(data['quotation_id'], data['product_id'], data['quantity'])
        except StockError as e:
            return error_response(e)

        return Response(QuotationReservationSerializer(reservation).data, status=status.HTTP_201_CREATED)


class ReservationReleaseView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, pk):
        try:
            reservation = stock.release_reservation(pk)
        except StockError as e:
            return error_response(e)

        return Response(QuotationReservationSerializer(reservation).data)


class ReservationConvertView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        serializer = ReservationConvertSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            movement = stock.convert(
                data['quotation_id'],
                data['product_id'],
                reference_type=data['reference_type'],
                reference_id=data['reference_id'],
                user=_user(request),
            )
        except StockError as e:
            return error_response(e)

        return Response(StockMovementSerializer(movement).data, status=status.HTTP_201_CREATED)


class ProductMovementsView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, pk):
        product = get_object_or_404(Product, pk=pk)
        filters = MovementFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        movements = stock.movements(product, **filters.validated_data)
        return Response(StockMovementSerializer(movements, many=True).data)


class ProductStatusView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, pk):
        try:
            return Response(stock.status(pk))
        except StockError as e:
            return error_response(e)


class AlertListView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        alerts = LowStockAlert.objects.select_related('product')
        if request.query_params.get('open') in ('1', 'true'):
            alerts = alerts.open()
        return Response(LowStockAlertSerializer(alerts, many=True).data)


class AlertAcknowledgeView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, pk):
        alert = get_object_or_404(LowStockAlert, pk=pk)
        alert = acknowledge(alert, user=_user(request))
        return Response(LowStockAlertSerializer(alert).data)
