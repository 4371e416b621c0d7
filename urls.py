from django.urls import path

from stockledger.views import (
    AdjustView,
    AlertAcknowledgeView,
    AlertListView,
    InvoiceExtractView,
    ProductMovementsView,
    ProductStatusView,
    PurchaseView,
    ReservationConvertView,
    ReservationListCreateView,
    ReservationReleaseView,
    SaleView,
)

app_name = 'stockledger'

urlpatterns = [
    path('stock/purchase', PurchaseView.as_view(), name='stock-purchase'),
    path('stock/adjust', AdjustView.as_view(), name='stock-adjust'),
    path('stock/sale', SaleView.as_view(), name='stock-sale'),
    path('stock/invoices/extract', InvoiceExtractView.as_view(), name='invoice-extract'),
    path('reservations', ReservationListCreateView.as_view(), name='reservations'),
    path('reservations/convert', ReservationConvertView.as_view(), name='reservation-convert'),
    path('reservations/<int:pk>/release', ReservationReleaseView.as_view(), name='reservation-release'),
    path('products/<int:pk>/movements', ProductMovementsView.as_view(), name='product-movements'),
    path('products/<int:pk>/status', ProductStatusView.as_view(), name='product-status'),
    path('alerts', AlertListView.as_view(), name='alerts'),
    path('alerts/<int:pk>/acknowledge', AlertAcknowledgeView.as_view(), name='alert-acknowledge'),
]
