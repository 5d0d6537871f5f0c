from django.urls import path

from .views import CreatePaymentView, OrderDetailsView, OrderPaymentsView, PaymentDetailView

urlpatterns = [
    path("order/<int:order_id>", OrderDetailsView.as_view(), name="payment-order-details"),
    path("order/<int:order_id>/payments", OrderPaymentsView.as_view(), name="payment-order-payments"),
    path("create", CreatePaymentView.as_view(), name="payment-create"),
    path("<int:payment_id>", PaymentDetailView.as_view(), name="payment-detail"),
]
