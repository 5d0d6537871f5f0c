from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny

from apps.api.exceptions import ApplicationError
from apps.api.schemas import ErrorEnvelopeSerializer, enveloped
from apps.api.utils import success_response
from apps.api.views import EnvelopeAPIView
from apps.common import get_logger
from .container import build_payment_service
from .serializers import OrderReadSerializer, PaymentCreateSerializer, PaymentReadSerializer

logger = get_logger(__name__).bind(component="payments", layer="view")

PAYMENT_ENVELOPE = enveloped(PaymentReadSerializer)

PAYMENT_ERRORS = {
    400: OpenApiResponse(response=ErrorEnvelopeSerializer),
    404: OpenApiResponse(response=ErrorEnvelopeSerializer),
    500: OpenApiResponse(response=ErrorEnvelopeSerializer),
}


class PaymentView(EnvelopeAPIView):
    permission_classes = [AllowAny]
    service = build_payment_service()


class OrderDetailsView(PaymentView):
    log = logger.bind(view="OrderDetailsView")

    @extend_schema(
        summary="View order details",
        description="Fetches the order from the order service before it is paid.",
        responses={200: enveloped(OrderReadSerializer), **PAYMENT_ERRORS},
    )
    def get(self, request, order_id: int):
        self.log.info("Order details requested", order_id=order_id)
        failure = "An unexpected error occurred while retrieving order details"
        try:
            order = self.service.view_order_details(order_id)
        except ApplicationError as exc:
            return self.service_error(exc, self.log, "View order", failure)
        except Exception:
            return self.unexpected_error(self.log, "view order", failure, order_id=order_id)
        return success_response(
            "Order retrieved successfully", OrderReadSerializer(order).data
        )


class CreatePaymentView(PaymentView):
    log = logger.bind(view="CreatePaymentView")

    @extend_schema(
        summary="Pay an order",
        description=(
            "Completes the order in the order service, stores the payment and "
            "notifies the customer. Notification failures do not fail the payment."
        ),
        request=PaymentCreateSerializer,
        responses={201: PAYMENT_ENVELOPE, **PAYMENT_ERRORS},
    )
    def post(self, request):
        serializer = PaymentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        user = self.current_user(request)
        self.log.info(
            "Create payment request received",
            order_id=data["orderId"],
            user_id=user.user_id,
            method=data["method"],
        )

        failure = "An unexpected error occurred while processing payment"
        try:
            payment = self.service.create_payment(
                data["orderId"],
                data["total"],
                data["currency"],
                data["method"],
                data.get("description"),
            )
        except ApplicationError as exc:
            return self.service_error(exc, self.log, "Create payment", failure)
        except Exception:
            return self.unexpected_error(
                self.log, "create payment", failure, order_id=data["orderId"]
            )

        self.log.info(
            "Payment created successfully",
            order_id=payment.order_id,
            payment_id=payment.id,
        )
        return success_response(
            "Payment created successfully",
            PaymentReadSerializer(payment).data,
            status.HTTP_201_CREATED,
        )


class PaymentDetailView(PaymentView):
    log = logger.bind(view="PaymentDetailView")

    @extend_schema(summary="Get payment", responses={200: PAYMENT_ENVELOPE, **PAYMENT_ERRORS})
    def get(self, request, payment_id: int):
        failure = "An unexpected error occurred while retrieving payment"
        try:
            payment = self.service.get_payment(payment_id)
        except ApplicationError as exc:
            return self.service_error(exc, self.log, "Get payment", failure)
        except Exception:
            return self.unexpected_error(self.log, "get payment", failure, payment_id=payment_id)
        return success_response("Payment retrieved successfully", PaymentReadSerializer(payment).data)


class OrderPaymentsView(PaymentView):
    log = logger.bind(view="OrderPaymentsView")

    @extend_schema(
        summary="List payments of an order",
        responses={
            200: enveloped(PaymentReadSerializer, many=True),
            500: OpenApiResponse(response=ErrorEnvelopeSerializer),
        },
    )
    def get(self, request, order_id: int):
        failure = "An unexpected error occurred while retrieving payments"
        try:
            payments = self.service.list_payments_for_order(order_id)
        except Exception:
            return self.unexpected_error(self.log, "list payments", failure, order_id=order_id)
        return success_response(
            "Payments retrieved successfully",
            PaymentReadSerializer(payments, many=True).data,
        )
