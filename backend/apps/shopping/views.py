from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework.permissions import AllowAny

from apps.api.exceptions import ApplicationError
from apps.api.identity import HEADER_EMAIL, HEADER_ROLE, HEADER_USER_ID
from apps.api.schemas import ErrorEnvelopeSerializer, enveloped
from apps.api.utils import error_response, success_response
from apps.api.views import EnvelopeAPIView
from apps.common import get_logger
from .commands import ProductRequestCommand
from .container import build_shopping_service
from .serializers import CartReadSerializer, ProductRequestSerializer

logger = get_logger(__name__).bind(component="shopping", layer="view")

IDENTITY_HEADERS = [
    OpenApiParameter(HEADER_USER_ID, int, OpenApiParameter.HEADER, required=False),
    OpenApiParameter(HEADER_EMAIL, str, OpenApiParameter.HEADER, required=False),
    OpenApiParameter(HEADER_ROLE, str, OpenApiParameter.HEADER, required=False),
]

CART_ENVELOPE = enveloped(CartReadSerializer)

CART_ERRORS = {
    400: OpenApiResponse(response=ErrorEnvelopeSerializer),
    404: OpenApiResponse(response=ErrorEnvelopeSerializer),
    500: OpenApiResponse(response=ErrorEnvelopeSerializer),
}


class ShoppingView(EnvelopeAPIView):
    permission_classes = [AllowAny]
    service = build_shopping_service()


class AddToCartView(ShoppingView):
    log = logger.bind(view="AddToCartView")

    @extend_schema(
        summary="Add product to cart",
        description=(
            "Adds a quantity of a product to the caller's cart, creating the cart on first use. "
            "Adding a product already in the cart accumulates its quantity."
        ),
        parameters=IDENTITY_HEADERS,
        request=ProductRequestSerializer,
        responses={200: CART_ENVELOPE, **CART_ERRORS},
    )
    def post(self, request):
        user = self.current_user(request)
        command = ProductRequestCommand.from_raw(request.data)
        self.log.info(
            "Add to cart request received",
            user_id=user.user_id,
            product_id=command.product_id,
            quantity=command.quantity,
        )
        if user.user_id is None:
            self.log.error("Add to cart failed: user id missing")
            return error_response("User ID is required")
        if command.product_id is None:
            self.log.error("Add to cart failed: product id missing", user_id=user.user_id)
            return error_response("Product ID is required")
        if command.quantity is None or command.quantity <= 0:
            self.log.error("Add to cart failed: invalid quantity", quantity=command.quantity)
            return error_response("Quantity must be a positive number")

        failure = "An unexpected error occurred while adding product to cart"
        try:
            cart = self.service.add_to_cart(user.user_id, command.product_id, command.quantity)
        except ApplicationError as exc:
            return self.service_error(exc, self.log, "Add to cart", failure)
        except Exception:
            return self.unexpected_error(self.log, "add to cart", failure, user_id=user.user_id)

        self.log.info(
            "Product added to cart successfully",
            user_id=user.user_id,
            product_id=command.product_id,
            cart_total=cart.total,
        )
        return success_response(
            "Product added to cart successfully", CartReadSerializer(cart).data
        )


class RemoveFromCartView(ShoppingView):
    log = logger.bind(view="RemoveFromCartView")

    @extend_schema(
        summary="Remove product from cart",
        parameters=IDENTITY_HEADERS,
        request=ProductRequestSerializer,
        responses={200: CART_ENVELOPE, **CART_ERRORS},
    )
    def delete(self, request):
        user = self.current_user(request)
        command = ProductRequestCommand.from_raw(request.data)
        self.log.info(
            "Remove from cart request received",
            user_id=user.user_id,
            product_id=command.product_id,
        )
        if user.user_id is None:
            self.log.error("Remove from cart failed: user id missing")
            return error_response("User ID is required")
        if command.product_id is None:
            self.log.error("Remove from cart failed: product id missing", user_id=user.user_id)
            return error_response("Product ID is required")

        failure = "An unexpected error occurred while removing product from cart"
        try:
            cart = self.service.remove_from_cart(user.user_id, command.product_id)
        except ApplicationError as exc:
            return self.service_error(exc, self.log, "Remove from cart", failure)
        except Exception:
            return self.unexpected_error(self.log, "remove from cart", failure, user_id=user.user_id)

        self.log.info(
            "Product removed from cart successfully",
            user_id=user.user_id,
            product_id=command.product_id,
            cart_total=cart.total,
        )
        return success_response(
            "Product removed from cart successfully", CartReadSerializer(cart).data
        )


class SendCartView(ShoppingView):
    log = logger.bind(view="SendCartView")

    @extend_schema(
        summary="Get cart",
        parameters=IDENTITY_HEADERS,
        responses={200: CART_ENVELOPE, **CART_ERRORS},
    )
    def get(self, request):
        user = self.current_user(request)
        self.log.info("Get cart request received", user_id=user.user_id)
        if user.user_id is None:
            self.log.error("Get cart failed: user id missing")
            return error_response("User ID is required")

        failure = "An unexpected error occurred while retrieving cart"
        try:
            cart = self.service.send_cart(user.user_id)
        except ApplicationError as exc:
            return self.service_error(exc, self.log, "Get cart", failure)
        except Exception:
            return self.unexpected_error(self.log, "get cart", failure, user_id=user.user_id)

        self.log.info(
            "Cart retrieved successfully",
            user_id=user.user_id,
            items=len(cart.items),
            total=cart.total,
        )
        return success_response("Cart retrieved successfully", CartReadSerializer(cart).data)


class ClearCartView(ShoppingView):
    log = logger.bind(view="ClearCartView")

    @extend_schema(
        summary="Clear cart",
        description="Removes every line from the caller's cart and resets its total to zero.",
        parameters=IDENTITY_HEADERS,
        responses={200: enveloped(None, name="ClearCart"), **CART_ERRORS},
    )
    def get(self, request):
        user = self.current_user(request)
        self.log.info("Clear cart request received", user_id=user.user_id)
        if user.user_id is None:
            self.log.error("Clear cart failed: user id missing")
            return error_response("User ID is required")

        failure = "An unexpected error occurred while clearing cart"
        try:
            self.service.clear_cart(user.user_id)
        except ApplicationError as exc:
            return self.service_error(exc, self.log, "Clear cart", failure)
        except Exception:
            return self.unexpected_error(self.log, "clear cart", failure, user_id=user.user_id)

        self.log.info("Cart cleared successfully", user_id=user.user_id)
        return success_response("Cart cleared successfully")
