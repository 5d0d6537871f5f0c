from __future__ import annotations

from django.conf import settings

from .order import OrderServiceClient
from .product import ProductServiceClient
from .user import UserServiceClient


def _timeout():
    return getattr(settings, "REMOTE_SERVICE_TIMEOUT", None)


def build_product_client() -> ProductServiceClient:
    return ProductServiceClient(settings.PRODUCT_SERVICE_URL, timeout=_timeout())


def build_user_client() -> UserServiceClient:
    return UserServiceClient(settings.USER_SERVICE_URL, timeout=_timeout())


def build_order_client() -> OrderServiceClient:
    return OrderServiceClient(settings.ORDER_SERVICE_URL, timeout=_timeout())
