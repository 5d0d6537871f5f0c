from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

from django.utils.dateparse import parse_datetime


def _first(payload: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = payload.get(key)
        if value is not None:
            return value
    return None


def _to_int(value: Any) -> Optional[int]:
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def _to_decimal(value: Any) -> Optional[Decimal]:
    if value is None:
        return None
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None


def _to_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return parse_datetime(value)
        except ValueError:
            return None
    return None


@dataclass
class ProductResponse:
    id: int
    name: str
    price: Decimal
    stock: int
    description: str = ""

    @staticmethod
    def from_payload(raw: Any) -> Optional["ProductResponse"]:
        if not isinstance(raw, dict):
            return None
        product_id = _to_int(_first(raw, "idProduct", "id", "productId"))
        if product_id is None:
            return None
        return ProductResponse(
            id=product_id,
            name=str(_first(raw, "name", "title") or ""),
            price=_to_decimal(raw.get("price")) or Decimal("0"),
            stock=_to_int(raw.get("stock")) or 0,
            description=str(raw.get("description") or ""),
        )


@dataclass
class ApiResponse:
    """Envelope returned by the product service: ``{status, message, data}``."""

    status: Optional[str]
    message: Optional[str]
    data: Any

    @staticmethod
    def from_payload(raw: Any) -> "ApiResponse":
        if not isinstance(raw, dict):
            return ApiResponse(status=None, message=None, data=None)
        return ApiResponse(
            status=raw.get("status"),
            message=raw.get("message"),
            data=raw.get("data"),
        )


@dataclass
class UserResponse:
    id: int
    name: str
    last_name: str
    email: str
    role: Optional[str] = None

    @staticmethod
    def from_payload(raw: Any) -> Optional["UserResponse"]:
        if not isinstance(raw, dict):
            return None
        user_id = _to_int(_first(raw, "id", "idUser", "userId"))
        if user_id is None:
            return None
        return UserResponse(
            id=user_id,
            name=str(_first(raw, "name", "firstName", "first_name") or ""),
            last_name=str(_first(raw, "lastName", "last_name") or ""),
            email=str(raw.get("email") or ""),
            role=raw.get("role"),
        )


@dataclass
class OrderResponse:
    order_id: int
    name: str
    last_name: str
    email: str
    address: str
    phone: str
    order_status: Optional[str]
    order_date: Optional[datetime]
    total_amount: Optional[Decimal]

    @staticmethod
    def from_payload(raw: Any) -> Optional["OrderResponse"]:
        if not isinstance(raw, dict):
            return None
        order_id = _to_int(_first(raw, "orderId", "idOrder", "id"))
        if order_id is None:
            return None
        return OrderResponse(
            order_id=order_id,
            name=str(raw.get("name") or ""),
            last_name=str(_first(raw, "lastName", "last_name") or ""),
            email=str(raw.get("email") or ""),
            address=str(raw.get("address") or ""),
            phone=str(raw.get("phone") or ""),
            order_status=_first(raw, "orderStatus", "status"),
            order_date=_to_datetime(_first(raw, "orderDate", "date")),
            total_amount=_to_decimal(_first(raw, "totalAmount", "total")),
        )
