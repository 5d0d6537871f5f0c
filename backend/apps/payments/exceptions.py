from typing import Optional

from apps.api.exceptions import ApplicationError, ErrorKind


class OrderNotFoundError(ApplicationError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, order_id: int):
        super().__init__(
            f"Order not found with ID: {order_id}", details={"order_id": order_id}
        )
        self.order_id = order_id


class PaymentNotFoundError(ApplicationError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, payment_id: int):
        super().__init__(
            f"Payment not found with ID: {payment_id}", details={"payment_id": payment_id}
        )
        self.payment_id = payment_id


class PaymentError(ApplicationError):
    """
    Payment processing failed for a reason the client cannot act on.

    Wraps remote failures (``REMOTE_FAILURE``) and persistence failures
    (``UNEXPECTED``); the underlying exception is kept on ``cause``.
    """

    def __init__(
        self,
        message: str,
        *,
        order_id: Optional[int] = None,
        kind: ErrorKind = ErrorKind.UNEXPECTED,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message, details={"order_id": order_id})
        self.kind = kind
        self.order_id = order_id
        self.cause = cause
