from apps.api.exceptions import ApplicationError, ErrorKind


class ProductNotFoundError(ApplicationError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, product_id: int):
        super().__init__(
            f"Product not found with ID: {product_id}",
            details={"product_id": product_id},
        )
        self.product_id = product_id


class UserNotFoundError(ApplicationError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, user_id: int):
        super().__init__(
            f"User not found with ID: {user_id}", details={"user_id": user_id}
        )
        self.user_id = user_id


class CartNotFoundError(ApplicationError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, user_id: int):
        super().__init__(
            f"Cart not found for user ID: {user_id}", details={"user_id": user_id}
        )
        self.user_id = user_id


class CartOperationError(ApplicationError):
    """The cart cannot be mutated as requested (bad quantity, missing line, low stock)."""

    kind = ErrorKind.OPERATION_INVALID
