"""
Domain errors raised by the service layer.

Route handlers catch these and turn them into HTTP responses with
``to_http``; anything else bubbles up to the 500 handler in main.py.
"""
from fastapi import HTTPException


class ChapaError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailed(ChapaError):
    status_code = 400


class AuthFailed(ChapaError):
    status_code = 401


class NotFound(ChapaError):
    status_code = 404


class Conflict(ChapaError):
    status_code = 409


class OrderValidationError(ValidationFailed):
    pass


class InvalidStatus(ValidationFailed):
    pass


class InvalidQuantity(ValidationFailed):
    pass


class LoyaltyNotReady(ValidationFailed):
    pass


class OrderNotFound(NotFound):
    def __init__(self, order_id: str):
        super().__init__("Order not found")
        self.order_id = order_id


class ProductNotFound(NotFound):
    def __init__(self, product_id: int):
        super().__init__("Product not found")
        self.product_id = product_id


class UserNotFound(NotFound):
    def __init__(self, user_id: str):
        super().__init__("User not found")
        self.user_id = user_id


class EmailTaken(Conflict):
    def __init__(self, email: str):
        super().__init__("Email already registered")
        self.email = email


class InvalidCredentials(AuthFailed):
    pass


def to_http(exc: ChapaError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=exc.message)
