"""Checkout error taxonomy shared by the Ordering, Payments and Catalogue contexts.

Every error is a Protean ``ValidationError`` carrying the usual
``{field: [message]}`` payload, so command handlers and aggregates raise them
exactly like any other rule violation. Each class also declares the HTTP
status it maps to and whether the caller may retry.
"""

from protean.exceptions import ValidationError


class CheckoutError(ValidationError):
    """Base class for all checkout and order lifecycle errors."""

    field = "checkout"
    status_code = 400
    retryable = False

    def __init__(self, message, field=None):
        self.message = message
        super().__init__({field or self.field: [message]})


class InvalidQuantity(CheckoutError):
    field = "quantity"


class IncompleteCheckout(CheckoutError):
    field = "checkout"


class InsufficientStock(CheckoutError):
    field = "quantity"
    status_code = 409


class AmountMismatch(CheckoutError):
    field = "amount"
    status_code = 409


class AmountInvalid(CheckoutError):
    field = "amount"


class InvalidTransition(CheckoutError):
    field = "status"
    status_code = 409


class Forbidden(CheckoutError):
    field = "actor"
    status_code = 403


class DuplicateReview(CheckoutError):
    field = "review"
    status_code = 409


class InvalidRating(CheckoutError):
    field = "rating"


class NotFound(CheckoutError):
    field = "id"
    status_code = 404


class UpstreamTimeout(CheckoutError):
    """The payment processor did not answer in time. Safe to retry."""

    field = "gateway"
    status_code = 503
    retryable = True
