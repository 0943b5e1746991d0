"""Error types shared by the onboarding business areas.

Business rule violations subclass ``BusinessError`` (a ``ValueError``) and
stringify to a short upper-case code, e.g. ``str(err) == "PRODUCT_NOT_FOUND"``.
Each carries the HTTP status the API answers with. ``CryptoUnavailable`` is an
environment defect and is deliberately not a ``BusinessError``.
"""


class BusinessError(ValueError):
    """Base class for business rule violations.

    Attributes:
        code: Short error code, also the exception message.
        status_code: HTTP status used when the error reaches the API.
    """

    code = "BUSINESS_ERROR"
    status_code = 422

    def __init__(self, code: str | None = None):
        if code is not None:
            self.code = code
        super().__init__(self.code)


class ProductNotFound(BusinessError):
    """A requested line references a product absent from the catalog."""

    code = "PRODUCT_NOT_FOUND"

    def __init__(self, product_id):
        self.product_id = product_id
        super().__init__()


class DuplicateProduct(BusinessError):
    """The catalog holds more than one product with the same id."""

    code = "DUPLICATE_PRODUCT"

    def __init__(self, product_id):
        self.product_id = product_id
        super().__init__()


class EmptyOrder(BusinessError):
    code = "EMPTY_ORDER"


class CreditCardInvalid(BusinessError):
    code = "CREDIT_CARD_INVALID"


class PurchaseOrderInvalid(BusinessError):
    code = "PURCHASE_ORDER_INVALID"


class CustomerNotFound(BusinessError):
    code = "CUSTOMER_NOT_FOUND"
    status_code = 404


class PurchaseOrderNotFound(BusinessError):
    code = "PURCHASE_ORDER_NOT_FOUND"
    status_code = 404


class OrderNotEditable(BusinessError):
    code = "ORDER_NOT_EDITABLE"
    status_code = 409


class OrderAlreadyPaid(BusinessError):
    code = "ORDER_ALREADY_PAID"
    status_code = 409


class PaymentInProgress(BusinessError):
    """A payment for the order was submitted and has no final answer yet."""

    code = "PAYMENT_IN_PROGRESS"
    status_code = 409


class CryptoUnavailable(RuntimeError):
    """The MD5 primitive required by the gateway could not be instantiated."""

    code = "CRYPTO_UNAVAILABLE"

    def __init__(self):
        super().__init__(self.code)


class UpstreamUnavailable(RuntimeError):
    """The gateway client gave up before getting an answer (circuit open or busy)."""
