# storefront/domain/errors.py
"""
Domain errors. Each one subclasses the builtin that plain service code
would raise for the same concern, so routers can map them to HTTP status
codes the same way.
"""


class ValidationFailed(ValueError):
    pass


class NotFound(LookupError):
    pass


class AuthenticationFailed(PermissionError):
    pass


class EmailTaken(ValueError):
    pass


class CartConflict(RuntimeError):
    pass


class PaymentGatewayError(RuntimeError):
    pass


class PaymentDeclined(ValueError):
    """The processor answered, but the payment did not go through."""

    def __init__(self, message: str, status: str):
        super().__init__(message)
        self.status = status
