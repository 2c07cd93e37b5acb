# backoffice/domain/errors.py
"""
Błędy domenowe. Dziedziczą po wbudowanych wyjątkach, routery mapują je
na kody HTTP tak jak ValueError / PermissionError.
"""


class NotFoundError(LookupError):
    pass


class OrderNotFound(NotFoundError):
    def __init__(self, order_id: str):
        super().__init__(f"Order {order_id} not found")
        self.order_id = order_id


class QuoteNotFound(NotFoundError):
    def __init__(self, quote_id: str):
        super().__init__(f"Transport quote {quote_id} not found")
        self.quote_id = quote_id


class FulfillmentNotFound(NotFoundError):
    def __init__(self, ref: str):
        super().__init__(f"Fulfillment for {ref} not found")
        self.ref = ref


class CustomerNotFound(NotFoundError):
    def __init__(self, customer_id: str):
        super().__init__(f"Customer {customer_id} not found")
        self.customer_id = customer_id


class WarehouseNotFound(ValueError):
    def __init__(self, warehouse_id: str | None):
        if warehouse_id is None:
            msg = "Order items do not reference a warehouse and no default warehouse is configured"
        else:
            msg = f"Warehouse {warehouse_id} not found"
        super().__init__(msg)
        self.warehouse_id = warehouse_id


class InvalidInput(ValueError):
    pass


class AlreadyExists(ValueError):
    pass


class MissingShippingAddress(ValueError):
    def __init__(self, order_id: str):
        super().__init__(f"Order {order_id} has no shipping address")
        self.order_id = order_id


class InvalidStatusTransition(ValueError):
    def __init__(self, current: str, requested: str):
        super().__init__(f"Cannot change fulfillment status from {current} to {requested}")
        self.current = current
        self.requested = requested


class QuoteConflict(RuntimeError):
    """Oferta nie może zostać zaakceptowana w obecnym stanie."""


class QuoteExpired(QuoteConflict):
    def __init__(self, quote_id: str):
        super().__init__(f"Transport quote {quote_id} has expired")
        self.quote_id = quote_id


class QuoteNotPending(QuoteConflict):
    def __init__(self, quote_id: str, status: str):
        super().__init__(f"Transport quote {quote_id} is {status}, not pending")
        self.quote_id = quote_id
        self.status = status


class AcceptanceFailed(QuoteConflict):
    def __init__(self, quote_id: str, cause: Exception):
        super().__init__(f"Accepting transport quote {quote_id} failed: {cause}")
        self.quote_id = quote_id
        self.cause = cause
        self.__cause__ = cause


class QuoteAlreadyChosen(QuoteConflict):
    def __init__(self, order_id: str):
        super().__init__(f"Order {order_id} already has an accepted transport quote")
        self.order_id = order_id


class OrderNotQuotable(QuoteConflict):
    def __init__(self, order_id: str, status: str):
        super().__init__(f"Order {order_id} is {status}, transport quotes are only issued for open orders")
        self.order_id = order_id
        self.status = status


class ProductNotFound(NotFoundError):
    def __init__(self, product_id: str):
        super().__init__(f"Product {product_id} not found")
        self.product_id = product_id


class EmployeeNotFound(NotFoundError):
    def __init__(self, employee_id: str):
        super().__init__(f"Employee {employee_id} not found")
        self.employee_id = employee_id
