#import wszystkich modeli żeby SQLAlchemy je zarejestrował w base metadata

from backoffice.data.models.customer import CustomerModel
from backoffice.data.models.warehouse import WarehouseModel
from backoffice.data.models.product import ProductModel
from backoffice.data.models.employee import EmployeeModel
from backoffice.data.models.order import OrderModel
from backoffice.data.models.transport_quote import TransportQuoteModel
from backoffice.data.models.fulfillment import FulfillmentModel
from backoffice.data.models.payment import PaymentModel

__all__ = [
    "CustomerModel",
    "WarehouseModel",
    "ProductModel",
    "EmployeeModel",
    "OrderModel",
    "TransportQuoteModel",
    "FulfillmentModel",
    "PaymentModel",
]
