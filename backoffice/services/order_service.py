# backoffice/services/order_service.py
from decimal import Decimal
from typing import List
from uuid import uuid4

from sqlalchemy.orm import Session

from backoffice.data.models.order import OrderModel
from backoffice.domain.errors import CustomerNotFound, InvalidInput, OrderNotFound, ProductNotFound
from backoffice.domain.schemas import OrderCreate, OrderItem, OrderItemIn, OrderOut
from backoffice.domain.statuses import (
    FulfillmentStatus,
    OrderStatus,
    PaymentStatus,
    ProductStatus,
    payment_status_for,
)
from backoffice.repos.customer_repo import CustomerRepo
from backoffice.repos.fulfillment_repo import FulfillmentRepo
from backoffice.repos.order_repo import OrderRepo
from backoffice.repos.product_repo import ProductRepo
from backoffice.services.costing import calculate_tax, round2
from backoffice.services.fulfillment_service import new_fulfillment
from backoffice.services.product_service import pick_warehouse
from backoffice.utils.clock import utcnow, ensure_utc
from backoffice.utils.logging import get_logger

logger = get_logger(__name__)


def order_to_out(order: OrderModel) -> OrderOut:
    data = order.data or {}
    fulfillment = order.fulfillment
    return OrderOut(
        id=order.id,
        customer_id=order.customer_id,
        assigned_to=order.assigned_to,
        items=data.get("items", []),
        status=order.status,
        payment_status=order.payment_status,
        fulfillment_status=fulfillment.status if fulfillment else None,
        shipping=data.get("shipping") or {},
        subtotal=data.get("subtotal", "0.00"),
        tax=data.get("tax", "0.00"),
        shipping_cost=data.get("shipping_cost", "0.00"),
        total=data.get("total", "0.00"),
        notes=data.get("notes"),
        created_at=ensure_utc(order.created_at),
        updated_at=ensure_utc(order.updated_at),
    )


class OrderService:
    """
    Serwis odpowiedzialny za domenę zamówień.
    Dokument zamówienia (pozycje, wysyłka, kwoty) trzymany w kolumnie data.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = OrderRepo(db)
        self.customers = CustomerRepo(db)
        self.products = ProductRepo(db)
        self.fulfillments = FulfillmentRepo(db)

    # =====================================================
    # QUERY
    # =====================================================
    def get_order(self, order_id: str) -> OrderOut:
        order = self.repo.get_order(order_id)
        if not order:
            raise OrderNotFound(order_id)
        return order_to_out(order)

    def list_orders(self, status: OrderStatus | None = None) -> List[OrderOut]:
        return [order_to_out(o) for o in self.repo.list_orders(status.value if status else None)]

    # =====================================================
    # COMMANDS
    # =====================================================
    def create_order(self, payload: OrderCreate) -> OrderOut:
        """
        Use Case: Utworzenie zamówienia.

        1. Weryfikuje klienta
        2. Uzupełnia pozycje z katalogu (cena, waga, magazyn)
        3. Liczy subtotal, podatek 10% i total
        4. Zapisuje zamówienie razem z fulfillment w statusie pending
        """
        if not self.customers.get_customer(payload.customer_id):
            raise CustomerNotFound(payload.customer_id)

        items = [self._catalog_item(i) for i in payload.items]

        subtotal = round2(sum((i.price * i.quantity for i in items), Decimal("0.00")))
        tax = calculate_tax(subtotal)
        shipping_cost = round2(payload.shipping_cost)
        total = subtotal + tax + shipping_cost

        now = utcnow()
        order_id = f"ord_{uuid4().hex[:12]}"

        order = OrderModel(
            id=order_id,
            customer_id=payload.customer_id,
            status=OrderStatus.PENDING.value,
            payment_status=PaymentStatus.PENDING.value,
            data={
                "items": [i.model_dump(mode="json") for i in items],
                "shipping": payload.shipping.model_dump(mode="json"),
                "subtotal": str(subtotal),
                "tax": str(tax),
                "shipping_cost": str(shipping_cost),
                "total": str(total),
                "notes": payload.notes,
            },
            created_at=now,
            updated_at=now,
        )

        try:
            self.repo.add_order(order)
            self.fulfillments.add_fulfillment(
                new_fulfillment(order_id, FulfillmentStatus.PENDING, now, "Order created")
            )
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Order {order_id} created for customer {payload.customer_id}, total {total}")
        return self.get_order(order_id)

    def update_order_status(self, order_id: str, status: OrderStatus) -> OrderOut:
        payment_status = payment_status_for(status)

        rowcount = self.repo.update_status(
            order_id,
            status.value,
            utcnow(),
            payment_status=payment_status.value if payment_status else None,
        )
        if rowcount == 0:
            self.repo.rollback()
            raise OrderNotFound(order_id)

        self.repo.commit()
        logger.info(f"Order {order_id} status -> {status.value}")
        return self.get_order(order_id)

    def delete_order(self, order_id: str) -> None:
        """Twarde usunięcie; oferty transportu i fulfillment znikają razem z zamówieniem."""
        order = self.repo.get_order(order_id)
        if not order:
            raise OrderNotFound(order_id)

        try:
            self.repo.delete_order(order)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Order {order_id} deleted")

    def _catalog_item(self, item: OrderItemIn) -> OrderItem:
        product = self.products.get_product(item.product_id)
        if not product:
            raise ProductNotFound(item.product_id)
        if product.status == ProductStatus.DISCONTINUED.value:
            raise InvalidInput(f"Product {item.product_id} is discontinued")

        data = product.data or {}
        return OrderItem(
            product_id=product.id,
            name=data.get("name"),
            sku=data.get("sku"),
            quantity=item.quantity,
            price=item.price if item.price is not None else data["price"],
            weight=data.get("weight"),
            warehouse_id=item.warehouse_id or pick_warehouse(product, item.quantity),
        )
