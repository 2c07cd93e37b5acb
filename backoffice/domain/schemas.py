# backoffice/domain/schemas.py
from pydantic import BaseModel, Field
from typing import Dict, List, Optional, Union
from decimal import Decimal
from datetime import datetime

from backoffice.domain.statuses import (
    OrderStatus,
    PaymentStatus,
    QuoteStatus,
    FulfillmentStatus,
    ProductStatus,
    EmployeeRole,
    EmployeeStatus,
)


# =====================================================
# CUSTOMERS / WAREHOUSES
# =====================================================
class CustomerCreate(BaseModel):
    """Schema dla tworzenia klienta."""

    name: str = Field(..., min_length=1, max_length=200)
    email: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None


class CustomerRead(CustomerCreate):
    id: str
    created_at: datetime


class WarehouseCreate(BaseModel):
    """Schema dla magazynu. Lokalizacja to adres używany do liczenia dystansu."""

    id: str = Field(..., min_length=1, max_length=50, description="np. WH-1")
    name: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    capacity: int = Field(0, ge=0)
    is_active: bool = True


class WarehouseRead(WarehouseCreate):
    created_at: datetime


# =====================================================
# PRODUCTS
# =====================================================
class InventoryLevel(BaseModel):
    warehouse_id: str = Field(..., min_length=1)
    quantity: int = Field(0, ge=0)
    minimum_stock: int = Field(0, ge=0)


class ProductCreate(BaseModel):
    """Produkt katalogowy. Waga (kg) i stany magazynowe zasilają wyceny transportu."""

    id: str = Field(..., min_length=1, max_length=50, description="np. EX-001")
    name: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    model: Optional[str] = None
    sku: str = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0)
    weight: Optional[float] = Field(None, gt=0)
    specifications: Dict[str, Union[str, float, int]] = Field(default_factory=dict)
    inventory: List[InventoryLevel] = Field(default_factory=list)


class ProductRead(ProductCreate):
    status: ProductStatus
    total_stock: int
    created_at: datetime
    updated_at: datetime


class InventoryUpdate(BaseModel):
    quantity: int = Field(..., ge=0)
    minimum_stock: Optional[int] = Field(None, ge=0)


# =====================================================
# EMPLOYEES
# =====================================================
class PayrollInfo(BaseModel):
    commission_rate: Decimal = Field(Decimal("0"), ge=0, le=100, description="Procent wartości zamówienia")
    base_rate: Decimal = Field(Decimal("0"), ge=0)
    currency: str = "USD"
    payment_frequency: str = Field("monthly", pattern="^(weekly|biweekly|monthly)$")


class EmployeeCreate(BaseModel):
    agent_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    phone: Optional[str] = None
    role: EmployeeRole = EmployeeRole.EMPLOYEE
    payroll: PayrollInfo = Field(default_factory=PayrollInfo)


class EmployeeRead(EmployeeCreate):
    id: str
    status: EmployeeStatus
    created_at: datetime


class CommissionOut(BaseModel):
    employee_id: str
    order_id: str
    order_total: Decimal
    rate: Decimal
    commission: Decimal


class CommissionSummary(BaseModel):
    employee_id: str
    rate: Decimal
    orders: List[CommissionOut]
    total_commission: Decimal


# =====================================================
# ORDERS
# =====================================================
class Address(BaseModel):
    street: str
    city: str
    state: Optional[str] = None
    postal_code: str
    country: str

    def one_line(self) -> str:
        parts = [self.street, self.city, self.state, self.postal_code, self.country]
        return ", ".join(p for p in parts if p)


class ShippingDetails(BaseModel):
    address: Optional[Address] = None
    method: Optional[str] = None


class OrderItemIn(BaseModel):
    """Pozycja zamówienia; nazwa, SKU, waga i cena domyślnie z katalogu produktów."""

    product_id: str = Field(..., min_length=1)
    quantity: int = Field(..., gt=0)
    price: Optional[Decimal] = Field(None, ge=0, description="Cena jednostkowa; brak = cena katalogowa")
    warehouse_id: Optional[str] = Field(None, description="Brak = pierwszy magazyn z wystarczającym stanem")


class OrderItem(BaseModel):
    product_id: str
    name: Optional[str] = None
    sku: Optional[str] = None
    quantity: int
    price: Decimal
    weight: Optional[float] = Field(None, description="Waga jednostkowa w kg")
    warehouse_id: Optional[str] = None


class OrderCreate(BaseModel):
    """Schema dla tworzenia zamówienia (akcja administratora)."""

    customer_id: str = Field(..., min_length=1)
    items: List[OrderItemIn] = Field(..., min_length=1)
    shipping: ShippingDetails = Field(default_factory=ShippingDetails)
    shipping_cost: Decimal = Field(Decimal("0.00"), ge=0)
    notes: Optional[str] = None


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class OrderAssignment(BaseModel):
    employee_id: Optional[str] = Field(None, description="Brak = odpięcie pracownika")


class OrderOut(BaseModel):
    id: str
    customer_id: str
    assigned_to: Optional[str] = None
    items: List[OrderItem]
    status: OrderStatus
    payment_status: PaymentStatus
    fulfillment_status: Optional[FulfillmentStatus] = None
    shipping: ShippingDetails
    subtotal: Decimal
    tax: Decimal
    shipping_cost: Decimal
    total: Decimal
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime


# =====================================================
# TRANSPORT QUOTES
# =====================================================
class Insurance(BaseModel):
    included: bool
    coverage: Decimal
    cost: Decimal


class QuoteRequest(BaseModel):
    provider: str = Field(..., min_length=1, description="Nazwa przewoznika")
    method: str = Field("standard", min_length=1, description="Typ uslugi / pojazdu")


class TransportQuoteOut(BaseModel):
    id: str
    order_id: str
    provider: str
    method: str
    cost: Decimal
    estimated_days: int
    distance: float
    total_weight: float
    total_value: Decimal
    insurance: Insurance
    status: QuoteStatus
    valid_until: datetime
    created_at: datetime


# =====================================================
# FULFILLMENT
# =====================================================
class HistoryEntry(BaseModel):
    status: FulfillmentStatus
    timestamp: datetime
    note: Optional[str] = None


class FulfillmentOut(BaseModel):
    id: str
    order_id: str
    status: FulfillmentStatus
    carrier: Optional[str] = None
    tracking_number: Optional[str] = None
    estimated_delivery: Optional[datetime] = None
    actual_delivery: Optional[datetime] = None
    transport_quote_id: Optional[str] = None
    history: List[HistoryEntry] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class FulfillmentStatusUpdate(BaseModel):
    status: FulfillmentStatus
    note: Optional[str] = Field(None, max_length=1000)


class TrackingUpdate(BaseModel):
    carrier: str = Field(..., min_length=1)
    tracking_number: str = Field(..., min_length=1)
    estimated_delivery: Optional[datetime] = None


class AcceptanceOut(BaseModel):
    """Wynik akceptacji oferty: oferta, zamówienie i fulfillment po transakcji."""

    quote: TransportQuoteOut
    order: OrderOut
    fulfillment: FulfillmentOut
    already_accepted: bool = False


# =====================================================
# PAYMENTS
# =====================================================
class PaymentOut(BaseModel):
    id: str
    order_id: str
    fulfillment_id: str
    method: str
    note: Optional[str] = None
    receipt_filename: str
    receipt_size: int
    confirmed_by: str
    created_at: datetime
