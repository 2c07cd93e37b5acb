# backoffice/data/seed.py
from backoffice.data.database import SessionLocal
from backoffice.data.models.product import ProductModel
from backoffice.data.models.warehouse import WarehouseModel
from backoffice.domain.statuses import stock_status
from backoffice.utils.clock import utcnow
from backoffice.utils.logging import get_logger

logger = get_logger(__name__)

WAREHOUSES = [
    {
        "id": "WH-1",
        "name": "Main Warehouse",
        "location": "New York, NY, USA",
        "capacity": 10000,
        "is_active": True,
    },
    {
        "id": "WH-2",
        "name": "West Coast Warehouse",
        "location": "Los Angeles, CA, USA",
        "capacity": 8000,
        "is_active": True,
    },
]

PRODUCTS = [
    {
        "id": "EX-001",
        "category": "Excavators",
        "name": "Compact Mini Excavator",
        "model": "ME-2000",
        "sku": "ME2000-001",
        "price": "15000.00",
        "weight": 2000,
        "specifications": {"power": 15, "digDepth": 2.5, "maxReach": 4.2, "engineType": "Diesel"},
        "inventory": [
            {"warehouse_id": "WH-1", "quantity": 5, "minimum_stock": 2},
            {"warehouse_id": "WH-2", "quantity": 3, "minimum_stock": 1},
        ],
    },
    {
        "id": "CR-001",
        "category": "Cranes",
        "name": "Heavy Duty Tower Crane",
        "model": "TC-5000",
        "sku": "TC5000-001",
        "price": "180000.00",
        "weight": None,
        "specifications": {"liftingCapacity": 5000, "maxHeight": 80, "boomLength": 60, "engineType": "Electric"},
        "inventory": [
            {"warehouse_id": "WH-2", "quantity": 2, "minimum_stock": 1},
        ],
    },
]


def seed(session_factory=SessionLocal):
    db = session_factory()
    try:
        # nie nadpisujemy: tylko brakujące magazyny i produkty
        for wh in WAREHOUSES:
            if db.get(WarehouseModel, wh["id"]):
                continue
            data = {k: v for k, v in wh.items() if k != "id"}
            db.add(WarehouseModel(id=wh["id"], data=data))
            logger.info(f"Seeded warehouse {wh['id']}")
        db.flush()

        now = utcnow()
        for product in PRODUCTS:
            if db.get(ProductModel, product["id"]):
                continue
            data = {k: v for k, v in product.items() if k not in ("id", "category")}
            db.add(
                ProductModel(
                    id=product["id"],
                    category=product["category"],
                    status=stock_status(product["inventory"]).value,
                    data=data,
                    created_at=now,
                    updated_at=now,
                )
            )
            logger.info(f"Seeded product {product['id']}")
        db.commit()
    finally:
        db.close()
