# backoffice/api/__init__.py
from fastapi import FastAPI

from backoffice.api.routers import (
    customers,
    employees,
    fulfillments,
    health,
    orders,
    payments,
    products,
    transport,
    warehouses,
)


def create_app(lifespan=None) -> FastAPI:
    app = FastAPI(
        title="Equipment Back Office",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.include_router(health.router)
    app.include_router(customers.router)
    app.include_router(warehouses.router)
    app.include_router(products.router)
    app.include_router(employees.router)
    app.include_router(orders.router)
    app.include_router(transport.router)
    app.include_router(fulfillments.router)
    app.include_router(payments.router)

    return app
