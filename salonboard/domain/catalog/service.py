"""Catalog service - Business logic for reference data"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...database import begin_write
from ...models import Client, Product, Service, Staff
from ...utils.sanitization import sanitize_name, sanitize_string
from ..scheduling.inventory import ProductStock, is_low_stock
from .repository import CatalogRepository
from .schemas import (
    ClientCreate,
    ClientUpdate,
    ProductCreate,
    ProductUpdate,
    ServiceCreate,
    ServiceUpdate,
    StaffCreate,
    StaffUpdate,
)

logger = logging.getLogger(__name__)


def _name(value: str) -> str:
    try:
        return sanitize_name(value)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from None


class CatalogService:
    """
    Service layer for staff, services, products and clients.

    Writes open their transaction with begin_write() so that a stock edit
    never interleaves with a booking that is consuming the same product.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = CatalogRepository()

    def _not_found(self, detail: str) -> HTTPException:
        self.db.rollback()
        return HTTPException(status_code=404, detail=detail)

    # Staff

    def get_staff(self, include_inactive: bool = False) -> list[Staff]:
        return self.repo.get_staff(self.db, include_inactive)

    def get_staff_member(self, staff_id: int) -> Staff:
        staff = self.repo.get_staff_by_id(self.db, staff_id)
        if not staff:
            raise self._not_found("Staff member not found")
        return staff

    def create_staff(self, data: StaffCreate) -> Staff:
        logger.info(f"📥 Adding staff member {data.name!r}")
        return self.repo.create(self.db, Staff(name=_name(data.name), color=data.color, active=True))

    def update_staff(self, staff_id: int, data: StaffUpdate) -> Staff:
        name = _name(data.name) if data.name is not None else None
        begin_write(self.db)
        staff = self.get_staff_member(staff_id)
        return self.repo.update(self.db, staff, name=name, color=data.color, active=data.active)

    def remove_staff(self, staff_id: int) -> dict:
        """
        Take a staff member off the board.

        The row stays so existing appointments keep their column and history;
        new bookings and moves into it are refused.
        """
        begin_write(self.db)
        staff = self.get_staff_member(staff_id)
        staff.active = False
        self.db.commit()
        logger.info(f"✅ Staff member #{staff_id} removed from the board")
        return {"message": "Staff member removed"}

    # Services

    def get_services(self) -> list[Service]:
        return self.repo.get_services(self.db)

    def get_service(self, service_id: int) -> Service:
        service = self.repo.get_service_by_id(self.db, service_id)
        if not service:
            raise self._not_found("Service not found")
        return service

    def create_service(self, data: ServiceCreate) -> Service:
        name = _name(data.name)
        begin_write(self.db)
        self._require_product(data.linkedProductId)
        return self.repo.create(
            self.db,
            Service(
                name=name,
                price=data.price,
                duration_minutes=data.durationMinutes,
                category=sanitize_string(data.category),
                linked_product_id=data.linkedProductId,
                loyalty_points_multiplier=data.loyaltyPointsMultiplier,
            ),
        )

    def update_service(self, service_id: int, data: ServiceUpdate) -> Service:
        """Change a service. Appointments already booked keep the lines they were booked with."""
        name = _name(data.name) if data.name is not None else None
        begin_write(self.db)
        service = self.get_service(service_id)
        self._require_product(data.linkedProductId)
        return self.repo.update(
            self.db,
            service,
            name=name,
            price=data.price,
            duration_minutes=data.durationMinutes,
            category=sanitize_string(data.category),
            linked_product_id=data.linkedProductId,
            loyalty_points_multiplier=data.loyaltyPointsMultiplier,
        )

    def delete_service(self, service_id: int) -> dict:
        begin_write(self.db)
        service = self.get_service(service_id)
        self.repo.delete_service(self.db, service)
        logger.info(f"🗑️ Service #{service_id} deleted")
        return {"message": "Service deleted"}

    def _require_product(self, product_id) -> None:
        if product_id is not None and not self.repo.get_product_by_id(self.db, product_id):
            raise self._not_found("Linked product not found")

    # Products

    def get_products(self) -> list[Product]:
        return self.repo.get_products(self.db)

    def get_low_stock_products(self) -> list[Product]:
        return [p for p in self.repo.get_products(self.db) if is_low_stock(ProductStock.from_product(p))]

    def get_product(self, product_id: int) -> Product:
        product = self.repo.get_product_by_id(self.db, product_id)
        if not product:
            raise self._not_found("Product not found")
        return product

    def create_product(self, data: ProductCreate) -> Product:
        name = _name(data.name)
        begin_write(self.db)
        if self.repo.get_product_by_name(self.db, name):
            self.db.rollback()
            raise HTTPException(status_code=409, detail=f"Product {name!r} already exists")
        return self.repo.create(
            self.db,
            Product(name=name, quantity=data.quantity, low_stock_threshold=data.lowStockThreshold),
        )

    def update_product(self, product_id: int, data: ProductUpdate) -> Product:
        """Direct admin edit (restock, threshold change)"""
        name = _name(data.name) if data.name is not None else None
        begin_write(self.db)
        product = self.get_product(product_id)
        return self.repo.update(
            self.db,
            product,
            name=name,
            quantity=data.quantity,
            low_stock_threshold=data.lowStockThreshold,
        )

    def delete_product(self, product_id: int) -> dict:
        begin_write(self.db)
        product = self.get_product(product_id)
        self.repo.delete_product(self.db, product)
        logger.info(f"🗑️ Product #{product_id} deleted")
        return {"message": "Product deleted"}

    # Clients

    def get_clients(self) -> list[Client]:
        return self.repo.get_clients(self.db)

    def get_client(self, client_id: int) -> Client:
        client = self.repo.get_client_by_id(self.db, client_id)
        if not client:
            raise self._not_found("Client not found")
        return client

    def create_client(self, data: ClientCreate) -> Client:
        return self.repo.create(self.db, Client(name=_name(data.name), phone=data.phone))

    def update_client(self, client_id: int, data: ClientUpdate) -> Client:
        """Contact details only; loyalty counters move with paid appointments"""
        name = _name(data.name) if data.name is not None else None
        begin_write(self.db)
        client = self.get_client(client_id)
        return self.repo.update(self.db, client, name=name, phone=data.phone)
