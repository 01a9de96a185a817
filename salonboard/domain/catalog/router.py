"""Catalog router - FastAPI endpoints for staff, services, products and clients"""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...database import get_db
from ...models import Client, Product, Service
from ..scheduling.inventory import ProductStock, is_low_stock
from .schemas import (
    ClientCreate,
    ClientResponse,
    ClientUpdate,
    ProductCreate,
    ProductResponse,
    ProductUpdate,
    ServiceCreate,
    ServiceResponse,
    ServiceUpdate,
    StaffCreate,
    StaffResponse,
    StaffUpdate,
)
from .service import CatalogService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/catalog", tags=["Catalog"])


def get_catalog_service(db: Session = Depends(get_db)) -> CatalogService:
    """Dependency injection for CatalogService"""
    return CatalogService(db)


def to_service_response(s: Service) -> ServiceResponse:
    return ServiceResponse(
        id=s.id,
        name=s.name,
        price=s.price,
        durationMinutes=s.duration_minutes,
        category=s.category,
        linkedProductId=s.linked_product_id,
        loyaltyPointsMultiplier=s.loyalty_points_multiplier,
    )


def to_product_response(p: Product) -> ProductResponse:
    return ProductResponse(
        id=p.id,
        name=p.name,
        quantity=p.quantity,
        lowStockThreshold=p.low_stock_threshold,
        isLowStock=is_low_stock(ProductStock.from_product(p)),
    )


def to_client_response(c: Client) -> ClientResponse:
    return ClientResponse(
        id=c.id,
        name=c.name,
        phone=c.phone,
        loyaltyPoints=c.loyalty_points,
        totalVisits=c.total_visits,
        totalSpent=c.total_spent,
    )


# ============================================================================
# STAFF
# ============================================================================


@router.get("/staff", response_model=list[StaffResponse])
async def get_staff(
    include_inactive: bool = Query(False),
    service: CatalogService = Depends(get_catalog_service),
):
    """Staff columns of the board"""
    return [StaffResponse.model_validate(s) for s in service.get_staff(include_inactive)]


@router.post("/staff", response_model=StaffResponse, status_code=201)
async def create_staff(data: StaffCreate, service: CatalogService = Depends(get_catalog_service)):
    return StaffResponse.model_validate(service.create_staff(data))


@router.patch("/staff/{staff_id}", response_model=StaffResponse)
async def update_staff(
    staff_id: int,
    data: StaffUpdate,
    service: CatalogService = Depends(get_catalog_service),
):
    return StaffResponse.model_validate(service.update_staff(staff_id, data))


@router.delete("/staff/{staff_id}")
async def remove_staff(staff_id: int, service: CatalogService = Depends(get_catalog_service)):
    """Remove a staff member from the board (soft removal)"""
    return service.remove_staff(staff_id)


# ============================================================================
# SERVICES
# ============================================================================


@router.get("/services", response_model=list[ServiceResponse])
async def get_services(service: CatalogService = Depends(get_catalog_service)):
    return [to_service_response(s) for s in service.get_services()]


@router.post("/services", response_model=ServiceResponse, status_code=201)
async def create_service(data: ServiceCreate, service: CatalogService = Depends(get_catalog_service)):
    return to_service_response(service.create_service(data))


@router.get("/services/{service_id}", response_model=ServiceResponse)
async def get_service(service_id: int, service: CatalogService = Depends(get_catalog_service)):
    return to_service_response(service.get_service(service_id))


@router.patch("/services/{service_id}", response_model=ServiceResponse)
async def update_service(
    service_id: int,
    data: ServiceUpdate,
    service: CatalogService = Depends(get_catalog_service),
):
    return to_service_response(service.update_service(service_id, data))


@router.delete("/services/{service_id}")
async def delete_service(service_id: int, service: CatalogService = Depends(get_catalog_service)):
    """Delete a service (booked appointments keep their lines)"""
    return service.delete_service(service_id)


# ============================================================================
# PRODUCTS
# ============================================================================


@router.get("/products", response_model=list[ProductResponse])
async def get_products(service: CatalogService = Depends(get_catalog_service)):
    return [to_product_response(p) for p in service.get_products()]


@router.get("/products/low-stock", response_model=list[ProductResponse])
async def get_low_stock_products(service: CatalogService = Depends(get_catalog_service)):
    """Products at or below their low-stock threshold"""
    return [to_product_response(p) for p in service.get_low_stock_products()]


@router.get("/products/{product_id}", response_model=ProductResponse)
async def get_product(product_id: int, service: CatalogService = Depends(get_catalog_service)):
    return to_product_response(service.get_product(product_id))


@router.post("/products", response_model=ProductResponse, status_code=201)
async def create_product(data: ProductCreate, service: CatalogService = Depends(get_catalog_service)):
    return to_product_response(service.create_product(data))


@router.patch("/products/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: int,
    data: ProductUpdate,
    service: CatalogService = Depends(get_catalog_service),
):
    return to_product_response(service.update_product(product_id, data))


@router.delete("/products/{product_id}")
async def delete_product(product_id: int, service: CatalogService = Depends(get_catalog_service)):
    """Delete a product; linked services stop tracking stock"""
    return service.delete_product(product_id)


# ============================================================================
# CLIENTS
# ============================================================================


@router.get("/clients", response_model=list[ClientResponse])
async def get_clients(service: CatalogService = Depends(get_catalog_service)):
    return [to_client_response(c) for c in service.get_clients()]


@router.post("/clients", response_model=ClientResponse, status_code=201)
async def create_client(data: ClientCreate, service: CatalogService = Depends(get_catalog_service)):
    return to_client_response(service.create_client(data))


@router.get("/clients/{client_id}", response_model=ClientResponse)
async def get_client(client_id: int, service: CatalogService = Depends(get_catalog_service)):
    return to_client_response(service.get_client(client_id))


@router.patch("/clients/{client_id}", response_model=ClientResponse)
async def update_client(
    client_id: int,
    data: ClientUpdate,
    service: CatalogService = Depends(get_catalog_service),
):
    return to_client_response(service.update_client(client_id, data))
