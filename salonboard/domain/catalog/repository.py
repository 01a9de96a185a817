"""Catalog repository - Database operations for staff, services, products and clients"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import AppointmentLine, Client, Product, Service, Staff


class CatalogRepository:
    """Repository for reference data used by the booking board"""

    @staticmethod
    def get_staff(db: Session, include_inactive: bool = False) -> list[Staff]:
        query = db.query(Staff)
        if not include_inactive:
            query = query.filter(Staff.active.is_(True))
        return query.order_by(Staff.id).all()

    @staticmethod
    def get_staff_by_id(db: Session, staff_id: int) -> Optional[Staff]:
        return db.query(Staff).filter(Staff.id == staff_id).first()

    @staticmethod
    def get_services(db: Session) -> list[Service]:
        return db.query(Service).order_by(Service.category, Service.name).all()

    @staticmethod
    def get_products(db: Session) -> list[Product]:
        return db.query(Product).order_by(Product.name).all()

    @staticmethod
    def get_product_by_id(db: Session, product_id: int) -> Optional[Product]:
        return db.query(Product).filter(Product.id == product_id).first()

    @staticmethod
    def get_product_by_name(db: Session, name: str) -> Optional[Product]:
        return db.query(Product).filter(Product.name == name).first()

    @staticmethod
    def get_service_by_id(db: Session, service_id: int) -> Optional[Service]:
        return db.query(Service).filter(Service.id == service_id).first()

    @staticmethod
    def get_client_by_id(db: Session, client_id: int) -> Optional[Client]:
        return db.query(Client).filter(Client.id == client_id).first()

    @staticmethod
    def get_clients(db: Session) -> list[Client]:
        return db.query(Client).order_by(Client.name).all()

    @staticmethod
    def create(db: Session, row):
        """Insert any catalog row"""
        db.add(row)
        db.commit()
        db.refresh(row)
        return row

    @staticmethod
    def update(db: Session, row, **updates):
        """Update a row with the provided (non-None) fields"""
        for key, value in updates.items():
            if value is not None and hasattr(row, key):
                setattr(row, key, value)

        db.commit()
        db.refresh(row)
        return row

    @staticmethod
    def delete_service(db: Session, service: Service) -> None:
        """Delete a service. Booked lines keep their name and price but lose the reference."""
        db.query(AppointmentLine).filter(AppointmentLine.service_id == service.id).update(
            {AppointmentLine.service_id: None}, synchronize_session=False
        )
        db.delete(service)
        db.commit()

    @staticmethod
    def delete_product(db: Session, product: Product) -> None:
        """Delete a product. Services and booked lines linked to it stop tracking stock."""
        db.query(Service).filter(Service.linked_product_id == product.id).update(
            {Service.linked_product_id: None}, synchronize_session=False
        )
        db.query(AppointmentLine).filter(AppointmentLine.linked_product_id == product.id).update(
            {AppointmentLine.linked_product_id: None}, synchronize_session=False
        )
        db.delete(product)
        db.commit()
