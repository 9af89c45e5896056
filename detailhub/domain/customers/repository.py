"""Customer repository - Database operations for customer snapshots"""

from collections import defaultdict
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Booking, CustomerSnapshot


class CustomerRepository:
    """Repository for customer database operations"""

    @staticmethod
    def get_customers(db: Session, detailer_id: int) -> list[CustomerSnapshot]:
        return (
            db.query(CustomerSnapshot)
            .filter(CustomerSnapshot.detailer_id == detailer_id)
            .order_by(CustomerSnapshot.updated_at.desc(), CustomerSnapshot.id.desc())
            .all()
        )

    @staticmethod
    def get_customer_by_id(
        db: Session, customer_id: int, detailer_id: int
    ) -> Optional[CustomerSnapshot]:
        return (
            db.query(CustomerSnapshot)
            .filter(CustomerSnapshot.id == customer_id, CustomerSnapshot.detailer_id == detailer_id)
            .first()
        )

    @staticmethod
    def get_customer_by_phone(
        db: Session, detailer_id: int, phone: str
    ) -> Optional[CustomerSnapshot]:
        return (
            db.query(CustomerSnapshot)
            .filter(
                CustomerSnapshot.detailer_id == detailer_id,
                CustomerSnapshot.customer_phone == phone,
            )
            .first()
        )

    @staticmethod
    def create_customer(
        db: Session, detailer_id: int, commit: bool = True, **customer_data
    ) -> CustomerSnapshot:
        customer = CustomerSnapshot(detailer_id=detailer_id, **customer_data)
        db.add(customer)
        if commit:
            db.commit()
            db.refresh(customer)
        return customer

    @staticmethod
    def update_customer(
        db: Session, customer: CustomerSnapshot, commit: bool = True, **updates
    ) -> CustomerSnapshot:
        for key, value in updates.items():
            if hasattr(customer, key):
                setattr(customer, key, value)

        if commit:
            db.commit()
            db.refresh(customer)
        return customer

    @staticmethod
    def delete_customer(db: Session, customer: CustomerSnapshot) -> None:
        db.delete(customer)
        db.commit()

    @staticmethod
    def get_completed_service_times(
        db: Session, detailer_id: int, phones: list[str]
    ) -> dict[str, list[datetime]]:
        """Completion timestamps of completed bookings, grouped by customer phone"""
        history: dict[str, list[datetime]] = defaultdict(list)
        if not phones:
            return history

        rows = (
            db.query(Booking.customer_phone, Booking.completed_at)
            .filter(
                Booking.detailer_id == detailer_id,
                Booking.status == "completed",
                Booking.customer_phone.in_(phones),
            )
            .all()
        )
        for phone, completed_at in rows:
            if completed_at:
                history[phone].append(completed_at)
        return history
