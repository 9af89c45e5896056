"""Detailer repository - Database operations for detailers"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import Detailer


class DetailerRepository:
    """Repository for detailer database operations"""

    @staticmethod
    def get_by_id(db: Session, detailer_id: int) -> Optional[Detailer]:
        return db.query(Detailer).filter(Detailer.id == detailer_id).first()

    @staticmethod
    def get_by_twilio_number(db: Session, phone: str) -> Optional[Detailer]:
        """Find the SMS-enabled detailer that owns a Twilio number"""
        return (
            db.query(Detailer)
            .filter(Detailer.twilio_phone_number == phone, Detailer.sms_enabled.is_(True))
            .first()
        )

    @staticmethod
    def search_active(
        db: Session,
        city: Optional[str] = None,
        state: Optional[str] = None,
        query: Optional[str] = None,
    ) -> list[Detailer]:
        """Active detailers matching the optional filters (case-insensitive)"""
        q = db.query(Detailer).filter(Detailer.is_active.is_(True))

        if city:
            q = q.filter(func.lower(Detailer.city) == city.strip().lower())
        if state:
            q = q.filter(func.lower(Detailer.state) == state.strip().lower())
        if query:
            q = q.filter(func.lower(Detailer.business_name).contains(query.strip().lower()))

        return q.order_by(Detailer.business_name.asc()).all()

    @staticmethod
    def update(db: Session, detailer: Detailer, **updates) -> Detailer:
        for key, value in updates.items():
            if hasattr(detailer, key):
                setattr(detailer, key, value)

        db.commit()
        db.refresh(detailer)
        return detailer
