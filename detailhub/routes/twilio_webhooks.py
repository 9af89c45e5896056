"""
Twilio Inbound SMS Webhook
Single receiver for customer text messages sent to a detailer's Twilio number
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form
from fastapi.responses import JSONResponse, Response
from sqlalchemy.orm import Session

from .. import config
from ..database import get_db
from ..domain.customers.repository import CustomerRepository
from ..domain.detailers.repository import DetailerRepository
from ..models import SmsMessage
from ..shared.customer_type import CustomerType
from ..shared.phone import mask_phone, normalize_or_raw

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/webhooks/twilio", tags=["twilio-webhooks"])

EMPTY_TWIML = '<?xml version="1.0" encoding="UTF-8"?><Response></Response>'


@router.post("/sms")
async def receive_sms(
    from_number: str = Form(..., alias="From"),
    to_number: str = Form(..., alias="To"),
    body: Optional[str] = Form(None, alias="Body"),
    message_sid: Optional[str] = Form(None, alias="MessageSid"),
    db: Session = Depends(get_db),
):
    """Store an inbound SMS and register first-time senders as customers"""
    if not from_number.strip():
        logger.warning("⚠️ Inbound SMS without a sender number")
        return JSONResponse(status_code=400, content={"detail": "Missing sender phone number"})

    sender = normalize_or_raw(from_number, config.DEFAULT_PHONE_COUNTRY)
    recipient = normalize_or_raw(to_number, config.DEFAULT_PHONE_COUNTRY)

    detailer = DetailerRepository.get_by_twilio_number(db, recipient)
    if not detailer:
        logger.error(f"❌ No SMS-enabled detailer for Twilio number {mask_phone(recipient)}")
        return JSONResponse(status_code=404, content={"detail": "Detailer not found"})

    customer = CustomerRepository.get_customer_by_phone(db, detailer.id, sender)
    if not customer:
        CustomerRepository.create_customer(
            db,
            detailer.id,
            commit=False,
            customer_phone=sender,
            customer_type=CustomerType.NEW.value,
            services=[],
        )
        logger.info(f"📥 First-time SMS customer {mask_phone(sender)} for detailer {detailer.id}")

    db.add(
        SmsMessage(
            detailer_id=detailer.id,
            customer_phone=sender,
            direction="inbound",
            body=body,
            message_sid=message_sid,
        )
    )
    db.commit()

    logger.info(f"✅ Stored inbound SMS {message_sid or '-'} for detailer {detailer.id}")
    return Response(content=EMPTY_TWIML, media_type="application/xml")
