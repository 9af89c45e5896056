"""Customer router - FastAPI endpoints for customer operations"""

import logging

from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy.orm import Session

from ...auth import get_current_detailer
from ...database import get_db
from ...models import Detailer
from .schemas import (
    CustomerImportRequest,
    CustomerImportResult,
    CustomerResponse,
    CustomerUpdate,
    CustomerUpsert,
)
from .service import CustomerService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/customers", tags=["Customers"])


def get_customer_service(db: Session = Depends(get_db)) -> CustomerService:
    """Dependency injection for CustomerService"""
    return CustomerService(db)


@router.get("", response_model=list[CustomerResponse])
async def get_customers(
    current_detailer: Detailer = Depends(get_current_detailer),
    service: CustomerService = Depends(get_customer_service),
):
    """Get all customers for the current detailer, most recently updated first"""
    customers = service.get_customers(current_detailer)
    return service.to_responses(current_detailer, customers)


@router.get("/export")
async def export_customers_csv(
    current_detailer: Detailer = Depends(get_current_detailer),
    service: CustomerService = Depends(get_customer_service),
):
    return service.export_customers_csv(current_detailer)


@router.get("/lookup", response_model=CustomerResponse)
async def lookup_customer(
    phone: str = Query(..., min_length=1, max_length=32),
    current_detailer: Detailer = Depends(get_current_detailer),
    service: CustomerService = Depends(get_customer_service),
):
    """Find a customer by phone number in any format"""
    customer = service.lookup_by_phone(phone, current_detailer)
    return service.to_response(current_detailer, customer)


@router.post("/import", response_model=CustomerImportResult)
async def import_customers_csv(
    file: UploadFile = File(...),
    current_detailer: Detailer = Depends(get_current_detailer),
    service: CustomerService = Depends(get_customer_service),
):
    """Import customers from a CSV spreadsheet; columns are detected from the header row"""
    contents = await file.read()
    return service.import_customers_csv(file.filename, contents, current_detailer)


@router.post("/import/rows", response_model=CustomerImportResult)
async def import_customer_rows(
    data: CustomerImportRequest,
    current_detailer: Detailer = Depends(get_current_detailer),
    service: CustomerService = Depends(get_customer_service),
):
    return service.import_customers(data, current_detailer)


@router.get("/{customer_id}", response_model=CustomerResponse)
async def get_customer(
    customer_id: int,
    current_detailer: Detailer = Depends(get_current_detailer),
    service: CustomerService = Depends(get_customer_service),
):
    customer = service.get_customer(customer_id, current_detailer)
    return service.to_response(current_detailer, customer)


@router.post("", response_model=CustomerResponse, status_code=201)
async def upsert_customer(
    data: CustomerUpsert,
    current_detailer: Detailer = Depends(get_current_detailer),
    service: CustomerService = Depends(get_customer_service),
):
    """Create a customer, or update the one with the same phone number"""
    customer = service.upsert_customer(data, current_detailer)
    return service.to_response(current_detailer, customer)


@router.patch("/{customer_id}", response_model=CustomerResponse)
async def update_customer(
    customer_id: int,
    data: CustomerUpdate,
    current_detailer: Detailer = Depends(get_current_detailer),
    service: CustomerService = Depends(get_customer_service),
):
    customer = service.update_customer(customer_id, data, current_detailer)
    return service.to_response(current_detailer, customer)


@router.delete("/{customer_id}")
async def delete_customer(
    customer_id: int,
    current_detailer: Detailer = Depends(get_current_detailer),
    service: CustomerService = Depends(get_customer_service),
):
    return service.delete_customer(customer_id, current_detailer)
