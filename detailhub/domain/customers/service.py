"""Customer service - Business logic for customer operations"""

import csv
import logging
import os
from datetime import datetime, timezone
from io import StringIO
from typing import Any, Optional

from fastapi import HTTPException
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from ... import config
from ...models import CustomerSnapshot, Detailer
from ...shared.customer_type import classify_customer, parse_datetime
from ...shared.phone import (
    format_phone_display,
    normalize_for_import,
    normalize_or_raw,
    normalize_to_e164,
    phone_match_key,
)
from ...shared.validators import validate_email
from .csv_import import FIRST_DATA_ROW, CsvImportError, parse_customer_csv
from .repository import CustomerRepository
from .schemas import (
    MAX_IMPORT_ROWS,
    CustomerImportRequest,
    CustomerImportResult,
    CustomerImportRow,
    CustomerResponse,
    CustomerUpdate,
    CustomerUpsert,
)

logger = logging.getLogger(__name__)

MAX_IMPORT_FILE_SIZE = 5 * 1024 * 1024  # 5MB

# Request field -> model column
CUSTOMER_FIELD_MAP = {
    "customerPhone": "customer_phone",
    "customerName": "customer_name",
    "customerEmail": "customer_email",
    "address": "address",
    "locationType": "location_type",
    "customerType": "customer_type",
    "vehicle": "vehicle",
    "vehicleYear": "vehicle_year",
    "vehicleMake": "vehicle_make",
    "vehicleModel": "vehicle_model",
    "services": "services",
    "data": "data",
}


def _merge_data(existing: Optional[dict], incoming: Optional[dict]) -> Optional[dict]:
    merged = dict(existing) if isinstance(existing, dict) else {}
    if incoming:
        merged.update(incoming)
    return merged or None


def _imported_history(data: Optional[dict]) -> tuple[int, Optional[datetime]]:
    """Visit count and last visit recorded by a spreadsheet import"""
    if not isinstance(data, dict):
        return 0, None

    try:
        count = int(data.get("importedVisitCount") or 0)
    except (TypeError, ValueError):
        count = 0

    return max(count, 0), parse_datetime(data.get("importedLastVisit"))


class CustomerService:
    """Service layer for customer business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = CustomerRepository()

    # ------------------------------------------------------------------
    # Presentation
    # ------------------------------------------------------------------

    def to_responses(
        self,
        detailer: Detailer,
        customers: list[CustomerSnapshot],
        reference_date: Optional[datetime] = None,
    ) -> list[CustomerResponse]:
        """Build responses with the customer type computed from service history"""
        reference = reference_date or datetime.now(timezone.utc)
        history = self.repo.get_completed_service_times(
            self.db, detailer.id, [c.customer_phone for c in customers]
        )

        responses = []
        for customer in customers:
            completed = [parse_datetime(t) for t in history.get(customer.customer_phone, [])]
            imported_count, imported_last = _imported_history(customer.data)

            count = len(completed) + imported_count
            candidates = [t for t in completed + [imported_last] if t is not None]
            last = max(candidates) if candidates else None

            responses.append(
                CustomerResponse(
                    id=customer.id,
                    customerPhone=customer.customer_phone,
                    customerPhoneDisplay=format_phone_display(customer.customer_phone),
                    customerName=customer.customer_name,
                    customerEmail=customer.customer_email,
                    address=customer.address,
                    locationType=customer.location_type,
                    customerType=classify_customer(count, last, reference).value,
                    storedCustomerType=customer.customer_type,
                    completedServices=count,
                    lastCompletedServiceAt=last,
                    vehicle=customer.vehicle,
                    vehicleYear=customer.vehicle_year,
                    vehicleMake=customer.vehicle_make,
                    vehicleModel=customer.vehicle_model,
                    services=customer.services or [],
                    data=customer.data,
                    created_at=customer.created_at,
                    updated_at=customer.updated_at,
                )
            )
        return responses

    def to_response(self, detailer: Detailer, customer: CustomerSnapshot) -> CustomerResponse:
        return self.to_responses(detailer, [customer])[0]

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def get_customers(self, detailer: Detailer) -> list[CustomerSnapshot]:
        return self.repo.get_customers(self.db, detailer.id)

    def get_customer(self, customer_id: int, detailer: Detailer) -> CustomerSnapshot:
        customer = self.repo.get_customer_by_id(self.db, customer_id, detailer.id)
        if not customer:
            raise HTTPException(status_code=404, detail="Customer not found")
        return customer

    def lookup_by_phone(self, phone: str, detailer: Detailer) -> CustomerSnapshot:
        normalized = normalize_to_e164(phone, config.DEFAULT_PHONE_COUNTRY)
        if not normalized:
            raise HTTPException(status_code=400, detail="Invalid phone number")

        customer = self.repo.get_customer_by_phone(self.db, detailer.id, normalized)
        if not customer:
            raise HTTPException(status_code=404, detail="Customer not found")
        return customer

    def upsert_customer(self, data: CustomerUpsert, detailer: Detailer) -> CustomerSnapshot:
        """Create or update the customer identified by the normalized phone number"""
        phone = normalize_or_raw(data.customerPhone, config.DEFAULT_PHONE_COUNTRY)
        fields = data.model_dump(exclude_unset=True)
        fields.pop("customerPhone", None)
        incoming_data = fields.pop("data", None)

        updates = {CUSTOMER_FIELD_MAP[k]: v for k, v in fields.items()}
        existing = self.repo.get_customer_by_phone(self.db, detailer.id, phone)

        if existing:
            updates["data"] = _merge_data(existing.data, incoming_data)
            logger.info(f"📥 Updating customer {existing.id} for detailer {detailer.id}")
            return self.repo.update_customer(self.db, existing, **updates)

        updates.setdefault("services", [])
        updates["data"] = _merge_data(None, incoming_data)
        logger.info(f"📥 Creating customer for detailer {detailer.id}")
        return self.repo.create_customer(self.db, detailer.id, customer_phone=phone, **updates)

    def update_customer(
        self, customer_id: int, data: CustomerUpdate, detailer: Detailer
    ) -> CustomerSnapshot:
        customer = self.get_customer(customer_id, detailer)
        fields = data.model_dump(exclude_unset=True)
        updates = {}

        if (fields.get("customerPhone") or "").strip():
            phone = normalize_or_raw(fields["customerPhone"], config.DEFAULT_PHONE_COUNTRY)
            if phone != customer.customer_phone:
                clash = self.repo.get_customer_by_phone(self.db, detailer.id, phone)
                if clash:
                    raise HTTPException(
                        status_code=400, detail="Another customer already uses this phone number"
                    )
            updates["customer_phone"] = phone
        fields.pop("customerPhone", None)

        if "data" in fields:
            updates["data"] = _merge_data(customer.data, fields.pop("data"))

        for key, value in fields.items():
            # Blank strings clear the field
            if isinstance(value, str) and not value.strip():
                value = None
            if key == "services" and value is None:
                value = []
            updates[CUSTOMER_FIELD_MAP[key]] = value

        return self.repo.update_customer(self.db, customer, **updates)

    def delete_customer(self, customer_id: int, detailer: Detailer) -> dict:
        customer = self.get_customer(customer_id, detailer)
        self.repo.delete_customer(self.db, customer)
        return {"message": "Customer deleted"}

    # ------------------------------------------------------------------
    # Import / export
    # ------------------------------------------------------------------

    def import_customers(
        self,
        request: CustomerImportRequest,
        detailer: Detailer,
        first_row_number: int = 1,
    ) -> CustomerImportResult:
        """
        Bulk import spreadsheet rows.

        Rows are matched to existing customers by exact phone, then by the last
        ten digits; duplicate phones within one import are skipped. Rows that
        are rejected are reported as "Row N: ..." errors, numbered from
        first_row_number.
        """
        result = CustomerImportResult()

        existing_by_phone: dict[str, CustomerSnapshot] = {}
        existing_by_key: dict[str, CustomerSnapshot] = {}
        for customer in self.repo.get_customers(self.db, detailer.id):
            existing_by_phone[customer.customer_phone] = customer
            key = phone_match_key(customer.customer_phone)
            if key:
                existing_by_key[key] = customer

        processed: set[str] = set()

        for index, row in enumerate(request.rows, start=first_row_number):
            if not row.phone or not row.phone.strip():
                result.errors.append(f"Row {index}: Phone number is required")
                result.skipped += 1
                continue

            phone = normalize_for_import(row.phone, config.DEFAULT_PHONE_COUNTRY)
            if phone in processed:
                result.skipped += 1
                continue

            try:
                email = validate_email(row.email)
            except ValueError as e:
                result.errors.append(f"Row {index}: {e}")
                result.skipped += 1
                continue

            # Only accepted rows claim their phone number
            processed.add(phone)

            imported: dict[str, Any] = dict(row.model_extra or {})
            if row.notes:
                imported["notes"] = row.notes
            if row.visitCount is not None:
                imported["importedVisitCount"] = row.visitCount
            if row.firstVisit:
                imported["importedFirstVisit"] = row.firstVisit
            if row.lastVisit:
                imported["importedLastVisit"] = row.lastVisit

            fields = {
                "customer_name": row.name,
                "customer_email": email,
                "address": row.address,
                "location_type": row.locationType,
                "vehicle": row.vehicle,
                "services": row.services,
            }
            fields = {k: v for k, v in fields.items() if v}

            key = phone_match_key(phone)
            existing = existing_by_phone.get(phone) or (existing_by_key.get(key) if key else None)

            if existing:
                fields["data"] = _merge_data(existing.data, imported)
                self.repo.update_customer(self.db, existing, commit=False, **fields)
                result.updated += 1
            else:
                fields.setdefault("services", [])
                fields["data"] = imported or None
                created = self.repo.create_customer(
                    self.db, detailer.id, commit=False, customer_phone=phone, **fields
                )
                existing_by_phone[phone] = created
                if key:
                    existing_by_key[key] = created
                result.created += 1

        self.db.commit()
        logger.info(
            f"📊 Customer import for detailer {detailer.id}: created={result.created}, "
            f"updated={result.updated}, skipped={result.skipped}, errors={len(result.errors)}"
        )
        return result

    def import_customers_csv(
        self, filename: Optional[str], contents: bytes, detailer: Detailer
    ) -> CustomerImportResult:
        """Import customers from an uploaded CSV file, detecting columns from its header"""
        extension = os.path.splitext(filename or "")[1].lower().lstrip(".")
        if extension in ("xlsx", "xls"):
            raise HTTPException(
                status_code=400,
                detail="Excel files (.xlsx, .xls) are not yet supported. Please convert to CSV format.",
            )
        if extension != "csv":
            raise HTTPException(status_code=400, detail="Unsupported file format")

        if len(contents) > MAX_IMPORT_FILE_SIZE:
            raise HTTPException(status_code=400, detail="File size exceeds 5MB limit")

        try:
            text = contents.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise HTTPException(status_code=400, detail="File must be UTF-8 encoded") from e

        try:
            rows = parse_customer_csv(text)
        except CsvImportError as e:
            logger.warning(f"⚠️ Rejected customer import {filename} for detailer {detailer.id}: {e}")
            raise HTTPException(status_code=400, detail=str(e)) from e

        if len(rows) > MAX_IMPORT_ROWS:
            raise HTTPException(
                status_code=400, detail=f"File has more than {MAX_IMPORT_ROWS} customer rows"
            )

        logger.info(f"📤 Importing {len(rows)} CSV rows from {filename} for detailer {detailer.id}")
        request = CustomerImportRequest(rows=[CustomerImportRow(**row) for row in rows])
        return self.import_customers(request, detailer, first_row_number=FIRST_DATA_ROW)

    def export_customers_csv(self, detailer: Detailer) -> StreamingResponse:
        customers = self.get_customers(detailer)
        responses = self.to_responses(detailer, customers)

        output = StringIO()
        writer = csv.writer(output)
        writer.writerow(
            ["ID", "Name", "Phone", "Email", "Address", "Vehicle", "Customer Type", "Completed Services"]
        )
        for c in responses:
            writer.writerow(
                [
                    c.id,
                    c.customerName or "",
                    c.customerPhoneDisplay,
                    c.customerEmail or "",
                    c.address or "",
                    c.vehicle or "",
                    c.customerType,
                    c.completedServices,
                ]
            )

        output.seek(0)
        filename = f"customers_export_{datetime.now().strftime('%Y%m%d_%H%M%S')}.csv"
        logger.info(f"✅ CSV export successful: {filename} ({len(responses)} customers)")

        return StreamingResponse(
            iter([output.getvalue()]),
            media_type="text/csv",
            headers={
                "Content-Disposition": f"attachment; filename={filename}",
                "Cache-Control": "no-cache",
            },
        )
