"""Unit tests for customer CSV column detection and row mapping."""

import pytest

from detailhub.domain.customers.csv_import import (
    CsvImportError,
    build_address,
    detect_columns,
    parse_customer_csv,
)


def test_detect_columns_is_case_insensitive():
    columns = detect_columns(["Customer Name", "Mobile Phone", "Email Address", "ZIP Code", "First Visit"])
    assert columns["name"] == "Customer Name"
    assert columns["phone"] == "Mobile Phone"
    assert columns["email"] == "Email Address"
    assert columns["zip"] == "ZIP Code"
    assert columns["firstVisit"] == "First Visit"
    assert "address1" not in columns


def test_build_address_pads_short_zip_codes():
    columns = {"address1": "Address 1", "city": "City", "state": "State", "zip": "Zip"}
    record = {"Address 1": "9 Elm St", "City": "Boston", "State": "MA", "Zip": "215"}
    assert build_address(record, columns) == "9 Elm St, Boston, MA 00215"


def test_build_address_blank_split_columns():
    columns = {"address1": "Address 1", "city": "City"}
    assert build_address({"Address 1": "", "City": ""}, columns) is None


def test_build_address_legacy_single_column():
    columns = {"address": "Address"}
    assert build_address({"Address": " 1 Oak Ave "}, columns) == "1 Oak Ave"


def test_parse_rows_splits_vehicles_and_services():
    text = (
        "Phone,Vehicles,Services,Technician\n"
        '5125550111,"2020 Honda Civic; 2018 Ford F-150","Interior, Wax",Alex\n'
    )
    row = parse_customer_csv(text)[0]
    assert row["phone"] == "5125550111"
    assert row["vehicle"] == "2020 Honda Civic"
    assert row["vehicles"] == ["2020 Honda Civic", "2018 Ford F-150"]
    assert row["services"] == ["Interior", "Wax"]
    assert row["technician"] == "Alex"


def test_parse_rejects_empty_file():
    with pytest.raises(CsvImportError):
        parse_customer_csv("")
