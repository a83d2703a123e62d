import os
import sys

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from appointment_desk.schemas.appointment import Address, AppointmentRecord, BookedBy
from appointment_desk.services.projector import (
    FilterProjector,
    display_address,
    display_email,
    display_name,
    display_phone,
    full_name,
    project,
)


def _record(appointment_id, first=None, last=None, phone="9000000000", email=None):
    return AppointmentRecord(
        id=appointment_id,
        status="COMPLETED",
        booked_by=BookedBy(first_name=first, last_name=last, phone_number=phone, email=email),
    )


def _collection():
    return [
        _record(1, "Asha", "Rao", "9000000001", "asha@example.com"),
        _record(2, "Vikram", None, "9000000002"),
        _record(3, None, None, "9111111113", "guest@example.com"),
        _record(4, "Meera", "Iyer", "9000000004", "MEERA@Example.com"),
    ]


def test_empty_query_returns_collection_unchanged() -> None:
    collection = _collection()

    result = project(collection, "")

    assert result == collection
    assert [record.id for record in result] == [1, 2, 3, 4]


def test_query_matches_name_email_or_phone_case_insensitively() -> None:
    collection = _collection()

    assert [r.id for r in project(collection, "ASHA")] == [1]
    assert [r.id for r in project(collection, "example.com")] == [1, 3, 4]
    assert [r.id for r in project(collection, "meera@")] == [4]
    assert [r.id for r in project(collection, "911111")] == [3]
    assert [r.id for r in project(collection, "a r")] == [1]
    assert project(collection, "zz") == []


def test_projection_preserves_input_order() -> None:
    collection = list(reversed(_collection()))

    result = project(collection, "9000")

    assert [record.id for record in result] == [4, 2, 1]


def test_nameless_record_shows_placeholder_but_is_not_matched_by_it() -> None:
    record = _record(7, None, None, "9000000007")

    assert display_name(record.booked_by) == "N/A"
    assert project([record], "n/a") == []
    assert project([record], "N") == []
    assert project([record], "0007") == [record]


def test_full_name_collapses_whitespace() -> None:
    booked_by = BookedBy(first_name="  Asha ", last_name="  Rao  ", phone_number="1")

    assert full_name(booked_by) == "Asha Rao"
    assert display_name(BookedBy(first_name=None, last_name="Rao", phone_number="1")) == "Rao"


def test_display_helpers_fill_missing_values() -> None:
    booked_by = BookedBy(first_name="Asha", phone_number="9000000001")

    assert display_email(booked_by) == "--"
    assert display_phone(booked_by) == "+91 9000000001"
    assert display_phone(booked_by, "+1") == "+1 9000000001"
    assert display_address(None) == ""
    assert (
        display_address(Address(state="Karnataka", area="Indiranagar", district="Bengaluru", landmark="Metro"))
        == "Indiranagar, Bengaluru, Karnataka, Near Metro"
    )
    assert display_address(Address(state="Delhi", area="Saket", district="South Delhi")) == "Saket, South Delhi, Delhi"


def test_filter_projector_recomputes_when_version_or_query_changes() -> None:
    projector = FilterProjector()
    collection = _collection()

    first = projector.project(collection, "asha", version=1)
    assert [r.id for r in first] == [1]

    # Same key returns the cached projection even if the caller passes new data.
    cached = projector.project(collection[1:], "asha", version=1)
    assert [r.id for r in cached] == [1]

    refreshed = projector.project(collection[1:], "asha", version=2)
    assert refreshed == []

    requeried = projector.project(collection[1:], "vik", version=2)
    assert [r.id for r in requeried] == [2]
