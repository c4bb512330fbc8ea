import pytest
from sqlalchemy import func, select

from customer_records.domain.errors import DuplicatePhoneNumber, NotFound, ValidationError
from customer_records.domain.models import Address


def make_customers(service, names):
    for index, (first, last) in enumerate(names):
        service.create_customer({
            "first_name": first,
            "last_name": last,
            "phone_number": f"98000000{index:02d}",
        })


def address_count(session):
    return session.execute(select(func.count()).select_from(Address)).scalar_one()


class TestCustomers:
    def test_create_then_get_returns_trimmed_record(self, service):
        created = service.create_customer({
            "first_name": "  Ann ",
            "last_name": " Lee",
            "phone_number": " +1 (555) 123-4567 ",
        })
        fetched = service.get_customer(created.id)

        assert created.id is not None
        assert (fetched.first_name, fetched.last_name) == ("Ann", "Lee")
        assert fetched.phone_number == "15551234567"
        assert fetched.addresses == []

    def test_invalid_record_is_rejected_before_storage(self, service):
        with pytest.raises(ValidationError) as exc_info:
            service.create_customer({"first_name": "Ann", "last_name": "Lee", "phone_number": "12"})
        assert exc_info.value.message == "phone_number looks invalid"
        assert service.list_customers().pagination.total == 0

    def test_duplicate_normalized_phone_rejected(self, service, ann):
        service.create_customer(ann)
        with pytest.raises(DuplicatePhoneNumber):
            service.create_customer({"first_name": "Bob", "last_name": "Ray", "phone_number": "1-555-123-4567"})
        assert service.list_customers().pagination.total == 1

    def test_service_usable_after_duplicate(self, service, ann):
        service.create_customer(ann)
        with pytest.raises(DuplicatePhoneNumber):
            service.create_customer(ann)
        other = service.create_customer({"first_name": "Bob", "last_name": "Ray", "phone_number": "5550001"})
        assert service.get_customer(other.id).first_name == "Bob"

    def test_get_missing_customer(self, service):
        with pytest.raises(NotFound) as exc_info:
            service.get_customer(9999)
        assert exc_info.value.message == "Customer not found"

    def test_update_replaces_all_fields(self, service, ann):
        customer = service.create_customer(ann)
        updated = service.update_customer(customer.id, {
            "first_name": "Anne", "last_name": "Leigh", "phone_number": "555 000 111",
        })
        assert (updated.id, updated.first_name, updated.last_name, updated.phone_number) == (
            customer.id, "Anne", "Leigh", "555000111",
        )
        assert service.get_customer(customer.id).first_name == "Anne"

    def test_update_keeping_own_phone(self, service, ann):
        customer = service.create_customer(ann)
        updated = service.update_customer(customer.id, dict(ann, first_name="Annie"))
        assert updated.phone_number == "15551234567"

    def test_update_to_taken_phone(self, service, ann):
        service.create_customer(ann)
        bob = service.create_customer({"first_name": "Bob", "last_name": "Ray", "phone_number": "5550001"})
        with pytest.raises(DuplicatePhoneNumber):
            service.update_customer(bob.id, {"first_name": "Bob", "last_name": "Ray", "phone_number": "15551234567"})
        assert service.get_customer(bob.id).phone_number == "5550001"

    def test_update_missing_customer(self, service, ann):
        with pytest.raises(NotFound):
            service.update_customer(9999, ann)

    def test_update_validates_first(self, service):
        with pytest.raises(ValidationError):
            service.update_customer(9999, {"first_name": "Ann"})

    def test_delete_cascades_to_addresses(self, service, session, ann, home_address):
        customer = service.create_customer(ann)
        address = service.create_address(customer.id, home_address)
        service.create_address(customer.id, dict(home_address, city="Mumbai"))
        assert address_count(session) == 2

        assert service.delete_customer(customer.id) == customer.id

        assert address_count(session) == 0
        with pytest.raises(NotFound):
            service.list_addresses(customer.id)
        with pytest.raises(NotFound):
            service.get_address(address.id)

    def test_delete_missing_customer(self, service):
        with pytest.raises(NotFound):
            service.delete_customer(9999)


class TestListing:
    NAMES = [("Ann", "Lee"), ("Bob", "Example"), ("Cara", "Stone"), ("Dan", "Lee"), ("Exampleton", "Moss")]

    def test_pagination_metadata(self, service):
        make_customers(service, self.NAMES)
        result = service.list_customers(page=2, limit=2)

        assert [c.first_name for c in result.items] == ["Cara", "Dan"]
        assert result.pagination.model_dump() == {"total": 5, "page": 2, "limit": 2, "total_pages": 3}

    def test_page_past_end_is_empty(self, service):
        make_customers(service, self.NAMES)
        result = service.list_customers(page=4, limit=2)
        assert result.items == []
        assert result.pagination.total == 5

    def test_search_is_case_insensitive_across_fields(self, service):
        make_customers(service, self.NAMES)
        result = service.list_customers(search="example")
        assert sorted(c.first_name for c in result.items) == ["Bob", "Exampleton"]
        assert result.pagination.total == 2
        assert result.pagination.total_pages == 1

    def test_search_matches_phone_number(self, service):
        make_customers(service, self.NAMES)
        result = service.list_customers(search="0003")
        assert [c.first_name for c in result.items] == ["Dan"]

    def test_search_total_respects_filter_not_page(self, service):
        make_customers(service, self.NAMES)
        result = service.list_customers(search="lee", limit=1)
        assert len(result.items) == 1
        assert result.pagination.total == 2
        assert result.pagination.total_pages == 2

    def test_sort_descending_by_last_name(self, service):
        make_customers(service, self.NAMES)
        result = service.list_customers(sort_by="last_name", order="desc")
        assert [c.last_name for c in result.items][:2] == ["Stone", "Moss"]

    def test_unknown_sort_falls_back_to_id(self, service):
        make_customers(service, self.NAMES)
        result = service.list_customers(sort_by="password", order="up")
        ids = [c.id for c in result.items]
        assert ids == sorted(ids)


class TestAddresses:
    def test_create_and_list(self, service, ann, home_address):
        customer = service.create_customer(ann)
        address = service.create_address(customer.id, dict(home_address, pin_code=" 411001 "))

        assert address.id is not None
        assert address.customer_id == customer.id
        assert address.pin_code == "411001"
        assert [a.id for a in service.list_addresses(customer.id)] == [address.id]
        assert [a.city for a in service.get_customer(customer.id).addresses] == ["Pune"]

    def test_list_for_customer_without_addresses(self, service, ann):
        customer = service.create_customer(ann)
        assert service.list_addresses(customer.id) == []

    def test_create_for_missing_customer(self, service, session, home_address):
        with pytest.raises(NotFound) as exc_info:
            service.create_address(9999, home_address)
        assert exc_info.value.entity == "Customer"
        assert address_count(session) == 0

    def test_invalid_address_rejected(self, service, ann, home_address):
        customer = service.create_customer(ann)
        with pytest.raises(ValidationError) as exc_info:
            service.create_address(customer.id, dict(home_address, pin_code="12"))
        assert exc_info.value.message == "pin_code looks invalid"

    def test_update_keeps_owner(self, service, ann, home_address):
        customer = service.create_customer(ann)
        address = service.create_address(customer.id, home_address)
        updated = service.update_address(address.id, {
            "address_details": "7 Hill Road", "city": "Nashik", "state": "Maharashtra", "pin_code": "422001",
        })
        assert (updated.id, updated.customer_id, updated.city) == (address.id, customer.id, "Nashik")
        assert service.get_address(address.id).address_details == "7 Hill Road"

    def test_update_missing_address(self, service, home_address):
        with pytest.raises(NotFound) as exc_info:
            service.update_address(424242, home_address)
        assert exc_info.value.message == "Address not found"

    def test_delete(self, service, session, ann, home_address):
        customer = service.create_customer(ann)
        address = service.create_address(customer.id, home_address)
        assert service.delete_address(address.id) == address.id
        assert address_count(session) == 0
        with pytest.raises(NotFound):
            service.delete_address(address.id)


def test_update_address_returns_persisted_row(service, ann, home_address):
    customer = service.create_customer(ann)
    address = service.create_address(customer.id, home_address)
    updated = service.update_address(address.id, dict(home_address, city="  Nashik ", pin_code=" 422001"))
    assert (updated.city, updated.pin_code) == ("Nashik", "422001")
    assert updated is service.get_address(address.id)
