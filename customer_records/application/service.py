from contextlib import contextmanager
from typing import Any, Callable, Iterator, Mapping, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from customer_records.core.logging_config import get_logger
from customer_records.domain.errors import (
    DuplicatePhoneNumber,
    NotFound,
    RecordStoreError,
    StorageError,
    ValidationError,
)
from customer_records.domain.models import Address, Customer
from .queries import build_customer_listing
from .schemas import CustomerPage, CustomerRead, Pagination
from .validators import (
    normalize_address,
    normalize_customer,
    validate_address,
    validate_customer,
)

logger = get_logger(__name__)


class CustomerService:
    """Record store for customers and the addresses they own.

    Every operation is one unit of work on the injected session: it either
    commits in full or rolls back and raises a ``RecordStoreError``.
    """

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _unit_of_work(self, on_conflict: Optional[Callable[[], RecordStoreError]] = None) -> Iterator[None]:
        try:
            yield
            self.db.commit()
        except RecordStoreError:
            self.db.rollback()
            raise
        except IntegrityError as exc:
            self.db.rollback()
            if on_conflict is None:
                raise StorageError(str(exc.orig)) from exc
            raise on_conflict() from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StorageError(str(exc)) from exc

    def _require_customer(self, customer_id: int, lock: bool = False) -> None:
        stmt = select(Customer.id).where(Customer.id == customer_id)
        if lock:
            # No-op on SQLite, row lock on Postgres
            stmt = stmt.with_for_update()
        if self.db.execute(stmt).scalar_one_or_none() is None:
            raise NotFound("Customer", customer_id)

    # Customers

    def create_customer(self, record: Mapping[str, Any]) -> Customer:
        error = validate_customer(record)
        if error:
            raise ValidationError(error)
        values = normalize_customer(record)

        customer = Customer(**values)
        with self._unit_of_work(on_conflict=lambda: DuplicatePhoneNumber(values["phone_number"])):
            self.db.add(customer)
            self.db.flush()
        logger.info(f"Customer created: id={customer.id}")
        return customer

    def list_customers(
        self,
        page: Any = 1,
        limit: Any = 10,
        search: Optional[str] = None,
        sort_by: Optional[str] = "id",
        order: Optional[str] = "ASC",
    ) -> CustomerPage:
        listing = build_customer_listing(page, limit, search, sort_by, order)
        with self._unit_of_work():
            rows = self.db.execute(listing.statement).scalars().all()
            total = self.db.execute(listing.count_statement).scalar_one()

        return CustomerPage(
            items=[CustomerRead.model_validate(row) for row in rows],
            pagination=Pagination(
                total=total,
                page=listing.page,
                limit=listing.limit,
                total_pages=listing.total_pages(total),
            ),
        )

    def get_customer(self, customer_id: int) -> Customer:
        stmt = (
            select(Customer)
            .options(selectinload(Customer.addresses))
            .where(Customer.id == customer_id)
            .execution_options(populate_existing=True)
        )
        with self._unit_of_work():
            customer = self.db.execute(stmt).scalar_one_or_none()
            if customer is None:
                raise NotFound("Customer", customer_id)
        return customer

    def update_customer(self, customer_id: int, record: Mapping[str, Any]) -> Customer:
        error = validate_customer(record)
        if error:
            raise ValidationError(error)
        values = normalize_customer(record)

        stmt = update(Customer).where(Customer.id == customer_id).values(**values)
        with self._unit_of_work(on_conflict=lambda: DuplicatePhoneNumber(values["phone_number"])):
            result = self.db.execute(stmt)
            if result.rowcount == 0:
                raise NotFound("Customer", customer_id)
            customer = self.db.get(Customer, customer_id, populate_existing=True)
        logger.info(f"Customer updated: id={customer_id}")
        return customer

    def delete_customer(self, customer_id: int) -> int:
        # Owned addresses go with the row through ON DELETE CASCADE
        stmt = delete(Customer).where(Customer.id == customer_id)
        with self._unit_of_work():
            result = self.db.execute(stmt)
            if result.rowcount == 0:
                raise NotFound("Customer", customer_id)
        # Cascaded address rows may still sit in the identity map
        self.db.expunge_all()
        logger.info(f"Customer deleted: id={customer_id}")
        return customer_id

    # Addresses

    def create_address(self, customer_id: int, record: Mapping[str, Any]) -> Address:
        error = validate_address(record)
        if error:
            raise ValidationError(error)
        values = normalize_address(record)

        address = Address(customer_id=customer_id, **values)
        # Existence check and insert share one transaction; a parent deleted
        # in between surfaces as a foreign key failure.
        with self._unit_of_work(on_conflict=lambda: NotFound("Customer", customer_id)):
            self._require_customer(customer_id, lock=True)
            self.db.add(address)
            self.db.flush()
        logger.info(f"Address created: id={address.id} customer_id={customer_id}")
        return address

    def list_addresses(self, customer_id: int) -> list[Address]:
        stmt = select(Address).where(Address.customer_id == customer_id).order_by(Address.id)
        with self._unit_of_work():
            self._require_customer(customer_id)
            return list(self.db.execute(stmt).scalars().all())

    def get_address(self, address_id: int) -> Address:
        with self._unit_of_work():
            address = self.db.get(Address, address_id, populate_existing=True)
            if address is None:
                raise NotFound("Address", address_id)
        return address

    def update_address(self, address_id: int, record: Mapping[str, Any]) -> Address:
        error = validate_address(record)
        if error:
            raise ValidationError(error)
        values = normalize_address(record)

        stmt = update(Address).where(Address.id == address_id).values(**values)
        with self._unit_of_work():
            result = self.db.execute(stmt)
            if result.rowcount == 0:
                raise NotFound("Address", address_id)
        logger.info(f"Address updated: id={address_id}")
        return self.get_address(address_id)

    def delete_address(self, address_id: int) -> int:
        stmt = delete(Address).where(Address.id == address_id)
        with self._unit_of_work():
            result = self.db.execute(stmt)
            if result.rowcount == 0:
                raise NotFound("Address", address_id)
        logger.info(f"Address deleted: id={address_id}")
        return address_id
