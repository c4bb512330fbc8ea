from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional
from customer_records.infrastructure.db import get_db
from customer_records.application.service import CustomerService
from customer_records.application.schemas import (
    AddressEnvelope,
    AddressListEnvelope,
    AddressPayload,
    AddressRead,
    CustomerDeleted,
    CustomerDetail,
    CustomerDetailEnvelope,
    CustomerEnvelope,
    CustomerListEnvelope,
    CustomerPayload,
    CustomerRead,
    MessageResponse,
)

router = APIRouter(prefix="/api/customers", tags=["customers"])
address_router = APIRouter(prefix="/api/addresses", tags=["addresses"])


@router.post("", response_model=CustomerEnvelope, status_code=201)
def create_customer(payload: CustomerPayload, db: Session = Depends(get_db)):
    customer = CustomerService(db).create_customer(payload.model_dump())
    return CustomerEnvelope(message="Customer created", data=CustomerRead.model_validate(customer))


@router.get("", response_model=CustomerListEnvelope)
def list_customers(
    db: Session = Depends(get_db),
    page: int = Query(1, ge=1, description="1-based page number"),
    limit: int = Query(10, ge=1, le=100, description="Page size"),
    search: Optional[str] = Query(None, max_length=100, description="Substring of first name, last name or phone"),
    sort_by: Optional[str] = Query(None, description="id, first_name, last_name or phone_number"),
    order: str = Query("ASC", description="ASC or DESC"),
    sort_by_camel: Optional[str] = Query(None, alias="sortBy", include_in_schema=False),
):
    """List customers with search, sorting and pagination"""
    # Clients of the first API release still send sortBy
    sort_by = sort_by or sort_by_camel or "id"
    result = CustomerService(db).list_customers(
        page=page, limit=limit, search=search, sort_by=sort_by, order=order
    )
    return CustomerListEnvelope(data=result.items, pagination=result.pagination)


@router.get("/{customer_id}", response_model=CustomerDetailEnvelope)
def get_customer(customer_id: int, db: Session = Depends(get_db)):
    customer = CustomerService(db).get_customer(customer_id)
    return CustomerDetailEnvelope(data=CustomerDetail.model_validate(customer))


@router.put("/{customer_id}", response_model=CustomerEnvelope)
def update_customer(customer_id: int, payload: CustomerPayload, db: Session = Depends(get_db)):
    customer = CustomerService(db).update_customer(customer_id, payload.model_dump())
    return CustomerEnvelope(data=CustomerRead.model_validate(customer))


@router.delete("/{customer_id}", response_model=CustomerDeleted)
def delete_customer(customer_id: int, db: Session = Depends(get_db)):
    deleted_id = CustomerService(db).delete_customer(customer_id)
    return CustomerDeleted(deleted_customer_id=deleted_id)


@router.post("/{customer_id}/addresses", response_model=AddressEnvelope, status_code=201)
def create_address(customer_id: int, payload: AddressPayload, db: Session = Depends(get_db)):
    address = CustomerService(db).create_address(customer_id, payload.model_dump())
    return AddressEnvelope(data=AddressRead.model_validate(address))


@router.get("/{customer_id}/addresses", response_model=AddressListEnvelope)
def list_addresses(customer_id: int, db: Session = Depends(get_db)):
    addresses = CustomerService(db).list_addresses(customer_id)
    return AddressListEnvelope(data=[AddressRead.model_validate(a) for a in addresses])


@address_router.put("/{address_id}", response_model=AddressEnvelope)
def update_address(address_id: int, payload: AddressPayload, db: Session = Depends(get_db)):
    address = CustomerService(db).update_address(address_id, payload.model_dump())
    return AddressEnvelope(
        message="Address updated successfully", data=AddressRead.model_validate(address)
    )


@address_router.delete("/{address_id}", response_model=MessageResponse)
def delete_address(address_id: int, db: Session = Depends(get_db)):
    CustomerService(db).delete_address(address_id)
    return MessageResponse(message="Address deleted successfully")
