from pydantic import BaseModel
from typing import Any, Optional


# Request bodies accept missing or non-string fields so the validators can
# report the first violated rule instead of a generic 422.
class CustomerPayload(BaseModel):
    first_name: Optional[Any] = None
    last_name: Optional[Any] = None
    phone_number: Optional[Any] = None


class AddressPayload(BaseModel):
    address_details: Optional[Any] = None
    city: Optional[Any] = None
    state: Optional[Any] = None
    pin_code: Optional[Any] = None


class AddressRead(BaseModel):
    id: int
    customer_id: int
    address_details: str
    city: str
    state: str
    pin_code: str

    class Config:
        from_attributes = True


class CustomerRead(BaseModel):
    id: int
    first_name: str
    last_name: str
    phone_number: str

    class Config:
        from_attributes = True


class CustomerDetail(CustomerRead):
    addresses: list[AddressRead] = []


class Pagination(BaseModel):
    total: int
    page: int
    limit: int
    total_pages: int


class CustomerPage(BaseModel):
    items: list[CustomerRead]
    pagination: Pagination


class CustomerEnvelope(BaseModel):
    message: str = "success"
    data: CustomerRead


class CustomerDetailEnvelope(BaseModel):
    message: str = "success"
    data: CustomerDetail


class CustomerListEnvelope(BaseModel):
    message: str = "success"
    data: list[CustomerRead]
    pagination: Pagination


class CustomerDeleted(BaseModel):
    message: str = "success"
    deleted_customer_id: int


class AddressEnvelope(BaseModel):
    message: str = "success"
    data: AddressRead


class AddressListEnvelope(BaseModel):
    message: str = "success"
    data: list[AddressRead]


class MessageResponse(BaseModel):
    message: str
