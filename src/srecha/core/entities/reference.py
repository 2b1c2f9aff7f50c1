"""Reference data entities: clients, products and their classifications, suppliers."""

from datetime import datetime

from pydantic import BaseModel, Field

from srecha.core.clock import utc_now


class Client(BaseModel):
    """A customer invoices are issued to."""

    id: int | None = None
    name: str = Field(min_length=1)
    legal_name: str | None = None
    mb: str | None = None  # company registration number
    pib: str | None = None  # tax identification number
    abbreviation: str | None = None
    client_type: str | None = None
    address: str | None = None
    street: str | None = None
    house_number: str | None = None
    city: str | None = None
    municipality: str | None = None
    postal_code: str | None = None
    country: str | None = None
    phone: str | None = None
    email: str | None = None
    bank: str | None = None
    contact_person: str | None = None
    installment: bool = False
    installment_term: int | None = None  # days
    notes: str | None = None
    created_at: datetime = Field(default_factory=utc_now)


class Product(BaseModel):
    """A sellable product, unique by ``code``."""

    id: int | None = None
    code: str = Field(min_length=1)
    name: str = Field(min_length=1)
    description: str | None = None
    price: float | None = Field(default=None, ge=0)
    category: str | None = None
    subcategory: str | None = None
    weight: float | None = None
    supplier: str | None = None
    internal_code: str | None = None
    is_active: bool = True
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class Category(BaseModel):
    id: int | None = None
    name: str = Field(min_length=1)
    created_at: datetime = Field(default_factory=utc_now)


class Subcategory(BaseModel):
    id: int | None = None
    name: str = Field(min_length=1)
    category_id: int  # FK → categories.id
    created_at: datetime = Field(default_factory=utc_now)


class Country(BaseModel):
    id: int | None = None
    name: str = Field(min_length=1)
    code: str | None = None  # ISO 3166-1 alpha-2
    created_at: datetime = Field(default_factory=utc_now)


class SupplierSector(BaseModel):
    id: int | None = None
    name: str = Field(min_length=1)
    created_at: datetime = Field(default_factory=utc_now)


class SupplierProduct(BaseModel):
    """A product line a supplier sector deals in."""

    id: int | None = None
    name: str = Field(min_length=1)
    sector_id: int  # FK → supplier_sectors.id
    created_at: datetime = Field(default_factory=utc_now)


class Supplier(BaseModel):
    id: int | None = None
    name: str = Field(min_length=1)
    legal_name: str | None = None
    mb: str | None = None
    pib: str | None = None
    reg_number: str | None = None  # for non-Serbian companies
    address: str | None = None
    city: str | None = None
    country: str | None = None
    phone: str | None = None
    email: str | None = None
    website: str | None = None
    telegram: str | None = None
    wechat: str | None = None
    bank: str | None = None
    sector_id: int | None = None  # FK → supplier_sectors.id
    product_id: int | None = None  # FK → supplier_products.id
    contact_person: str | None = None
    notes: str | None = None
    is_active: bool = True
    created_at: datetime = Field(default_factory=utc_now)
