"""
Pydantic schemas for service orders (OS).
"""
from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Union

from oficina.formatting import status_label, truncate_text
from oficina.models.service_order import ServiceOrderStatus
from oficina.schemas.client import ClientSummary
from oficina.schemas.common import Money, strip_or_none
from oficina.schemas.vehicle import VehicleSummary


class InlineClient(BaseModel):
    """A client typed into the order form instead of picked from the list."""
    name: str = Field(min_length=3)
    phone: str = Field(min_length=10)


class InlineVehicle(BaseModel):
    """A vehicle typed into the order form instead of picked from the list."""
    model: str = Field(min_length=3)
    plate: str = Field(min_length=7, max_length=8)
    year: str = Field(pattern=r"^\d{4}$")

    @field_validator("plate", mode="before")
    @classmethod
    def normalize_plate(cls, value):
        return value.strip().upper() if isinstance(value, str) else value

    @field_validator("year", mode="before")
    @classmethod
    def year_to_str(cls, value):
        return str(value) if isinstance(value, int) else value


class ServiceOrderPartIn(BaseModel):
    """A part line requested on a new order."""
    part_id: int
    quantity: int = Field(default=1, ge=1)


class ServiceOrderCreate(BaseModel):
    """
    Schema for creating a service order.

    The client and vehicle are either referenced by id or given inline.
    """
    client_id: Optional[int] = None
    client: Optional[InlineClient] = None
    vehicle_id: Optional[int] = None
    vehicle: Optional[InlineVehicle] = None
    service_type: str = Field(min_length=1)
    description: Optional[str] = None
    labor_cost: Money = Field(ge=0)
    parts: List[ServiceOrderPartIn] = Field(default_factory=list)
    finalize: bool = False

    @field_validator("description", mode="before")
    @classmethod
    def empty_to_none(cls, value):
        return strip_or_none(value)

    @model_validator(mode="after")
    def check_client_and_vehicle(self):
        if (self.client_id is None) == (self.client is None):
            raise ValueError("Provide either client_id or client")
        if (self.vehicle_id is None) == (self.vehicle is None):
            raise ValueError("Provide either vehicle_id or vehicle")
        return self


class ServiceOrderPartLine(BaseModel):
    """A part line as stored on an order."""
    id: Optional[int] = None
    part_id: int
    name: str
    quantity: int
    price: Money
    subtotal: Money

    model_config = ConfigDict(from_attributes=True)


class ServiceOrderPreview(BaseModel):
    """Running totals for a draft order."""
    parts: List[ServiceOrderPartLine]
    parts_cost: Money
    labor_cost: Money
    total_cost: Money


class ServiceOrderStatusUpdate(BaseModel):
    status: ServiceOrderStatus


class ServiceOrderUpdate(BaseModel):
    """Editable descriptive fields; totals change only through parts and labor."""
    description: Optional[str] = None
    labor_cost: Optional[Money] = Field(default=None, ge=0)

    @field_validator("labor_cost", mode="before")
    @classmethod
    def blank_labor(cls, value):
        return strip_or_none(value)


class ServiceOrderListItem(BaseModel):
    """Row of the service history table."""
    id: int
    number: int
    client: ClientSummary
    vehicle: VehicleSummary
    service_type: str
    description: Optional[str] = None
    total_cost: Money
    status: ServiceOrderStatus
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def status_label(self) -> str:
        return status_label(self.status)

    @computed_field
    @property
    def description_preview(self) -> str:
        return truncate_text(self.description, 60)


class ServiceOrder(BaseModel):
    """Full service order with parts, client and vehicle."""
    id: int
    number: int
    client: ClientSummary
    vehicle: VehicleSummary
    service_type: str
    description: Optional[str] = None
    labor_cost: Money
    parts_cost: Money
    total_cost: Money
    status: ServiceOrderStatus
    parts: List[ServiceOrderPartLine] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def status_label(self) -> str:
        return status_label(self.status)


class ServiceOrderDraft(BaseModel):
    """Parts and labor typed so far; used for the live totals panel."""
    # Raw form input; blank or unparseable labor counts as zero
    labor_cost: Optional[Union[Decimal, str]] = None
    parts: List[ServiceOrderPartIn] = Field(default_factory=list)
