"""
Vehicle data models for Vehicles Service.
"""

from typing import Optional

from pydantic import BaseModel, Field


class Vehicle(BaseModel):
    """A vehicle record.

    Every attribute is optional at the type level so that blank or missing
    values reach the coordinator, which reports them by field name.
    """
    id: Optional[int] = Field(None, description="Identifier assigned by the store")
    brand: Optional[str] = Field(None, description="Manufacturer")
    model: Optional[str] = Field(None, description="Model name")
    year: Optional[int] = Field(None, description="Model year")
    plate: Optional[str] = Field(None, description="License plate")
    color: Optional[str] = Field(None, description="Body color")


# Fields that must be non-blank on create and update, in reporting order
REQUIRED_FIELDS = ("brand", "model", "plate")


class VehicleCreatedResponse(BaseModel):
    """Response model for vehicle creation."""
    id: int = Field(..., description="Identifier assigned by the store")
