from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Dict, Any


class AvailabilityRequest(BaseModel):
    # No coercion: "5", 5.0 and true are not quantities
    model_config = ConfigDict(strict=True)

    product_id: str = Field("", description="Product identifier", examples=["PROD-123"])
    quantity: int = Field(0, description="Number of units requested, must be greater than 0", examples=[5])
    warehouse_location: str = Field("", description="Warehouse to check", examples=["DE-Berlin"])


class AvailabilityResponse(BaseModel):
    available: bool = Field(description="Whether the requested quantity can be shipped", examples=[True])
    available_quantity: int = Field(description="Stock left after the 10% reserve buffer", examples=[90])
    reason: str = Field(description="Why the product is or is not available", examples=["Sufficient stock available"])
    warehouse: str = Field(description="Warehouse the check was made against", examples=["DE-Berlin"])


class InventoryItem(BaseModel):
    model_config = ConfigDict(strict=True)

    product_id: str
    warehouse: str
    stock_level: int = Field(ge=0)


class StockLevel(BaseModel):
    """Body returned by the remote inventory API."""

    model_config = ConfigDict(strict=True)

    stock_level: int = Field(ge=0)


class ErrorDetail(BaseModel):
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None
    correlation_id: Optional[str] = None


class ErrorResponse(BaseModel):
    error: ErrorDetail
