"""Request and response models for the check controllers."""

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from product_scout.services.tracking.models import CheckResult, Retailer


class CheckRequest(BaseModel):
    """Data model for a single product check."""

    url: str = Field(..., description="Product page URL.")


class CheckResponse(BaseModel):
    """Outcome of one availability and price check."""

    status: str = Field(..., description="Display status, e.g. '✅ Available'.")
    price: str = Field(..., description="Display price, '—' when unknown.")
    is_available: bool = Field(..., description="Whether the product can be bought now.")
    details: str = Field(..., description="Why the check reached its verdict.")
    retailer: Retailer = Field(..., description="Retailer the URL belongs to.")

    @classmethod
    def from_result(cls, result: CheckResult) -> "CheckResponse":
        return cls(
            status=result.status,
            price=result.price,
            is_available=result.is_available,
            details=result.details,
            retailer=result.retailer,
        )


class BatchItem(BaseModel):
    """One tracked product in a batch check."""

    url: str = Field(..., description="Product page URL.")
    price_limit: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Only alert when the price is at or below this value.",
    )
    previously_available: Optional[bool] = Field(
        default=None,
        description="Availability seen on the previous check, if any.",
    )


class BatchCheckRequest(BaseModel):
    """Products checked one after another."""

    items: List[BatchItem] = Field(..., min_length=1)


class BatchItemResponse(CheckResponse):
    """A check result with the alert decision for its product."""

    url: str = Field(..., description="Product page URL as submitted.")
    name: str = Field(..., description="Product name derived from the URL.")
    should_alert: bool = Field(..., description="Whether a restock alert should fire.")
    alert_reason: str = Field(..., description="Why the alert fires or not.")


class BatchCheckResponse(BaseModel):
    results: List[BatchItemResponse]


class ClassificationResponse(BaseModel):
    """Retailer detected for a URL."""

    retailer: Retailer
    display_name: str
    confidence: float = Field(..., description="Informational only.")
    reason: str
    is_valid_url: bool


class RetailerInfo(BaseModel):
    retailer: Retailer
    display_name: str
