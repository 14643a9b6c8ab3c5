"""Routes for checking product availability and price.

A failed check is not an HTTP error: the result body carries the failure
status ("Load Failed", "Timeout", ...).
"""
from typing import List

from fastapi import APIRouter, Depends, Query

from product_scout.logger_config import get_logger
from product_scout.models.check_models import (
    BatchCheckRequest,
    BatchCheckResponse,
    BatchItemResponse,
    CheckRequest,
    CheckResponse,
    ClassificationResponse,
    RetailerInfo,
)
from product_scout.services.tracking.alerts import should_alert
from product_scout.services.tracking.orchestrator import (
    CheckOrchestrator,
    get_orchestrator,
)
from product_scout.services.tracking.routing import (
    extract_name,
    is_valid_url,
    normalize_url,
    supported_retailers,
)

logger = get_logger(__name__)

retailer_router = APIRouter(prefix="/retailers", tags=["Retailers"])
check_router = APIRouter(prefix="/check", tags=["Checks"])


@retailer_router.get("", response_model=List[RetailerInfo])
def list_retailers() -> List[RetailerInfo]:
    """Retailers the engine can read."""
    return [
        RetailerInfo(retailer=retailer, display_name=retailer.display_name)
        for retailer in supported_retailers()
    ]


@retailer_router.get("/classify", response_model=ClassificationResponse)
def classify_url(
    url: str = Query(..., description="Product page URL."),
    orchestrator: CheckOrchestrator = Depends(get_orchestrator),
) -> ClassificationResponse:
    """Tell which retailer a URL belongs to, without loading it."""
    url = normalize_url(url)
    classification = orchestrator.router.classify(url)
    return ClassificationResponse(
        retailer=classification.retailer,
        display_name=classification.retailer.display_name,
        confidence=classification.confidence,
        reason=classification.reason,
        is_valid_url=is_valid_url(url),
    )


@check_router.post("", response_model=CheckResponse)
async def check_product(
    data: CheckRequest,
    orchestrator: CheckOrchestrator = Depends(get_orchestrator),
) -> CheckResponse:
    """
    Load a product page and decide its price and availability.

    Args:
        data (CheckRequest): the product URL.

    Returns:
        CheckResponse with the display status, price and details.
    """
    url = normalize_url(data.url)
    result = await orchestrator.check(url)
    logger.info("Checked %s: %s", url, result.status)
    return CheckResponse.from_result(result)


@check_router.post("/batch", response_model=BatchCheckResponse)
async def check_batch(
    data: BatchCheckRequest,
    orchestrator: CheckOrchestrator = Depends(get_orchestrator),
) -> BatchCheckResponse:
    """
    Check tracked products one after another and evaluate restock alerts.

    Args:
        data (BatchCheckRequest): products with optional price limits and
        the availability seen on their previous check.

    Returns:
        BatchCheckResponse with one result per item, in input order.
    """
    urls = [normalize_url(item.url) for item in data.items]
    results = await orchestrator.check_many(urls)

    responses: List[BatchItemResponse] = []
    for item, url, result in zip(data.items, urls, results):
        alert = should_alert(item.previously_available, result, item.price_limit)
        if alert.should_alert:
            logger.info("Restock alert for %s: %s", url, alert.reason)
        responses.append(
            BatchItemResponse(
                **CheckResponse.from_result(result).model_dump(),
                url=url,
                name=extract_name(url),
                should_alert=alert.should_alert,
                alert_reason=alert.reason,
            )
        )
    return BatchCheckResponse(results=responses)
