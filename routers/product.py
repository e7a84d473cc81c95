from fastapi import APIRouter, Depends, HTTPException
from typing import Dict, Any

from interfaces.productModels import ProductDetail, ProductSummary, Suggestions
from logger_manager import log_info, log_error
from services.product_service import InvalidQueryError, ProductService, get_product_service

router = APIRouter()


@router.get("/find_barcode", response_model=ProductSummary)
def find_product_by_barcode(barcode_number: str, service: ProductService = Depends(get_product_service)):
    """Endpoint to find a product using a UPC/GTIN barcode number."""
    log_info(f"Find product by barcode endpoint called for barcode: {barcode_number}")
    try:
        product = service.lookup_barcode(barcode_number)
    except InvalidQueryError as e:
        raise HTTPException(status_code=422, detail=str(e))

    if product is None:
        raise HTTPException(status_code=404, detail="Product not found. Try searching by name.")
    return product


@router.get("/suggestions", response_model=Suggestions)
def get_suggestions(service: ProductService = Depends(get_product_service)):
    """Popular and highly rated products for the home screen."""
    log_info("Suggestions endpoint called")
    return service.get_suggestions()


@router.get("/stats", response_model=Dict[str, Any])
def get_stats(service: ProductService = Depends(get_product_service)):
    log_info("Stats endpoint called")
    return service.get_stats()


@router.get("/{product_id}", response_model=ProductDetail)
def get_product(product_id: int, service: ProductService = Depends(get_product_service)):
    log_info(f"Product detail endpoint called for {product_id}")
    product = service.get_product_detail(product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.get("/{product_id}/trustscore", response_model=Dict[str, Any])
def get_product_trust_score(product_id: int, service: ProductService = Depends(get_product_service)):
    """Both server-side scores for a product: the simple score and the bonus breakdown."""
    log_info(f"Trust score endpoint called for {product_id}")
    try:
        simple_score = service.get_simple_trust_score(product_id)
        breakdown = service.get_trust_score_breakdown(product_id)
    except Exception as e:
        log_error(f"Error in trust score endpoint: {e}", e)
        raise HTTPException(status_code=500, detail="Internal Server Error")

    if simple_score is None and breakdown is None:
        raise HTTPException(status_code=404, detail="Trust score not available")
    return {
        "product_id": product_id,
        "simple_score": simple_score,
        "breakdown": breakdown.model_dump() if breakdown else None,
    }
