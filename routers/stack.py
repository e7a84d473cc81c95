from fastapi import APIRouter, Depends, HTTPException
from typing import List

from interfaces.stackModels import StackChangeResponse, StackEntry, StackSummary
from logger_manager import log_info
from services.product_service import ProductService, get_product_service
from services.stack_service import StackRepository
from services.storage import StorageBackend, get_storage

router = APIRouter()


def get_stack_repository(storage: StorageBackend = Depends(get_storage)) -> StackRepository:
    return StackRepository(storage)


def _change_response(stack: StackRepository, changed: bool) -> StackChangeResponse:
    return StackChangeResponse(changed=changed, summary=stack.summary(), entries=stack.list_entries())


@router.get("", response_model=List[StackEntry])
def read_stack(stack: StackRepository = Depends(get_stack_repository)):
    log_info("Read stack endpoint called")
    return stack.list_entries()


@router.get("/summary", response_model=StackSummary)
def read_stack_summary(stack: StackRepository = Depends(get_stack_repository)):
    return stack.summary()


@router.post("", response_model=StackChangeResponse)
def add_to_stack(entry: StackEntry, stack: StackRepository = Depends(get_stack_repository)):
    log_info(f"Add to stack endpoint called for {entry.id}")
    return _change_response(stack, stack.add(entry))


@router.post("/product/{product_id}", response_model=StackChangeResponse)
def add_product_to_stack(
    product_id: int,
    stack: StackRepository = Depends(get_stack_repository),
    service: ProductService = Depends(get_product_service),
):
    """Snapshot a catalog product into the stack by id."""
    log_info(f"Add catalog product {product_id} to stack")
    if stack.contains(product_id):
        return _change_response(stack, False)

    product = service.get_product_detail(product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")

    certifications = {flag.name: flag.value for flag in product.certifications}
    entry = StackEntry(
        id=product.id,
        brand_name=product.brand_name,
        full_name=product.full_name,
        image_url=product.image_url,
        trust_score=product.trust_score,
        trust_category=product.trust_category,
        usp_verified=certifications.get("USP Verified", False),
        nsf_certified=certifications.get("NSF Certified", False),
        informed_sport=certifications.get("Informed Sport", False),
        fda_flagged=product.fda_flagged,
    )
    return _change_response(stack, stack.add(entry))


@router.delete("/{product_id}", response_model=StackChangeResponse)
def remove_from_stack(product_id: int, stack: StackRepository = Depends(get_stack_repository)):
    log_info(f"Remove from stack endpoint called for {product_id}")
    return _change_response(stack, stack.remove(product_id))


@router.delete("", response_model=StackChangeResponse)
def clear_stack(stack: StackRepository = Depends(get_stack_repository)):
    log_info("Clear stack endpoint called")
    stack.clear()
    return _change_response(stack, True)
