from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from interfaces.productModels import ProductSummary


class StackEntry(BaseModel):
    """Snapshot of a product saved to the local stack."""
    id: int
    brand_name: Optional[str] = ""
    full_name: Optional[str] = ""
    image_url: Optional[str] = None
    trust_score: int = 0
    trust_category: str = ""
    usp_verified: bool = False
    nsf_certified: bool = False
    informed_sport: bool = False
    fda_flagged: bool = False
    added_at: Optional[datetime] = None

    @classmethod
    def from_summary(cls, product: ProductSummary, added_at: Optional[datetime] = None) -> "StackEntry":
        return cls(
            id=product.id,
            brand_name=product.brand_name,
            full_name=product.full_name,
            image_url=product.image_url,
            trust_score=product.trust_score,
            trust_category=product.trust_category,
            usp_verified=product.usp_verified,
            nsf_certified=product.nsf_certified,
            informed_sport=product.informed_sport,
            fda_flagged=product.fda_flagged,
            added_at=added_at,
        )


class StackSummary(BaseModel):
    count: int = 0
    average_trust_score: int = 0


class StackChangeResponse(BaseModel):
    changed: bool
    summary: StackSummary
    entries: List[StackEntry] = Field(default_factory=list)


class RecentSearchesResponse(BaseModel):
    searches: List[str] = Field(default_factory=list)
