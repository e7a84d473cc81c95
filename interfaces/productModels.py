from pydantic import BaseModel, Field
from typing import List, Dict, Any, Optional
from datetime import datetime


class CertificationSet(BaseModel):
    """Third-party certification flags for one product (one row of `verification`)."""
    usp_verified: bool = False
    informed_sport: bool = False
    informed_choice: bool = False
    nsf_certified: bool = False
    bscg: bool = False
    ifos: bool = False
    ikos: bool = False
    iaos: bool = False
    ipro: bool = False
    igen: bool = False
    clean_label_project_certified: bool = False
    non_gmo_certified: bool = False
    gf_certified: bool = False
    usda_organic_certified: bool = False
    vegan_action_certified: bool = False
    fda_flagged: bool = False
    fda_recall_number: Optional[str] = None
    fda_recall_url: Optional[str] = None

    class Config:
        from_attributes = True  # This enables ORM mode

    @classmethod
    def from_row(cls, row: Optional[Dict[str, Any]]) -> "CertificationSet":
        """Build from a joined row, reading missing or null flags as False."""
        if not row:
            return cls()
        data = {}
        for name, field in cls.model_fields.items():
            value = row.get(name)
            if field.annotation is bool:
                data[name] = bool(value)
            else:
                data[name] = value
        return cls(**data)


class TrustScoreResult(BaseModel):
    score: int = Field(..., ge=0, le=100)
    category: str
    certification_count: int = 0


class CertificationFlag(BaseModel):
    name: str
    value: bool


class FdaRecall(BaseModel):
    number: str
    url: Optional[str] = None


class ProductSummary(BaseModel):
    """Row shape shared by search, scan, suggestions and the stack."""
    id: int
    brand_name: Optional[str] = ""
    full_name: Optional[str] = ""
    image_url: Optional[str] = None
    upc: Optional[str] = None
    trust_score: int = 0
    trust_category: str = ""
    usp_verified: bool = False
    nsf_certified: bool = False
    informed_sport: bool = False
    fda_flagged: bool = False
    suggestion_type: Optional[str] = None


class ProductDetail(BaseModel):
    """Response model for the single product view"""
    id: int
    brand_name: Optional[str] = ""
    full_name: Optional[str] = ""
    upc: Optional[str] = None
    product_type: Optional[str] = None
    entry_date: Optional[datetime] = None
    off_market: bool = False
    image_url: Optional[str] = None
    product_url: Optional[str] = None
    trust_score: int = Field(..., description="Trust score including the off-market penalty")
    trust_category: str
    certifications: List[CertificationFlag] = []
    fda_flagged: bool = False
    fda_recall: Optional[FdaRecall] = None


class Suggestions(BaseModel):
    popular: List[ProductSummary] = []
    top_rated: List[ProductSummary] = []
