import re
from typing import Any, Dict, List, Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from db.database import SessionLocal, get_db
from db.models import Label
from db.repositories import CatalogRepository
from env import (
    SEARCH_DEFAULT_LIMIT,
    SEARCH_MIN_LENGTH,
    SUGGESTIONS_PER_SECTION,
    UPC_MAX_LENGTH,
    UPC_MIN_LENGTH,
)
from interfaces.productModels import (
    CertificationFlag,
    CertificationSet,
    FdaRecall,
    ProductDetail,
    ProductSummary,
    Suggestions,
    TrustScoreResult,
)
from logger_manager import log_debug, log_error, log_info, log_warning
from services.trust_score import (
    ScoringView,
    calculate_trust_score,
    categorize_score,
    clamp_score,
    score_from_bonus,
)

# Display names for the product view, in display order
CERTIFICATION_NAMES = [
    ("usp_verified", "USP Verified"),
    ("informed_sport", "Informed Sport"),
    ("informed_choice", "Informed Choice"),
    ("nsf_certified", "NSF Certified"),
    ("bscg", "BSCG"),
    ("ifos", "IFOS"),
    ("ikos", "IKOS"),
    ("iaos", "IAOS"),
    ("ipro", "IPRO"),
    ("igen", "iGen"),
    ("clean_label_project_certified", "Clean Label"),
    ("non_gmo_certified", "Non-GMO"),
    ("gf_certified", "Gluten Free"),
    ("usda_organic_certified", "USDA Organic"),
    ("vegan_action_certified", "Vegan"),
]


class InvalidQueryError(ValueError):
    """Raised for input that is rejected before any catalog query."""


class SearchUnavailableError(Exception):
    """Raised when neither the ranked search nor the label search answered."""


def is_searchable(term: Optional[str]) -> bool:
    return bool(term) and len(term.strip()) >= SEARCH_MIN_LENGTH


def clean_barcode(raw: Optional[str]) -> str:
    """Strip everything but digits and check the UPC/GTIN length."""
    digits = re.sub(r"\D", "", raw or "")
    if len(digits) < UPC_MIN_LENGTH or len(digits) > UPC_MAX_LENGTH:
        raise InvalidQueryError("Please enter a valid UPC code")
    return digits


def certifications_for(label: Label) -> CertificationSet:
    verification = label.verification
    if verification is None:
        return CertificationSet()
    return CertificationSet.from_row(
        {name: getattr(verification, name, None) for name in CertificationSet.model_fields}
    )


def _first_product(label: Label):
    return label.products[0] if label.products else None


def label_to_summary(label: Label) -> ProductSummary:
    certs = certifications_for(label)
    result = calculate_trust_score(certs, off_market=label.off_market == 1, view=ScoringView.LIST)
    product = _first_product(label)
    return ProductSummary(
        id=label.id,
        brand_name=label.brand_name,
        full_name=label.full_name,
        image_url=product.image_url if product and product.image_url else label.thumbnail,
        upc=label.upc,
        trust_score=result.score,
        trust_category=result.category,
        usp_verified=certs.usp_verified,
        nsf_certified=certs.nsf_certified,
        informed_sport=certs.informed_sport,
        fda_flagged=certs.fda_flagged,
    )


def row_to_summary(row: Dict[str, Any]) -> ProductSummary:
    """Shape a pre-joined procedure row.

    Rows carrying a certifications_bonus are rescored locally; rows with only a
    precomputed trust_score keep the number but take the local category label.
    """
    certs = CertificationSet.from_row(row)
    if row.get("certifications_bonus") is not None:
        result = score_from_bonus(row["certifications_bonus"], certs.fda_flagged)
    elif row.get("trust_score") is not None:
        score = clamp_score(int(row["trust_score"]))
        result = TrustScoreResult(score=score, category=categorize_score(score))
    else:
        result = calculate_trust_score(certs)

    return ProductSummary(
        id=row["id"],
        brand_name=row.get("brand_name"),
        full_name=row.get("full_name"),
        image_url=row.get("image_url"),
        upc=row.get("upc"),
        trust_score=result.score,
        trust_category=result.category,
        usp_verified=certs.usp_verified,
        nsf_certified=certs.nsf_certified,
        informed_sport=certs.informed_sport,
        fda_flagged=certs.fda_flagged,
        suggestion_type=row.get("suggestion_type"),
    )


class ProductService:
    def __init__(self, repository: CatalogRepository):
        self.repository = repository

    @classmethod
    def from_session(cls, db: Session) -> "ProductService":
        return cls(CatalogRepository(db))

    def search_or_raise(self, term: str, limit: int = SEARCH_DEFAULT_LIMIT) -> List[ProductSummary]:
        """Search the catalog, raising SearchUnavailableError when both lookups fail.

        An empty list means the catalog answered with no matches.
        """
        if not is_searchable(term):
            log_debug(f"Search term too short, skipping query: {term!r}")
            return []
        term = term.strip()
        log_info(f"Searching catalog for: {term}")

        try:
            rows = self.repository.search_supplements(term, limit)
            return [row_to_summary(row) for row in rows]
        except Exception as e:
            log_error(f"Ranked search failed for {term}, falling back to label search: {e}", e)
            self.repository.rollback()

        try:
            labels = self.repository.search_labels(term, limit)
            return [label_to_summary(label) for label in labels]
        except Exception as e:
            log_error(f"Search error for {term}: {e}", e)
            raise SearchUnavailableError(f"Search for {term!r} failed") from e

    def search(self, term: str, limit: int = SEARCH_DEFAULT_LIMIT) -> List[ProductSummary]:
        try:
            return self.search_or_raise(term, limit)
        except SearchUnavailableError:
            return []

    def lookup_barcode(self, barcode: str) -> Optional[ProductSummary]:
        digits = clean_barcode(barcode)
        log_info(f"Looking up barcode: {digits}")

        try:
            rows = self.repository.search_supplements(digits, 1)
            if rows:
                return row_to_summary(rows[0])
        except Exception as e:
            log_error(f"Ranked barcode lookup failed for {digits}: {e}", e)
            self.repository.rollback()

        try:
            label = self.repository.find_by_upc(digits)
        except Exception as e:
            log_error(f"Scan error for {digits}: {e}", e)
            return None

        if label is None:
            log_info(f"No product found for barcode {digits}")
            return None
        return label_to_summary(label)

    def get_product_detail(self, product_id: int) -> Optional[ProductDetail]:
        log_info(f"Fetching product detail for {product_id}")
        try:
            label = self.repository.get_label(product_id)
        except Exception as e:
            log_error(f"Fetch error for product {product_id}: {e}", e)
            return None

        if label is None:
            log_info(f"Product {product_id} not found")
            return None

        certs = certifications_for(label)
        off_market = label.off_market == 1
        result = calculate_trust_score(certs, off_market=off_market, view=ScoringView.DETAIL)
        product = _first_product(label)

        return ProductDetail(
            id=label.id,
            brand_name=label.brand_name,
            full_name=label.full_name,
            upc=label.upc,
            product_type=label.product_type,
            entry_date=label.entry_date,
            off_market=off_market,
            image_url=product.image_url if product else None,
            product_url=product.product_url if product else None,
            trust_score=result.score,
            trust_category=result.category,
            fda_flagged=certs.fda_flagged,
            certifications=[
                CertificationFlag(name=display, value=getattr(certs, field))
                for field, display in CERTIFICATION_NAMES
            ],
            fda_recall=FdaRecall(number=certs.fda_recall_number, url=certs.fda_recall_url)
            if certs.fda_recall_number
            else None,
        )

    def get_trust_score_breakdown(self, product_id: int) -> Optional[TrustScoreResult]:
        """Product-view score from the server-side certification bonus."""
        try:
            row = self.repository.get_product_details(product_id)
        except Exception as e:
            log_error(f"Error fetching product details for {product_id}: {e}", e)
            return None
        if not row or row.get("certifications_bonus") is None:
            return None
        return score_from_bonus(
            row["certifications_bonus"],
            bool(row.get("fda_flagged")),
            off_market=row.get("off_market") == 1,
            view=ScoringView.DETAIL,
            certification_count=int(row.get("certification_count") or 0),
        )

    def get_simple_trust_score(self, product_id: int) -> Optional[int]:
        try:
            return self.repository.calculate_simple_trustscore(product_id)
        except Exception as e:
            log_error(f"Error calculating trust score for {product_id}: {e}", e)
            return None

    def get_suggestions(self) -> Suggestions:
        try:
            rows = self.repository.get_suggested_products()
        except Exception as e:
            log_error(f"Error fetching products: {e}", e)
            return Suggestions()

        products = [row_to_summary(row) for row in rows or []]
        popular = [p for p in products if p.suggestion_type == "popular"]
        top_rated = [p for p in products if p.suggestion_type == "top_rated"]
        if not products:
            log_warning("No suggested products available")
        return Suggestions(
            popular=popular[:SUGGESTIONS_PER_SECTION],
            top_rated=top_rated[:SUGGESTIONS_PER_SECTION],
        )

    def get_stats(self) -> Dict[str, Any]:
        try:
            rows = self.repository.get_product_stats()
        except Exception as e:
            log_error(f"Error fetching product stats: {e}", e)
            return {}
        return rows[0] if rows else {}


def get_product_service(db: Session = Depends(get_db)) -> ProductService:
    return ProductService.from_session(db)


def search_in_own_session(term: str) -> List[ProductSummary]:
    """Run one search on a fresh session, for callers off the request thread."""
    db = SessionLocal()
    try:
        return ProductService.from_session(db).search_or_raise(term)
    finally:
        db.close()


def get_search_fn():
    return search_in_own_session
