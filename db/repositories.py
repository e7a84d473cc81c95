from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_, text
from sqlalchemy.orm import Session, selectinload

from logger_manager import log_debug
from . import models


def _rows_to_dicts(result) -> List[Dict[str, Any]]:
    return [dict(row) for row in result.mappings().all()]


class CatalogRepository:
    """Read access to the hosted supplement catalog.

    Errors from the database are not caught here; the service layer decides
    how to degrade.
    """

    def __init__(self, db: Session):
        self.db = db

    def _labels_with_relations(self):
        return self.db.query(models.Label).options(
            selectinload(models.Label.products),
            selectinload(models.Label.verification),
        )

    def rollback(self):
        self.db.rollback()

    def get_label(self, label_id: int) -> Optional[models.Label]:
        return self._labels_with_relations().filter(models.Label.id == label_id).first()

    def find_by_upc(self, upc: str) -> Optional[models.Label]:
        label = self._labels_with_relations().filter(models.Label.upc == upc).first()
        if label:
            log_debug(f"Exact UPC match found: {upc}")
        return label

    def search_labels(self, term: str, limit: int = 20) -> List[models.Label]:
        pattern = f"%{term}%"
        return (
            self._labels_with_relations()
            .filter(
                or_(
                    models.Label.brand_name.ilike(pattern),
                    models.Label.full_name.ilike(pattern),
                    models.Label.search_text.ilike(pattern),
                )
            )
            .order_by(models.Label.brand_name, models.Label.full_name)
            .limit(limit)
            .all()
        )

    def probe(self) -> List[int]:
        return [row.id for row in self.db.query(models.Label.id).limit(1).all()]

    def count_labels(self) -> int:
        return self.db.query(func.count(models.Label.id)).scalar() or 0

    def score_distribution(self, limit: int = 10000) -> Dict[str, int]:
        categories = self.db.query(models.TrustScoreRecord.category).limit(limit).subquery()
        rows = (
            self.db.query(categories.c.category, func.count())
            .group_by(categories.c.category)
            .all()
        )
        return {category: count for category, count in rows}

    # Stored procedures on the hosted database

    def search_supplements(self, query: str, limit_count: int = 20) -> List[Dict[str, Any]]:
        result = self.db.execute(
            text("SELECT * FROM search_supplements(:query, :limit_count)"),
            {"query": query, "limit_count": limit_count},
        )
        return _rows_to_dicts(result)

    def get_suggested_products(self) -> List[Dict[str, Any]]:
        result = self.db.execute(text("SELECT * FROM get_suggested_products()"))
        return _rows_to_dicts(result)

    def calculate_simple_trustscore(self, product_id: int) -> Optional[int]:
        result = self.db.execute(
            text("SELECT calculate_simple_trustscore(:p_product_id)"),
            {"p_product_id": product_id},
        )
        return result.scalar()

    def get_product_details(self, product_id: int) -> Optional[Dict[str, Any]]:
        result = self.db.execute(
            text("SELECT * FROM get_product_details(:product_id)"),
            {"product_id": product_id},
        )
        rows = _rows_to_dicts(result)
        return rows[0] if rows else None

    def get_product_stats(self) -> List[Dict[str, Any]]:
        result = self.db.execute(text("SELECT * FROM get_product_stats()"))
        return _rows_to_dicts(result)
