from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import Dict

from db.database import get_db
from db.repositories import CatalogRepository
from interfaces.metricsModels import BenchmarkReport
from logger_manager import log_info, log_error
from services.performance_service import run_catalog_benchmark

router = APIRouter()


def get_catalog_repository(db: Session = Depends(get_db)) -> CatalogRepository:
    return CatalogRepository(db)


@router.post("/run", response_model=BenchmarkReport)
def run_benchmark(repository: CatalogRepository = Depends(get_catalog_repository)):
    log_info("Benchmark endpoint called")
    return run_catalog_benchmark(repository)


@router.get("/distribution", response_model=Dict[str, int])
def read_score_distribution(repository: CatalogRepository = Depends(get_catalog_repository)):
    log_info("Score distribution endpoint called")
    try:
        return repository.score_distribution()
    except Exception as e:
        log_error(f"Error in score distribution endpoint: {e}", e)
        raise HTTPException(status_code=500, detail="Internal Server Error")
