from pydantic import BaseModel, Field
from typing import List, Any, Optional


class TimingResult(BaseModel):
    name: str
    duration_ms: float
    success: bool
    rating: str
    error: Optional[str] = None
    details: Optional[Any] = None


class BenchmarkReport(BaseModel):
    """Response model for a catalog performance run"""
    results: List[TimingResult] = Field(default_factory=list)
    total: int = 0
    passed: int = 0
    failed: int = 0
    average_ms: float = 0.0
    timestamp: str = Field(..., description="Timestamp of the run")
