import time
from datetime import datetime
from typing import Any, Callable, List

import pytz

from db.repositories import CatalogRepository
from env import TIMEZONE
from interfaces.metricsModels import BenchmarkReport, TimingResult
from logger_manager import log_error, log_info

SAMPLE_SEARCHES = ["protein", "NOW", "vitamin c"]
SAMPLE_UPC = "765704991183"


def rate_duration(duration_ms: float) -> str:
    if duration_ms < 50:
        return "fast"
    if duration_ms < 100:
        return "ok"
    if duration_ms < 200:
        return "slow"
    return "critical"


def run_timed(name: str, fn: Callable[[], Any]) -> TimingResult:
    """Run fn and time it. A raised exception becomes a failed result."""
    start = time.perf_counter()
    try:
        details = fn()
        duration = (time.perf_counter() - start) * 1000
        return TimingResult(name=name, duration_ms=duration, success=True,
                            rating=rate_duration(duration), details=details)
    except Exception as e:
        duration = (time.perf_counter() - start) * 1000
        log_error(f"Benchmark step {name} failed: {e}", e)
        return TimingResult(name=name, duration_ms=duration, success=False,
                            rating=rate_duration(duration), error=str(e))


def _result_count(rows) -> dict:
    return {"results": len(rows or [])}


def run_catalog_benchmark(repository: CatalogRepository) -> BenchmarkReport:
    log_info("Running catalog benchmark")
    steps: List[tuple] = [
        ("Database Connection", lambda: {"connected": True, "sample": repository.probe()}),
        ("Count Products", lambda: {"count": repository.count_labels()}),
        ("Suggested Products", lambda: _result_count(repository.get_suggested_products())),
        ("Calculate TrustScore Function", lambda: {"score": repository.calculate_simple_trustscore(1)}),
    ]
    for term in SAMPLE_SEARCHES:
        steps.append((f"Search ({term})", lambda term=term: _result_count(repository.search_supplements(term, 20))))
    steps.append((f"UPC Scan ({SAMPLE_UPC})", lambda: _result_count(repository.search_supplements(SAMPLE_UPC, 1))))
    steps.append(("Score Distribution Query", lambda: repository.score_distribution()))

    results = []
    for name, fn in steps:
        result = run_timed(name, fn)
        if not result.success:
            # a failed statement leaves the transaction unusable for the next step
            repository.rollback()
        results.append(result)

    passed = sum(1 for r in results if r.success)
    average = sum(r.duration_ms for r in results) / len(results) if results else 0.0
    log_info(f"Catalog benchmark finished: {passed}/{len(results)} passed")
    return BenchmarkReport(
        results=results,
        total=len(results),
        passed=passed,
        failed=len(results) - passed,
        average_ms=average,
        timestamp=datetime.now(tz=pytz.timezone(TIMEZONE)).isoformat(),
    )
