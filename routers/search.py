import asyncio
from typing import List

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect

from env import SEARCH_DEFAULT_LIMIT
from interfaces.productModels import ProductSummary
from interfaces.stackModels import RecentSearchesResponse
from logger_manager import log_info, log_error
from services.product_service import (
    ProductService,
    SearchUnavailableError,
    get_product_service,
    get_search_fn,
    is_searchable,
)
from services.search_session import SearchSession
from services.stack_service import RecentSearches
from services.storage import StorageBackend, get_storage

router = APIRouter()


def get_recent_searches(storage: StorageBackend = Depends(get_storage)) -> RecentSearches:
    return RecentSearches(storage)


@router.get("", response_model=List[ProductSummary])
def search_products(
    q: str = Query("", description="Brand or product name"),
    limit: int = Query(SEARCH_DEFAULT_LIMIT, ge=1, le=100),
    service: ProductService = Depends(get_product_service),
    recent: RecentSearches = Depends(get_recent_searches),
):
    log_info(f"Search endpoint called for: {q}")
    try:
        results = service.search_or_raise(q, limit)
    except SearchUnavailableError:
        return []
    if is_searchable(q):
        recent.record(q.strip())
    return results


@router.get("/recent", response_model=RecentSearchesResponse)
def read_recent_searches(recent: RecentSearches = Depends(get_recent_searches)):
    return RecentSearchesResponse(searches=recent.list())


@router.delete("/recent", response_model=RecentSearchesResponse)
def clear_recent_searches(recent: RecentSearches = Depends(get_recent_searches)):
    recent.clear()
    return RecentSearchesResponse(searches=[])


async def _submit_and_send(websocket: WebSocket, session: SearchSession, term: str):
    try:
        results = await session.submit(term)
        if results is None:
            return
        await websocket.send_json({
            "term": term,
            "results": [product.model_dump() for product in results],
        })
    except asyncio.CancelledError:
        raise
    except Exception as e:
        log_error(f"Error answering live search for {term}: {e}", e)


@router.websocket("/live")
async def live_search(
    websocket: WebSocket,
    search_fn=Depends(get_search_fn),
    recent: RecentSearches = Depends(get_recent_searches),
):
    """Type-ahead search. Each message is a query; only the newest one is answered."""
    await websocket.accept()
    session = SearchSession(search_fn, recent=recent)
    pending = set()
    try:
        while True:
            term = await websocket.receive_text()
            task = asyncio.create_task(_submit_and_send(websocket, session, term))
            pending.add(task)
            task.add_done_callback(pending.discard)
    except WebSocketDisconnect:
        log_info("Live search client disconnected")
    except Exception as e:
        log_error(f"Error in live search: {e}", e)
    finally:
        session.cancel()
