import asyncio
from typing import Callable, List, Optional

from env import SEARCH_DEBOUNCE_MS
from interfaces.productModels import ProductSummary
from logger_manager import log_debug, log_error
from services.product_service import is_searchable
from services.stack_service import RecentSearches

SearchFn = Callable[[str], List[ProductSummary]]


class SearchSession:
    """Search-as-you-type for one user.

    Each submit cancels the previous pending or in-flight request. Results are
    only published when they belong to the newest request, so a slow response
    can never replace a newer one.
    """

    def __init__(
        self,
        search_fn: SearchFn,
        debounce_seconds: float = SEARCH_DEBOUNCE_MS / 1000,
        recent: Optional[RecentSearches] = None,
    ):
        self.search_fn = search_fn
        self.debounce_seconds = debounce_seconds
        self.recent = recent
        self.latest_term: Optional[str] = None
        self.latest_results: List[ProductSummary] = []
        self._generation = 0
        self._task: Optional[asyncio.Task] = None

    def cancel(self):
        self._generation += 1
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def submit(self, term: str) -> Optional[List[ProductSummary]]:
        """Search for term after the debounce delay.

        Returns the results, or None if a newer submit superseded this one.
        """
        self.cancel()
        generation = self._generation

        if not is_searchable(term):
            self.latest_term = term
            self.latest_results = []
            return []

        task = asyncio.ensure_future(self._run(term.strip(), generation))
        self._task = task
        try:
            return await task
        except asyncio.CancelledError:
            if generation != self._generation:
                log_debug(f"Search for {term!r} superseded")
                return None
            raise

    async def _run(self, term: str, generation: int) -> Optional[List[ProductSummary]]:
        await asyncio.sleep(self.debounce_seconds)
        try:
            results = await asyncio.to_thread(self.search_fn, term)
            succeeded = True
        except Exception as e:
            log_error(f"Live search failed for {term!r}: {e}", e)
            results = []
            succeeded = False

        if generation != self._generation:
            log_debug(f"Discarding stale results for {term!r}")
            return None

        self.latest_term = term
        self.latest_results = results
        if succeeded and self.recent is not None:
            await asyncio.to_thread(self.recent.record, term)
        return results
