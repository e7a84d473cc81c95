import asyncio
import time
import unittest
from unittest.mock import MagicMock
from interfaces.productModels import ProductSummary
from services.product_service import SearchUnavailableError
from services.search_session import SearchSession
from services.stack_service import RecentSearches
from services.storage import InMemoryStorage


def results_for(term):
    return [ProductSummary(id=len(term), full_name=term, trust_score=50, trust_category="Fair")]


class TestSearchSession(unittest.IsolatedAsyncioTestCase):

    async def test_short_term_returns_empty_without_search(self):
        search_fn = MagicMock(side_effect=results_for)
        session = SearchSession(search_fn, debounce_seconds=0)

        self.assertEqual(await session.submit("ab"), [])

        search_fn.assert_not_called()
        self.assertEqual(session.latest_results, [])

    async def test_debounce_coalesces_rapid_submits(self):
        search_fn = MagicMock(side_effect=results_for)
        session = SearchSession(search_fn, debounce_seconds=0.05)

        first = asyncio.create_task(session.submit("prot"))
        await asyncio.sleep(0)
        second = asyncio.create_task(session.submit("protein"))

        self.assertIsNone(await first)
        results = await second
        search_fn.assert_called_once_with("protein")
        self.assertEqual(results[0].full_name, "protein")
        self.assertEqual(session.latest_term, "protein")

    async def test_stale_response_does_not_overwrite_newer(self):
        def search_fn(term):
            if term == "slow query":
                time.sleep(0.2)
            return results_for(term)

        session = SearchSession(search_fn, debounce_seconds=0)

        slow = asyncio.create_task(session.submit("slow query"))
        await asyncio.sleep(0.05)
        fast = await session.submit("fast query")

        self.assertIsNone(await slow)
        self.assertEqual(fast[0].full_name, "fast query")

        # let the abandoned worker thread finish
        await asyncio.sleep(0.3)
        self.assertEqual(session.latest_term, "fast query")
        self.assertEqual(session.latest_results[0].full_name, "fast query")

    async def test_records_recent_searches(self):
        recent = RecentSearches(InMemoryStorage())
        session = SearchSession(results_for, debounce_seconds=0, recent=recent)

        await session.submit("omega 3")
        await session.submit("  creatine ")

        self.assertEqual(recent.list(), ["creatine", "omega 3"])

    async def test_failed_search_is_not_recorded(self):
        recent = RecentSearches(InMemoryStorage())
        search_fn = MagicMock(side_effect=SearchUnavailableError("catalog down"))
        session = SearchSession(search_fn, debounce_seconds=0, recent=recent)

        results = await session.submit("protein")

        self.assertEqual(results, [])
        self.assertEqual(session.latest_results, [])
        self.assertEqual(recent.list(), [])

    async def test_cancel_discards_pending_search(self):
        search_fn = MagicMock(side_effect=results_for)
        session = SearchSession(search_fn, debounce_seconds=0.05)

        pending = asyncio.create_task(session.submit("vitamins"))
        await asyncio.sleep(0)
        session.cancel()

        self.assertIsNone(await pending)
        search_fn.assert_not_called()

if __name__ == '__main__':
    unittest.main()
