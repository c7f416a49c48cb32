import itertools
import logging
from typing import List, Optional, Union

from elasticsearch import Elasticsearch

from wikisearch.config import ELASTIC_INDEX, RESULTS_PER_PAGE, SEARCH_FETCH_LIMIT
from wikisearch.es_models import SearchResult
from wikisearch.es_utils import search_articles
from wikisearch.refiner import (
    can_change_page,
    count_pages,
    display_sentences,
    generate_page_labels,
    paginate,
    refine_results,
)

logger = logging.getLogger(__name__)


class SearchSession:
    """
    State of one user's search screen.

    Every search is tagged with an increasing sequence number; a response is
    only applied when no newer one has been applied already.
    """

    def __init__(
        self,
        es: Elasticsearch,
        index_name: str = ELASTIC_INDEX,
        fetch_limit: int = SEARCH_FETCH_LIMIT,
        page_length: int = RESULTS_PER_PAGE,
    ):
        self.es = es
        self.index_name = index_name
        self.fetch_limit = fetch_limit
        self.page_length = page_length

        self.query = ""
        self.results: List[SearchResult] = []
        self.current_page = 1
        self.selected: Optional[SearchResult] = None

        self._sequence = itertools.count(1)
        self._applied_sequence = 0

    def begin(self) -> int:
        """Reserve the sequence number for a new outgoing search"""
        return next(self._sequence)

    def apply(self, sequence: int, query: str, results: List[SearchResult]) -> bool:
        if sequence <= self._applied_sequence:
            logger.info(f"Discarding stale response #{sequence} for {query!r}")
            return False
        self._applied_sequence = sequence
        self.query = query
        self.results = results
        self.current_page = 1
        self.selected = None
        return True

    def search(self, query: str) -> List[SearchResult]:
        """Fetch, refine and apply results for `query`; engine errors propagate"""
        sequence = self.begin()
        articles = search_articles(self.es, query, 0, self.fetch_limit, self.index_name)
        results = refine_results(articles, query)
        self.apply(sequence, query, results)
        return self.results

    @property
    def total_pages(self) -> int:
        return count_pages(len(self.results), self.page_length)

    @property
    def visible_results(self) -> List[SearchResult]:
        return paginate(self.results, self.page_length, self.current_page)

    @property
    def page_labels(self) -> List[Union[int, str]]:
        return generate_page_labels(self.current_page, self.total_pages)

    def change_page(self, page: int) -> bool:
        if not can_change_page(page, self.total_pages):
            return False
        self.current_page = page
        return True

    def select(self, result: SearchResult) -> List[str]:
        """Select a result and return the sentences to show for it"""
        self.selected = result
        return display_sentences(result)
