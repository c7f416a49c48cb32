from pydantic import BaseModel, Field
from typing import List, Optional, Union

from wikisearch.config import RESULTS_PER_PAGE, SEARCH_FETCH_LIMIT


class Keyword(BaseModel):
    """Nested keyword entry stored under `keywords` in the index"""
    word: str


class Article(BaseModel):
    """Model representing a single article hit as returned by the engine"""
    title: str
    text: str
    url: str

    class Config:
        frozen = True
        # Keywords and any other indexed fields are not part of the article
        extra = "ignore"


class SearchResult(Article):
    """Article with its query-relevant, highlighted sentences"""
    sentences: List[str] = []


class SearchRequest(BaseModel):
    query: Optional[str] = Field(None, description="Search query, missing or blank matches nothing")
    limit: int = Field(10, gt=0, description="Number of hits to fetch")
    page: int = Field(1, ge=1, description="Page number")


class SearchResponse(BaseModel):
    """Raw article hits.

    `totalResults` is the number of hits returned for this page, not the
    number of documents matching in the index.
    """
    results: List[Article]
    totalResults: int


class RefinedSearchRequest(BaseModel):
    query: Optional[str] = Field(None, description="Search query, missing or blank matches nothing")
    limit: int = Field(SEARCH_FETCH_LIMIT, gt=0,
                       description="Number of hits to fetch from the engine")
    page: int = Field(1, ge=1, description="Page of refined results to show")
    page_length: int = Field(RESULTS_PER_PAGE, gt=0,
                             description="Refined results per page")


class RefinedSearchResponse(BaseModel):
    """Visible page of refined results plus pagination labels"""
    query: str
    results: List[SearchResult]
    total_results: int
    page: int
    total_pages: int
    page_labels: List[Union[int, str]]
