from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from elasticsearch import Elasticsearch
from functools import lru_cache
import logging

from wikisearch.config import (
    ELASTIC_INDEX,
    ELASTIC_PASSWORD,
    ELASTIC_TIMEOUT,
    ELASTIC_URL,
    ELASTIC_USERNAME,
)
from wikisearch.es_utils import (
    EngineUnavailableError,
    connect_elasticsearch,
    ping_elasticsearch,
    search_articles,
)
from wikisearch.es_models import (
    RefinedSearchRequest,
    RefinedSearchResponse,
    SearchRequest,
    SearchResponse,
)
from wikisearch.refiner import count_pages, generate_page_labels, paginate, refine_results

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Wikipedia Search API",
    description="Search Wikipedia articles and read the sentences that match",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@lru_cache
def get_es_client() -> Elasticsearch:
    return connect_elasticsearch(ELASTIC_URL, ELASTIC_USERNAME, ELASTIC_PASSWORD, ELASTIC_TIMEOUT)


@app.on_event("startup")
async def startup_event():
    """Initialize the application on startup"""
    if not ping_elasticsearch(get_es_client()):
        logger.warning(f"Could not connect to Elasticsearch at {ELASTIC_URL}")


@app.get("/", tags=["Health"])
def root(es: Elasticsearch = Depends(get_es_client)):
    """Health check endpoint"""
    return {
        "message": "Wikipedia Search API",
        "version": "1.0.0",
        "status": "healthy" if ping_elasticsearch(es) else "elasticsearch_down"
    }


@app.post("/api/search", response_model=SearchResponse, tags=["Search"])
def search(request: SearchRequest, es: Elasticsearch = Depends(get_es_client)):
    """
    Search articles by title, text and keywords.
    """
    skip = (request.page - 1) * request.limit
    try:
        results = search_articles(es, request.query, skip, request.limit, ELASTIC_INDEX)
    except EngineUnavailableError:
        raise HTTPException(status_code=500, detail="Search failed")

    return SearchResponse(results=results, totalResults=len(results))


@app.post("/api/search/refined", response_model=RefinedSearchResponse, tags=["Search"])
def search_refined(request: RefinedSearchRequest, es: Elasticsearch = Depends(get_es_client)):
    """
    Search articles and return one page of them with their matching sentences.
    """
    try:
        articles = search_articles(es, request.query, 0, request.limit, ELASTIC_INDEX)
    except EngineUnavailableError:
        raise HTTPException(status_code=500, detail="Search failed")

    query = request.query or ""
    results = refine_results(articles, query)
    pages = count_pages(len(results), request.page_length)

    return RefinedSearchResponse(
        query=query,
        results=paginate(results, request.page_length, request.page),
        total_results=len(results),
        page=request.page,
        total_pages=pages,
        page_labels=generate_page_labels(request.page, pages)
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
