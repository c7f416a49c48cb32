from elasticsearch import Elasticsearch, ApiError, TransportError
from typing import Dict, Any, List, Optional
from pydantic import ValidationError
import logging

from wikisearch.es_models import Article

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

TITLE_BOOST = 3.0
TEXT_BOOST = 2.0
KEYWORD_BOOST = 1.5


class EngineUnavailableError(Exception):
    """Raised when the search engine call fails for any reason"""


def connect_elasticsearch(
    url: str, username: str = "", password: str = "", timeout: float = 10.0
) -> Elasticsearch:
    """Create a client; basic auth is only used when a username is set"""
    options: Dict[str, Any] = {"request_timeout": timeout}
    if username:
        options["basic_auth"] = (username, password)
    es = Elasticsearch(url, **options)
    logger.info(f"Elasticsearch client created for {url}")
    return es


def ping_elasticsearch(es: Elasticsearch) -> bool:
    try:
        return bool(es.ping())
    except TransportError as e:
        logger.warning(f"Elasticsearch ping failed: {str(e)}")
        return False


def build_query(query: str, skip: int, limit: int, collection: str) -> Dict[str, Any]:
    """
    Build the search request for `query`.

    At least one of three clauses has to match: the title (exact terms), the
    body text (fuzzy) or any nested keyword word (fuzzy). Boosts only weigh the
    combined score. The query text is passed through untouched.
    Returns: keyword arguments for `Elasticsearch.search`
    """
    search_body = {
        "from": skip,
        "size": limit,
        "query": {
            "bool": {
                "should": [
                    {"match": {"title": {"query": query, "boost": TITLE_BOOST}}},
                    {"match": {"text": {
                        "query": query, "fuzziness": "AUTO", "boost": TEXT_BOOST
                    }}},
                    {
                        "nested": {
                            "path": "keywords",
                            "query": {"bool": {"should": [
                                {"match": {"keywords.word": {
                                    "query": query, "fuzziness": "AUTO",
                                    "boost": KEYWORD_BOOST
                                }}}
                            ]}}
                        }
                    },
                ],
                "minimum_should_match": 1,
            }
        },
    }
    return {"index": collection, "body": search_body}


def search_articles(
    es: Elasticsearch, query: Optional[str], skip: int = 0, limit: int = 10,
    index_name: str = "wikipedia"
) -> List[Article]:
    """
    Search articles in engine relevance order.
    A missing, empty or blank query matches nothing and never reaches the engine.
    """
    if not query or not query.strip():
        logger.info("Empty query, returning no articles")
        return []

    try:
        response = es.search(**build_query(query, skip, limit, index_name))
    except (ApiError, TransportError) as e:
        logger.error(f"Search error for query {query!r} on {index_name}: {str(e)}")
        raise EngineUnavailableError("Search failed") from e

    try:
        hits = response["hits"]["hits"]
        return [Article(**hit["_source"]) for hit in hits]
    except (KeyError, ValidationError) as e:
        logger.error(f"Malformed search response for query {query!r} on {index_name}: {str(e)}")
        raise EngineUnavailableError("Search failed") from e
