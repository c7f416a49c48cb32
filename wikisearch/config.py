import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Elasticsearch connection
ELASTIC_URL = os.getenv("ELASTIC_URL", "http://localhost:9200")
ELASTIC_USERNAME = os.getenv("ELASTIC_USERNAME", "")
ELASTIC_PASSWORD = os.getenv("ELASTIC_PASSWORD", "")
ELASTIC_INDEX = os.getenv("ELASTIC_INDEX", "wikipedia")
ELASTIC_TIMEOUT = float(os.getenv("ELASTIC_TIMEOUT", "10"))

# Result refinement
SEARCH_FETCH_LIMIT = int(os.getenv("SEARCH_FETCH_LIMIT", "100"))
RESULTS_PER_PAGE = int(os.getenv("RESULTS_PER_PAGE", "10"))
HIGHLIGHT_PRE_TAG = os.getenv("HIGHLIGHT_PRE_TAG", "<mark>")
HIGHLIGHT_POST_TAG = os.getenv("HIGHLIGHT_POST_TAG", "</mark>")
