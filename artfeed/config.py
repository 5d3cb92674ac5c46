"""Configuration: env, catalog and translation endpoints, feed tuning."""
import os
from pathlib import Path

from dotenv import load_dotenv

# Base paths (project root = parent of artfeed package)
BASE_DIR = Path(__file__).resolve().parent.parent

# Load .env from project root so ARTFEED_* overrides are set
load_dotenv(BASE_DIR / ".env")

# API
API_HOST = os.getenv("ARTFEED_API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("ARTFEED_API_PORT", "8000"))
# Front-end origin for CORS (empty = allow any, local use)
ARTFEED_WEB_ORIGIN = os.getenv("ARTFEED_WEB_ORIGIN", "")

# Catalog (Art Institute of Chicago public API, no key required)
CATALOG_URL = os.getenv("ARTFEED_CATALOG_URL", "https://api.artic.edu/api/v1")
CATALOG_FIELDS = "id,title,image_id,artist_title,description"
IIIF_IMAGE_SIZE = "843,"
# Random discovery draws a page out of this many
PAGE_UNIVERSE = int(os.getenv("ARTFEED_PAGE_UNIVERSE", "1000"))
# Smaller discovery batches keep variety high; search batches favor richness
DISCOVERY_BATCH_SIZE = int(os.getenv("ARTFEED_DISCOVERY_BATCH", "15"))
SEARCH_BATCH_SIZE = int(os.getenv("ARTFEED_SEARCH_BATCH", "30"))

# Translation (MyMemory)
TRANSLATE_URL = os.getenv("ARTFEED_TRANSLATE_URL", "https://api.mymemory.translated.net/get")
SOURCE_LANG = os.getenv("ARTFEED_SOURCE_LANG", "en")
TARGET_LANG = os.getenv("ARTFEED_TARGET_LANG", "zh-CN")
TRANSLATE_MAX_CHARS = 500

# Shared HTTP client
HTTP_TIMEOUT_SEC = float(os.getenv("ARTFEED_HTTP_TIMEOUT", "10.0"))
USER_AGENT = os.getenv("ARTFEED_USER_AGENT", "artfeed/0.1 (local art feed)")

# Feed tuning
UNKNOWN_AUTHOR = "Unknown Artist"
TAIL_THRESHOLD = 3  # fetch more when current index is within this many of the end
PREFETCH_AHEAD = 2  # images warmed after the current index
PREFETCH_MEMORY = 256  # warmed URLs remembered to skip repeat loads
INITIAL_MATERIALIZE = 2  # records rendered right after a fresh load
