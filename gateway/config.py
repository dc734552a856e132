"""Application configuration constants."""
from __future__ import annotations

HTTP_NOT_FOUND = 404
HTTP_INTERNAL_ERROR = 500

SEARCH_TTL = 60 * 60
ANIME_TTL = 60 * 60
RECENT_TTL = 5 * 60
RECOMMENDATIONS_TTL = 60 * 60
POPULAR_TTL = 10 * 60
UPCOMING_TTL = 60 * 60

POPULAR_PAGE_SIZE = 20
DEFAULT_PAGE = "1"

CATALOG_SOURCE = "gogoanime"

NOT_FOUND_MESSAGE = "Not found"
INTERNAL_ERROR_MESSAGE = "Internal Server Error"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

# Every method except OPTIONS, which the pipeline answers before routing.
ROUTE_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD"]
