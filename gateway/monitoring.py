"""Monitoring sinks: request view counting and error logging."""
import logging
import uuid
from collections import Counter
from datetime import datetime, timezone
from pathlib import Path
from typing import Mapping, Optional
from urllib.parse import urlparse

import httpx
from pydantic import BaseModel

logger = logging.getLogger(__name__)


class ErrorRecord(BaseModel):
    """Single failed request, as written to the error log."""

    error_id: str
    timestamp: str
    error_type: str
    message: str
    path: Optional[str] = None


class ErrorLog:
    """Logs upstream failures to a JSON Lines file for analysis."""

    def __init__(self, log_dir: Path = Path("logs")):
        """Initialize logger with target directory."""
        self.log_dir = log_dir
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.log_file = self.log_dir / "errors.jsonl"
        logger.info(f"ErrorLog initialized: {self.log_file}")

    def generate_error_id(self) -> str:
        """Generate a unique error identifier."""
        return str(uuid.uuid4())[:8]

    def create_record(self, error: BaseException, path: Optional[str] = None) -> ErrorRecord:
        """Create an ErrorRecord with auto-generated timestamp and ID."""
        return ErrorRecord(
            error_id=self.generate_error_id(),
            timestamp=datetime.now(timezone.utc).isoformat(),
            error_type=type(error).__name__,
            message=str(error),
            path=path,
        )

    def record_error(self, error: BaseException, path: Optional[str] = None) -> None:
        """Append an entry for error to the log file."""
        record = self.create_record(error, path)
        try:
            with open(self.log_file, "a", encoding="utf-8") as f:
                f.write(record.model_dump_json() + "\n")
        except Exception as e:
            logger.error(f"Failed to write error log: {e}")


class ViewCounter:
    """
    Counts served requests, optionally forwarding each view to a remote counter.

    Called fire-and-forget by the request pipeline; a failing remote call
    raises to the caller, which logs and drops it.
    """

    def __init__(self, stats_url: Optional[str] = None, timeout: float = 5.0,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.stats_url = stats_url
        self.total = 0
        self.by_referer: Counter[str] = Counter()
        self.client = httpx.AsyncClient(timeout=timeout, transport=transport) if stats_url else None

    async def aclose(self):
        if self.client is not None:
            await self.client.aclose()

    async def record_view(self, headers: Mapping[str, str]) -> None:
        """Count one view described by the request headers."""
        referer = headers.get("referer") or ""
        self.total += 1
        self.by_referer[urlparse(referer).netloc or "direct"] += 1

        if self.client is None:
            return

        response = await self.client.post(self.stats_url, json={
            "referer": referer or None,
            "userAgent": headers.get("user-agent"),
            "origin": headers.get("origin"),
        })
        response.raise_for_status()
