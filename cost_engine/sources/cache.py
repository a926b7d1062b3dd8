"""
Local Pricing Cache
===================
Pricing JSON persisted on disk as ``{"timestamp": <unix seconds>, "data": {...}}``.
"""

import json
import os
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

import structlog

from cost_engine.core.errors import PricingSourceError
from cost_engine.sources.base import Clock, PricingPayload, ensure_pricing_json, utcnow

logger = structlog.get_logger()


class PricingCache:
    """
    Disk cache for pricing data.

    Entries older than ``max_age`` are treated as missing.
    """

    name = "cache"

    def __init__(
        self,
        path: Path,
        max_age: timedelta = timedelta(hours=24),
        clock: Clock = utcnow,
    ):
        self.path = Path(path)
        self.max_age = max_age
        self._clock = clock

    def load(self) -> PricingPayload:
        """
        Read cached pricing data.

        Raises:
            PricingSourceError: file missing, unreadable, malformed or expired
        """
        if not self.path.exists():
            raise PricingSourceError(self.name, "cache file does not exist")

        try:
            cached = json.loads(self.path.read_bytes())
        except OSError as e:
            raise PricingSourceError(self.name, f"failed to read cache file: {e}") from e
        except ValueError as e:
            raise PricingSourceError(self.name, f"failed to parse cache file: {e}") from e

        if not isinstance(cached, dict) or "data" not in cached:
            raise PricingSourceError(self.name, "cache file has no data")

        try:
            cached_at = datetime.fromtimestamp(int(cached.get("timestamp", 0)), tz=timezone.utc)
        except (TypeError, ValueError, OverflowError, OSError) as e:
            raise PricingSourceError(self.name, f"invalid cache timestamp: {e}") from e

        if self._clock() - cached_at > self.max_age:
            raise PricingSourceError(self.name, "cache expired")

        data = json.dumps(cached["data"]).encode("utf-8")
        ensure_pricing_json(data, self.name)

        return PricingPayload(data=data, source=self.name, updated_at=cached_at)

    def save(self, data: bytes, updated_at: Optional[datetime] = None) -> bool:
        """
        Persist pricing data with a timestamp.

        Failures are logged and reported through the return value only.

        Returns:
            Whether the cache file was written
        """
        timestamp = int((updated_at or self._clock()).timestamp())
        tmp_path = self.path.with_name(self.path.name + ".tmp")

        try:
            payload = json.dumps({"timestamp": timestamp, "data": json.loads(data)})
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(payload, encoding="utf-8")
            os.replace(tmp_path, self.path)
        except (OSError, ValueError) as e:
            logger.warning("Failed to save pricing cache", path=str(self.path), error=str(e))
            return False

        logger.info("Saved pricing cache", path=str(self.path), timestamp=timestamp)
        return True
