"""
Cache objects usable with GeocoderMany.

Any object with `get(key)` and `set(key, value)` works, and an optional
`delete(key)` lets GeocoderMany remove the entry it writes while checking the
cache. These two cover the common cases. Values are plain dicts so they
survive JSON serialization.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class MemoryCache:
    """Process-local dict cache."""

    def __init__(self):
        self._cache: Dict[str, Any] = {}

    def get(self, key: str) -> Optional[Any]:
        return self._cache.get(key)

    def set(self, key: str, value: Any) -> bool:
        self._cache[key] = value
        return True

    def delete(self, key: str) -> bool:
        if key not in self._cache:
            return False
        del self._cache[key]
        return True

    def clear(self):
        self._cache = {}

    def __len__(self):
        return len(self._cache)


class JsonFileCache(MemoryCache):
    """
    Dict cache persisted to a JSON file after every write.

    Usage:
        cache = JsonFileCache(settings.GEOCODING_CACHE_PATH)
        geocoder = GeocoderMany(cache=cache)
    """

    def __init__(self, path: Path):
        super().__init__()
        self.path = Path(path)
        self._load_cache()

    def _load_cache(self):
        """Load cache from file."""
        if self.path.exists():
            try:
                with open(self.path) as f:
                    self._cache = json.load(f)
                logger.debug(f"Loaded {len(self._cache)} cached geocoding results")
            except (OSError, ValueError) as e:
                logger.warning(f"Failed to load geocoding cache: {e}")
                self._cache = {}

    def _save_cache(self) -> bool:
        """Save cache to file."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w") as f:
                json.dump(self._cache, f, indent=2)
            return True
        except (OSError, TypeError) as e:
            logger.warning(f"Failed to save geocoding cache: {e}")
            return False

    def set(self, key: str, value: Any) -> bool:
        super().set(key, value)
        return self._save_cache()

    def delete(self, key: str) -> bool:
        if not super().delete(key):
            return False
        return self._save_cache()

    def clear(self):
        """Clear the geocoding cache."""
        super().clear()
        if self.path.exists():
            self.path.unlink()
        logger.info("Geocoding cache cleared")
