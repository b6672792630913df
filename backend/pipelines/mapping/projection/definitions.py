"""
Projection Definition Registry
Maps CRS identifiers (e.g. "EPSG:4326") to projection definition strings
"""
import logging
import threading
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

WGS84_DEFINITION = "+proj=longlat +datum=WGS84 +no_defs"
NAD83_DEFINITION = "+proj=longlat +ellps=GRS80 +datum=NAD83 +no_defs"
# Spherical mercator on the WGS84 semi-major axis
WEB_MERCATOR_DEFINITION = (
    "+proj=merc +a=6378137 +b=6378137 +lat_ts=0 +lon_0=0 +x_0=0 +y_0=0 +k=1 +units=m +no_defs"
)

# Seed set available before any registration or remote lookup
BUILTIN_DEFINITIONS: Dict[str, str] = {
    "EPSG:4326": WGS84_DEFINITION,
    "WGS84": WGS84_DEFINITION,
    "EPSG:4269": NAD83_DEFINITION,
    "EPSG:3857": WEB_MERCATOR_DEFINITION,
    "EPSG:3785": WEB_MERCATOR_DEFINITION,
    "GOOGLE": WEB_MERCATOR_DEFINITION,
    "EPSG:900913": WEB_MERCATOR_DEFINITION,
    "EPSG:102113": WEB_MERCATOR_DEFINITION,
}


class DefinitionRegistry:
    """
    Thread-safe mapping from CRS identifier to projection definition.

    Entries are only ever added. Keys that are not registered are treated by
    `resolve` as raw definitions and passed through unchanged.
    """

    def __init__(self, definitions: Optional[Dict[str, str]] = None):
        self._definitions: Dict[str, str] = dict(BUILTIN_DEFINITIONS)
        if definitions:
            self._definitions.update(definitions)
        self._lock = threading.Lock()
        logger.debug(f"📚 Definition registry initialized with {len(self._definitions)} entries")

    def define(self, key: str, value: str) -> None:
        """Register (or overwrite) the definition for a CRS identifier"""
        with self._lock:
            self._definitions[key] = value
        logger.debug(f"📚 Registered projection definition for {key}")

    def has(self, key: str) -> bool:
        with self._lock:
            return key in self._definitions

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._definitions.get(key)

    def resolve(self, identifier: str) -> str:
        """Return the registered definition, or the identifier itself as a raw definition"""
        definition = self.get(identifier)
        return definition if definition is not None else identifier

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._definitions.keys())

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)

    def __len__(self) -> int:
        with self._lock:
            return len(self._definitions)
