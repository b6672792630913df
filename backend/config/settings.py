"""
Central configuration for backend settings.
"""
import os


# Transform cache bound: number of (source, target) pairs kept alive
CRS_TRANSFORM_CACHE_SIZE: int = int(os.getenv("CRS_TRANSFORM_CACHE_SIZE", "10"))

# Remote projection definition lookup (epsg.io compatible search endpoint)
CRS_LOOKUP_URL: str = os.getenv("CRS_LOOKUP_URL", "https://epsg.io/")
CRS_LOOKUP_TIMEOUT: float = float(os.getenv("CRS_LOOKUP_TIMEOUT", "30"))
CRS_LOOKUP_SCHEME: str = os.getenv("CRS_LOOKUP_SCHEME", "EPSG")

# Pair used when a transform is requested without an explicit source/target
CRS_DEFAULT_SOURCE: str = os.getenv("CRS_DEFAULT_SOURCE", "EPSG:4326")
CRS_DEFAULT_TARGET: str = os.getenv("CRS_DEFAULT_TARGET", "EPSG:3857")

# Logging: rotating file under LOG_DIR plus an in-memory tail served at /logs/recent
LOG_DIR: str = os.getenv("LOG_DIR", os.path.join(os.path.dirname(__file__), "..", "logs"))
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FILE_NAME: str = os.getenv("LOG_FILE_NAME", "crs_engine.log")
RING_BUFFER_SIZE: int = int(os.getenv("RING_BUFFER_SIZE", "2000"))
RING_BUFFER_MIN_LEVEL: str = os.getenv("RING_BUFFER_MIN_LEVEL", "INFO").upper()
