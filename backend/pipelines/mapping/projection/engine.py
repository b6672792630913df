"""
Projection Context
Owns the definition registry, transform cache and remote resolver, and hands
out shared transforms for (source, target) pairs.
"""
import logging
from typing import Any, Dict, Optional

from config.settings import CRS_DEFAULT_SOURCE, CRS_DEFAULT_TARGET

from .definition_resolver import DefinitionResolver
from .definitions import DefinitionRegistry
from .transform_cache import TransformCache
from .transformer import CoordinateTransform

logger = logging.getLogger(__name__)


class ProjectionContext:
    """
    Explicitly constructed engine state.

    Create one per process (or per test) and pass it to whatever needs
    transforms; nothing in the engine reaches for a global instance.
    """

    def __init__(
        self,
        registry: Optional[DefinitionRegistry] = None,
        cache: Optional[TransformCache] = None,
        resolver: Optional[DefinitionResolver] = None,
        cache_size: Optional[int] = None,
    ):
        self.registry = registry if registry is not None else DefinitionRegistry()
        self.cache = cache if cache is not None else TransformCache(capacity=cache_size)
        self.resolver = resolver if resolver is not None else DefinitionResolver(self.registry)
        logger.info(f"🧭 Projection context initialized (cache capacity {self.cache.capacity})")

    def define(self, key: str, definition: str) -> None:
        self.registry.define(key, definition)

    async def lookup(self, code: str) -> str:
        return await self.resolver.lookup(code)

    def get_transform(self, source: Optional[str] = None, target: Optional[str] = None) -> CoordinateTransform:
        """
        Return the shared transform for a (source, target) pair.

        Identifiers found in the registry are replaced by their definitions;
        anything else is handed to pyproj as a raw definition.

        Raises:
            TransformConstructionError: a definition is not understood by pyproj
        """
        source = source or CRS_DEFAULT_SOURCE
        target = target or CRS_DEFAULT_TARGET
        return self.cache.get_or_create(
            (source, target),
            lambda: CoordinateTransform(
                source,
                target,
                self.registry.resolve(source),
                self.registry.resolve(target),
            ),
        )

    async def get_transform_async(self, source: Optional[str] = None, target: Optional[str] = None) -> CoordinateTransform:
        """Like `get_transform`, first looking up unregistered authority codes remotely"""
        source = await self._resolve_identifier(source or CRS_DEFAULT_SOURCE)
        target = await self._resolve_identifier(target or CRS_DEFAULT_TARGET)
        return self.get_transform(source, target)

    async def _resolve_identifier(self, identifier: str) -> str:
        # Unregistered authority codes are fetched and then addressed by their canonical key
        if self.registry.has(identifier) or not self.resolver.supports(identifier):
            return identifier
        await self.resolver.lookup(identifier)
        return self.resolver.canonical_code(identifier)

    def transform_coordinates(
        self,
        source: str,
        target: str,
        coordinates: Any,
        num_components: Optional[int] = None,
    ) -> Any:
        """
        One-shot forward transform of a coordinate batch.

        Returns the input object untouched when source and target are the
        same identifier; otherwise a new batch in the input's shape.
        """
        if source == target:
            return coordinates
        return self.get_transform(source, target).forward(coordinates, num_components)

    def cache_stats(self) -> Dict[str, Any]:
        return self.cache.stats()
