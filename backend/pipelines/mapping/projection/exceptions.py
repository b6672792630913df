"""
Projection Engine Errors
Error taxonomy shared by the registry, resolver, normalizer and transforms
"""


class ProjectionEngineError(Exception):
    """Base class for all projection engine errors"""
    pass


class InvalidCoordinatesError(ProjectionEngineError, ValueError):
    """Coordinate batch has a malformed or ambiguous shape"""
    pass


class TransformConstructionError(ProjectionEngineError):
    """A projection definition could not be turned into a transform"""
    pass


class ProjectionError(ProjectionEngineError):
    """Projection math failed while transforming points"""
    pass


class DefinitionLookupError(ProjectionEngineError):
    """Remote definition lookup failed"""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code


class UnsupportedSchemeError(DefinitionLookupError):
    """Lookup requested for an authority scheme the resolver does not serve"""
    pass


class DefinitionNotFoundError(DefinitionLookupError):
    """Lookup service returned no definition for the code"""
    pass
