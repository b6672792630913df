"""
Base Renderer Interface
Capabilities every rendering backend must provide to consume projected coordinates
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List

Points = List[Dict[str, float]]


class RendererBackend(ABC):
    """
    Base class for rendering backends.

    There are no default implementations: a backend that leaves any method
    out cannot be instantiated.
    """

    @abstractmethod
    def api(self) -> str:
        """Name of the rendering API the backend drives"""
        pass

    @abstractmethod
    def world_to_gcs(self, points: Points) -> Points:
        """Convert points from world to GCS coordinates"""
        pass

    @abstractmethod
    def display_to_gcs(self, points: Points) -> Points:
        """Convert points from display to GCS coordinates"""
        pass

    @abstractmethod
    def gcs_to_display(self, points: Points) -> Points:
        """Convert points from GCS to display coordinates"""
        pass

    @abstractmethod
    def world_to_display(self, points: Points) -> Points:
        """Convert points from world to display coordinates"""
        pass

    @abstractmethod
    def display_to_world(self, points: Points) -> Points:
        """Convert points from display to world coordinates"""
        pass

    @abstractmethod
    def init(self) -> None:
        pass

    @abstractmethod
    def resize(self, width: int, height: int) -> None:
        pass

    @abstractmethod
    def render(self) -> Any:
        pass

    @abstractmethod
    def exit(self) -> None:
        pass
