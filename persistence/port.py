"""
Pistachio Persistence - Persistence Port

Schnittstelle, über die die Anwendung Sketch-Dokumente lädt und speichert.
Laden/Speichern sind synchron und blockierend. Ein interaktiver Host führt sie
in einem Hintergrund-Task aus und übergibt das fertige Document als Ganzes an
den UI-Thread.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Union

from sketcher.sketch import Document

PathLike = Union[str, Path]


class SketchDocumentPersistencePort(ABC):
    """Lade-/Speicher-Einstiegspunkt für Sketch-Dokumente."""

    @abstractmethod
    def load_document(self, path: PathLike) -> Document:
        ...

    @abstractmethod
    def save_document(self, doc: Document, path: PathLike):
        ...

    @abstractmethod
    def can_handle(self, path: PathLike) -> bool:
        ...

    @abstractmethod
    def supported_extensions(self) -> str:
        ...
