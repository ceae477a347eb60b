"""
Pistachio Persistence - JSON Sketch Document Adapter

Ablauf:
    Laden:     Datei-Bytes -> json_codec.loads -> FileDto -> Mapper -> Document
    Speichern: Document -> Mapper -> FileDto -> json_codec.dumps -> UTF-8 -> Datei

Ein fehlgeschlagenes Laden liefert nie ein halbes Document. Beim Speichern
werden die kompletten UTF-8-Bytes im Speicher erzeugt, bevor die Zieldatei
geöffnet wird; ein Encode-Fehler lässt eine vorhandene Datei unverändert.
"""

from pathlib import Path

from loguru import logger

from config.feature_flags import is_enabled
from sketcher.errors import InvalidFieldError, SketchError, SketchIOError
from sketcher.sketch import Document

from . import json_codec
from .mapper import document_from_dto, document_to_dto
from .port import PathLike, SketchDocumentPersistencePort

SKETCH_EXTENSIONS = (".sketch.json", ".pistachio.json")
DEFAULT_EXTENSION = ".sketch.json"


class JsonSketchDocumentAdapter(SketchDocumentPersistencePort):
    """Speichert Sketch-Dokumente als UTF-8 JSON (*.sketch.json / *.pistachio.json)."""

    def load_document(self, path: PathLike) -> Document:
        """
        Lädt ein Document aus einer Sketch-Datei.

        Raises:
            SketchIOError: Datei kann nicht geöffnet oder gelesen werden
            MalformedFileError: Inhalt ist kein JSON-Objekt
            UnsupportedVersionError / MissingFieldError / UnknownKindError /
            InvalidFieldError: Verletzungen des Datei-Schemas
            DuplicateIdError: zwei Entities eines Sketches teilen sich eine Id
        """
        path = Path(path)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Sketch-Datei konnte nicht gelesen werden: {path} ({e})")
            raise SketchIOError(path, "Failed to open sketch file for reading") from e

        try:
            doc = document_from_dto(json_codec.loads(text))
        except SketchError as e:
            logger.error(f"Sketch-Datei ungültig: {path} ({e})")
            raise

        logger.info(f"Sketch-Dokument geladen: '{doc.name}' ({len(doc.sketches)} Sketches) aus {path}")
        return doc

    def save_document(self, doc: Document, path: PathLike) -> Path:
        """
        Speichert ein Document. Ein Pfad ohne Endung bekommt '.sketch.json'.

        Returns:
            Der tatsächlich geschriebene Pfad.

        Raises:
            InvalidFieldError: Id außerhalb u64, NaN/Inf oder nicht als UTF-8 kodierbarer Text
            SketchIOError: Datei kann nicht geöffnet oder geschrieben werden
        """
        path = Path(path)
        if not path.suffix:
            path = path.with_name(path.name + DEFAULT_EXTENSION)

        indent = None if is_enabled("compact_json") else 2
        try:
            text = json_codec.dumps(document_to_dto(doc), indent=indent)
            try:
                data = text.encode("utf-8")
            except UnicodeEncodeError as e:
                raise InvalidFieldError("text", e.object[e.start:e.end], "UTF-8 encodable string") from e
        except SketchError as e:
            logger.error(f"Sketch-Dokument nicht kodierbar, {path} bleibt unverändert ({e})")
            raise

        try:
            with open(path, 'wb') as f:
                f.write(data)
        except OSError as e:
            logger.error(f"Sketch-Dokument konnte nicht gespeichert werden: {path} ({e})")
            raise SketchIOError(path, "Failed to open sketch file for writing") from e

        logger.info(f"Sketch-Dokument gespeichert: '{doc.name}' -> {path}")
        return path

    def can_handle(self, path: PathLike) -> bool:
        return str(path).endswith(SKETCH_EXTENSIONS)

    def supported_extensions(self) -> str:
        return ";".join(f"*{ext}" for ext in SKETCH_EXTENSIONS)
