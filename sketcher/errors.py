"""
Pistachio Sketcher - Fehler-Taxonomie

Alle Fehler werden synchron geworfen und sind für die auslösende Operation
endgültig. Es gibt keine internen Retries; die Anwendung entscheidet, ob sie
eine Meldung zeigt, abbricht oder den Benutzer fragt.
"""

from typing import Any, Optional


class SketchError(Exception):
    """Basis aller Fehler des Sketch-Kerns."""
    pass


# === EntityStore ===

class DuplicateIdError(SketchError):
    """EntityId ist im EntityStore bereits vergeben."""

    def __init__(self, entity_id: int):
        self.entity_id = entity_id
        super().__init__(f"Duplicate EntityId {entity_id} in EntityStore")


class EntityNotFoundError(SketchError, LookupError):
    """EntityId existiert nicht im EntityStore."""

    def __init__(self, entity_id: int):
        self.entity_id = entity_id
        super().__init__(f"EntityId {entity_id} not found")


class IndexOutOfRangeError(SketchError, IndexError):
    """Dichter Index außerhalb des Arrays einer Entity-Art."""

    def __init__(self, kind: Any, index: int, size: int):
        self.kind = kind
        self.index = index
        self.size = size
        super().__init__(f"{kind.name} index {index} out of range (size {size})")


# === Datei-Format ===

class SketchFormatError(SketchError):
    """Basis für Fehler beim Dekodieren einer Sketch-Datei."""
    pass


class UnsupportedVersionError(SketchFormatError):
    """fileVersion weicht von der aktuellen Schema-Version ab (keine Migration)."""

    def __init__(self, found: Any, expected: int):
        self.found = found
        self.expected = expected
        super().__init__(f"Unsupported sketch fileVersion: {found} (expected {expected})")


class MissingFieldError(SketchFormatError):
    """Pflichtfeld fehlt im JSON-Objekt."""

    def __init__(self, field: str, context: Optional[str] = None):
        self.field = field
        self.context = context
        where = f" in {context}" if context else ""
        super().__init__(f"Missing field: {field}{where}")


class InvalidFieldError(SketchFormatError):
    """Feld ist vorhanden, hat aber einen unbrauchbaren Typ oder Wert."""

    def __init__(self, field: str, value: Any, expected: str):
        self.field = field
        self.value = value
        self.expected = expected
        super().__init__(f"Invalid field '{field}': expected {expected}, got {value!r}")


class UnknownKindError(SketchFormatError):
    """Unbekannter Tag einer Tagged-Union (Entity, Constraint, Enum-Wert)."""

    def __init__(self, category: str, kind: Any):
        self.category = category
        self.kind = kind
        super().__init__(f"Unknown {category} kind: {kind!r}")


class MalformedFileError(SketchFormatError):
    """Dateiinhalt ist kein gültiges JSON-Objekt."""
    pass


# === I/O ===

class SketchIOError(SketchError):
    """Datei konnte nicht geöffnet, gelesen oder geschrieben werden."""

    def __init__(self, path: Any, message: str):
        self.path = path
        super().__init__(f"{message}: {path}")
