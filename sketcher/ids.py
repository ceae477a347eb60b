"""
Pistachio Sketcher - Identifikatoren, Entity-Arten und Anker

Alle Ids (DocumentId, SketchId, EntityId, ConstraintId) sind opake
64-Bit-Werte, die vom Aufrufer vergeben werden. Python-seitig sind es ints.
"""

from dataclasses import dataclass
from enum import IntEnum

DocumentId = int
SketchId = int
EntityId = int
ConstraintId = int

# Wertebereich auf der Leitung (u64)
ID_MAX = 2 ** 64 - 1


class EntityKind(IntEnum):
    """Entity-Arten. Die Reihenfolge ist auch die Gruppierung beim Speichern."""
    POINT = 0
    LINE = 1
    CIRCLE = 2
    ARC = 3
    ELLIPSE = 4
    CURVE = 5

    @property
    def tag(self) -> str:
        """Tag im Datei-Envelope ("Point", "Line", ...)"""
        return self.name.capitalize()


class EntityAnchor(IntEnum):
    """Feingranulare Stelle auf einer Entity als Ziel für Constraints/Maße.

    Die Zahlenwerte sind Teil des Datei-Formats und dürfen nicht umsortiert werden.
    """
    NONE = 0

    # Punkt
    POINT = 1

    # Linie
    LINE_START = 2
    LINE_END = 3
    LINE_MID = 4
    LINE_INFINITE = 5

    # Kreis / Bogen / Ellipse
    CENTER = 6
    RADIUS_POINT = 7
    START = 8
    END = 9

    # Kurve (Spline/Polylinie)
    CURVE_POINT_0 = 10
    CURVE_POINT_1 = 11
    CURVE_TANGENT_0 = 12
    CURVE_TANGENT_1 = 13

    ANY_POINT = 14


@dataclass(frozen=True)
class EntityRef:
    """Referenz auf eine Entity plus Anker.

    Ob der Anker zur Entity-Art passt (z.B. LINE_START auf einem Kreis),
    wird nicht geprüft.
    """
    id: EntityId
    anchor: EntityAnchor = EntityAnchor.NONE

    def __repr__(self):
        return f"Ref({self.id}:{self.anchor.name})"
