"""
Pistachio Sketcher - Sketch und Document
Aggregate aus EntityStore + Constraint-Liste bzw. Liste von Sketches
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .constraints import Constraint
from .entity_store import EntityStore
from .ids import DocumentId, SketchId


@dataclass
class Sketch:
    """Benannter 2D-Sketch"""
    id: SketchId
    name: str = ""
    visible: bool = True
    entities: EntityStore = field(default_factory=EntityStore)
    constraints: List[Constraint] = field(default_factory=list)

    def add_constraint(self, constraint: Constraint) -> Constraint:
        """Hängt einen Constraint an (keine Prüfung der Referenzen)."""
        self.constraints.append(constraint)
        return constraint

    def entity_count(self) -> int:
        return len(self.entities)

    def constraint_count(self) -> int:
        return len(self.constraints)

    def __repr__(self):
        return (f"Sketch#{self.id}('{self.name}', {self.entity_count()} entities, "
                f"{self.constraint_count()} constraints)")


@dataclass
class Document:
    """Dokument mit geordneter Sketch-Liste"""
    id: DocumentId
    name: str = ""
    sketches: List[Sketch] = field(default_factory=list)

    def add_sketch(self, sketch: Sketch) -> Sketch:
        self.sketches.append(sketch)
        return sketch

    def find_sketch(self, sketch_id: SketchId) -> Optional[Sketch]:
        for sketch in self.sketches:
            if sketch.id == sketch_id:
                return sketch
        return None

    def __repr__(self):
        return f"Document#{self.id}('{self.name}', {len(self.sketches)} sketches)"
