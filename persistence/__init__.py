"""
Pistachio Persistence Module
Versioniertes JSON-Dateiformat für Sketch-Dokumente.
"""

from .dto import (
    SKETCH_FILE_VERSION,
    EntityRefDto, ConstraintMetaDto,
    PointDto, LineDto, CircleDto, ArcDto, EllipseDto, CurveDto, EntityDto,
    GeometricConstraintDto, DimensionalConstraintDto, ConstraintDto,
    SketchDto, DocumentDto, FileDto,
)

from .mapper import SketchDocumentMapper, document_to_dto, document_from_dto

from .port import SketchDocumentPersistencePort

from .json_adapter import JsonSketchDocumentAdapter, SKETCH_EXTENSIONS
