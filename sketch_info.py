#!/usr/bin/env python3
"""
Pistachio - Sketch-Datei Info

Lädt eine *.sketch.json / *.pistachio.json Datei, gibt eine Übersicht über
Dokument, Sketches, Entities und Constraints aus und kann das Dokument
optional neu speichern (normalisiert: Entities nach Art gruppiert).

Verwendung:
    python sketch_info.py drawing.sketch.json
    python sketch_info.py drawing.sketch.json --resave normalized.sketch.json
"""

import argparse
import sys
from typing import List, Optional

from loguru import logger

from config.version import get_version_info
from persistence import JsonSketchDocumentAdapter
from sketcher import Document, EntityKind, SketchError


def summarize_document(doc: Document) -> List[str]:
    """Erzeugt die Übersichtszeilen für ein Dokument."""
    lines = [f"Document {doc.id}: '{doc.name}' ({len(doc.sketches)} Sketches)"]
    for sketch in doc.sketches:
        hidden = "" if sketch.visible else " [hidden]"
        lines.append(f"  Sketch {sketch.id}: '{sketch.name}'{hidden}")
        counts = [
            f"{kind.tag}={sketch.entities.count(kind)}"
            for kind in EntityKind
            if sketch.entities.count(kind)
        ]
        lines.append(f"    Entities ({sketch.entity_count()}): {', '.join(counts) or '-'}")
        lines.append(f"    Constraints: {sketch.constraint_count()}")
        for c in sketch.constraints:
            lines.append(f"      #{c.meta.id} {c!r}")
    return lines


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Show a summary of a Pistachio sketch file"
    )
    parser.add_argument("file", help="Sketch file (*.sketch.json / *.pistachio.json)")
    parser.add_argument(
        "--resave",
        metavar="OUT",
        help="Write the loaded document back to OUT",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    args = parser.parse_args(argv)

    logger.remove()
    logger.add(sys.stderr, format="<level>{level: <8}</level> | {message}",
               level="DEBUG" if args.debug else "WARNING")

    info = get_version_info()
    print(f"{info['app_name']} {info['version_full']} (sketch file v{info['sketch_file_version']})")

    adapter = JsonSketchDocumentAdapter()
    if not adapter.can_handle(args.file):
        logger.warning(f"Unbekannte Dateiendung, erwartet {adapter.supported_extensions()}: {args.file}")

    try:
        doc = adapter.load_document(args.file)
    except SketchError as e:
        print(f"FEHLER: {e}")
        return 1

    for line in summarize_document(doc):
        print(line)

    if args.resave:
        try:
            written = adapter.save_document(doc, args.resave)
        except SketchError as e:
            print(f"FEHLER: {e}")
            return 1
        print(f"Gespeichert: {written}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
