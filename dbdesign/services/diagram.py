"""Convert a design recommendation into Mermaid ``erDiagram`` text."""
from __future__ import annotations

from typing import Any, Mapping, Union

from ..models.schemas import DesignRecommendation

ER_HEADER = "erDiagram"
ENTITY_INDENT = "    "
FIELD_INDENT = "        "
# Every relationship is drawn the same way; the backend does not supply cardinality.
RELATIONSHIP_CARDINALITY = "}o--||"
RELATIONSHIP_LABEL = "relates"


def render_er_diagram(design: Union[DesignRecommendation, Mapping[str, Any]]) -> str:
    """Render ``design`` as a Mermaid entity-relationship diagram.

    Entity blocks come first in table order, followed by every relationship
    line in table order then relationship order. Column nullability is not
    marked. Table and column names are emitted verbatim, so names containing
    Mermaid syntax (braces, pipes, newlines) will produce a broken diagram.

    Plain mappings are validated into ``DesignRecommendation`` first and raise
    ``pydantic.ValidationError`` when malformed.
    """

    if not isinstance(design, DesignRecommendation):
        design = DesignRecommendation.model_validate(design)

    lines = [ER_HEADER]

    for table in design.tables:
        lines.append(f"{ENTITY_INDENT}{table.name} {{")
        for column in table.columns:
            lines.append(f"{FIELD_INDENT}{column.type} {column.name}")
        lines.append(f"{ENTITY_INDENT}}}")

    for table in design.tables:
        for relationship in table.relationships or ():
            lines.append(
                f"{ENTITY_INDENT}{relationship.target_table} {RELATIONSHIP_CARDINALITY} "
                f"{table.name} : {RELATIONSHIP_LABEL}"
            )

    return "".join(f"{line}\n" for line in lines)
