"""Data model for the Torn API V1 schema dialect.

The V1 schema source describes every API section as a list of selections. Each
selection carries its response shape and the pool of named structures that
shape may reference. Field shapes are untyped nested mappings in the source;
this module parses them once into a tagged variant so the generator never has
to re-inspect ad hoc markers:

* ``{"type": "integer"}`` becomes ``PrimitiveNode``
* ``{"structure": {"id": "...", "type": "enum"}}`` becomes ``StructureRefNode``
* a bare mapping of field name to node becomes ``InlineObjectNode``
* anything else becomes ``UnknownNode``

``nullable: true`` and ``array: true`` decorate any node and are carried as
flags on the variant.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


MODIFIER_KEYS = ('nullable', 'array')


@dataclass(kw_only=True)
class SchemaNode:
    """Base of the schema node variants."""
    nullable: bool = False
    array: bool = False


@dataclass
class PrimitiveNode(SchemaNode):
    """A field described by a free-text primitive type token."""
    token: str


@dataclass
class StructureRefNode(SchemaNode):
    """A field referencing a named structure by id."""
    structure_id: str
    kind: Optional[str] = None  # "enum" or "object"


@dataclass
class InlineObjectNode(SchemaNode):
    """A nested object declared inline as a field mapping."""
    fields: Dict[str, SchemaNode] = field(default_factory=dict)


@dataclass
class UnknownNode(SchemaNode):
    """A node the dialect gives no meaning to."""


@dataclass
class Structure:
    """A named, reusable shape within a section."""
    id: str
    name: str
    type: Optional[str] = None
    values: Optional[List[str]] = None
    schema: Optional[Dict[str, SchemaNode]] = None

    @property
    def is_literal_union(self) -> bool:
        return self.values is not None

    @property
    def is_object(self) -> bool:
        return self.values is None and self.schema is not None


@dataclass
class Selection:
    """One operation/response definition within a section."""
    name: str
    description: str
    access: str
    schema: Dict[str, SchemaNode]
    structures: List[Structure] = field(default_factory=list)


@dataclass
class SectionSchema:
    """The schema document of one API section."""
    selections: List[Selection] = field(default_factory=list)


@dataclass
class ErrorCode:
    """An entry of the API error table."""
    code: int
    message: str
    description: str = ''


def parse_schema_node(raw: Any) -> SchemaNode:
    """
    Parse a raw schema node into its tagged variant.

    The interpretation precedence is: a string ``type`` marker, then a truthy
    ``structure`` marker, then a bare mapping without either marker. Anything
    else is unknown.

    Args:
        raw: The JSON value of the node.

    Returns:
        SchemaNode: The parsed node.
    """
    if not isinstance(raw, dict):
        return UnknownNode()
    modifiers = {
        'nullable': raw.get('nullable') is True,
        'array': raw.get('array') is True,
    }
    if isinstance(raw.get('type'), str):
        return PrimitiveNode(raw['type'], **modifiers)
    structure = raw.get('structure')
    if structure:
        if isinstance(structure, dict):
            return StructureRefNode(str(structure.get('id')), structure.get('type'), **modifiers)
        return UnknownNode(**modifiers)
    if not raw.get('type'):
        fields = {
            name: parse_schema_node(value)
            for name, value in raw.items()
            if not (name in MODIFIER_KEYS and isinstance(value, bool))
        }
        return InlineObjectNode(fields, **modifiers)
    return UnknownNode(**modifiers)


def parse_field_map(raw: Any) -> Dict[str, SchemaNode]:
    """Parse a mapping of field name to raw node, keeping entry order."""
    if not isinstance(raw, dict):
        return {}
    return {name: parse_schema_node(value) for name, value in raw.items()}


def parse_structure(raw: Dict[str, Any]) -> Structure:
    values = raw.get('values')
    schema = raw.get('schema')
    return Structure(
        id=str(raw.get('id')),
        name=raw.get('name', ''),
        type=raw.get('type'),
        values=[str(v) for v in values] if isinstance(values, list) else None,
        schema=parse_field_map(schema) if isinstance(schema, dict) else None,
    )


def parse_selection(raw: Dict[str, Any]) -> Selection:
    return Selection(
        name=raw.get('name', ''),
        description=raw.get('description', ''),
        access=raw.get('access', ''),
        schema=parse_field_map(raw.get('schema')),
        structures=[parse_structure(s) for s in raw.get('structures') or []],
    )


def parse_section_schema(raw: Dict[str, Any]) -> SectionSchema:
    """Parse a section schema document ``{"selections": [...]}``."""
    return SectionSchema([parse_selection(s) for s in raw.get('selections') or []])


def parse_error_codes(raw: List[Dict[str, Any]]) -> List[ErrorCode]:
    """Parse the error table entries, keeping their order."""
    return [
        ErrorCode(code=int(entry['code']), message=entry.get('message', ''), description=entry.get('description', ''))
        for entry in raw
    ]
