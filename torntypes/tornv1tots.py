# pylint: disable=line-too-long

""" TornV1ToTypeScript class for converting the Torn API V1 schema to TypeScript declarations """

import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Set, Tuple

from torntypes.common import capitalize_first, literal_union, process_template, sanitize_type_name, string_literal
from torntypes.constants import ERROR_ENUM_NAME, ERROR_NAME_MAX_TOKENS, ERROR_NAME_STOP_WORDS, V1_BASE_URL, V1_HEADER
from torntypes.tornschema import (ErrorCode, InlineObjectNode, PrimitiveNode, SchemaNode, SectionSchema, Selection,
                                  Structure, StructureRefNode)

logger = logging.getLogger(__name__)

DiagnosticSink = Callable[[str], None]

# V1 primitive type tokens (lower-cased) to TypeScript types
PRIMITIVE_TYPE_MAP: Dict[str, str] = {
    'array of strings': 'string[]',
    'boolean': 'boolean',
    'array of integers': 'number[]',
    'array of epoch timestamp (in seconds)': 'number[]',
    'epoch timestamp (in seconds)': 'number',
    'integer': 'number',
    'number (with floating point)': 'number',
    'integer or number (with floating point)': 'number',
    'numberboolean (0 for false, 1 for true)': '0 | 1',
    '1 or 1.25': '1 | 1.25',
    '1 or 1.5': '1 | 1.5',
    '1 or 2': '1 | 2',
    'string': 'string',
    'date (yyyy-dd-mm hh:mm:ss)': 'string',
    'date (yyyy-mm-dd hh:mm:ss)': 'string',
    'integer + string': 'number | string',
    'integer + (empty) string': 'number | ""',
    'key-value map': 'Record<string, any>',
    'unknown, let us know what it looks like.': 'unknown',
    'unknown': 'unknown',
}


def map_primitive_to_typescript(token: str, warn: Optional[DiagnosticSink] = None) -> str:
    """
    Map a V1 primitive type token to a TypeScript type.

    Tokens outside the vocabulary map to ``unknown`` and report one warning
    through ``warn`` (the module logger when not given).
    """
    ts_type = PRIMITIVE_TYPE_MAP.get(token.lower())
    if ts_type is None:
        (warn or logger.warning)(f'Unknown type: {token}')
        return 'unknown'
    return ts_type


def is_dynamic_key(field_name: str) -> bool:
    """Checks if a field name denotes arbitrary string keys, e.g. ``<item id>``"""
    return len(field_name) >= 2 and field_name.startswith('<') and field_name.endswith('>')


def render_field_key(field_name: str) -> str:
    """Renders a field name as a property key or index signature"""
    if is_dynamic_key(field_name):
        param_name = re.sub(r'[\s\-]+', '_', field_name[1:-1])
        return f'[{param_name}: string]'
    if re.match(r'^[0-9]', field_name) or re.search(r'[\s\-]', field_name):
        return string_literal(field_name)
    return field_name


class StructureRegistry:
    """
    Tracks the structure type names already emitted within one section.

    A registry lives exactly as long as the generation of its section, so two
    sections can reuse a structure name for different shapes.
    """

    def __init__(self) -> None:
        self._seen: Set[str] = set()
        self._order: List[str] = []

    def register(self, type_name: str) -> bool:
        """Registers a type name, returns False if it was already registered."""
        if type_name in self._seen:
            return False
        self._seen.add(type_name)
        self._order.append(type_name)
        return True

    def __contains__(self, type_name: str) -> bool:
        return type_name in self._seen

    def __len__(self) -> int:
        return len(self._order)

    @property
    def names(self) -> List[str]:
        """The registered names in first-encounter order."""
        return list(self._order)


@dataclass
class ConversionContext:
    """Everything a type conversion within one selection needs to know."""
    section_prefix: str
    structures: Dict[str, Structure]
    registry: StructureRegistry

    @classmethod
    def for_selection(cls, section_prefix: str, selection: Selection, registry: StructureRegistry) -> 'ConversionContext':
        structures: Dict[str, Structure] = {}
        for structure in selection.structures:
            structures.setdefault(structure.id, structure)
        return cls(section_prefix, structures, registry)


class TornV1ToTypeScript:
    """ Converts the Torn API V1 schema to TypeScript declarations """

    def __init__(self, source_url: str = V1_BASE_URL, warn: Optional[DiagnosticSink] = None) -> None:
        self.source_url = source_url
        self.warn = warn

    def map_primitive_to_typescript(self, token: str) -> str:
        """ Maps V1 primitive type tokens to TypeScript types """
        return map_primitive_to_typescript(token, self.warn)

    def structure_type_name(self, section_prefix: str, structure: Structure) -> str:
        """ Gets the TypeScript type name of a structure """
        return f'{section_prefix}V1{sanitize_type_name(structure.name)}'

    def response_type_name(self, section_prefix: str, selection: Selection) -> str:
        """ Gets the TypeScript type name of a selection's response """
        return f'{section_prefix}V1{sanitize_type_name(selection.name)}Response'

    def convert_node_to_typescript(self, node: SchemaNode, context: ConversionContext) -> str:
        """ Converts a schema node to a TypeScript type expression """
        if isinstance(node, PrimitiveNode):
            ts_type = self.map_primitive_to_typescript(node.token)
        elif isinstance(node, StructureRefNode):
            ts_type = self.convert_structure_ref_to_typescript(node, context)
        elif isinstance(node, InlineObjectNode):
            nested_fields = [
                f'{render_field_key(name)}: {self.convert_node_to_typescript(child, context)}'
                for name, child in node.fields.items()
            ]
            ts_type = '{ ' + '; '.join(nested_fields) + ' }'
        else:
            ts_type = 'unknown'

        # nullable wraps first so nullable arrays become arrays of nullable items
        if node.nullable:
            ts_type = f'({ts_type}) | null'
        if node.array:
            ts_type = f'({ts_type})[]'
        return ts_type

    def convert_structure_ref_to_typescript(self, node: StructureRefNode, context: ConversionContext) -> str:
        """ Resolves a structure reference to an inline literal union or the structure's type name """
        structure = context.structures.get(node.structure_id)
        if structure is None:
            logger.debug('Unresolved structure reference %s in section %s', node.structure_id, context.section_prefix)
            return 'unknown'
        if node.kind == 'enum' and structure.values is not None:
            return literal_union(structure.values)
        return self.structure_type_name(context.section_prefix, structure)

    def generate_fields(self, schema: Dict[str, SchemaNode], context: ConversionContext) -> List[str]:
        """ Generates the field declarations of an interface """
        dynamic_fields: List[Tuple[str, SchemaNode]] = []
        static_fields: List[Tuple[str, SchemaNode]] = []
        for field_name, field_node in schema.items():
            if is_dynamic_key(field_name):
                dynamic_fields.append((field_name, field_node))
            else:
                static_fields.append((field_name, field_node))

        if len(dynamic_fields) > 1:
            # Static fields are dropped along with the individual key names
            if static_fields:
                logger.debug('Collapsing %d dynamic keys in %s, dropping static fields %s',
                             len(dynamic_fields), context.section_prefix, [name for name, _ in static_fields])
            value_types: List[str] = []
            for _, field_node in dynamic_fields:
                ts_type = self.convert_node_to_typescript(field_node, context)
                if ts_type not in value_types:
                    value_types.append(ts_type)
            return [f'[key: string]: {" | ".join(value_types)};']

        return [
            f'{render_field_key(field_name)}: {self.convert_node_to_typescript(field_node, context)};'
            for field_name, field_node in static_fields + dynamic_fields
        ]

    def generate_interface(self, type_name: str, schema: Dict[str, SchemaNode], context: ConversionContext) -> str:
        """ Generates an interface declaration """
        return process_template(
            'tornv1tots/interface.ts.jinja',
            type_name=type_name,
            fields=self.generate_fields(schema, context),
        )

    def generate_structure(self, structure: Structure, context: ConversionContext) -> Optional[str]:
        """ Generates the declaration of a structure unless the section already has it """
        type_name = self.structure_type_name(context.section_prefix, structure)
        if not context.registry.register(type_name):
            return None
        if structure.is_literal_union:
            return f'export type {type_name} = {literal_union(structure.values)};'
        if structure.is_object:
            return self.generate_interface(type_name, structure.schema, context)
        logger.debug('Structure %s has neither values nor schema', structure.id)
        return f'export type {type_name} = unknown;'

    def generate_section_types(self, section: str, section_schema: SectionSchema) -> str:
        """ Generates the declarations of one API section """
        section_prefix = capitalize_first(section)
        registry = StructureRegistry()
        types: List[str] = []
        for selection in section_schema.selections:
            context = ConversionContext.for_selection(section_prefix, selection, registry)
            for structure in selection.structures:
                declaration = self.generate_structure(structure, context)
                if declaration is not None:
                    types.append(declaration)
                    types.append('')
            types.append(self.generate_interface(self.response_type_name(section_prefix, selection), selection.schema, context))
            types.append('')
        logger.debug('Section %s: %d selections, %d structures', section, len(section_schema.selections), len(registry))
        return '\n'.join(types)

    def error_enum_member_name(self, message: str) -> str:
        """ Derives an enum member name from an error message """
        words = re.sub(r'[^\w\s]', '', message.upper(), flags=re.ASCII).split()
        words = [word for word in words if word not in ERROR_NAME_STOP_WORDS]
        return '_'.join(words[:ERROR_NAME_MAX_TOKENS])

    def generate_error_enum(self, errors: List[ErrorCode]) -> str:
        """ Generates the error code enum """
        return process_template(
            'tornv1tots/enum.ts.jinja',
            enum_name=ERROR_ENUM_NAME,
            members=[{'name': self.error_enum_member_name(e.message), 'code': e.code} for e in errors],
        )

    def convert(self, sections: List[str], section_types: List[str], errors: List[ErrorCode]) -> str:
        """ Assembles the V1 document from already generated section declarations """
        return process_template(
            'tornv1tots/document.ts.jinja',
            header=V1_HEADER,
            source_url=self.source_url.rstrip('/') + '/',
            sections=[{'name': name, 'types': types} for name, types in zip(sections, section_types)],
            error_enum=self.generate_error_enum(errors),
        )

    def convert_schema(self, sections: List[str], section_schemas: List[SectionSchema], errors: List[ErrorCode]) -> str:
        """ Converts the full V1 schema to TypeScript declarations """
        section_types = [self.generate_section_types(section, schema) for section, schema in zip(sections, section_schemas)]
        return self.convert(sections, section_types, errors)


def convert_torn_v1_schema_to_typescript(sections: List[str], section_schemas: List[SectionSchema], errors: List[ErrorCode],
                                         source_url: str = V1_BASE_URL, warn: Optional[DiagnosticSink] = None) -> str:
    """Convert an already fetched Torn API V1 schema to TypeScript declarations."""
    converter = TornV1ToTypeScript(source_url, warn)
    return converter.convert_schema(sections, section_schemas, errors)
