# pylint: disable=line-too-long

""" OpenApiToTypeScript class for converting the component schemas of an OpenAPI document to TypeScript declarations """

import logging
from typing import Any, Callable, Dict, List, Optional

from torntypes.common import is_typescript_identifier, literal_union, process_template, string_literal, typescript_identifier
from torntypes.constants import V2_HEADER, V2_OPENAPI_URL

logger = logging.getLogger(__name__)

SCHEMA_REF_PREFIX = '#/components/schemas/'

# OpenAPI primitive types to TypeScript types
OPENAPI_TO_TYPESCRIPT_TYPES: Dict[str, str] = {
    'string': 'string',
    'integer': 'number',
    'number': 'number',
    'boolean': 'boolean',
    'null': 'null',
}


def group_type(ts_type: str) -> str:
    """Parenthesizes a union or intersection so it can be an operand"""
    if ' | ' in ts_type or ' & ' in ts_type:
        return f'({ts_type})'
    return ts_type


def union_of(ts_types: List[str]) -> str:
    """Joins types into a union, dropping duplicates"""
    unique: List[str] = []
    for ts_type in ts_types:
        if ts_type not in unique:
            unique.append(ts_type)
    if not unique:
        return 'never'
    if len(unique) == 1:
        return unique[0]
    return ' | '.join(group_type(t) for t in unique)


class OpenApiToTypeScript:
    """
    Converts ``components.schemas`` of an OpenAPI 3.x document to TypeScript declarations.

    Declarations are emitted without the ``export`` keyword. Object schemas with
    properties become interfaces, all other schemas become type aliases.
    Untyped ``additionalProperties`` are not rendered.
    """

    def __init__(self, source_url: str = V2_OPENAPI_URL, warn: Optional[Callable[[str], None]] = None) -> None:
        self.source_url = source_url
        self.warn = warn or logger.warning

    def type_name(self, schema_name: str) -> str:
        """ Gets the TypeScript type name of a component schema """
        return typescript_identifier(schema_name)

    def property_key(self, name: str) -> str:
        """ Renders a property name, quoting it when needed """
        return name if is_typescript_identifier(name) else string_literal(name)

    def resolve_ref_name(self, ref: str) -> str:
        """ Resolves a $ref to the name of the referenced declaration """
        if isinstance(ref, str) and ref.startswith(SCHEMA_REF_PREFIX):
            return self.type_name(ref[len(SCHEMA_REF_PREFIX):])
        self.warn(f'Unsupported reference: {ref}')
        return 'unknown'

    def is_nullable(self, schema: Dict[str, Any]) -> bool:
        type_value = schema.get('type')
        return schema.get('nullable') is True or (isinstance(type_value, list) and 'null' in type_value)

    def convert_schema_to_typescript(self, schema: Any) -> str:
        """ Converts a schema object to a TypeScript type expression """
        if schema is False:
            return 'never'
        if not isinstance(schema, dict):
            return 'unknown'
        ts_type = self.convert_non_null_schema_to_typescript(schema)
        if self.is_nullable(schema) and ts_type not in ('null', 'unknown'):
            ts_type = f'{ts_type} | null'
        return ts_type

    def convert_non_null_schema_to_typescript(self, schema: Dict[str, Any]) -> str:
        """ Converts a schema object, ignoring its nullability """
        if '$ref' in schema:
            return self.resolve_ref_name(schema['$ref'])
        if 'const' in schema:
            return string_literal(schema['const'])
        if 'enum' in schema:
            return literal_union([v for v in schema['enum'] if v is not None])
        for keyword in ('oneOf', 'anyOf'):
            if keyword in schema:
                return union_of([self.convert_schema_to_typescript(s) for s in schema[keyword]])
        if 'allOf' in schema:
            parts = [group_type(self.convert_schema_to_typescript(s)) for s in schema['allOf']]
            return ' & '.join(parts) if parts else 'unknown'

        type_value = schema.get('type')
        if isinstance(type_value, list):
            non_null = [t for t in type_value if t != 'null']
            return union_of([self.convert_non_null_schema_to_typescript({**schema, 'type': t}) for t in non_null])
        if type_value == 'array':
            items_type = self.convert_schema_to_typescript(schema.get('items', {}))
            return f'{group_type(items_type)}[]'
        if type_value == 'object' or 'properties' in schema or 'additionalProperties' in schema:
            return self.convert_object_to_typescript(schema)
        if type_value is None:
            return 'unknown'
        if type_value not in OPENAPI_TO_TYPESCRIPT_TYPES:
            self.warn(f'Unknown type: {type_value}')
            return 'unknown'
        return OPENAPI_TO_TYPESCRIPT_TYPES[type_value]

    def index_type(self, schema: Dict[str, Any]) -> Optional[str]:
        """ Gets the value type of the index signature of an object schema, if any """
        additional = schema.get('additionalProperties')
        if not isinstance(additional, dict) or not additional:
            return None
        return self.convert_schema_to_typescript(additional)

    def generate_properties(self, schema: Dict[str, Any]) -> List[Dict[str, Any]]:
        """ Generates the property list of an object schema """
        required = set(schema.get('required') or [])
        return [{
            'name': self.property_key(name),
            'type': self.convert_schema_to_typescript(prop_schema),
            'required': name in required,
        } for name, prop_schema in (schema.get('properties') or {}).items()]

    def convert_object_to_typescript(self, schema: Dict[str, Any]) -> str:
        """ Converts an object schema to an inline object type """
        members = [f"{p['name']}{'' if p['required'] else '?'}: {p['type']}" for p in self.generate_properties(schema)]
        index_type = self.index_type(schema)
        if index_type:
            members.append(f'[key: string]: {index_type}')
        if not members:
            return 'Record<string, unknown>'
        return '{ ' + '; '.join(members) + ' }'

    def generate_declaration(self, schema_name: str, schema: Any) -> str:
        """ Generates the declaration of one component schema """
        type_name = self.type_name(schema_name)
        if isinstance(schema, dict) and schema.get('properties') and not self.is_nullable(schema) \
                and not any(k in schema for k in ('$ref', 'allOf', 'oneOf', 'anyOf', 'enum', 'const')):
            return process_template(
                'openapitots/interface.ts.jinja',
                type_name=type_name,
                fields=self.generate_properties(schema),
                index_type=self.index_type(schema),
            )
        return f'type {type_name} = {self.convert_schema_to_typescript(schema)};'

    def convert_schema(self, openapi_doc: Dict[str, Any]) -> str:
        """ Converts all component schemas to declarations separated by blank lines """
        schemas = (openapi_doc.get('components') or {}).get('schemas') or {}
        logger.info('Converting %d OpenAPI component schemas', len(schemas))
        declarations = [self.generate_declaration(name, schema) for name, schema in schemas.items()]
        return '\n\n'.join(declarations) + '\n' if declarations else ''

    def convert(self, openapi_doc: Dict[str, Any]) -> str:
        """ Converts the OpenAPI document to the V2 document """
        return '\n'.join([
            V2_HEADER,
            f'// Generated from: {self.source_url}',
            '',
            self.convert_schema(openapi_doc),
        ])


def convert_openapi_to_typescript(openapi_doc: Dict[str, Any], source_url: str = V2_OPENAPI_URL,
                                  warn: Optional[Callable[[str], None]] = None) -> str:
    """Convert an OpenAPI document to TypeScript declarations."""
    return OpenApiToTypeScript(source_url, warn).convert(openapi_doc)
