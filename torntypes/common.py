"""
Common utility functions for torntypes.
"""

# pylint: disable=line-too-long

import json
import os
import re
import tempfile
from typing import Any

import jinja2


def sanitize_type_name(name: str) -> str:
    """
    Convert a human-readable name into a PascalCase TypeScript identifier.

    Commas and ampersands are removed, the rest is split on runs of whitespace,
    hyphens and underscores, and each token is capitalized with the remainder
    lower-cased. Empty tokens are dropped.

    Args:
        name (str): The display name, e.g. "Drugs & Weapons".

    Returns:
        str: The identifier, e.g. "DrugsWeapons".
    """
    stripped = re.sub(r'[,&]', '', name)
    words = [word for word in re.split(r'[\s\-_]+', stripped) if word]
    return ''.join(word[0].upper() + word[1:].lower() for word in words)


def capitalize_first(name: str) -> str:
    """Uppercase the first character and leave the rest untouched."""
    return name[:1].upper() + name[1:]


def typescript_identifier(name: str) -> str:
    """Convert an arbitrary name into a TypeScript identifier."""
    val = re.sub(r'[^a-zA-Z0-9_$]', '_', name)
    if not val or re.match(r'^[0-9]', val):
        val = '_' + val
    return val


def is_typescript_identifier(name: str) -> bool:
    """Check whether a property name can be written without quotes."""
    return re.match(r'^[A-Za-z_$][A-Za-z0-9_$]*$', name) is not None


def string_literal(value: Any) -> str:
    """Render a value as a TypeScript literal type."""
    return json.dumps(value, ensure_ascii=False)


def literal_union(values: list) -> str:
    """Render a list of values as a union of literal types."""
    if not values:
        return 'never'
    return ' | '.join(string_literal(v) for v in values)


def process_template(file_path: str, **kvargs) -> str:
    """
    Process a file as a Jinja2 template with the given object as input.

    Args:
        file_path (str): The template path relative to the package directory.
        **kvargs: The values to render the template with.

    Returns:
        str: The processed template as a string.
    """
    file_dir = os.path.dirname(__file__)
    template_loader = jinja2.FileSystemLoader(searchpath=file_dir)
    template_env = jinja2.Environment(loader=template_loader)
    template_env.filters['pascal'] = sanitize_type_name

    template = template_env.get_template(file_path)
    return template.render(**kvargs)


def write_text_atomic(output: str, content: str) -> None:
    """
    Write text to a file so that readers never observe a partial file.

    The content goes to a temporary file in the target directory which then
    replaces the output in one step.

    Args:
        output (str): The output file path.
        content (str): The text to write.
    """
    directory = os.path.dirname(os.path.abspath(output))
    os.makedirs(directory, exist_ok=True)
    with tempfile.NamedTemporaryFile('w', encoding='utf-8', dir=directory, suffix='.tmp', delete=False) as f:
        f.write(content)
        temp_path = f.name
    try:
        os.replace(temp_path, output)
    except OSError:
        os.remove(temp_path)
        raise
