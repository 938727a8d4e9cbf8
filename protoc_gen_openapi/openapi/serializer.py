"""Document rendering and base document loading."""

import json
import pathlib

import yaml

from protoc_gen_openapi.exceptions import BaseDocumentError
from protoc_gen_openapi.openapi import model

HEADER = '# Generated with protoc-gen-openapi\n'


def to_yaml(document):
    return HEADER + yaml.safe_dump(
        document.as_dict(), sort_keys=False, default_flow_style=False, allow_unicode=True)


def to_json(document):
    return json.dumps(document.as_dict(), indent=2, ensure_ascii=False) + '\n'


def render(document, output_format):
    """Render a finished document in `yaml` or `json`."""
    if output_format == 'json':
        return to_json(document)
    return to_yaml(document)


def load_base_document(path):
    """Load a YAML or JSON base document.

    Raises:
        BaseDocumentError: if the file can not be read or parsed, or does not
            hold an OpenAPI document mapping.
    """
    try:
        data = yaml.safe_load(pathlib.Path(path).read_text())
    except (OSError, yaml.YAMLError) as e:
        raise BaseDocumentError('Unable to load base document %s: %s' % (path, e))
    if not isinstance(data, dict):
        raise BaseDocumentError('Base document %s is not a mapping' % path)
    try:
        return model.Document.from_dict(data)
    except model.ModelError as e:
        raise BaseDocumentError('Invalid base document %s: %s' % (path, e))
