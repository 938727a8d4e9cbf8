"""OpenAPI comment annotations."""

import json
import re

from protoc_gen_openapi.exceptions import OpenAPIGeneratorError

# Start of a key-value annotation, the value is a JSON object which is parsed
# separately as it may itself contain brackets.
ANNOTATION_START_REGEX = re.compile(r'\[#([\w-]+?):\s*')

# Protobuf API linter directives, e.g. (-- api-linter: core::0131=disabled --).
LINTER_RULE_REGEX = re.compile(r'\(--.*?--\)', re.DOTALL)

# File level, merged into the generated document.
DOCUMENT_ANNOTATION = 'openapi-document'

# Service level, appended to every operation of the service.
SERVICE_ANNOTATION = 'openapi-service'

# Method level, merged into the generated operation.
OPERATION_ANNOTATION = 'openapi-operation'

# Message level, merged into the component schema.
SCHEMA_ANNOTATION = 'openapi-schema'

# Field level, merged into the property schema.
PROPERTY_ANNOTATION = 'openapi-property'

ANNOTATION_PREFIX = 'openapi-'

VALID_ANNOTATIONS = set([
    DOCUMENT_ANNOTATION,
    SERVICE_ANNOTATION,
    OPERATION_ANNOTATION,
    SCHEMA_ANNOTATION,
    PROPERTY_ANNOTATION,
])

_decoder = json.JSONDecoder()


class AnnotationError(OpenAPIGeneratorError):
    """Base error class for the annotations module."""


def _scan(s):
    """Yield (annotation, value, start, end) for each annotation in s."""
    pos = 0
    while match := ANNOTATION_START_REGEX.search(s, pos):
        annotation = match.group(1)
        if not annotation.startswith(ANNOTATION_PREFIX):
            pos = match.end()
            continue
        if annotation not in VALID_ANNOTATIONS:
            raise AnnotationError('Unknown annotation: %s' % annotation)
        try:
            value, end = _decoder.raw_decode(s, match.end())
        except json.JSONDecodeError as e:
            raise AnnotationError('Invalid JSON in [#%s:] annotation: %s' % (annotation, e))
        if not isinstance(value, dict):
            raise AnnotationError('[#%s:] annotation must hold a JSON object' % annotation)
        end = s.find(']', end)
        if end == -1:
            raise AnnotationError('Unterminated [#%s:] annotation' % annotation)
        yield annotation, value, match.start(), end + 1
        pos = end + 1


def extract_annotations(s):
    """Extract annotations map from a given comment string.

    Args:
        s: string that may contains annotations.

    Returns:
        Annotation map, from annotation name to the decoded JSON object.
    """
    annotations = {}
    for annotation, value, _start, _end in _scan(s):
        annotations[annotation] = value
    return annotations


def without_annotations(s):
    spans = [(start, end) for _annotation, _value, start, end in _scan(s)]
    for start, end in reversed(spans):
        s = s[:start] + s[end:]
    return s


def filter_comment(s):
    """Comment text suitable for a description.

    Annotations and linter directives are removed and whitespace trimmed.
    """
    return LINTER_RULE_REGEX.sub('', without_annotations(s)).strip()
