import pytest

from protoc_gen_openapi.api_proto_plugin import annotations
from protoc_gen_openapi.exceptions import OpenAPIGeneratorError


def test_extract_annotations():
    comment = (
        'Lists books.\n'
        '[#openapi-operation: {"summary": "List", "tags": ["a]b"]}]\n'
        '[#openapi-property: {"example": {"nested": [1, 2]}}]\n')
    assert (
        annotations.extract_annotations(comment)
        == {
            'openapi-operation': {'summary': 'List', 'tags': ['a]b']},
            'openapi-property': {'example': {'nested': [1, 2]}}
        })


def test_extract_annotations_skips_other_markers():
    comment = '[#next-free-field: 3]\n[#not-implemented-hide:]\nText'
    assert annotations.extract_annotations(comment) == {}


def test_extract_annotations_none():
    assert annotations.extract_annotations('Just text [with brackets]') == {}


@pytest.mark.parametrize(
    "comment",
    ['[#openapi-unknown: {}]',
     '[#openapi-schema: {"title": }]',
     '[#openapi-schema: ["list"]]',
     '[#openapi-schema: {"title": "x"}'])
def test_extract_annotations_invalid(comment):
    with pytest.raises(annotations.AnnotationError):
        annotations.extract_annotations(comment)


def test_annotation_error():
    assert issubclass(annotations.AnnotationError, OpenAPIGeneratorError)


def test_without_annotations():
    comment = 'Before [#openapi-schema: {"title": "T"}] after'
    assert annotations.without_annotations(comment) == 'Before  after'


def test_filter_comment():
    comment = (
        ' A book.\n'
        '(-- api-linter: core::0122=disabled\n'
        '    aip.dev/not-precedent: legacy --)\n'
        '[#openapi-schema: {"title": "Book"}]\n')
    assert annotations.filter_comment(comment) == 'A book.'


def test_valid_annotations():
    assert (
        annotations.VALID_ANNOTATIONS
        == {'openapi-document', 'openapi-service', 'openapi-operation',
            'openapi-schema', 'openapi-property'})
