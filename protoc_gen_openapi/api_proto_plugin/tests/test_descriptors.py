import pytest

from google.api import annotations_pb2, client_pb2, field_behavior_pb2
from google.protobuf import timestamp_pb2
from google.protobuf.compiler import plugin_pb2
from google.protobuf.descriptor_pb2 import FieldDescriptorProto

from protoc_gen_openapi.api_proto_plugin import descriptors


@pytest.mark.parametrize(
    "name, expected",
    [("name", "name"),
     ("page_count", "pageCount"),
     ("create_time_utc", "createTimeUtc"),
     ("trailing_", "trailing")])
def test_json_name(name, expected):
    assert descriptors.json_name(name) == expected


def test_strip_type_name():
    assert descriptors.strip_type_name('.library.v1.Book') == 'library.v1.Book'
    assert descriptors.strip_type_name('library.v1.Book') == 'library.v1.Book'


def test_registry(library):
    assert [f.name for f in library.generated_files] == ['library/v1/library.proto']
    assert 'google/protobuf/timestamp.proto' in [f.name for f in library.files]
    assert library.message('.library.v1.Book').full_name == 'library.v1.Book'
    assert library.message('library.v1.Book.LabelsEntry').parent.name == 'Book'
    assert library.message('.google.protobuf.Timestamp').package == 'google.protobuf'
    assert library.message('.library.v1.Missing') is None
    assert [v.name for v in library.enum('.library.v1.Genre').values] == [
        'GENRE_UNSPECIFIED', 'FICTION', 'HISTORY']


def test_registry_from_request(library_proto):
    request = plugin_pb2.CodeGeneratorRequest()
    request.file_to_generate.append(library_proto.name)
    request.proto_file.add().CopyFrom(library_proto)
    registry = descriptors.Registry.from_request(request)
    assert [f.name for f in registry.generated_files] == [library_proto.name]
    assert registry.message('.library.v1.Author').name == 'Author'


def test_file(library):
    file = library.generated_files[0]
    assert file.package == 'library.v1'
    assert [m.name for m in file.messages] == [
        'Book', 'Author', 'ListBooksRequest', 'ListBooksResponse', 'GetBookRequest',
        'CreateBookRequest', 'DeleteBookRequest']
    assert [e.full_name for e in file.enums] == ['library.v1.Genre']
    assert [s.full_name for s in file.services] == ['library.v1.LibraryService']
    assert file.annotation('openapi-document') is None


def test_message(library):
    book = library.message('library.v1.Book')
    assert book.description == 'A single book.'
    assert not book.is_map_entry
    assert book.parent is None
    assert [m.name for m in book.messages] == ['LabelsEntry']
    assert book.messages[0].is_map_entry
    assert book.field('page_count') is book.field('pageCount')
    assert book.field('missing') is None
    assert book.annotation('openapi-schema') is None


def test_message_from_descriptor():
    message = descriptors.Message.from_descriptor(timestamp_pb2.Timestamp.DESCRIPTOR)
    assert message.full_name == 'google.protobuf.Timestamp'
    assert message.package == 'google.protobuf'
    assert message.name == 'Timestamp'
    assert message.parent is None
    assert message.fields == []


def test_field(library):
    book = library.message('library.v1.Book')
    page_count = book.field('page_count')
    assert page_count.full_name == 'library.v1.Book.page_count'
    assert page_count.json_name == 'pageCount'
    assert page_count.kind == FieldDescriptorProto.TYPE_INT64
    assert page_count.kind_name == 'int64'
    assert page_count.description == 'Number of pages.'
    assert not page_count.is_message
    assert page_count.message_type is None
    assert page_count.enum_type is None
    assert not page_count.deprecated
    assert page_count.behaviors == []

    labels = book.field('labels')
    assert labels.is_repeated
    assert labels.is_map
    assert not labels.is_list
    assert labels.map_value.name == 'value'

    tags = book.field('tags')
    assert tags.is_list
    assert not tags.is_map

    assert book.field('author').message_type is library.message('library.v1.Author')
    assert book.field('genre').enum_type is library.enum('library.v1.Genre')


def test_field_json_name_fallback(library_proto, make_registry):
    library_proto.message_type[0].field[1].ClearField('json_name')
    registry = make_registry(library_proto)
    assert registry.message('library.v1.Book').field('page_count').json_name == 'pageCount'


def test_field_options(library_proto, make_registry):
    field = library_proto.message_type[0].field[0]
    field.options.deprecated = True
    field.options.Extensions[field_behavior_pb2.field_behavior].extend(
        [field_behavior_pb2.REQUIRED, field_behavior_pb2.OUTPUT_ONLY])
    name = make_registry(library_proto).message('library.v1.Book').field('name')
    assert name.deprecated
    assert name.behaviors == [field_behavior_pb2.REQUIRED, field_behavior_pb2.OUTPUT_ONLY]


def test_enum(library):
    genre = library.enum('library.v1.Genre')
    assert genre.name == 'Genre'
    assert [(v.number, v.description) for v in genre.values] == [
        (0, ''), (1, 'Made up stories.'), (2, '')]


def test_service_and_methods(library):
    service = library.generated_files[0].services[0]
    assert service.name == 'LibraryService'
    assert service.description == 'Manages a library of books.'
    assert service.default_host == ''
    assert [m.name for m in service.methods] == ['ListBooks', 'GetBook', 'CreateBook', 'DeleteBook']

    list_books = service.methods[0]
    assert list_books.service is service
    assert list_books.description == 'Lists books.'
    assert list_books.input is library.message('library.v1.ListBooksRequest')
    assert list_books.output is library.message('library.v1.ListBooksResponse')
    assert [rule.get for rule in list_books.http_rules] == ['/v1/{name=shelves/*}/books']
    assert service.methods[3].output.full_name == 'google.protobuf.Empty'


def test_service_default_host(library_proto, make_registry):
    library_proto.service[0].options.Extensions[client_pb2.default_host] = 'library.example.com'
    service = make_registry(library_proto).generated_files[0].services[0]
    assert service.default_host == 'library.example.com'


def test_method_additional_bindings(library_proto, make_registry):
    method = library_proto.service[0].method[1]
    binding = method.options.Extensions[annotations_pb2.http].additional_bindings.add()
    binding.get = '/v1/books/{name}'
    rules = make_registry(library_proto).generated_files[0].services[0].methods[1].http_rules
    assert [rule.get for rule in rules] == ['/v1/{name=shelves/*/books/*}', '/v1/books/{name}']


def test_method_without_http_rule(library_proto, make_registry):
    library_proto.service[0].method[0].options.ClearExtension(annotations_pb2.http)
    service = make_registry(library_proto).generated_files[0].services[0]
    assert service.methods[0].http_rules == []
