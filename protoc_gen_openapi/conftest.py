#
# Descriptor fixtures shared by the plugin and generator tests.
#

import functools

import pytest

from google.api import annotations_pb2, httpbody_pb2
from google.protobuf import (
    any_pb2, descriptor_pb2, duration_pb2, empty_pb2, field_mask_pb2, struct_pb2, text_format,
    timestamp_pb2, wrappers_pb2)
from google.protobuf.compiler import plugin_pb2
from google.rpc import status_pb2

from protoc_gen_openapi.api_proto_plugin import descriptors
from protoc_gen_openapi.openapi import config

LIBRARY_PROTO = """
name: "library/v1/library.proto"
package: "library.v1"
dependency: "google/protobuf/empty.proto"
dependency: "google/protobuf/timestamp.proto"
syntax: "proto3"
message_type {
  name: "Book"
  field { name: "name" number: 1 label: LABEL_OPTIONAL type: TYPE_STRING json_name: "name" }
  field {
    name: "page_count" number: 2 label: LABEL_OPTIONAL type: TYPE_INT64 json_name: "pageCount"
  }
  field {
    name: "create_time" number: 3 label: LABEL_OPTIONAL type: TYPE_MESSAGE
    type_name: ".google.protobuf.Timestamp" json_name: "createTime"
  }
  field {
    name: "genre" number: 4 label: LABEL_OPTIONAL type: TYPE_ENUM
    type_name: ".library.v1.Genre" json_name: "genre"
  }
  field {
    name: "labels" number: 5 label: LABEL_REPEATED type: TYPE_MESSAGE
    type_name: ".library.v1.Book.LabelsEntry" json_name: "labels"
  }
  field {
    name: "author" number: 6 label: LABEL_OPTIONAL type: TYPE_MESSAGE
    type_name: ".library.v1.Author" json_name: "author"
  }
  field { name: "tags" number: 7 label: LABEL_REPEATED type: TYPE_STRING json_name: "tags" }
  nested_type {
    name: "LabelsEntry"
    field { name: "key" number: 1 label: LABEL_OPTIONAL type: TYPE_STRING json_name: "key" }
    field { name: "value" number: 2 label: LABEL_OPTIONAL type: TYPE_STRING json_name: "value" }
    options { map_entry: true }
  }
}
message_type {
  name: "Author"
  field {
    name: "display_name" number: 1 label: LABEL_OPTIONAL type: TYPE_STRING
    json_name: "displayName"
  }
  field {
    name: "mentor" number: 2 label: LABEL_OPTIONAL type: TYPE_MESSAGE
    type_name: ".library.v1.Author" json_name: "mentor"
  }
}
message_type {
  name: "ListBooksRequest"
  field { name: "name" number: 1 label: LABEL_OPTIONAL type: TYPE_STRING json_name: "name" }
  field { name: "filter" number: 2 label: LABEL_OPTIONAL type: TYPE_STRING json_name: "filter" }
}
message_type {
  name: "ListBooksResponse"
  field {
    name: "books" number: 1 label: LABEL_REPEATED type: TYPE_MESSAGE
    type_name: ".library.v1.Book" json_name: "books"
  }
  field {
    name: "next_page_token" number: 2 label: LABEL_OPTIONAL type: TYPE_STRING
    json_name: "nextPageToken"
  }
}
message_type {
  name: "GetBookRequest"
  field { name: "name" number: 1 label: LABEL_OPTIONAL type: TYPE_STRING json_name: "name" }
}
message_type {
  name: "CreateBookRequest"
  field { name: "parent" number: 1 label: LABEL_OPTIONAL type: TYPE_STRING json_name: "parent" }
  field {
    name: "book" number: 2 label: LABEL_OPTIONAL type: TYPE_MESSAGE
    type_name: ".library.v1.Book" json_name: "book"
  }
}
message_type {
  name: "DeleteBookRequest"
  field { name: "name" number: 1 label: LABEL_OPTIONAL type: TYPE_STRING json_name: "name" }
}
enum_type {
  name: "Genre"
  value { name: "GENRE_UNSPECIFIED" number: 0 }
  value { name: "FICTION" number: 1 }
  value { name: "HISTORY" number: 2 }
}
service {
  name: "LibraryService"
  method {
    name: "ListBooks"
    input_type: ".library.v1.ListBooksRequest"
    output_type: ".library.v1.ListBooksResponse"
  }
  method {
    name: "GetBook"
    input_type: ".library.v1.GetBookRequest"
    output_type: ".library.v1.Book"
  }
  method {
    name: "CreateBook"
    input_type: ".library.v1.CreateBookRequest"
    output_type: ".library.v1.Book"
  }
  method {
    name: "DeleteBook"
    input_type: ".library.v1.DeleteBookRequest"
    output_type: ".google.protobuf.Empty"
  }
}
source_code_info {
  location { path: [4, 0] span: [10, 0, 30, 1] leading_comments: " A single book.\\n" }
  location {
    path: [4, 0, 2, 1] span: [12, 2, 30] leading_comments: " Number of pages.\\n"
  }
  location {
    path: [4, 2, 2, 1] span: [40, 2, 30]
    leading_comments: " Filter expression.\\n Default: none\\n"
  }
  location { path: [5, 0, 2, 1] span: [70, 2, 14] leading_comments: " Made up stories.\\n" }
  location {
    path: [6, 0] span: [80, 0, 100, 1] leading_comments: " Manages a library of books.\\n"
  }
  location { path: [6, 0, 2, 0] span: [82, 2, 90] leading_comments: " Lists books.\\n" }
}
"""

WELL_KNOWN_DESCRIPTORS = (
    any_pb2.Any.DESCRIPTOR,
    duration_pb2.Duration.DESCRIPTOR,
    empty_pb2.Empty.DESCRIPTOR,
    field_mask_pb2.FieldMask.DESCRIPTOR,
    struct_pb2.Struct.DESCRIPTOR,
    timestamp_pb2.Timestamp.DESCRIPTOR,
    wrappers_pb2.StringValue.DESCRIPTOR,
    httpbody_pb2.HttpBody.DESCRIPTOR,
    status_pb2.Status.DESCRIPTOR,
)


def parse_file_proto(text):
    return text_format.Parse(text, descriptor_pb2.FileDescriptorProto())


def well_known_file_protos():
    protos = []
    for descriptor in WELL_KNOWN_DESCRIPTORS:
        proto = descriptor_pb2.FileDescriptorProto()
        descriptor.file.CopyToProto(proto)
        protos.append(proto)
    return protos


def find_method(file_proto, name):
    for service in file_proto.service:
        for method in service.method:
            if method.name == name:
                return method
    raise KeyError(name)


def bind(method_proto, verb, path, body=''):
    """Set the google.api.http option of a method."""
    rule = method_proto.options.Extensions[annotations_pb2.http]
    setattr(rule, verb, path)
    rule.body = body
    return rule


def add_comment(file_proto, path, comment, line=200):
    location = file_proto.source_code_info.location.add()
    location.path.extend(path)
    location.span.extend([line, 0, 1])
    location.leading_comments = comment
    return location


@pytest.fixture
def library_proto():
    """The library file, every method bound to an HTTP rule."""
    proto = parse_file_proto(LIBRARY_PROTO)
    bind(find_method(proto, 'ListBooks'), 'get', '/v1/{name=shelves/*}/books')
    bind(find_method(proto, 'GetBook'), 'get', '/v1/{name=shelves/*/books/*}')
    bind(find_method(proto, 'CreateBook'), 'post', '/v1/{parent=shelves/*}/books', 'book')
    bind(find_method(proto, 'DeleteBook'), 'delete', '/v1/{name=shelves/*/books/*}')
    return proto


@pytest.fixture
def make_registry():
    """Registry generating for the given file protos, well known files included."""

    def _make_registry(*file_protos):
        registry = descriptors.Registry([proto.name for proto in file_protos])
        return registry.add_files(well_known_file_protos() + list(file_protos))

    return _make_registry


@pytest.fixture
def library(library_proto, make_registry):
    return make_registry(library_proto)


@pytest.fixture
def file_proto_from_text():
    return parse_file_proto


@pytest.fixture
def make_config():

    def _make_config(**options):
        return config.Configuration(**options).with_defaults().validate()

    return _make_config


@pytest.fixture
def bind_http():
    return bind


@pytest.fixture
def add_leading_comment():
    return add_comment


@pytest.fixture
def make_request():
    """CodeGeneratorRequest generating for the given file protos."""

    def _make_request(*file_protos, parameter=''):
        request = plugin_pb2.CodeGeneratorRequest(parameter=parameter)
        request.file_to_generate.extend(proto.name for proto in file_protos)
        request.proto_file.extend(well_known_file_protos() + list(file_protos))
        return request

    return _make_request


def _command_main(patches, main, handler, args=("arg0", "arg1", "arg2")):
    parts = handler.split(".")
    patched = patches(parts.pop(), prefix=".".join(parts))

    with patched as (m_handler,):
        assert main(*args) == m_handler.return_value.return_value
    assert m_handler.call_args == [args, {}]
    assert m_handler.return_value.call_args == [(), {}]


@pytest.fixture
def command_main(patches):
    return functools.partial(_command_main, patches)
