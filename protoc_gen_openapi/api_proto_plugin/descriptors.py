"""Resolved views over the FileDescriptorProtos of a plugin request.

The protoc request carries every file needed to resolve the files being
generated, each as a FileDescriptorProto. `Registry` indexes all of them, by
traversing each file, so that field and method types can be followed across
files by their fully qualified names.
"""

from functools import cached_property

from google.api import annotations_pb2
from google.api import client_pb2
from google.api import field_behavior_pb2
from google.protobuf import descriptor_pb2

from protoc_gen_openapi.api_proto_plugin import constants, traverse, type_context

FieldDescriptorProto = descriptor_pb2.FieldDescriptorProto


def json_name(name):
    """lowerCamelCase JSON name for a proto field name, as protoc computes it."""
    result = []
    capitalize_next = False
    for c in name:
        if c == '_':
            capitalize_next = True
        elif capitalize_next:
            result.append(c.upper())
            capitalize_next = False
        else:
            result.append(c)
    return ''.join(result)


def strip_type_name(type_name):
    return type_name[1:] if type_name.startswith('.') else type_name


class EnumValue(object):

    def __init__(self, proto, comment):
        self.proto = proto
        self.comment = comment

    @property
    def name(self):
        return self.proto.name

    @property
    def number(self):
        return self.proto.number

    @property
    def description(self):
        return self.comment.description


class Enum(object):

    def __init__(self, proto, full_name, comment, values):
        self.proto = proto
        self.full_name = full_name
        self.comment = comment
        self.values = values

    @property
    def name(self):
        return self.proto.name


class Field(object):
    """A message field, with its type resolved through the registry."""

    def __init__(self, registry, containing_message, proto, ctx):
        self.registry = registry
        self.containing_message = containing_message
        self.proto = proto
        self.full_name = ctx.name
        self.comment = ctx.leading_comment

    def __repr__(self):
        return '<Field %s>' % self.full_name

    @property
    def name(self):
        return self.proto.name

    @property
    def json_name(self):
        return self.proto.json_name or json_name(self.proto.name)

    @property
    def kind(self):
        return self.proto.type

    @property
    def kind_name(self):
        return constants.FIELD_KIND_NAMES.get(self.proto.type, str(self.proto.type))

    @property
    def is_repeated(self):
        return self.proto.label == FieldDescriptorProto.LABEL_REPEATED

    @property
    def is_message(self):
        return self.proto.type == FieldDescriptorProto.TYPE_MESSAGE

    @cached_property
    def message_type(self):
        """Message for message typed fields, None otherwise or if unresolved."""
        if not self.is_message:
            return None
        return self.registry.message(self.proto.type_name)

    @cached_property
    def enum_type(self):
        if self.proto.type != FieldDescriptorProto.TYPE_ENUM:
            return None
        return self.registry.enum(self.proto.type_name)

    @property
    def is_map(self):
        return (
            self.is_message and self.is_repeated and self.message_type is not None
            and self.message_type.is_map_entry)

    @property
    def is_list(self):
        return self.is_repeated and not self.is_map

    @property
    def map_value(self):
        """Value field of a map entry."""
        return self.message_type.fields[1]

    @property
    def description(self):
        return self.comment.description

    @property
    def deprecated(self):
        return self.proto.options.deprecated

    @property
    def behaviors(self):
        return list(self.proto.options.Extensions[field_behavior_pb2.field_behavior])

    def annotation(self, name):
        return self.comment.annotations.get(name)


class Message(object):
    """A message type and its fields."""

    def __init__(self, proto, full_name, package, comment=None):
        self.proto = proto
        self.full_name = full_name
        self.package = package
        self.comment = comment or type_context.Comment('')
        self.parent = None
        self.fields = []
        self.messages = []
        self.enums = []

    def __repr__(self):
        return '<Message %s>' % self.full_name

    @classmethod
    def from_descriptor(cls, descriptor):
        """Message for a compiled protobuf Descriptor, e.g. `any_pb2.Any.DESCRIPTOR`.

        Fields are not populated, the result only identifies the type.
        """
        proto = descriptor_pb2.DescriptorProto()
        descriptor.CopyToProto(proto)
        message = cls(proto, descriptor.full_name, descriptor.file.package)
        if descriptor.containing_type is not None:
            message.parent = cls.from_descriptor(descriptor.containing_type)
        return message

    @property
    def name(self):
        return self.proto.name

    @property
    def is_map_entry(self):
        return self.proto.options.map_entry

    @property
    def description(self):
        return self.comment.description

    def annotation(self, name):
        return self.comment.annotations.get(name)

    def field(self, name):
        """Find a field by its proto or JSON name."""
        for field in self.fields:
            if name in (field.name, field.json_name):
                return field
        return None


class Method(object):

    def __init__(self, registry, service, proto, ctx):
        self.registry = registry
        self.service = service
        self.proto = proto
        self.comment = ctx.leading_comment

    @property
    def name(self):
        return self.proto.name

    @property
    def description(self):
        return self.comment.description

    @cached_property
    def input(self):
        return self.registry.message(self.proto.input_type)

    @cached_property
    def output(self):
        return self.registry.message(self.proto.output_type)

    @property
    def http_rules(self):
        """The google.api.http rule and its additional bindings, if any."""
        if not self.proto.options.HasExtension(annotations_pb2.http):
            return []
        rule = self.proto.options.Extensions[annotations_pb2.http]
        return [rule] + list(rule.additional_bindings)

    def annotation(self, name):
        return self.comment.annotations.get(name)


class Service(object):

    def __init__(self, proto, full_name, comment):
        self.proto = proto
        self.full_name = full_name
        self.comment = comment
        self.methods = []

    @property
    def name(self):
        return self.proto.name

    @property
    def description(self):
        return self.comment.description

    @property
    def default_host(self):
        if not self.proto.options.HasExtension(client_pb2.default_host):
            return ''
        return self.proto.options.Extensions[client_pb2.default_host]

    def annotation(self, name):
        return self.comment.annotations.get(name)


class File(object):

    def __init__(self, proto, source_code_info, messages, enums, services, generate):
        self.proto = proto
        self.source_code_info = source_code_info
        self.messages = messages
        self.enums = enums
        self.services = services
        self.generate = generate

    def __repr__(self):
        return '<File %s>' % self.name

    @property
    def name(self):
        return self.proto.name

    @property
    def package(self):
        return self.proto.package

    def annotation(self, name):
        return self.source_code_info.file_level_annotations.get(name)


class _Indexer(object):
    """Traversal visitor building the descriptor views of one file."""

    def __init__(self, registry, file_proto):
        self.registry = registry
        self.file_proto = file_proto

    def visit_enum(self, enum_proto, ctx):
        values = [
            EnumValue(value, ctx.extend_enum_value(index, value.name).leading_comment)
            for index, value in enumerate(enum_proto.value)
        ]
        enum = Enum(enum_proto, ctx.name, ctx.leading_comment, values)
        self.registry.enums[enum.full_name] = enum
        return enum

    def visit_message(self, msg_proto, ctx, nested_msgs, nested_enums):
        message = Message(msg_proto, ctx.name, self.file_proto.package, ctx.leading_comment)
        message.fields = [
            Field(self.registry, message, field, ctx.extend_field(index, field.name))
            for index, field in enumerate(msg_proto.field)
        ]
        for nested in nested_msgs:
            nested.parent = message
        message.messages = nested_msgs
        message.enums = nested_enums
        self.registry.messages[message.full_name] = message
        return message

    def visit_service(self, service_proto, ctx):
        service = Service(service_proto, ctx.name, ctx.leading_comment)
        service.methods = [
            Method(self.registry, service, method, ctx.extend_method(index, method.name))
            for index, method in enumerate(service_proto.method)
        ]
        return service

    def visit_file(self, file_proto, ctx, services, msgs, enums):
        return File(
            file_proto, ctx.source_code_info, msgs, enums, services,
            file_proto.name in self.registry.files_to_generate)


class Registry(object):
    """Index of every message and enum in a set of files."""

    def __init__(self, files_to_generate=()):
        self.files_to_generate = set(files_to_generate)
        self.files = []
        self.messages = {}
        self.enums = {}

    @classmethod
    def from_request(cls, request):
        """Registry for a CodeGeneratorRequest."""
        registry = cls(request.file_to_generate)
        registry.add_files(request.proto_file)
        return registry

    def add_files(self, file_protos):
        for file_proto in file_protos:
            self.files.append(traverse.traverse_file(file_proto, _Indexer(self, file_proto)))
        return self

    def message(self, type_name):
        return self.messages.get(strip_type_name(type_name))

    def enum(self, type_name):
        return self.enums.get(strip_type_name(type_name))

    @property
    def generated_files(self):
        return [f for f in self.files if f.generate]
