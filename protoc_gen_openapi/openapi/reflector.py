"""Protobuf field and message types to OpenAPI schemas."""

import logging

from google.protobuf.descriptor_pb2 import FieldDescriptorProto

from protoc_gen_openapi.api_proto_plugin import constants
from protoc_gen_openapi.openapi import model, naming, wellknown

logger = logging.getLogger(__name__)


class SchemaWorklist(object):
    """Component schemas referenced so far and those already generated.

    `required` only grows, in reference order, while schemas are resolved.
    """

    def __init__(self):
        self.required = []
        self.generated = set()

    def require(self, name):
        if name not in self.required:
            self.required.append(name)

    def is_pending(self, name):
        return name in self.required and name not in self.generated

    def add_schema(self, document, name, schema):
        """Add a component schema, unless one was already added under `name`.

        Returns:
            True if the schema was added.
        """
        if name in self.generated:
            return False
        self.generated.add(name)
        document.schemas[name] = schema
        return True


class Reflector(object):

    def __init__(self, config, worklist=None):
        self.config = config
        self.worklist = worklist if worklist is not None else SchemaWorklist()

    def format_message_name(self, message):
        return naming.format_message_name(self.config, message)

    def format_field_name(self, field):
        return naming.format_field_name(self.config, field)

    def schema_reference_for_message(self, message):
        name = self.format_message_name(message)
        self.worklist.require(name)
        return model.Reference.to_schema(name)

    def schema_for_message(self, message):
        """Inline schema for well known types, a component reference otherwise.

        Returns None for google.protobuf.Empty.
        """
        if wellknown.is_well_known_type(message.full_name):
            return wellknown.schema_for_well_known_type(message.full_name, message)
        return self.schema_reference_for_message(message)

    def schema_for_field(self, field):
        """Schema for a field, or None if the field has no representation."""
        if field.is_map:
            value_schema = self._schema_for_kind(field.map_value)
            if value_schema is None:
                return None
            return wellknown.map_schema(value_schema)
        schema = self._schema_for_kind(field)
        if schema is not None and field.is_list:
            schema = wellknown.list_schema(schema)
        return schema

    def _schema_for_kind(self, field):
        kind = field.kind
        if kind == FieldDescriptorProto.TYPE_MESSAGE:
            if field.message_type is None:
                logger.warning('Unresolved message type %s of %s', field.proto.type_name, field.full_name)
                return None
            return self.schema_for_message(field.message_type)
        if kind == FieldDescriptorProto.TYPE_STRING:
            return wellknown.string_schema()
        if kind in constants.INT32_KINDS:
            return wellknown.integer_schema(field.kind_name)
        if kind in constants.INT64_KINDS:
            return wellknown.string_schema()
        if kind == FieldDescriptorProto.TYPE_ENUM:
            if field.enum_type is None:
                logger.warning('Unresolved enum type %s of %s', field.proto.type_name, field.full_name)
                return None
            return wellknown.enum_schema(field.enum_type, self.config.enum_type)
        if kind == FieldDescriptorProto.TYPE_BOOL:
            return wellknown.boolean_schema()
        if kind in constants.FLOAT_KINDS:
            return wellknown.number_schema(field.kind_name)
        if kind == FieldDescriptorProto.TYPE_BYTES:
            return wellknown.bytes_schema()
        logger.warning('Unsupported field type %s of %s', field.kind_name, field.full_name)
        return None

    def response_content_for_message(self, message):
        """Status code and content of the successful response."""
        if message.full_name == constants.EMPTY:
            return '200', {}
        if message.full_name == constants.HTTP_BODY:
            return '200', wellknown.http_body_media_type()
        return '200', wellknown.application_json_media_type(self.schema_for_message(message))
