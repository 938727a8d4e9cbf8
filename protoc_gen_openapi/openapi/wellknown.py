"""Schemas for scalar kinds and protobuf well known types.

Well known types have JSON mappings that differ from their message
structure, so they get hand built schemas rather than reflected ones.
"""

from frozendict import frozendict

from protoc_gen_openapi.api_proto_plugin import constants
from protoc_gen_openapi.openapi import model

APPLICATION_JSON = 'application/json'
HTTP_BODY_MEDIA_TYPE = '*/*'

DURATION_PATTERN = r'^-?(?:0|[1-9][0-9]{0,11})(?:\.[0-9]{1,9})?s$'
DURATION_DESCRIPTION = (
    'Represents a a duration between -315,576,000,000s and 315,576,000,000s '
    '(around 10000 years). Precision is in nanoseconds. 1 nanosecond is '
    'represented as 0.000000001s')
VALUE_DESCRIPTION = (
    'Represents a dynamically typed value which can be either null, a number, '
    'a string, a boolean, a recursive struct value, or a list of values.')
ANY_DESCRIPTION = (
    'Contains an arbitrary serialized message along with a @type that '
    'describes the type of the serialized message.')
STATUS_DESCRIPTION = (
    'The `Status` type defines a logical error model that is suitable for '
    'different programming environments, including REST APIs and RPC APIs. '
    'It is used by [gRPC](https://github.com/grpc). Each `Status` message '
    'contains three pieces of data: error code, error message, and error '
    'details. You can find out more about this error model and how to work '
    'with it in the [API Design Guide](https://cloud.google.com/apis/design/errors).')

# Value field kinds of the numeric wrappers.
WRAPPER_FORMATS = frozendict({
    constants.INT32_VALUE: 'int32',
    constants.UINT32_VALUE: 'uint32',
    constants.FLOAT_VALUE: 'float',
    constants.DOUBLE_VALUE: 'double',
})

# Types handled here rather than reflected, whether or not they produce an
# inline schema.
WELL_KNOWN_TYPES = frozenset([
    constants.HTTP_BODY,
    constants.TIMESTAMP,
    constants.DURATION,
    constants.DATE,
    constants.DATE_TIME,
    constants.FIELD_MASK,
    constants.STRUCT,
    constants.EMPTY,
]) | constants.WRAPPER_TYPES


def string_schema():
    return model.Schema(type='string')


def boolean_schema():
    return model.Schema(type='boolean')


def bytes_schema():
    return model.Schema(type='string', format='bytes')


def integer_schema(format):
    return model.Schema(type='integer', format=format)


def number_schema(format):
    return model.Schema(type='number', format=format)


def list_schema(items):
    return model.Schema(type='array', items=items)


def map_schema(value_schema):
    return model.Schema(type='object', additional_properties=value_schema)


def enum_schema(enum, enum_type):
    """Enum schema, values by name for `string` enum_type, by number otherwise."""
    schema = model.Schema(format='enum')
    if enum_type == 'string':
        schema.type = 'string'
        schema.enum = [value.name for value in enum.values]
    else:
        schema.type = 'integer'
        schema.enum = [value.number for value in enum.values]
    if schema.enum:
        schema.default = schema.enum[0]
    schema.description = ''.join(
        '- %s: %s\n' % (value.description, symbol)
        for value, symbol in zip(enum.values, schema.enum)
        if value.description)
    return schema


def _wrapper_format(full_name, message):
    value_field = message.field('value') if message is not None else None
    if value_field is not None:
        return value_field.kind_name
    return WRAPPER_FORMATS[full_name]


def schema_for_well_known_type(full_name, message=None):
    """Inline schema for a well known type.

    Returns None for types that are not well known, and for Empty, which
    is left out altogether.
    """
    if full_name == constants.HTTP_BODY:
        return string_schema()
    if full_name in (constants.TIMESTAMP, constants.DATE_TIME):
        return model.Schema(type='string', format='date-time')
    if full_name == constants.DURATION:
        return model.Schema(
            type='string', pattern=DURATION_PATTERN, description=DURATION_DESCRIPTION)
    if full_name == constants.DATE:
        return model.Schema(type='string', format='date')
    if full_name == constants.FIELD_MASK:
        return model.Schema(type='string', format='field-mask')
    if full_name == constants.STRUCT:
        return model.Schema(type='object')
    if full_name == constants.BOOL_VALUE:
        return boolean_schema()
    if full_name == constants.BYTES_VALUE:
        return bytes_schema()
    if full_name in (constants.INT32_VALUE, constants.UINT32_VALUE):
        return integer_schema(_wrapper_format(full_name, message))
    if full_name in (constants.STRING_VALUE, constants.INT64_VALUE, constants.UINT64_VALUE):
        return string_schema()
    if full_name in (constants.FLOAT_VALUE, constants.DOUBLE_VALUE):
        return number_schema(_wrapper_format(full_name, message))
    return None


def is_well_known_type(full_name):
    return full_name in WELL_KNOWN_TYPES


def value_schema():
    return model.Schema(description=VALUE_DESCRIPTION)


def any_schema():
    return model.Schema(
        type='object',
        description=ANY_DESCRIPTION,
        properties={
            '@type': model.Schema(type='string', description='The type of the serialized message.'),
        },
        additional_properties=True)


def status_schema(any_name):
    return model.Schema(
        type='object',
        description=STATUS_DESCRIPTION,
        properties={
            'code': model.Schema(
                type='integer',
                format='int32',
                description=(
                    'The status code, which should be an enum value of '
                    '[google.rpc.Code][google.rpc.Code].')),
            'message': model.Schema(
                type='string',
                description=(
                    'A developer-facing error message, which should be in English. '
                    'Any user-facing error message should be localized and sent in the '
                    '[google.rpc.Status.details][google.rpc.Status.details] field, '
                    'or localized by the client.')),
            'details': model.Schema(
                type='array',
                items=model.Reference.to_schema(any_name),
                description=(
                    'A list of messages that carry the error details.  There is a '
                    'common set of message types for APIs to use.')),
        })


def application_json_media_type(schema):
    return {APPLICATION_JSON: model.MediaType(schema=schema)}


def http_body_media_type():
    return {HTTP_BODY_MEDIA_TYPE: model.MediaType(schema=string_schema())}
