from frozendict import frozendict

from google.protobuf.descriptor_pb2 import FieldDescriptorProto

# Kind names as used for OpenAPI `format` values.
FIELD_KIND_NAMES = frozendict({
    FieldDescriptorProto.TYPE_DOUBLE: 'double',
    FieldDescriptorProto.TYPE_FLOAT: 'float',
    FieldDescriptorProto.TYPE_INT32: 'int32',
    FieldDescriptorProto.TYPE_SFIXED32: 'sfixed32',
    FieldDescriptorProto.TYPE_SINT32: 'sint32',
    FieldDescriptorProto.TYPE_FIXED32: 'fixed32',
    FieldDescriptorProto.TYPE_UINT32: 'uint32',
    FieldDescriptorProto.TYPE_INT64: 'int64',
    FieldDescriptorProto.TYPE_SFIXED64: 'sfixed64',
    FieldDescriptorProto.TYPE_SINT64: 'sint64',
    FieldDescriptorProto.TYPE_FIXED64: 'fixed64',
    FieldDescriptorProto.TYPE_UINT64: 'uint64',
    FieldDescriptorProto.TYPE_BOOL: 'bool',
    FieldDescriptorProto.TYPE_STRING: 'string',
    FieldDescriptorProto.TYPE_BYTES: 'bytes',
    FieldDescriptorProto.TYPE_ENUM: 'enum',
    FieldDescriptorProto.TYPE_MESSAGE: 'message',
    FieldDescriptorProto.TYPE_GROUP: 'group',
})

INT32_KINDS = frozenset([
    FieldDescriptorProto.TYPE_INT32,
    FieldDescriptorProto.TYPE_SINT32,
    FieldDescriptorProto.TYPE_UINT32,
    FieldDescriptorProto.TYPE_SFIXED32,
    FieldDescriptorProto.TYPE_FIXED32,
])

# JSON cannot carry 64 bit integers safely, these map to strings.
INT64_KINDS = frozenset([
    FieldDescriptorProto.TYPE_INT64,
    FieldDescriptorProto.TYPE_SINT64,
    FieldDescriptorProto.TYPE_UINT64,
    FieldDescriptorProto.TYPE_SFIXED64,
    FieldDescriptorProto.TYPE_FIXED64,
])

FLOAT_KINDS = frozenset([
    FieldDescriptorProto.TYPE_FLOAT,
    FieldDescriptorProto.TYPE_DOUBLE,
])

# Well known types, fully qualified without the leading dot.
HTTP_BODY = 'google.api.HttpBody'
TIMESTAMP = 'google.protobuf.Timestamp'
DURATION = 'google.protobuf.Duration'
DATE = 'google.type.Date'
DATE_TIME = 'google.type.DateTime'
FIELD_MASK = 'google.protobuf.FieldMask'
STRUCT = 'google.protobuf.Struct'
EMPTY = 'google.protobuf.Empty'
VALUE = 'google.protobuf.Value'
ANY = 'google.protobuf.Any'
STATUS = 'google.rpc.Status'
BOOL_VALUE = 'google.protobuf.BoolValue'
BYTES_VALUE = 'google.protobuf.BytesValue'
INT32_VALUE = 'google.protobuf.Int32Value'
UINT32_VALUE = 'google.protobuf.UInt32Value'
STRING_VALUE = 'google.protobuf.StringValue'
INT64_VALUE = 'google.protobuf.Int64Value'
UINT64_VALUE = 'google.protobuf.UInt64Value'
FLOAT_VALUE = 'google.protobuf.FloatValue'
DOUBLE_VALUE = 'google.protobuf.DoubleValue'

WRAPPER_TYPES = frozenset([
    BOOL_VALUE,
    BYTES_VALUE,
    INT32_VALUE,
    UINT32_VALUE,
    STRING_VALUE,
    INT64_VALUE,
    UINT64_VALUE,
    FLOAT_VALUE,
    DOUBLE_VALUE,
])

# Messages rendered as a single query parameter rather than expanded field by
# field.
QUERY_LEAF_TYPES = frozenset([VALUE, TIMESTAMP, DURATION, DATE, DATE_TIME, FIELD_MASK]) | WRAPPER_TYPES
