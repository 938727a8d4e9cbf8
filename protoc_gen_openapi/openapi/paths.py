"""HTTP rules, path and query parameters, request bodies."""

import enum
import logging
import re
from collections import namedtuple

from google.protobuf.descriptor_pb2 import FieldDescriptorProto

from protoc_gen_openapi.api_proto_plugin import constants
from protoc_gen_openapi.openapi import model, naming, wellknown

logger = logging.getLogger(__name__)

# {field}
SIMPLE_PATH_PARAMETER_REGEX = re.compile(r'{([^=}]+)}')
# {field=shelves/*/books/*}
NAMED_PATH_PARAMETER_REGEX = re.compile(r'{([^{}=]+)=([^{}]+)}')

DEFAULT_MARKER = 'Default:'


class HttpVerb(enum.Enum):
    GET = 'get'
    PUT = 'put'
    POST = 'post'
    DELETE = 'delete'
    PATCH = 'patch'
    CUSTOM = 'custom'
    UNKNOWN = 'unknown'

    @property
    def supported(self):
        return self not in (HttpVerb.CUSTOM, HttpVerb.UNKNOWN)


SUPPORTED_PATTERNS = frozenset(verb.value for verb in HttpVerb if verb.supported)

HttpRule = namedtuple('HttpRule', ['path', 'verb', 'body'])


def http_rule(rule):
    """HttpRule for a google.api.HttpRule, custom and unset patterns carry no path."""
    pattern = rule.WhichOneof('pattern')
    if pattern in SUPPORTED_PATTERNS:
        return HttpRule(getattr(rule, pattern), HttpVerb(pattern), rule.body)
    if pattern == 'custom':
        return HttpRule('', HttpVerb.CUSTOM, rule.body)
    return HttpRule('', HttpVerb.UNKNOWN, rule.body)


def query_description(comment):
    """First comment line, and the value of a `Default:` marker if any."""
    lines = comment.split('\n')
    default = None
    for line in lines:
        if DEFAULT_MARKER in line:
            default = line.split(DEFAULT_MARKER, 1)[1].strip()
            break
    return lines[0].strip(), default


class ParameterBuilder(object):

    def __init__(self, reflector):
        self.reflector = reflector

    @property
    def config(self):
        return self.reflector.config

    def build_path_parameters(self, path, message):
        """Path parameters for a path template.

        Args:
            path: path template of an HTTP rule.
            message: the method input Message.

        Returns:
            (parameters, covered field names, path rewritten with the
            formatted parameter names)
        """
        parameters = []
        covered = []

        for match in SIMPLE_PATH_PARAMETER_REGEX.finditer(path):
            name = match.group(1)
            covered.append(name)
            formatted = naming.find_and_format_field_name(self.config, name, message)
            path = path.replace('{%s}' % name, '{%s}' % formatted, 1)
            field = message.field(name) if message is not None else None
            schema = self.reflector.schema_for_field(field) if field is not None else None
            parameters.append(
                model.Parameter(
                    name=formatted,
                    in_='path',
                    description=field.description if field is not None else None,
                    required=True,
                    schema=schema or wellknown.string_schema()))

        match = NAMED_PATH_PARAMETER_REGEX.search(path)
        if match:
            covered.append(match.group(1))
            parts = match.group(2).split('/')
            names = []
            for i in range(0, len(parts) - 1, 2):
                name = naming.singular(
                    naming.find_and_format_field_name(self.config, parts[i], message))
                parts[i + 1] = '{%s}' % name
                names.append(name)
            path = path.replace(match.group(0), '/'.join(parts), 1)
            parameters.extend(
                model.Parameter(
                    name=name,
                    in_='path',
                    required=True,
                    description='The %s id.' % name,
                    schema=wellknown.string_schema()) for name in names)

        return parameters, covered, path

    def build_query_parameters(self, field, depths=None):
        """Query parameters for an input field.

        Message fields expand to one parameter per leaf field, named by the
        dotted field path. `depths` counts, per field, how often it is being
        expanded on the current path, expansion stops at `circular_depth`.
        """
        depths = {} if depths is None else depths
        if field.is_map:
            return []
        if not field.is_message:
            return [self._query_parameter(field)]
        message = field.message_type
        if message is None:
            logger.warning('Unresolved message type %s of %s', field.proto.type_name, field.full_name)
            return []
        if field.is_repeated:
            logger.debug('Skipping repeated message query parameter %s', field.full_name)
            return []
        if message.full_name in constants.QUERY_LEAF_TYPES:
            return [self._query_parameter(field)]

        prefix = self.reflector.format_field_name(field)
        description, _default = query_description(field.description)
        parameters = []
        for sub_field in message.fields:
            depth = depths.get(sub_field.full_name, 0)
            if depth >= self.config.circular_depth:
                continue
            depths[sub_field.full_name] = depth + 1
            for parameter in self.build_query_parameters(sub_field, depths):
                parameter.name = '%s.%s' % (prefix, parameter.name)
                if not parameter.description:
                    parameter.description = description
                parameters.append(parameter)
            depths[sub_field.full_name] = depth
        return parameters

    def _query_parameter(self, field):
        description, default = query_description(field.description)
        parameter = model.Parameter(
            name=self.reflector.format_field_name(field),
            in_='query',
            description=description,
            schema=self.reflector.schema_for_field(field))
        if default is not None:
            parameter.extensions['x-default'] = default
        return parameter

    def build_request_body(self, body, message):
        """Request body for an HTTP rule body selector, None without one."""
        if not body:
            return None
        schema = None
        if body == '*':
            schema = self.reflector.schema_for_message(message)
        else:
            field = message.field(body)
            if field is None:
                logger.warning('Body field %s not found in %s', body, message.full_name)
            elif field.kind == FieldDescriptorProto.TYPE_STRING:
                schema = wellknown.string_schema()
            elif field.is_message and field.message_type is not None:
                schema = self.reflector.schema_for_message(field.message_type)
            else:
                logger.warning('Unsupported body field type %s of %s', field.kind_name, field.full_name)
        return model.RequestBody(
            required=True, content=wellknown.application_json_media_type(schema))
