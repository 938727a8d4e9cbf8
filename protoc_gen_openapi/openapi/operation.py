"""Operations for HTTP bound methods."""

import copy
import logging
from urllib import parse

from google.protobuf import any_pb2
from google.rpc import status_pb2

from protoc_gen_openapi.api_proto_plugin import constants, descriptors
from protoc_gen_openapi.openapi import model, paths, wellknown

logger = logging.getLogger(__name__)

ANY_MESSAGE = descriptors.Message.from_descriptor(any_pb2.Any.DESCRIPTOR)
STATUS_MESSAGE = descriptors.Message.from_descriptor(status_pb2.Status.DESCRIPTOR)


def build_servers(default_host):
    """Servers for a service default host, always https."""
    if not default_host:
        return []
    url = parse.urlsplit(default_host if '//' in default_host else '//' + default_host)
    if not url.netloc:
        return []
    return [model.Server(url=parse.urlunsplit(url._replace(scheme='https')))]


def merge_service_extension(operation, extension):
    """Append the service wide data to an operation, external docs are merged."""
    if extension is None:
        return operation
    operation.parameters.extend(copy.deepcopy(extension.parameters))
    operation.extensions.update(copy.deepcopy(extension.extensions))
    operation.tags.extend(extension.tags)
    operation.servers.extend(copy.deepcopy(extension.servers))
    operation.security.extend(copy.deepcopy(extension.security))
    if extension.external_docs is not None:
        if operation.external_docs is None:
            operation.external_docs = model.ExternalDocs()
        operation.external_docs.merge(extension.external_docs)
    return operation


def process_parameters(operation):
    for parameter in operation.parameters:
        if parameter.in_ == 'header' and parameter.schema is None:
            parameter.schema = wellknown.string_schema()
    return operation


def process_tags(operation):
    """Move `key=value` tags into the operation extensions."""
    tags = []
    for tag in operation.tags:
        if '=' in tag:
            key, value = tag.split('=', 1)
            operation.extensions[key.strip()] = value.strip()
        else:
            tags.append(tag)
    operation.tags = tags
    return operation


class OperationBuilder(object):

    def __init__(self, reflector):
        self.reflector = reflector
        self.parameters = paths.ParameterBuilder(reflector)

    @property
    def config(self):
        return self.reflector.config

    def build_operation(
            self, document, tag, operation_id, description, default_host, rule, input_message,
            output_message):
        """Build the operation for one HTTP binding of a method.

        Returns:
            (Operation, path template with formatted parameter names)
        """
        parameters, covered, path = self.parameters.build_path_parameters(rule.path, input_message)
        if rule.body:
            covered.append(rule.body)

        if rule.body != '*' and input_message.full_name != constants.HTTP_BODY:
            for field in input_message.fields:
                if field.name in covered or field.json_name in covered:
                    continue
                parameters.extend(self.parameters.build_query_parameters(field))

        operation = model.Operation(
            tags=[tag],
            description=description,
            operation_id=operation_id,
            parameters=parameters,
            responses=self.build_responses(document, output_message),
            servers=build_servers(default_host),
            request_body=self.parameters.build_request_body(rule.body, input_message))
        return operation, path

    def build_responses(self, document, message):
        responses = {}
        if message is None:
            logger.warning('Unresolved response type, the response has no content')
            responses['200'] = model.Response(description='OK')
        else:
            code, content = self.reflector.response_content_for_message(message)
            responses[code] = model.Response(description='OK', content=content)

        if self.config.default_response:
            worklist = self.reflector.worklist
            any_name = self.reflector.format_message_name(ANY_MESSAGE)
            worklist.add_schema(document, any_name, wellknown.any_schema())
            status_name = self.reflector.format_message_name(STATUS_MESSAGE)
            worklist.add_schema(document, status_name, wellknown.status_schema(any_name))
            responses['default'] = model.Response(
                description='Default error response',
                content=wellknown.application_json_media_type(
                    model.Reference.to_schema(status_name)))
        return responses
