"""Python protoc plugin driver.

See
    https://protobuf.dev/reference/other/ for protoc plugin basics.
"""

import logging
import sys

# Without these imports the google.api option extensions would not be decoded
# when the request is parsed.
from google.api import annotations_pb2  # noqa: F401
from google.api import client_pb2  # noqa: F401
from google.api import field_behavior_pb2  # noqa: F401
from google.protobuf.compiler import plugin_pb2

from protoc_gen_openapi.exceptions import OpenAPIGeneratorError

logger = logging.getLogger(__name__)


def parse_parameter(parameter):
    """Parse the plugin parameter string.

    Args:
        parameter: `key=value,key=value` string as passed with `--openapi_opt`.

    Returns:
        Dict from parameter key to value, a bare `key` maps to an empty string.
    """
    params = {}
    for param in parameter.split(','):
        if not param.strip():
            continue
        key, _, value = param.partition('=')
        params[key.strip()] = value.strip()
    return params


def read_request(stream=None):
    """Read a CodeGeneratorRequest from a binary stream, stdin by default."""
    request = plugin_pb2.CodeGeneratorRequest()
    request.ParseFromString((stream or sys.stdin.buffer).read())
    return request


def write_response(response, stream=None):
    (stream or sys.stdout.buffer).write(response.SerializeToString())


def plugin(generator, request, params=None):
    """Run a generator over a CodeGeneratorRequest.

    Errors aborting the generation are reported to protoc in the response
    rather than raised.

    Args:
        generator: callable taking the request and the parameter dict, and
            returning an iterable of (file name, content) pairs.
        request: CodeGeneratorRequest.
        params: parameter dict, parsed from the request if not given.

    Returns:
        CodeGeneratorResponse.
    """
    response = plugin_pb2.CodeGeneratorResponse()
    response.supported_features = plugin_pb2.CodeGeneratorResponse.FEATURE_PROTO3_OPTIONAL
    if params is None:
        params = parse_parameter(request.parameter)
    try:
        files = list(generator(request, params))
    except OpenAPIGeneratorError as e:
        logger.error(str(e))
        response.error = str(e) or repr(e)
        return response
    for name, content in files:
        f = response.file.add()
        f.name = name
        f.content = content
    return response
