"""protoc plugin generating OpenAPI v3 documents from google.api.http bound
services.

Usage:

    protoc --openapi_out=. --openapi_opt=naming=json,depth=3 foo/v1/foo.proto
"""

import argparse
import sys
from functools import cached_property

from google.protobuf.message import DecodeError

from protoc_gen_openapi.api_proto_plugin import descriptors, plugin
from protoc_gen_openapi.base import runner
from protoc_gen_openapi.exceptions import ConfigurationError, OpenAPIGeneratorError
from protoc_gen_openapi.openapi import config as openapi_config
from protoc_gen_openapi.openapi import document, serializer

MERGED_OUTPUT_NAME = 'openapi'
LOG_LEVEL_PARAM = 'log_level'


def output_name(proto_file_name, output_format):
    """Output file name for a source relative document."""
    if proto_file_name.endswith('.proto'):
        proto_file_name = proto_file_name[:-len('.proto')]
    return '%s.openapi.%s' % (proto_file_name, output_format)


def generate(request, params):
    """Generate the OpenAPI documents for a CodeGeneratorRequest.

    Args:
        request: CodeGeneratorRequest.
        params: plugin parameter dict.

    Returns:
        List of (file name, content) pairs.
    """
    params = {k: v for k, v in params.items() if k != LOG_LEVEL_PARAM}
    config = openapi_config.Configuration.from_params(params).with_defaults().validate()
    base = serializer.load_base_document(config.base) if config.base else None
    registry = descriptors.Registry.from_request(request)
    output_format = config.output_format

    if config.output_mode == 'source_relative':
        return [(
            output_name(file.name, output_format),
            serializer.render(
                document.build_document(config, registry, [file], base), output_format))
                for file in registry.generated_files]

    return [(
        '%s.%s' % (MERGED_OUTPUT_NAME, output_format),
        serializer.render(
            document.build_document(config, registry, registry.generated_files, base),
            output_format))]


class OpenAPIPlugin(runner.Runner):
    """Reads a CodeGeneratorRequest from stdin and writes the response to stdout."""

    @property
    def name(self) -> str:
        return 'protoc_gen_openapi'

    @cached_property
    def request(self):
        if not self.args.request:
            return plugin.read_request()
        with open(self.args.request, 'rb') as f:
            return plugin.read_request(f)

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        super().add_arguments(parser)
        parser.add_argument(
            '--request', default=None, help='Read the CodeGeneratorRequest from a file')

    def set_log_level(self, level):
        if level not in runner.LOG_LEVELS:
            raise ConfigurationError(
                '%s must be one of %s, got %r'
                % (LOG_LEVEL_PARAM, ', '.join(runner.LOG_LEVELS), level))
        self.log.setLevel(runner.LOG_LEVELS[level])

    @runner.catches((OpenAPIGeneratorError, DecodeError, OSError))
    def run(self) -> int:
        params = plugin.parse_parameter(self.request.parameter)
        if LOG_LEVEL_PARAM in params:
            self.set_log_level(params[LOG_LEVEL_PARAM])
        self.log.debug('Generating OpenAPI for %s', ', '.join(self.request.file_to_generate))
        response = plugin.plugin(generate, self.request, params)
        plugin.write_response(response)
        return 1 if response.error else 0


def main(*args) -> int:
    return OpenAPIPlugin(*args)()


def cli() -> int:
    return main(*sys.argv[1:])


if __name__ == '__main__':
    sys.exit(cli())
