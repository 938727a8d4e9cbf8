"""OpenAPI document assembly.

Operations are built first, for every HTTP bound method of the files being
generated. Building them references component schemas by name, those are
then generated from the messages of every file in the request, which may in
turn reference more, until no new name turns up.
"""

import logging

from google.api import field_behavior_pb2

from protoc_gen_openapi.api_proto_plugin import annotations, constants
from protoc_gen_openapi.openapi import model, operation, paths, reflector, wellknown

logger = logging.getLogger(__name__)


def load_annotation(cls, value, where):
    """Load an annotation payload into a model entity.

    Raises:
        annotations.AnnotationError: if the payload does not fit the entity.
    """
    try:
        return cls.from_dict(value)
    except model.ModelError as e:
        raise annotations.AnnotationError('Invalid annotation on %s: %s' % (where, e))


def promote_title(document):
    """Name an untitled single service document after its service."""
    if len(document.tags) != 1 or document.info.title:
        return
    tag = document.tags[0]
    document.info.title = '%s API' % tag.name
    if tag.description:
        document.info.description = tag.description
        tag.description = None


def _single_server_url(servers):
    if len(servers) == 1:
        return servers[0].url
    return None


def hoist_servers(document):
    """Move servers shared by every operation of a path up to the path, then
    servers shared by every path up to the document."""
    all_urls = []
    for path_item in document.paths.values():
        operations = path_item.operations
        urls = []
        for op in operations:
            url = _single_server_url(op.servers)
            if url is not None and url not in urls:
                urls.append(url)
        for url in urls:
            if url not in all_urls:
                all_urls.append(url)
        if len(urls) == 1 and all(_single_server_url(op.servers) == urls[0] for op in operations):
            path_item.servers = [model.Server(url=urls[0])]
            for op in operations:
                op.servers = []

    if len(all_urls) != 1 or not document.paths:
        return
    if all(_single_server_url(p.servers) == all_urls[0] for p in document.paths.values()):
        document.servers = [model.Server(url=all_urls[0])]
        for path_item in document.paths.values():
            path_item.servers = []


def sort_document(document):
    document.tags.sort(key=lambda tag: tag.name or '')
    document.paths = dict(sorted(document.paths.items()))
    document.components.schemas = dict(sorted(document.components.schemas.items()))


def initial_document(config, base=None):
    document = model.Document(
        info=model.Info(
            title=config.title, version=config.version, description=config.description))
    if base is not None:
        document.merge(base)
    return document


class DocumentBuilder(object):
    """Builds one document from a set of files of a Registry."""

    def __init__(self, config, registry, base=None):
        self.config = config
        self.registry = registry
        self.base = base
        self.worklist = reflector.SchemaWorklist()
        self.reflector = reflector.Reflector(config, self.worklist)
        self.operations = operation.OperationBuilder(self.reflector)

    def build(self, files):
        """Document for the services of `files`, schemas may come from any file."""
        document = initial_document(self.config, self.base)
        for file in files:
            self.add_file(document, file)
        self.resolve_schemas(document)
        promote_title(document)
        hoist_servers(document)
        sort_document(document)
        return document

    def add_file(self, document, file):
        document_annotation = file.annotation(annotations.DOCUMENT_ANNOTATION)
        if document_annotation:
            document.merge(load_annotation(model.Document, document_annotation, file.name))
        for service in file.services:
            if self.config.services and service.full_name not in self.config.services:
                logger.debug('Skipping filtered service %s', service.full_name)
                continue
            self.add_service(document, service)

    def add_service(self, document, service):
        extension = service.annotation(annotations.SERVICE_ANNOTATION)
        if extension is not None:
            extension = load_annotation(model.ServiceExtension, extension, service.full_name)
        bindings = 0
        for method in service.methods:
            for rule in method.http_rules:
                if self.add_binding(document, service, method, paths.http_rule(rule), extension):
                    bindings += 1
        if bindings:
            document.tags.append(model.Tag(name=service.name, description=service.description))

    def add_binding(self, document, service, method, rule, extension):
        where = '%s.%s' % (service.full_name, method.name)
        if not rule.verb.supported:
            logger.warning('Skipping unsupported %s HTTP rule of %s', rule.verb.value, where)
            return False
        if method.input is None:
            logger.warning('Skipping %s, unresolved input type %s', where, method.proto.input_type)
            return False

        op, path = self.operations.build_operation(
            document, service.name, '%s_%s' % (service.name, method.name), method.description,
            service.default_host, rule, method.input, method.output)
        operation.merge_service_extension(op, extension)
        operation_annotation = method.annotation(annotations.OPERATION_ANNOTATION)
        if operation_annotation is not None:
            op.merge(load_annotation(model.Operation, operation_annotation, where))
        operation.process_parameters(op)
        operation.process_tags(op)
        self.add_operation(document, op, self.config.path_prefix + path, rule.verb)
        return True

    def add_operation(self, document, op, path, verb):
        # One operation per verb and path, a later binding replaces an earlier one.
        path_item = document.paths.setdefault(path, model.PathItem())
        if getattr(path_item, verb.value) is not None:
            logger.warning('Replacing %s operation of %s', verb.value.upper(), path)
        setattr(path_item, verb.value, op)

    def resolve_schemas(self, document):
        """Generate the referenced component schemas until no new reference appears."""
        while True:
            required = len(self.worklist.required)
            for file in self.registry.files:
                self._add_message_schemas(document, file.messages)
            if len(self.worklist.required) == required:
                return

    def _add_message_schemas(self, document, messages):
        for message in messages:
            self._add_message_schemas(document, message.messages)
            name = self.reflector.format_message_name(message)
            if not self.worklist.is_pending(name):
                continue
            if message.full_name == constants.VALUE:
                self.worklist.add_schema(document, name, wellknown.value_schema())
            elif message.full_name == constants.ANY:
                self.worklist.add_schema(document, name, wellknown.any_schema())
            elif message.full_name == constants.STATUS:
                any_name = self.reflector.format_message_name(operation.ANY_MESSAGE)
                self.worklist.add_schema(document, any_name, wellknown.any_schema())
                self.worklist.add_schema(document, name, wellknown.status_schema(any_name))
            else:
                self.worklist.add_schema(document, name, self.message_schema(message))

    def message_schema(self, message):
        """Component schema for an ordinary message."""
        properties = {}
        required = []
        for field in message.fields:
            behaviors = field.behaviors
            output_only = field_behavior_pb2.OUTPUT_ONLY in behaviors
            input_only = field_behavior_pb2.INPUT_ONLY in behaviors
            name = self.reflector.format_field_name(field)
            schema = self.reflector.schema_for_field(field)
            if schema is None:
                continue
            if field_behavior_pb2.REQUIRED in behaviors:
                required.append(name)
            property_annotation = field.annotation(annotations.PROPERTY_ANNOTATION)
            # A reference can not carry sibling keys.
            if schema.is_reference and (
                    output_only or input_only or field.description or field.deprecated
                    or property_annotation):
                schema = model.Schema(all_of=[schema])
            if not schema.is_reference:
                if not schema.description:
                    schema.description = field.description
                schema.read_only = output_only
                schema.write_only = input_only
                if field.deprecated:
                    schema.deprecated = True
                if property_annotation is not None:
                    schema = self._merge_schema_annotation(
                        schema, property_annotation, field.full_name)
            properties[name] = schema

        schema = model.Schema(
            type='object',
            description=message.description,
            properties=properties,
            required=required)
        schema_annotation = message.annotation(annotations.SCHEMA_ANNOTATION)
        if schema_annotation is not None:
            schema = self._merge_schema_annotation(schema, schema_annotation, message.full_name)
        return schema

    def _merge_schema_annotation(self, schema, value, where):
        loaded = load_annotation(model.Schema, value, where)
        if loaded.is_reference:
            return loaded
        return schema.merge(loaded)


def build_document(config, registry, files, base=None):
    """Build the document for `files`, resolving schemas against all of `registry`."""
    return DocumentBuilder(config, registry, base).build(files)
