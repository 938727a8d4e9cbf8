"""OpenAPI v3 object model.

Each entity declares a table of `Field`s, in the key order of the rendered
document. The table drives `as_dict` (rendering, unset and empty values
omitted), `from_dict` (loading annotations and base documents) and `merge`.

Merging follows protobuf `Merge` semantics: set scalars replace, true flags
replace, sequences are appended, nested entities merge recursively and
mappings merge key by key. Specification extensions (`x-*` keys) are kept in
`extensions`, a later value for the same key replaces the earlier one.
"""

import copy
import logging
from collections import namedtuple

from protoc_gen_openapi.exceptions import OpenAPIGeneratorError

logger = logging.getLogger(__name__)

OPENAPI_VERSION = '3.0.3'
SCHEMA_REF_PREFIX = '#/components/schemas/'

# Field kinds.
SCALAR = 'scalar'
FLAG = 'flag'
LIST = 'list'
MAP = 'map'
OBJECT = 'object'
LIST_OF = 'list_of'
MAP_OF = 'map_of'
# `additionalProperties`, a boolean or a schema.
BOOL_OR_OBJECT = 'bool_or_object'

Field = namedtuple('Field', ['attr', 'key', 'kind', 'cls'])


def field(attr, key=None, kind=SCALAR, cls=None):
    return Field(attr, key or attr, kind, cls)


class ModelError(OpenAPIGeneratorError):
    pass


def _empty(f):
    if f.kind in (LIST, LIST_OF):
        return []
    if f.kind in (MAP, MAP_OF):
        return {}
    if f.kind == FLAG:
        return False
    return None


def _dump(f, value):
    if f.kind in (OBJECT, BOOL_OR_OBJECT) and isinstance(value, Entity):
        return value.as_dict()
    if f.kind == LIST_OF:
        return [item.as_dict() for item in value]
    if f.kind == MAP_OF:
        return {name: item.as_dict() for name, item in value.items()}
    if f.kind in (LIST, MAP):
        return copy.deepcopy(value)
    return value


def _is_unset(f, value):
    if f.kind == FLAG:
        return not value
    return value is None or value == '' or value == [] or value == {}


def _load(cls, value, key):
    if not isinstance(value, dict):
        raise ModelError('%s: expected a mapping, got %r' % (key, value))
    return cls.from_dict(value)


def _load_field(f, value):
    if f.kind == FLAG:
        if not isinstance(value, bool):
            raise ModelError('%s: expected a boolean, got %r' % (f.key, value))
        return value
    if f.kind == LIST:
        if not isinstance(value, list):
            raise ModelError('%s: expected a sequence, got %r' % (f.key, value))
        return list(value)
    if f.kind == MAP:
        if not isinstance(value, dict):
            raise ModelError('%s: expected a mapping, got %r' % (f.key, value))
        return dict(value)
    if f.kind == OBJECT:
        return _load(f.cls, value, f.key)
    if f.kind == LIST_OF:
        if not isinstance(value, list):
            raise ModelError('%s: expected a sequence, got %r' % (f.key, value))
        return [_load(f.cls, item, f.key) for item in value]
    if f.kind == MAP_OF:
        if not isinstance(value, dict):
            raise ModelError('%s: expected a mapping, got %r' % (f.key, value))
        return {name: _load(f.cls, item, '%s.%s' % (f.key, name)) for name, item in value.items()}
    if f.kind == BOOL_OR_OBJECT:
        if isinstance(value, bool):
            return value
        return _load(f.cls, value, f.key)
    return value


def _merge_item(current, value):
    if isinstance(current, Entity) and type(current) is type(value):
        return current.merge(value)
    return copy.deepcopy(value)


class Entity(object):
    FIELDS = ()

    def __init__(self, extensions=None, **kwargs):
        self.extensions = dict(extensions or {})
        for f in self.FIELDS:
            setattr(self, f.attr, _empty(f))
        attrs = {f.attr for f in self.FIELDS}
        for attr, value in kwargs.items():
            if attr not in attrs:
                raise TypeError('%s has no field %r' % (self.__class__.__name__, attr))
            setattr(self, attr, value)

    def __eq__(self, other):
        return type(self) is type(other) and self.as_dict() == other.as_dict()

    def __repr__(self):
        return '%s(%r)' % (self.__class__.__name__, self.as_dict())

    @classmethod
    def from_dict(cls, data):
        """Load an entity from its OpenAPI mapping.

        Keys the entity does not know are logged and skipped.

        Raises:
            ModelError: if a value has the wrong shape.
        """
        fields = {f.key: f for f in cls.FIELDS}
        kwargs = {}
        extensions = {}
        for key, value in data.items():
            if key.startswith('x-'):
                extensions[key] = value
            elif key in fields:
                kwargs[fields[key].attr] = _load_field(fields[key], value)
            else:
                logger.warning('Skipping unknown %s key: %s', cls.__name__, key)
        return cls(extensions=extensions, **kwargs)

    def as_dict(self):
        result = {}
        for f in self.FIELDS:
            value = getattr(self, f.attr)
            if _is_unset(f, value):
                continue
            result[f.key] = _dump(f, value)
        result.update(copy.deepcopy(self.extensions))
        return result

    def merge(self, other):
        """Merge `other` into this entity in place, `other` wins on conflict."""
        for f in self.FIELDS:
            value = getattr(other, f.attr)
            current = getattr(self, f.attr)
            if f.kind == FLAG:
                if value:
                    setattr(self, f.attr, True)
            elif f.kind in (LIST, LIST_OF):
                current.extend(copy.deepcopy(value))
            elif f.kind == MAP:
                current.update(copy.deepcopy(value))
            elif f.kind == MAP_OF:
                for name, item in value.items():
                    current[name] = _merge_item(current.get(name), item)
            elif value is None:
                continue
            elif f.kind in (OBJECT, BOOL_OR_OBJECT):
                setattr(self, f.attr, _merge_item(current, value))
            else:
                setattr(self, f.attr, value)
        self.extensions.update(copy.deepcopy(other.extensions))
        return self


class Reference(Entity):
    FIELDS = (
        field('ref', '$ref'),
        field('summary'),
        field('description'),
    )
    is_reference = True

    @classmethod
    def to_schema(cls, name):
        return cls(ref=SCHEMA_REF_PREFIX + name)

    @property
    def schema_name(self):
        if self.ref and self.ref.startswith(SCHEMA_REF_PREFIX):
            return self.ref[len(SCHEMA_REF_PREFIX):]
        return None


class ExternalDocs(Entity):
    FIELDS = (
        field('description'),
        field('url'),
    )


class Contact(Entity):
    FIELDS = (
        field('name'),
        field('url'),
        field('email'),
    )


class License(Entity):
    FIELDS = (
        field('name'),
        field('url'),
    )


class Info(Entity):
    FIELDS = (
        field('title'),
        field('description'),
        field('terms_of_service', 'termsOfService'),
        field('contact', kind=OBJECT, cls=Contact),
        field('license', kind=OBJECT, cls=License),
        field('version'),
    )


class Server(Entity):
    FIELDS = (
        field('url'),
        field('description'),
        field('variables', kind=MAP),
    )


class Tag(Entity):
    FIELDS = (
        field('name'),
        field('description'),
        field('external_docs', 'externalDocs', kind=OBJECT, cls=ExternalDocs),
    )


class Schema(Entity):
    """A schema. `from_dict` returns a `Reference` for `$ref` mappings."""

    FIELDS = ()
    is_reference = False

    @classmethod
    def from_dict(cls, data):
        if '$ref' in data:
            return Reference.from_dict(data)
        return super().from_dict(data)


Schema.FIELDS = (
    field('nullable', kind=FLAG),
    field('discriminator', kind=MAP),
    field('read_only', 'readOnly', kind=FLAG),
    field('write_only', 'writeOnly', kind=FLAG),
    field('external_docs', 'externalDocs', kind=OBJECT, cls=ExternalDocs),
    field('example'),
    field('deprecated', kind=FLAG),
    field('title'),
    field('multiple_of', 'multipleOf'),
    field('maximum'),
    field('exclusive_maximum', 'exclusiveMaximum', kind=FLAG),
    field('minimum'),
    field('exclusive_minimum', 'exclusiveMinimum', kind=FLAG),
    field('max_length', 'maxLength'),
    field('min_length', 'minLength'),
    field('pattern'),
    field('max_items', 'maxItems'),
    field('min_items', 'minItems'),
    field('unique_items', 'uniqueItems', kind=FLAG),
    field('max_properties', 'maxProperties'),
    field('min_properties', 'minProperties'),
    field('required', kind=LIST),
    field('enum', kind=LIST),
    field('type'),
    field('all_of', 'allOf', kind=LIST_OF, cls=Schema),
    field('one_of', 'oneOf', kind=LIST_OF, cls=Schema),
    field('any_of', 'anyOf', kind=LIST_OF, cls=Schema),
    field('not_', 'not', kind=OBJECT, cls=Schema),
    field('items', kind=OBJECT, cls=Schema),
    field('properties', kind=MAP_OF, cls=Schema),
    field('additional_properties', 'additionalProperties', kind=BOOL_OR_OBJECT, cls=Schema),
    field('default'),
    field('description'),
    field('format'),
)


class MediaType(Entity):
    FIELDS = (
        field('schema', kind=OBJECT, cls=Schema),
        field('example'),
        field('examples', kind=MAP),
        field('encoding', kind=MAP),
    )


class Parameter(Entity):
    FIELDS = (
        field('name'),
        field('in_', 'in'),
        field('description'),
        field('required', kind=FLAG),
        field('deprecated', kind=FLAG),
        field('allow_empty_value', 'allowEmptyValue', kind=FLAG),
        field('style'),
        field('explode', kind=FLAG),
        field('allow_reserved', 'allowReserved', kind=FLAG),
        field('schema', kind=OBJECT, cls=Schema),
        field('example'),
    )


class RequestBody(Entity):
    FIELDS = (
        field('description'),
        field('content', kind=MAP_OF, cls=MediaType),
        field('required', kind=FLAG),
    )


class Response(Entity):
    FIELDS = (
        field('description'),
        field('headers', kind=MAP),
        field('content', kind=MAP_OF, cls=MediaType),
        field('links', kind=MAP),
    )


class Operation(Entity):
    FIELDS = (
        field('tags', kind=LIST),
        field('summary'),
        field('description'),
        field('external_docs', 'externalDocs', kind=OBJECT, cls=ExternalDocs),
        field('operation_id', 'operationId'),
        field('parameters', kind=LIST_OF, cls=Parameter),
        field('request_body', 'requestBody', kind=OBJECT, cls=RequestBody),
        field('responses', kind=MAP_OF, cls=Response),
        field('callbacks', kind=MAP),
        field('deprecated', kind=FLAG),
        field('security', kind=LIST),
        field('servers', kind=LIST_OF, cls=Server),
    )


class ServiceExtension(Entity):
    """Operation data shared by every operation of a service."""

    FIELDS = (
        field('tags', kind=LIST),
        field('external_docs', 'externalDocs', kind=OBJECT, cls=ExternalDocs),
        field('parameters', kind=LIST_OF, cls=Parameter),
        field('security', kind=LIST),
        field('servers', kind=LIST_OF, cls=Server),
    )


class PathItem(Entity):
    VERBS = ('get', 'put', 'post', 'delete', 'options', 'head', 'patch', 'trace')

    FIELDS = (
        field('summary'),
        field('description'),
        field('get', kind=OBJECT, cls=Operation),
        field('put', kind=OBJECT, cls=Operation),
        field('post', kind=OBJECT, cls=Operation),
        field('delete', kind=OBJECT, cls=Operation),
        field('options', kind=OBJECT, cls=Operation),
        field('head', kind=OBJECT, cls=Operation),
        field('patch', kind=OBJECT, cls=Operation),
        field('trace', kind=OBJECT, cls=Operation),
        field('servers', kind=LIST_OF, cls=Server),
        field('parameters', kind=LIST_OF, cls=Parameter),
    )

    @property
    def operations(self):
        """The operations set on this path, in verb order."""
        return [getattr(self, verb) for verb in self.VERBS if getattr(self, verb) is not None]


class Components(Entity):
    FIELDS = (
        field('schemas', kind=MAP_OF, cls=Schema),
        field('responses', kind=MAP),
        field('parameters', kind=MAP),
        field('examples', kind=MAP),
        field('request_bodies', 'requestBodies', kind=MAP),
        field('headers', kind=MAP),
        field('security_schemes', 'securitySchemes', kind=MAP),
        field('links', kind=MAP),
        field('callbacks', kind=MAP),
    )


class Document(Entity):
    FIELDS = (
        field('openapi'),
        field('info', kind=OBJECT, cls=Info),
        field('servers', kind=LIST_OF, cls=Server),
        field('paths', kind=MAP_OF, cls=PathItem),
        field('components', kind=OBJECT, cls=Components),
        field('security', kind=LIST),
        field('tags', kind=LIST_OF, cls=Tag),
        field('external_docs', 'externalDocs', kind=OBJECT, cls=ExternalDocs),
    )

    def __init__(self, extensions=None, **kwargs):
        super().__init__(extensions, **kwargs)
        if self.openapi is None:
            self.openapi = OPENAPI_VERSION
        if self.info is None:
            self.info = Info()
        if self.components is None:
            self.components = Components()

    @property
    def schemas(self):
        return self.components.schemas
