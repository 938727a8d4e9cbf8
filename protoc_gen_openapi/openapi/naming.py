"""Schema, property and path parameter naming."""

from frozendict import frozendict

from protoc_gen_openapi.api_proto_plugin import constants

# Schema names for types whose JSON mapping is not their message structure.
BUILTIN_SCHEMA_NAMES = frozendict({
    constants.VALUE: 'GoogleProtobufValue',
    constants.ANY: 'GoogleProtobufAny',
})


def singular(plural):
    """Collection name to resource name, e.g. shelves -> shelf.

    Suffix heuristic rather than a dictionary, so already singular names
    ending in `s` lose it (status -> statu).
    """
    if plural.endswith('ves'):
        return plural[:-3] + 'f'
    if plural.endswith('ies'):
        return plural[:-3] + 'y'
    if plural.endswith('s'):
        return plural[:-1]
    return plural


def message_name(message):
    """Message name, prefixed by its enclosing message if nested."""
    if message.parent is not None:
        return '%s_%s' % (message.parent.name, message.name)
    return message.name


def apply_naming(name, naming):
    if naming != 'json':
        return name
    if len(name) > 1:
        return name[0].upper() + name[1:]
    return name.lower()


def format_message_name(config, message):
    """Component schema name for a message."""
    name = message_name(message)
    if not config.fq_schema_naming:
        name = BUILTIN_SCHEMA_NAMES.get(message.full_name, name)
    name = apply_naming(name, config.naming)
    if config.fq_schema_naming:
        name = '%s.%s' % (message.package, name)
    return name


def format_field_name(config, field):
    if config.naming == 'proto':
        return field.name
    return field.json_name


def find_and_format_field_name(config, name, message):
    """Formatted name of the field called `name`, or `name` if there is none."""
    field = message.field(name) if message is not None else None
    if field is None:
        return name
    return format_field_name(config, field)
