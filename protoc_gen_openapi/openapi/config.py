"""Generator configuration.

Every option is optional, `None` meaning unset, so that configurations can be
layered with `merge`. `with_defaults` fills the unset options from `DEFAULTS`.
"""

from frozendict import frozendict

from protoc_gen_openapi.exceptions import ConfigurationError

NAMING_CONVENTIONS = ('proto', 'json')
ENUM_TYPES = ('string', 'integer')
OUTPUT_MODES = ('merged', 'source_relative')
OUTPUT_FORMATS = ('yaml', 'json')

DEFAULTS = frozendict(
    version='1.0.0',
    title='API',
    description='Generated API',
    naming='proto',
    fq_schema_naming=False,
    enum_type='string',
    circular_depth=2,
    default_response=True,
    output_mode='merged',
    output_format='yaml',
    path_prefix='',
    services=(),
    base=None)

TRUE_VALUES = ('true', '1', 'yes')
FALSE_VALUES = ('false', '0', 'no')


def _parse_str(key, value):
    return value


def _parse_bool(key, value):
    if value.lower() in TRUE_VALUES:
        return True
    if value.lower() in FALSE_VALUES:
        return False
    raise ConfigurationError('%s must be a boolean, got %r' % (key, value))


def _parse_int(key, value):
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError('%s must be an integer, got %r' % (key, value))


def _parse_list(key, value):
    return tuple(item.strip() for item in value.split(';') if item.strip())


# Plugin parameter key -> (option, parser).
PARAMS = frozendict(
    version=('version', _parse_str),
    title=('title', _parse_str),
    description=('description', _parse_str),
    naming=('naming', _parse_str),
    fq_schema_naming=('fq_schema_naming', _parse_bool),
    enum_type=('enum_type', _parse_str),
    depth=('circular_depth', _parse_int),
    default_response=('default_response', _parse_bool),
    output_mode=('output_mode', _parse_str),
    format=('output_format', _parse_str),
    path_prefix=('path_prefix', _parse_str),
    services=('services', _parse_list),
    base=('base', _parse_str))


class Configuration(object):

    def __init__(self, **options):
        unknown = set(options) - set(DEFAULTS)
        if unknown:
            raise ConfigurationError('Unknown configuration options: %s' % ', '.join(sorted(unknown)))
        for name in DEFAULTS:
            setattr(self, name, options.get(name))

    def __eq__(self, other):
        return isinstance(other, Configuration) and self.as_dict() == other.as_dict()

    def __repr__(self):
        return 'Configuration(%s)' % ', '.join(
            '%s=%r' % (k, v) for k, v in self.as_dict().items() if v is not None)

    @classmethod
    def defaults(cls):
        return cls(**DEFAULTS)

    @classmethod
    def from_params(cls, params):
        """Configuration from the plugin parameter dict.

        Raises:
            ConfigurationError: for unknown keys or values of the wrong type.
        """
        options = {}
        for key, value in params.items():
            if key not in PARAMS:
                raise ConfigurationError('Unknown plugin parameter: %s' % key)
            option, parse = PARAMS[key]
            options[option] = parse(key, value)
        return cls(**options)

    def as_dict(self):
        return {name: getattr(self, name) for name in DEFAULTS}

    def merge(self, other):
        """New configuration with the options set in `other` taking precedence."""
        merged = Configuration(**self.as_dict())
        for name, value in other.as_dict().items():
            if value is not None:
                setattr(merged, name, value)
        return merged

    def with_defaults(self):
        return Configuration.defaults().merge(self)

    def validate(self):
        """Check option values, unset options are not checked.

        An empty title is allowed, it lets a single service name the document.

        Raises:
            ConfigurationError: on the first invalid option.
        """
        if self.version is not None and not self.version:
            raise ConfigurationError('version is required')
        for name, allowed in (('naming', NAMING_CONVENTIONS), ('enum_type', ENUM_TYPES),
                              ('output_mode', OUTPUT_MODES), ('output_format', OUTPUT_FORMATS)):
            value = getattr(self, name)
            if value is not None and value not in allowed:
                raise ConfigurationError(
                    '%s must be one of %s, got %r' % (name, ', '.join(allowed), value))
        if self.circular_depth is not None and self.circular_depth < 1:
            raise ConfigurationError('circular_depth must be greater than 0')
        return self
