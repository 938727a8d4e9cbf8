class OpenAPIGeneratorError(Exception):
    """Base error class for errors that abort generation."""


class ConfigurationError(OpenAPIGeneratorError):
    pass


class BaseDocumentError(OpenAPIGeneratorError):
    pass
