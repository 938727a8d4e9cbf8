"""Source locations and comments of the definitions in a proto file."""

from functools import cached_property

from frozendict import frozendict

from google.protobuf import descriptor_pb2

from protoc_gen_openapi.api_proto_plugin import annotations

_File = descriptor_pb2.FileDescriptorProto
_Message = descriptor_pb2.DescriptorProto

# (kind, enclosing kind) -> field number of the child list in the enclosing
# descriptor, as used in SourceCodeInfo.Location paths.
PATH_FIELDS = frozendict({
    ('message', 'file'): _File.MESSAGE_TYPE_FIELD_NUMBER,
    ('enum', 'file'): _File.ENUM_TYPE_FIELD_NUMBER,
    ('service', 'file'): _File.SERVICE_FIELD_NUMBER,
    ('message', 'message'): _Message.NESTED_TYPE_FIELD_NUMBER,
    ('enum', 'message'): _Message.ENUM_TYPE_FIELD_NUMBER,
    ('field', 'message'): _Message.FIELD_FIELD_NUMBER,
    ('enum_value', 'enum'): descriptor_pb2.EnumDescriptorProto.VALUE_FIELD_NUMBER,
    ('method', 'service'): descriptor_pb2.ServiceDescriptorProto.METHOD_FIELD_NUMBER,
})


def strip_comment(comment):
    """Remove the single space protoc leaves at the start of comment lines."""
    return '\n'.join(line[1:] if line.startswith(' ') else line for line in comment.split('\n'))


class Comment(object):
    """A leading comment, split into its description and annotations."""

    def __init__(self, comment):
        self.raw = comment

    def __bool__(self):
        return bool(self.raw.strip())

    def __repr__(self):
        return 'Comment(%r)' % self.raw

    @cached_property
    def annotations(self):
        return annotations.extract_annotations(self.raw)

    @cached_property
    def description(self):
        return annotations.filter_comment(self.raw)


class SourceCodeInfo(object):
    """Path indexed view of a file's SourceCodeInfo."""

    def __init__(self, name, source_code_info):
        self.name = name
        self.proto = source_code_info

    @cached_property
    def locations(self):
        return {tuple(location.path): location for location in self.proto.location}

    @cached_property
    def file_level_comments(self):
        """Detached comments preceding the first definition of the file.

        protoc attaches these to whichever location follows them, so the
        earliest location carrying detached comments is taken.
        """
        candidates = [
            location for location in self.proto.location if location.leading_detached_comments
        ]
        if not candidates:
            return []
        first = min(candidates, key=lambda location: location.span[0])
        return [strip_comment(comment) for comment in first.leading_detached_comments]

    @cached_property
    def file_level_annotations(self):
        found = {}
        for comment in self.file_level_comments:
            found.update(annotations.extract_annotations(comment))
        return found

    def location_path_lookup(self, path):
        return self.locations.get(tuple(path))

    def leading_comment_path_lookup(self, path):
        location = self.location_path_lookup(path)
        return Comment(strip_comment(location.leading_comments) if location is not None else '')


class TypeContext(object):
    """Name and source path of a definition, extended while traversing a file.

    `name` is the fully qualified proto name, `path` the SourceCodeInfo path
    leading to the definition.
    """

    def __init__(self, source_code_info, name, path=(), kind='file'):
        self.source_code_info = source_code_info
        self.name = name
        self.path = list(path)
        self.kind = kind

    def __repr__(self):
        return '<TypeContext %s %s>' % (self.kind, self.name)

    def extend(self, kind, index, name):
        """Context of the `index`th child definition of `kind`."""
        field_number = PATH_FIELDS[(kind, self.kind)]
        return TypeContext(
            self.source_code_info,
            '%s.%s' % (self.name, name) if self.name else name,
            self.path + [field_number, index],
            kind)

    def extend_message(self, index, name):
        return self.extend('message', index, name)

    def extend_enum(self, index, name):
        return self.extend('enum', index, name)

    def extend_service(self, index, name):
        return self.extend('service', index, name)

    def extend_field(self, index, name):
        return self.extend('field', index, name)

    def extend_enum_value(self, index, name):
        return self.extend('enum_value', index, name)

    def extend_method(self, index, name):
        return self.extend('method', index, name)

    @property
    def location(self):
        return self.source_code_info.location_path_lookup(self.path)

    @property
    def leading_comment(self):
        return self.source_code_info.leading_comment_path_lookup(self.path)
