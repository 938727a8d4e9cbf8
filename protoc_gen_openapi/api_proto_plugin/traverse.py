"""FileDescriptorProto traversal.

A visitor receives each definition with its type_context.TypeContext, inner
definitions first, so that `visit_message` gets the already visited nested
messages and enums and `visit_file` everything defined in the file.
"""

from protoc_gen_openapi.api_proto_plugin import type_context


def traverse_enum(ctx, enum_proto, visitor):
    return visitor.visit_enum(enum_proto, ctx)


def traverse_message(ctx, msg_proto, visitor):
    """Traverse a message definition, nested types first.

    Args:
        ctx: type_context.TypeContext for message type.
        msg_proto: DescriptorProto for message.
        visitor: object with visit_* methods receiving the definition.

    Returns:
        Visitor specific output.
    """
    nested_msgs = [
        traverse_message(ctx.extend_message(index, nested.name), nested, visitor)
        for index, nested in enumerate(msg_proto.nested_type)
    ]
    nested_enums = [
        traverse_enum(ctx.extend_enum(index, nested.name), nested, visitor)
        for index, nested in enumerate(msg_proto.enum_type)
    ]
    return visitor.visit_message(msg_proto, ctx, nested_msgs, nested_enums)


def traverse_file(file_proto, visitor):
    """Traverse a proto file definition.

    Messages and enums are visited before services so that a visitor can
    resolve method types once it reaches them.

    Args:
        file_proto: FileDescriptorProto for file.
        visitor: object with visit_* methods receiving the definitions.

    Returns:
        Visitor specific output.
    """
    ctx = type_context.TypeContext(
        type_context.SourceCodeInfo(file_proto.name, file_proto.source_code_info),
        file_proto.package)
    msgs = [
        traverse_message(ctx.extend_message(index, msg.name), msg, visitor)
        for index, msg in enumerate(file_proto.message_type)
    ]
    enums = [
        traverse_enum(ctx.extend_enum(index, enum.name), enum, visitor)
        for index, enum in enumerate(file_proto.enum_type)
    ]
    services = [
        visitor.visit_service(service, ctx.extend_service(index, service.name))
        for index, service in enumerate(file_proto.service)
    ]
    return visitor.visit_file(file_proto, ctx, services, msgs, enums)
