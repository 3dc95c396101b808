"""
Field handles: typed access to message fields resolved by name.

A FieldHandle is created once, at discovery time, from a message descriptor
and a field name. Afterwards it reads and writes that field on any message
instance of that type without further lookups by name.
"""

from dataclasses import dataclass

from google.protobuf.descriptor import Descriptor, FieldDescriptor
from google.protobuf.message import Message


@dataclass(frozen=True)
class FieldHandle:
    """Resolved field of a message type."""

    field: FieldDescriptor

    @property
    def name(self) -> str:
        return self.field.name

    @property
    def repeated(self) -> bool:
        return self.field.is_repeated

    @property
    def message_type(self) -> Descriptor | None:
        return self.field.message_type

    def get(self, message: Message):
        return getattr(message, self.field.name)

    def set_string(self, message: Message, value: str) -> None:
        setattr(message, self.field.name, value)

    def set_message(self, message: Message, value: Message) -> None:
        # Python messages can't share sub-messages, so this stores a copy.
        getattr(message, self.field.name).CopyFrom(value)

    def get_list(self, message: Message) -> list[Message]:
        return list(getattr(message, self.field.name))


def find_field(
    message_type: Descriptor,
    name: str,
    field_type: int,
    *,
    repeated: bool = False,
    singular: bool = False,
) -> FieldHandle | None:
    """
    Resolve a field by exact name and check its shape.

    Args:
        message_type: Descriptor of the message that should contain the field
        name: Exact field name
        field_type: Expected ``FieldDescriptor.TYPE_*`` constant
        repeated: Require the field to be repeated
        singular: Require the field to be a plain optional field. When neither
            ``repeated`` nor ``singular`` is set any non-repeated field is
            accepted.

    Returns:
        The handle, or None if the field is missing or has the wrong shape

    Examples:
        >>> find_field(request_type, "id", FieldDescriptor.TYPE_STRING, singular=True)
    """
    field = message_type.fields_by_name.get(name)
    if field is None:
        return None
    if repeated:
        if not field.is_repeated:
            return None
    elif singular:
        if field.is_repeated or field.is_required:
            return None
    elif field.is_repeated:
        return None
    if field.type != field_type:
        return None
    return FieldHandle(field)
