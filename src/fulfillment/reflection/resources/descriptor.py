"""
Compiled metadata of discovered resource types.

Everything here is built once by the ResourceDiscoverer and never modified
afterwards. Templates are blank messages that are cloned before every use.
"""

from dataclasses import dataclass

from google.protobuf.descriptor import Descriptor
from google.protobuf.message import Message

from ..schema.fields import FieldHandle


def clone(template: Message) -> Message:
    """Return an independent deep copy of a message."""
    result = template.__class__()
    result.CopyFrom(template)
    return result


@dataclass(frozen=True)
class MethodDescriptor:
    """Wire path plus blank request and response templates of one method."""

    path: str
    request_template: Message
    response_template: Message

    def new_request(self) -> Message:
        return clone(self.request_template)

    def new_response(self) -> Message:
        return clone(self.response_template)


@dataclass(frozen=True)
class GetMethod:
    method: MethodDescriptor
    id: FieldHandle
    object: FieldHandle


@dataclass(frozen=True)
class ListMethod:
    method: MethodDescriptor
    filter: FieldHandle
    items: FieldHandle


@dataclass(frozen=True)
class ObjectMethod:
    """A method that sends an object and receives an object (Update, Create)."""

    method: MethodDescriptor
    request_object: FieldHandle
    response_object: FieldHandle


@dataclass(frozen=True)
class DeleteMethod:
    method: MethodDescriptor
    id: FieldHandle


@dataclass(frozen=True)
class ResourceDescriptor:
    """
    Everything needed to operate on one resource type.

    Attributes:
        descriptor: Descriptor of the object message type
        template: Blank object, cloned by ``instance()``
        get, list, update, delete: The mandatory methods
        create: The Create method, or None if the service doesn't have one
    """

    descriptor: Descriptor
    template: Message
    get: GetMethod
    list: ListMethod
    update: ObjectMethod
    delete: DeleteMethod
    create: ObjectMethod | None = None

    @property
    def full_name(self) -> str:
        return self.descriptor.full_name

    @property
    def singular(self) -> str:
        return self.descriptor.name.lower()
