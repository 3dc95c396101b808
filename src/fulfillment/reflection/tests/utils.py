"""
Helpers to build test schemas, fake transports and test servers.

Schemas are built at runtime from descriptor protos and added to a private
descriptor pool, so tests need neither ``protoc`` nor generated modules.
"""

from concurrent import futures

import grpc
from google.protobuf import descriptor_pool
from google.protobuf.descriptor_pb2 import (
    DescriptorProto,
    FieldDescriptorProto,
    FileDescriptorProto,
)

from fulfillment.reflection.schema.registry import SchemaRegistry
from fulfillment.reflection.utils.errors import TransportError

PACKAGE = "fulfillment.v1"

STRING = FieldDescriptorProto.TYPE_STRING
INT32 = FieldDescriptorProto.TYPE_INT32
MESSAGE = FieldDescriptorProto.TYPE_MESSAGE


def add_message(file_proto: FileDescriptorProto, name: str) -> DescriptorProto:
    return file_proto.message_type.add(name=name)


def add_field(
    message: DescriptorProto,
    name: str,
    field_type: int,
    type_name: str | None = None,
    repeated: bool = False,
) -> FieldDescriptorProto:
    number = len(message.field) + 1
    field = message.field.add(
        name=name,
        number=number,
        type=field_type,
        label=(
            FieldDescriptorProto.LABEL_REPEATED
            if repeated
            else FieldDescriptorProto.LABEL_OPTIONAL
        ),
        json_name=name,
    )
    if type_name is not None:
        field.type_name = type_name
    return field


def find_message(file_proto: FileDescriptorProto, name: str) -> DescriptorProto:
    for message in file_proto.message_type:
        if message.name == name:
            return message
    raise KeyError(name)


def find_field(message: DescriptorProto, name: str) -> FieldDescriptorProto:
    for field in message.field:
        if field.name == name:
            return field
    raise KeyError(name)


def qualified(file_proto: FileDescriptorProto, name: str) -> str:
    return f".{file_proto.package}.{name}"


def add_crud_service(
    file_proto: FileDescriptorProto,
    service_name: str,
    object_name: str,
    create: bool = True,
    methods: tuple[str, ...] = ("Get", "List", "Update", "Delete"),
) -> None:
    """
    Add a service following the CRUD convention for ``object_name``.

    Request and response messages are named ``<service><method>Request`` and
    ``<service><method>Response``, as in the real API. Tests tweak the
    returned file proto to break the convention.
    """
    object_type = qualified(file_proto, object_name)
    names = list(methods)
    if create:
        names.append("Create")

    for method in names:
        request = add_message(file_proto, f"{service_name}{method}Request")
        response = add_message(file_proto, f"{service_name}{method}Response")
        if method in ("Get", "Delete"):
            add_field(request, "id", STRING)
        if method == "Get":
            add_field(response, "object", MESSAGE, object_type)
        if method == "List":
            add_field(request, "offset", INT32)
            add_field(request, "limit", INT32)
            add_field(request, "filter", STRING)
            add_field(response, "size", INT32)
            add_field(response, "total", INT32)
            add_field(response, "items", MESSAGE, object_type, repeated=True)
        if method in ("Update", "Create"):
            add_field(request, "object", MESSAGE, object_type)
            add_field(response, "object", MESSAGE, object_type)

    service = file_proto.service.add(name=service_name)
    for method in names:
        service.method.add(
            name=method,
            input_type=qualified(file_proto, f"{service_name}{method}Request"),
            output_type=qualified(file_proto, f"{service_name}{method}Response"),
        )


def add_object(file_proto: FileDescriptorProto, name: str) -> DescriptorProto:
    message = add_message(file_proto, name)
    add_field(message, "id", STRING)
    add_field(message, "title", STRING)
    return message


def fulfillment_file(name: str = "fulfillment/v1/fulfillment.proto") -> FileDescriptorProto:
    """
    Build a file resembling the fulfillment API.

    It contains four resource services (Clusters and ClusterOrders with a
    Create method, ClusterTemplates and HostClasses without) and an Events
    service that doesn't follow the convention.
    """
    file_proto = FileDescriptorProto(name=name, package=PACKAGE, syntax="proto3")

    status = add_message(file_proto, "ClusterStatus")
    add_field(status, "state", STRING)
    spec = add_message(file_proto, "ClusterSpec")
    add_field(spec, "size", INT32)
    add_field(spec, "host_class", STRING)
    cluster = add_message(file_proto, "Cluster")
    add_field(cluster, "id", STRING)
    add_field(cluster, "spec", MESSAGE, qualified(file_proto, "ClusterSpec"))
    add_field(cluster, "status", MESSAGE, qualified(file_proto, "ClusterStatus"))
    add_object(file_proto, "ClusterOrder")
    add_object(file_proto, "ClusterTemplate")
    add_object(file_proto, "HostClass")

    add_crud_service(file_proto, "Clusters", "Cluster")
    add_crud_service(file_proto, "ClusterOrders", "ClusterOrder")
    add_crud_service(file_proto, "ClusterTemplates", "ClusterTemplate", create=False)
    add_crud_service(file_proto, "HostClasses", "HostClass", create=False)

    watch_request = add_message(file_proto, "EventsWatchRequest")
    add_field(watch_request, "filter", STRING)
    add_message(file_proto, "EventsWatchResponse")
    events = file_proto.service.add(name="Events")
    events.method.add(
        name="Watch",
        input_type=qualified(file_proto, "EventsWatchRequest"),
        output_type=qualified(file_proto, "EventsWatchResponse"),
    )
    return file_proto


def make_schema(*file_protos: FileDescriptorProto) -> SchemaRegistry:
    """Create a schema registry over a private pool containing the given files."""
    registry = SchemaRegistry(descriptor_pool.DescriptorPool())
    for file_proto in file_protos or (fulfillment_file(),):
        registry.add_file_proto(file_proto)
    return registry


class FakeExecutor:
    """
    Transport that answers from registered functions instead of the network.

    Functions receive the request and return a message that is merged into
    the response, or raise TransportError.
    """

    def __init__(self):
        self.handlers = {}
        self.calls = []

    def register(self, path: str, function) -> None:
        self.handlers[path] = function

    def invoke(self, path, request, response, *, timeout=None, metadata=None):
        sent = request.__class__()
        sent.CopyFrom(request)
        self.calls.append((path, sent, timeout, metadata))
        function = self.handlers.get(path)
        if function is None:
            raise TransportError(
                f"call to '{path}' failed with status UNIMPLEMENTED",
                code=grpc.StatusCode.UNIMPLEMENTED,
            )
        result = function(request)
        if result is not None:
            response.MergeFrom(result)
        return response


class Server:
    """
    gRPC server used only for tests.

    Listens in a randomly selected port of the local host and serves the
    handlers registered before ``start()``, using generic handlers so no
    generated code is needed.
    """

    def __init__(self, schema: SchemaRegistry):
        self.schema = schema
        self._server = grpc.server(futures.ThreadPoolExecutor(max_workers=4))
        self.port = self._server.add_insecure_port("127.0.0.1:0")
        self._methods = {}

    @property
    def address(self) -> str:
        return f"127.0.0.1:{self.port}"

    def register(self, service: str, method: str, function) -> None:
        """
        Register ``function(request, context)`` as implementation of a method.

        Args:
            service: Fully qualified service name (e.g. "fulfillment.v1.Clusters")
            method: Method name (e.g. "Get")
        """
        service_descriptor = self.schema.pool.FindServiceByName(service)
        method_descriptor = service_descriptor.methods_by_name[method]
        request_type = method_descriptor.input_type.full_name
        request_class = self.schema.new_message(request_type).__class__
        handler = grpc.unary_unary_rpc_method_handler(
            function,
            request_deserializer=request_class.FromString,
            response_serializer=lambda message: message.SerializeToString(),
        )
        self._methods.setdefault(service, {})[method] = handler

    def start(self) -> None:
        handlers = [
            grpc.method_handlers_generic_handler(service, methods)
            for service, methods in self._methods.items()
        ]
        self._server.add_generic_rpc_handlers(handlers)
        self._server.start()

    def stop(self) -> None:
        self._server.stop(grace=None)
