"""
Resource discovery for the reflection client.

This module scans the services of a schema registry and finds the ones that
follow the conventional Get/List/Update/Delete (and optionally Create) shape.
Each match becomes a ResourceDescriptor.
"""

import logging

from google.protobuf.descriptor import (
    Descriptor,
    FieldDescriptor,
    MethodDescriptor as ProtoMethodDescriptor,
    ServiceDescriptor,
)
from google.protobuf.message import Message

from ..resources.descriptor import (
    DeleteMethod,
    GetMethod,
    ListMethod,
    MethodDescriptor,
    ObjectMethod,
    ResourceDescriptor,
)
from ..schema.fields import FieldHandle, find_field
from ..schema.registry import SchemaRegistry
from ..utils.errors import SchemaInconsistencyError

logger = logging.getLogger(__name__)

# Method names
CREATE_METHOD = "Create"
DELETE_METHOD = "Delete"
GET_METHOD = "Get"
LIST_METHOD = "List"
UPDATE_METHOD = "Update"

# Field names
FILTER_FIELD = "filter"
ID_FIELD = "id"
ITEMS_FIELD = "items"
OBJECT_FIELD = "object"


def method_path(method: ProtoMethodDescriptor) -> str:
    """
    Build the wire path of a method.

    Examples:
        >>> method_path(clusters_service.methods_by_name["Get"])
        '/fulfillment.v1.Clusters/Get'
    """
    return f"/{method.containing_service.full_name}/{method.name}"


class ResourceDiscoverer:
    """
    Discoverer of resource types in a schema registry.

    A service qualifies when:
    - It has methods named exactly Get, List, Update and Delete.
    - The Get request has a singular string ``id`` field and the Get response a
      singular message ``object`` field. The type of that field is the object
      type of the resource.
    - The List request has a non repeated string ``filter`` field and the List
      response a repeated ``items`` field of the object type.
    - The Update request and response have a singular ``object`` field of the
      object type.
    - The Delete request has a singular string ``id`` field.

    A Create method with ``object`` fields of the object type is recorded when
    present, but it isn't required.
    """

    def __init__(self, schema: SchemaRegistry):
        """
        Initialize the resource discoverer.

        Args:
            schema: SchemaRegistry to scan and to create templates from
        """
        self.schema = schema

    def discover(self) -> list[ResourceDescriptor]:
        """
        Scan all the services of the schema registry.

        Returns:
            The descriptors of the resources found, in service enumeration order

        Raises:
            SchemaInconsistencyError: If a type used by a method can't be
                resolved. Nothing is returned in that case.
        """
        results = []
        for service in self.schema.services():
            resource = self.discover_service(service)
            if resource is not None:
                results.append(resource)
        logger.info(f"Discovered {len(results)} resource types")
        return results

    def discover_service(self, service: ServiceDescriptor) -> ResourceDescriptor | None:
        """
        Check a single service and build its descriptor.

        Returns:
            The descriptor, or None if the service isn't a resource service
        """
        logger.debug(f"Scanning service {service.full_name}")
        methods = service.methods_by_name
        get_method = methods.get(GET_METHOD)
        list_method = methods.get(LIST_METHOD)
        update_method = methods.get(UPDATE_METHOD)
        delete_method = methods.get(DELETE_METHOD)
        if None in (get_method, list_method, update_method, delete_method):
            logger.debug(
                f"Service {service.full_name} doesn't have the Get, List, Update "
                f"and Delete methods, it isn't a resource service"
            )
            return None

        get_id = self._id_field(get_method.input_type)
        if get_id is None:
            return self._skip(service, "Get request has no string 'id' field")
        get_object = self._object_field(get_method.output_type)
        if get_object is None:
            return self._skip(service, "Get response has no message 'object' field")
        object_type = get_object.message_type

        list_filter = find_field(
            list_method.input_type, FILTER_FIELD, FieldDescriptor.TYPE_STRING
        )
        if list_filter is None:
            return self._skip(service, "List request has no string 'filter' field")
        list_items = find_field(
            list_method.output_type,
            ITEMS_FIELD,
            FieldDescriptor.TYPE_MESSAGE,
            repeated=True,
        )
        if list_items is None or not self._same_type(list_items, object_type):
            return self._skip(service, "List response has no repeated 'items' field")

        update_in = self._object_field(update_method.input_type)
        update_out = self._object_field(update_method.output_type)
        if not (
            self._same_type(update_in, object_type)
            and self._same_type(update_out, object_type)
        ):
            return self._skip(service, "Update request or response has no 'object' field")

        delete_id = self._id_field(delete_method.input_type)
        if delete_id is None:
            return self._skip(service, "Delete request has no string 'id' field")

        create = None
        create_method = methods.get(CREATE_METHOD)
        if create_method is not None:
            create_in = self._object_field(create_method.input_type)
            create_out = self._object_field(create_method.output_type)
            if self._same_type(create_in, object_type) and self._same_type(
                create_out, object_type
            ):
                create = ObjectMethod(
                    method=self._method(create_method),
                    request_object=create_in,
                    response_object=create_out,
                )
            else:
                logger.debug(
                    f"Ignoring Create method of service {service.full_name}, "
                    f"its request or response has no 'object' field"
                )

        logger.debug(
            f"Service {service.full_name} manages objects of type {object_type.full_name}"
        )
        return ResourceDescriptor(
            descriptor=object_type,
            template=self._template(object_type.full_name),
            get=GetMethod(
                method=self._method(get_method),
                id=get_id,
                object=get_object,
            ),
            list=ListMethod(
                method=self._method(list_method),
                filter=list_filter,
                items=list_items,
            ),
            update=ObjectMethod(
                method=self._method(update_method),
                request_object=update_in,
                response_object=update_out,
            ),
            delete=DeleteMethod(
                method=self._method(delete_method),
                id=delete_id,
            ),
            create=create,
        )

    def _skip(self, service: ServiceDescriptor, reason: str) -> None:
        logger.debug(f"Skipping service {service.full_name}: {reason}")
        return None

    def _id_field(self, message_type: Descriptor) -> FieldHandle | None:
        return find_field(
            message_type, ID_FIELD, FieldDescriptor.TYPE_STRING, singular=True
        )

    def _object_field(self, message_type: Descriptor) -> FieldHandle | None:
        return find_field(
            message_type, OBJECT_FIELD, FieldDescriptor.TYPE_MESSAGE, singular=True
        )

    def _same_type(self, handle: FieldHandle | None, object_type: Descriptor) -> bool:
        if handle is None:
            return False
        return handle.message_type.full_name == object_type.full_name

    def _method(self, method: ProtoMethodDescriptor) -> MethodDescriptor:
        return MethodDescriptor(
            path=method_path(method),
            request_template=self._template(method.input_type.full_name),
            response_template=self._template(method.output_type.full_name),
        )

    def _template(self, full_name: str) -> Message:
        try:
            return self.schema.new_message(full_name)
        except KeyError as e:
            raise SchemaInconsistencyError(
                f"Message type '{full_name}' is used by a registered method but "
                f"can't be found in the schema registry"
            ) from e
