"""Petstore declarations used by the loader and CLI tests."""

from openapi_declare.registry import Registry

registry = Registry()

registry.component("Category", type="object", description="Pet category").add_property("name", type="string")

pet = registry.component("Pet", type="object", description="A pet for sale")
pet.add_property("id", type="number", description="Pet identifier")
pet.add_property("name", type="string", description="Pet name")
pet.add_property("status", type="string", allowable_values=["available", "pending", "sold"])
pet.add_property("category", as_="Category", nullable=True, required=False)
pet.add_property("tags", type="array", of="string", required=False)


def _list_pets(endpoint):
    endpoint.set_path("/pets").add_operation("get")
    endpoint.add_parameter("limit", type="number", required=False, description="Page size")
    endpoint.add_response("ok", type="array", of="Pet", description="All pets")


def _create_pet(endpoint):
    endpoint.set_path("/pets").add_operation("post")
    body = endpoint.set_request_body(type="object", description="New pet")
    body.add_property("name", type="string")
    body.add_property("status", type="string", required=False)
    endpoint.add_response("created", as_="Pet", description="Created pet")
    endpoint.exception_error()


def _show_pet(endpoint):
    endpoint.set_path("/pets/{petId}").add_operation("get")
    endpoint.add_parameter("petId", in_="path", type="number", description="Pet identifier")
    endpoint.add_response(200, as_="Pet", description="The pet")
    endpoint.add_response("not_found", type="object", description="Missing").add_property("error", type="string")


registry.endpoint(_list_pets)
registry.endpoint(_create_pet)
registry.endpoint(_show_pet)


def broken_registry() -> Registry:
    """A registry with declarations the lint pass rejects."""
    broken = Registry()
    broken.component("Widget", type="object").add_property("parts", type="array")
    endpoint = broken.endpoint()
    endpoint.set_path("/widgets").add_operation("get")
    endpoint.add_response("ok", as_="Gadget")
    return broken
