"""Finds malformed declarations before they turn into malformed specs."""

from openapi_declare.errors import UnknownStatusError
from openapi_declare.registry import Registry
from openapi_declare.schema.base import SchemaNode, Shape
from openapi_declare.schema.status import status_to_code


def check_node(node: SchemaNode, location: str, known: set[str]) -> dict[str, str]:
    """Check one node and its nested properties.

    Returns dict of {location: error_message} for problems found.
    """
    errors = {}
    if node.shape is Shape.ARRAY and not node.of:
        errors[location] = "array type requires 'of'"
    elif node.shape is Shape.REFERENCE and node.reference_target not in known:
        errors[location] = f"references unknown component '{node.reference_target}'"

    for name, child in node.properties.items():
        errors.update(check_node(child, f"{location}.properties.{name}", known))
    return errors


def check_components(registry: Registry) -> dict[str, str]:
    errors = {}
    known = registry.component_names()
    seen: set[str] = set()
    for component in registry.components:
        location = f"components.{component.name}"
        if component.name in seen:
            errors[location] = "component declared more than once"
        seen.add(component.name)
        errors.update(check_node(component, location, known))
    return errors


def check_endpoints(registry: Registry) -> dict[str, str]:
    errors = {}
    known = registry.component_names()
    for index, endpoint in enumerate(registry.endpoints):
        location = f"endpoints[{index}]"
        if not endpoint.path:
            errors[f"{location}.path"] = "endpoint has no path"
        if not endpoint.operations:
            errors[f"{location}.operations"] = "endpoint declares no operations"

        for parameter in endpoint.parameters.parameters:
            errors.update(check_node(parameter, f"{location}.parameters.{parameter.name}", known))
        if endpoint.request_body is not None:
            errors.update(check_node(endpoint.request_body, f"{location}.request_body", known))

        for status, response in endpoint.responses.items():
            response_location = f"{location}.responses.{status}"
            try:
                status_to_code(status)
            except UnknownStatusError as e:
                errors[response_location] = e.to_message()
                continue
            errors.update(check_node(response, response_location, known))
    return errors


def validate_declarations(registry: Registry) -> dict[str, str]:
    """Run all declaration checks.

    Returns dict of {location: error_message}; empty when every declaration
    compiles cleanly.
    """
    errors = {}
    errors.update(check_components(registry))
    errors.update(check_endpoints(registry))
    return errors
