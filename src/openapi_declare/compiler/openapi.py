"""OpenAPI 3.0 document generation from a declaration registry.

The compiler is a pure read of the registry: every call to
:meth:`OpenApiCompiler.compile` walks the declared nodes and returns a fresh
JSON-serializable dict.
"""

import json
import logging
from typing import Any

import yaml

from openapi_declare.compiler.checks import validate_declarations
from openapi_declare.config import ApiInfo
from openapi_declare.errors import DeclarationError
from openapi_declare.registry import Registry
from openapi_declare.schema.base import Endpoint, Property, RequestBody, Response, SchemaNode, Shape
from openapi_declare.schema.status import status_to_code
from openapi_declare.schema.types import normalize_type

logger = logging.getLogger(__name__)

OPENAPI_VERSION = "3.0.0"
CONTENT_TYPE_JSON = "application/json"
REF_PREFIX = "#/components/schemas/"


def ref(name: str) -> dict[str, str]:
    return {"$ref": f"{REF_PREFIX}{name}"}


def stringify_keys(value: Any) -> Any:
    """Recursively convert every mapping key to ``str``."""
    if isinstance(value, dict):
        return {str(key): stringify_keys(item) for key, item in value.items()}
    if isinstance(value, list):
        return [stringify_keys(item) for item in value]
    return value


class OpenApiCompiler:
    """Compiles a :class:`Registry` into an OpenAPI document."""

    def __init__(self, registry: Registry, info: ApiInfo | None = None, strict: bool = False):
        self.registry = registry
        self.info = info or ApiInfo()
        self.strict = strict

    def compile(self) -> dict[str, Any]:
        """Build the full document.

        In strict mode malformed declarations raise :class:`DeclarationError`;
        otherwise they are logged and compiled best-effort.
        """
        problems = validate_declarations(self.registry)
        if problems and self.strict:
            raise DeclarationError(problems)
        for location, message in problems.items():
            logger.warning(f"{location}: {message}")

        document = {
            "openapi": OPENAPI_VERSION,
            "info": self.info.model_dump(),
            "paths": self.build_paths(),
            "components": {"schemas": self.build_components()},
        }
        return stringify_keys(document)

    # --- Schemas ---

    def schema_for(self, node: SchemaNode) -> dict[str, Any]:
        """Compile one node (and its nested properties) to a JSON Schema dict."""
        if node.shape is Shape.REFERENCE:
            return self._reference_schema(node)
        if node.shape is Shape.ARRAY:
            return self._array_schema(node)
        if node.shape is Shape.UNION:
            return self._union_schema(node)
        return self._standard_schema(node)

    def properties_schema(self, properties: dict[str, Property]) -> dict[str, Any]:
        """Compile a properties mapping to its ``required`` and ``properties`` keys."""
        required = [str(name) for name, prop in properties.items() if prop.required]
        compiled = {}
        for name, prop in properties.items():
            schema = self.schema_for(prop)
            if schema:
                compiled[str(name)] = schema

        result: dict[str, Any] = {}
        if required:
            result["required"] = required
        if compiled:
            result["properties"] = compiled
        return result

    def items_schema(self, node: SchemaNode) -> dict[str, Any]:
        if node.of is None:
            return {}
        if self.registry.has_component(node.of):
            return ref(node.of)
        return {"type": node.of}

    def _reference_schema(self, node: SchemaNode) -> dict[str, Any]:
        target = node.reference_target
        if node.type == "array":
            return {"type": "array", "items": ref(target)}
        return {**ref(target), **self._nullable(node)}

    def _array_schema(self, node: SchemaNode) -> dict[str, Any]:
        items = {**self.items_schema(node), **self._nullable(node)}
        if node.of == "object" and node.properties:
            items.update(self.properties_schema(node.properties))
        return {
            "type": node.type,
            "description": node.description,
            "items": items,
        }

    def _union_schema(self, node: SchemaNode) -> dict[str, Any]:
        return {
            "anyOf": [{"type": normalize_type(member)} for member in node.type],
            "description": node.description,
            **self._enum_and_nullable(node),
        }

    def _standard_schema(self, node: SchemaNode) -> dict[str, Any]:
        schema: dict[str, Any] = {}
        if node.type is not None:
            schema["type"] = node.type
        schema["description"] = node.description
        schema.update(self._enum_and_nullable(node))
        schema.update(self.properties_schema(node.properties))
        return schema

    def _nullable(self, node: SchemaNode) -> dict[str, Any]:
        return {"nullable": True} if node.nullable else {}

    def _enum_and_nullable(self, node: SchemaNode) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if node.allowed_values is not None:
            result["enum"] = list(node.allowed_values)
        result.update(self._nullable(node))
        return result

    def _content_schema(self, node: SchemaNode) -> dict[str, Any]:
        schema = self.schema_for(node)
        schema.pop("description", None)
        return schema

    # --- Document sections ---

    def build_paths(self) -> dict[str, Any]:
        paths: dict[str, Any] = {}
        for endpoint in self.registry.endpoints:
            if not endpoint.path:
                continue
            operations = paths.setdefault(endpoint.path, {})
            for operation in endpoint.operations:
                operations[operation] = self.build_operation(endpoint)
        return paths

    def build_operation(self, endpoint: Endpoint) -> dict[str, Any]:
        operation: dict[str, Any] = {
            "parameters": self.build_parameters(endpoint),
            "responses": self.build_responses(endpoint),
        }
        if endpoint.description:
            operation["description"] = endpoint.description
        if endpoint.request_body is not None:
            operation["requestBody"] = self.build_request_body(endpoint.request_body)
        return operation

    def build_parameters(self, endpoint: Endpoint) -> list[dict[str, Any]]:
        return [
            {
                "name": parameter.name,
                "in": parameter.in_,
                "required": parameter.required,
                "description": parameter.description,
                "schema": self._content_schema(parameter),
            }
            for parameter in endpoint.parameters.parameters
        ]

    def build_responses(self, endpoint: Endpoint) -> dict[int, Any]:
        return {
            status_to_code(status): self.build_response(response)
            for status, response in endpoint.responses.items()
        }

    def build_response(self, response: Response) -> dict[str, Any]:
        return {
            "description": response.description,
            "headers": {},
            "content": {CONTENT_TYPE_JSON: {"schema": self._content_schema(response)}},
        }

    def build_request_body(self, request_body: RequestBody) -> dict[str, Any]:
        return {
            "description": request_body.description,
            "required": request_body.required,
            "content": {CONTENT_TYPE_JSON: {"schema": self._content_schema(request_body)}},
        }

    def build_components(self) -> dict[str, Any]:
        return {component.name: self.schema_for(component) for component in self.registry.components}


def render_document(document: dict[str, Any], fmt: str = "json") -> str:
    """Serialize a compiled document as ``json`` or ``yaml``."""
    if fmt == "yaml":
        return yaml.safe_dump(document, sort_keys=False, allow_unicode=True)
    return json.dumps(document, indent=2, ensure_ascii=False) + "\n"
