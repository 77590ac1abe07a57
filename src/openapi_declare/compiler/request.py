"""Runtime request validators built from endpoint declarations.

Parameters and request-body properties are flattened into one pydantic model
so query, path and body values are checked and coerced together. Validation
is deliberately shallow: scalars are coerced, nested objects recurse, arrays
are accepted as opaque lists, and enums or unions are not enforced.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, create_model

from openapi_declare.schema.base import Parameter, Parameters, Property, RequestBody, Shape

logger = logging.getLogger(__name__)


class ValidationResult(BaseModel):
    """Outcome of validating one input mapping."""

    success: bool
    data: dict[str, Any] = Field(default_factory=dict)
    errors: dict[str, Any] = Field(default_factory=dict)


def collect_errors(error: ValidationError) -> dict[str, Any]:
    """Nest pydantic error messages by field path.

    ``{"data": {"name": ["Field required"]}}`` for a missing ``data.name``.
    """
    errors: dict[str, Any] = {}
    for item in error.errors():
        loc = [str(part) for part in item["loc"]] or ["__root__"]
        target = errors
        for part in loc[:-1]:
            existing = target.get(part)
            if not isinstance(existing, dict):
                existing = {}
                target[part] = existing
            target = existing
        messages = target.setdefault(loc[-1], [])
        if isinstance(messages, list):
            messages.append(item["msg"])
    return errors


class Validator:
    """Callable wrapper around a generated pydantic model."""

    def __init__(self, model: type[BaseModel]):
        self.model = model

    def __call__(self, values: Mapping[str, Any]) -> ValidationResult:
        try:
            instance = self.model.model_validate(dict(values))
        except ValidationError as e:
            return ValidationResult(success=False, errors=collect_errors(e))
        return ValidationResult(
            success=True,
            data=instance.model_dump(by_alias=True, exclude_unset=True),
        )


class RequestValidatorCompiler:
    """Compiles parameters plus request-body properties into a :class:`Validator`."""

    model_name = "RequestParams"
    number_type: type = int

    def __init__(
        self,
        parameters: Parameters | Iterable[Parameter] | None = None,
        request_body: RequestBody | None = None,
    ):
        if not isinstance(parameters, Parameters):
            parameters = Parameters(parameters=list(parameters or []))
        self.parameters = parameters
        self.request_body = request_body

    def compile(self) -> Validator | None:
        """Return a validator, or ``None`` when there is nothing to validate."""
        body = self.request_body.properties if self.request_body is not None else {}
        if self.parameters.is_empty() and not body:
            return None

        fields: dict[str, Parameter | Property] = {p.name: p for p in self.parameters.parameters}
        fields.update(body)

        logger.debug(f"Compiling {self.model_name} with fields: {list(fields)}")
        return Validator(self.build_model(self.model_name, fields))

    def build_model(self, model_name: str, nodes: Mapping[str, Parameter | Property]) -> type[BaseModel]:
        definitions = {}
        for index, (name, node) in enumerate(nodes.items()):
            definitions[f"field_{index}"] = self.field_definition(model_name, name, node)
        return create_model(
            model_name,
            __config__=ConfigDict(extra="ignore", populate_by_name=False),
            **definitions,
        )

    def field_definition(self, model_name: str, name: str, node: Parameter | Property) -> tuple[Any, Any]:
        required = node.required
        shape = node.shape
        if shape is Shape.OBJECT and node.properties:
            annotation: Any = self.build_model(f"{model_name}_{name}", node.properties)
        elif shape is Shape.ARRAY or (shape is Shape.REFERENCE and node.type == "array"):
            annotation = list[Any]
        elif shape in (Shape.OBJECT, Shape.REFERENCE):
            # referenced components are not re-validated here
            annotation = dict[str, Any]
        elif shape is Shape.UNION:
            annotation = Any
        else:
            annotation = self.scalar_type(node.type)
            if not required and annotation is not str:
                annotation = annotation | None

        if required:
            return annotation, Field(alias=name)
        return annotation, Field(default=None, alias=name)

    def scalar_type(self, type_tag: Any) -> type:
        if type_tag == "number":
            return self.number_type
        if type_tag == "boolean":
            return bool
        return str
