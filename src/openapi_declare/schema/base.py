"""Declared schema nodes.

Components, endpoint parameters, request bodies and responses all share one
shape: a (possibly union) type, an optional element/reference target, and an
ordered mapping of nested properties. The compilers in
``openapi_declare.compiler`` read these trees; nothing here knows about
OpenAPI output or runtime validation.
"""

from collections.abc import Callable
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator

from .types import TypeTag, normalize_type


class Shape(str, Enum):
    """How a node compiles, fixed when the node is constructed."""

    REFERENCE = "reference"
    ARRAY = "array"
    UNION = "union"
    OBJECT = "object"
    SCALAR = "scalar"


def classify(type_: Any, of: str | None, as_: str | None) -> Shape:
    if as_ or (type_ == TypeTag.OBJECT.value and of):
        return Shape.REFERENCE
    if type_ == TypeTag.ARRAY.value:
        return Shape.ARRAY
    if isinstance(type_, list):
        return Shape.UNION
    if type_ == TypeTag.OBJECT.value:
        return Shape.OBJECT
    return Shape.SCALAR


class SchemaNode(BaseModel):
    """Fields shared by every describable node."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    type: str | list[Any] | None = None
    of: str | None = None
    description: str = ""
    as_: str | None = Field(default=None, alias="as")
    enum: list[Any] | None = None
    allowable_values: list[Any] | None = None
    nullable: bool = False
    properties: dict[str, "Property"] = Field(default_factory=dict)

    _shape: Shape = PrivateAttr(default=Shape.SCALAR)

    @field_validator("type", "of", mode="before")
    @classmethod
    def _normalize(cls, value: Any) -> Any:
        return normalize_type(value)

    @field_validator("as_", mode="before")
    @classmethod
    def _reference_name(cls, value: Any) -> Any:
        if isinstance(value, Component):
            return value.name
        return None if value is None else str(value)

    @field_validator("description", mode="before")
    @classmethod
    def _blank_description(cls, value: Any) -> str:
        return "" if value is None else str(value)

    def model_post_init(self, __context: Any) -> None:
        self._shape = classify(self.type, self.of, self.as_)

    @property
    def shape(self) -> Shape:
        return self._shape

    @property
    def reference_target(self) -> str | None:
        return self.as_ or self.of

    @property
    def allowed_values(self) -> list[Any] | None:
        """``allowable_values`` when set, otherwise ``enum``."""
        if self.allowable_values is not None:
            return self.allowable_values
        return self.enum

    def add_property(
        self,
        name: str,
        configure: Callable[["Property"], None] | None = None,
        **options: Any,
    ) -> "Property":
        """Declare a nested property and return it for further configuration.

        ``configure`` is called with the new property before returning, so
        nested trees can be built either way::

            user.add_property("address", type="object").add_property("city", type="string")
            user.add_property("tags", lambda p: p.add_property("x", type="string"), type="object")
        """
        child = Property(**options)
        self.properties[str(name)] = child
        if configure is not None:
            configure(child)
        return child


class Property(SchemaNode):
    """A single field, possibly with nested properties."""

    required: bool = True


class Component(SchemaNode):
    """A named, reusable schema referenced elsewhere through ``$ref``."""

    name: str

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, value: Any) -> str:
        return str(value)


class Parameter(SchemaNode):
    """An endpoint input parameter (query, path, header, or cookie)."""

    name: str
    in_: str = Field(default="query", alias="in")
    required: bool = True

    @field_validator("name", "in_", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> str:
        return str(value)


class RequestBody(SchemaNode):
    """The JSON body accepted by an operation."""

    required: bool = True


class Response(SchemaNode):
    """The JSON body returned for one status code."""


class Parameters(BaseModel):
    """Ordered parameters owned by one endpoint."""

    parameters: list[Parameter] = Field(default_factory=list)

    def define(
        self,
        name: str,
        configure: Callable[[Parameter], None] | None = None,
        **options: Any,
    ) -> Parameter:
        parameter = Parameter(name=name, **options)
        if configure is not None:
            configure(parameter)
        self.parameters.append(parameter)
        return parameter

    def is_empty(self) -> bool:
        return not self.parameters


class Endpoint(BaseModel):
    """A path, its HTTP operations, and their inputs and outputs."""

    path: str | None = None
    description: str = ""
    operations: list[str] = Field(default_factory=list)
    parameters: Parameters = Field(default_factory=Parameters)
    request_body: RequestBody | None = None
    responses: dict[int | str, Response] = Field(default_factory=dict)

    def set_path(self, path: str) -> "Endpoint":
        self.path = path
        return self

    def set_description(self, description: str) -> "Endpoint":
        self.description = description
        return self

    def add_operation(self, *verbs: str) -> "Endpoint":
        for verb in verbs:
            verb = str(verb).lower()
            if verb not in self.operations:
                self.operations.append(verb)
        return self

    def add_parameter(
        self,
        name: str,
        configure: Callable[[Parameter], None] | None = None,
        **options: Any,
    ) -> Parameter:
        return self.parameters.define(name, configure, **options)

    def set_request_body(
        self,
        configure: Callable[[RequestBody], None] | None = None,
        **options: Any,
    ) -> RequestBody:
        self.request_body = RequestBody(**options)
        if configure is not None:
            configure(self.request_body)
        return self.request_body

    def add_response(
        self,
        status: int | str,
        configure: Callable[[Response], None] | None = None,
        **options: Any,
    ) -> Response:
        response = Response(**options)
        self.responses[status] = response
        if configure is not None:
            configure(response)
        return response

    def exception_error(
        self,
        status: int | str = "unprocessable_entity",
        description: str = "Validation error",
    ) -> Response:
        """Declare the standard validation-error response body."""
        response = self.add_response(status, type="object", description=description)
        response.add_property("status", type="string", description="Status of the request")
        response.add_property("error_message", type="string", description="Error message")
        response.add_property("errors", type="object", description="Validation errors")
        return response

    def request_validator(self):
        """Compile a validator for this endpoint's parameters and body."""
        from openapi_declare.compiler.request import RequestValidatorCompiler

        return RequestValidatorCompiler(self.parameters, self.request_body).compile()

    def response_validators(self) -> dict:
        """Compile ``{status_code: validator}`` for responses with properties."""
        from openapi_declare.compiler.response import ResponseValidatorCompiler
        from .status import status_to_code

        validators = {}
        for status, response in self.responses.items():
            validator = ResponseValidatorCompiler(response).compile()
            if validator is not None:
                validators[status_to_code(status)] = validator
        return validators


for _model in (SchemaNode, Property, Component, Parameter, RequestBody, Response, Parameters, Endpoint):
    _model.model_rebuild()
