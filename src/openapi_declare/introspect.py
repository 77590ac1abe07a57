"""Derive components from storage column descriptions.

Serializer attributes are matched against table columns: associations become
arrays of the related component, columns map to property options through
their SQL type. Unlike the OpenAPI compiler this mapping is strict, and an
unrecognised column type raises :class:`UnknownColumnTypeError`.
"""

import logging
import re
from collections.abc import Callable, Iterable, Mapping
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, Field

from openapi_declare.errors import UnknownColumnTypeError
from openapi_declare.registry import Registry
from openapi_declare.schema.base import Component

logger = logging.getLogger(__name__)

DATETIME_TAG = "date-time"

NUMERIC_SQL_TYPES = {"integer", "bigint", "smallint", "double precision", "real"}
STRING_SQL_TYPES = {"string", "text", "uuid"}
DATETIME_SQL_TYPES = {"date", "timestamp", "timestamptz"}
OBJECT_SQL_TYPES = {"json", "jsonb"}

_NUMERIC_PATTERN = re.compile(r"^(numeric|decimal)(\(.*\))?$")
_STRING_PATTERN = re.compile(r"^(character varying|varchar|character|char)(\(.*\))?$")
_TIMESTAMP_PATTERN = re.compile(r"^timestamp(\(\d+\))? with(out)? time zone$")


class ColumnInfo(BaseModel):
    """What a storage layer reports about one column."""

    sql_type: str
    array: bool = False
    nullable: bool = True
    comment: str = ""
    allowable_values: list[Any] | None = None


class Association(BaseModel):
    """A serializer attribute backed by another resource."""

    resource_name: str


class ResourceInfo(BaseModel):
    """The attributes a serializer exposes, and which of them are associations."""

    attributes: list[str]
    associations: dict[str, Association] = Field(default_factory=dict)


@runtime_checkable
class ModelIntrospector(Protocol):
    """Anything that can turn a resource/model pair into a component."""

    def derive_component(self, component_name: str, resource: Any, model: Any) -> Component: ...


class ColumnIntrospector:
    """:class:`ModelIntrospector` over a :class:`ResourceInfo` and a column mapping."""

    def __init__(self, registry: Registry):
        self.registry = registry

    def derive_component(
        self,
        component_name: str,
        resource: ResourceInfo,
        model: Mapping[str, ColumnInfo],
        configure: Callable[[Component], None] | None = None,
    ) -> Component:
        return derive_component(
            self.registry,
            component_name,
            resource.attributes,
            model,
            resource.associations,
            configure,
        )


def scalar_tag_for(sql_type: str) -> str:
    """Map an SQL column type to a property type tag."""
    normalized = sql_type.strip().lower()
    if normalized in NUMERIC_SQL_TYPES or _NUMERIC_PATTERN.match(normalized):
        return "number"
    if normalized in STRING_SQL_TYPES or _STRING_PATTERN.match(normalized):
        return "string"
    if normalized == "boolean":
        return "boolean"
    if normalized in DATETIME_SQL_TYPES or _TIMESTAMP_PATTERN.match(normalized):
        return DATETIME_TAG
    if normalized in OBJECT_SQL_TYPES:
        return "object"
    raise UnknownColumnTypeError(sql_type)


def property_options_for_column(column: ColumnInfo) -> dict[str, Any]:
    """Build ``add_property`` options for one column."""
    tag = scalar_tag_for(column.sql_type)
    options: dict[str, Any] = {
        "description": column.comment,
        "nullable": column.nullable,
        "allowable_values": column.allowable_values,
    }
    if column.array and tag != "object":
        options.update(type="array", of=tag)
    else:
        options["type"] = tag
    return options


def derive_component(
    registry: Registry,
    name: str,
    attributes: Iterable[str],
    columns: Mapping[str, ColumnInfo],
    associations: Mapping[str, Association] | None = None,
    configure: Callable[[Component], None] | None = None,
) -> Component:
    """Register an object component whose properties come from storage metadata.

    ``configure`` runs first, so properties it declares take precedence over
    derived ones. Attributes with neither an association nor a column are
    skipped.
    """
    associations = associations or {}
    component = registry.component(name, configure, type="object")

    for attribute in attributes:
        if attribute in component.properties:
            continue
        if attribute in associations:
            component.add_property(attribute, type="array", of=associations[attribute].resource_name)
            continue
        column = columns.get(attribute)
        if column is None:
            logger.debug(f"{name}.{attribute}: no column, skipped")
            continue
        try:
            options = property_options_for_column(column)
        except UnknownColumnTypeError as e:
            raise UnknownColumnTypeError(e.sql_type, f"{name}.{attribute}") from e
        component.add_property(attribute, **options)
    return component
