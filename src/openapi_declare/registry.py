"""Declaration registry.

A :class:`Registry` owns every component and endpoint declared for one API.
Build one at application start, register declarations into it, then hand it
to :class:`~openapi_declare.compiler.openapi.OpenApiCompiler`.
Registration is append-only and not thread-safe; compiling is read-only.
"""

import logging
from collections.abc import Callable
from typing import Any

from openapi_declare.schema.base import Component, Endpoint

logger = logging.getLogger(__name__)


class Registry:
    """Ordered, append-only collections of components and endpoints."""

    def __init__(self) -> None:
        self.components: list[Component] = []
        self.endpoints: list[Endpoint] = []

    def component(
        self,
        name: str,
        configure: Callable[[Component], None] | None = None,
        **options: Any,
    ) -> Component:
        """Register a named component and return it.

        Example::

            user = registry.component("User", type="object", description="A user")
            user.add_property("name", type="string")
        """
        component = Component(name=name, **options)
        self.components.append(component)
        logger.debug(f"Registered component: {component.name}")
        if configure is not None:
            configure(component)
        return component

    def endpoint(self, configure: Callable[[Endpoint], None] | None = None) -> Endpoint:
        """Register an empty endpoint and return it for configuration."""
        endpoint = Endpoint()
        self.endpoints.append(endpoint)
        if configure is not None:
            configure(endpoint)
        logger.debug(f"Registered endpoint: {endpoint.operations} {endpoint.path}")
        return endpoint

    def component_names(self) -> set[str]:
        return {component.name for component in self.components}

    def has_component(self, name: Any) -> bool:
        return name is not None and str(name) in self.component_names()

    def find_endpoint(self, path: str, method: str) -> Endpoint | None:
        """Return the first endpoint declaring ``method`` on ``path``."""
        method = method.lower()
        for endpoint in self.endpoints:
            if endpoint.path == path and method in endpoint.operations:
                return endpoint
        return None
