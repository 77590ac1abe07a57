from openapi_declare.registry import Registry
from openapi_declare.schema.base import Component, Endpoint


class TestRegistry:
    def test_starts_empty(self):
        registry = Registry()
        assert registry.components == []
        assert registry.endpoints == []

    def test_component_is_appended_and_returned(self):
        registry = Registry()
        user = registry.component("User", type="object", description="A user")
        assert isinstance(user, Component)
        assert registry.components == [user]
        assert user.name == "User"
        assert user.type == "object"

    def test_component_configure_runs_before_return(self):
        registry = Registry()
        seen = []

        def configure(component):
            seen.append(component.name)
            component.add_property("name", type="string")

        user = registry.component("User", configure, type="object")
        assert seen == ["User"]
        assert "name" in user.properties

    def test_endpoint_configure(self):
        registry = Registry()
        endpoint = registry.endpoint(lambda e: e.set_path("/users").add_operation("get"))
        assert isinstance(endpoint, Endpoint)
        assert registry.endpoints == [endpoint]
        assert endpoint.path == "/users"

    def test_registries_are_independent(self):
        first, second = Registry(), Registry()
        first.component("User", type="object")
        assert second.components == []

    def test_has_component(self):
        registry = Registry()
        registry.component("User", type="object")
        assert registry.has_component("User")
        assert not registry.has_component("Pet")
        assert not registry.has_component(None)

    def test_find_endpoint(self):
        registry = Registry()
        registry.endpoint(lambda e: e.set_path("/users").add_operation("get"))
        post = registry.endpoint(lambda e: e.set_path("/users").add_operation("post"))
        assert registry.find_endpoint("/users", "POST") is post
        assert registry.find_endpoint("/users", "delete") is None
