from openapi_declare.config import ApiInfo


class TestApiInfo:
    def test_defaults(self):
        info = ApiInfo()
        assert info.title == "API"
        assert info.description == ""
        assert info.version == "1.0"

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("OPENAPI_TITLE", "Pets")
        monkeypatch.setenv("OPENAPI_DESCRIPTION", "Pet store")
        monkeypatch.setenv("OPENAPI_VERSION", "3.2")
        info = ApiInfo.from_env()
        assert info == ApiInfo(title="Pets", description="Pet store", version="3.2")

    def test_from_env_falls_back_to_defaults(self, monkeypatch):
        for name in ("OPENAPI_TITLE", "OPENAPI_DESCRIPTION", "OPENAPI_VERSION"):
            monkeypatch.delenv(name, raising=False)
        assert ApiInfo.from_env() == ApiInfo()
