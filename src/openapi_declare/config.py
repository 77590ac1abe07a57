"""Document-level settings for generated specs."""

import os

from pydantic import BaseModel

DEFAULT_TITLE = "API"
DEFAULT_VERSION = "1.0"


class ApiInfo(BaseModel):
    """The OpenAPI ``info`` block."""

    title: str = DEFAULT_TITLE
    description: str = ""
    version: str = DEFAULT_VERSION

    @classmethod
    def from_env(cls) -> "ApiInfo":
        """Read ``OPENAPI_TITLE``, ``OPENAPI_DESCRIPTION`` and ``OPENAPI_VERSION``."""
        return cls(
            title=os.getenv("OPENAPI_TITLE", DEFAULT_TITLE),
            description=os.getenv("OPENAPI_DESCRIPTION", ""),
            version=os.getenv("OPENAPI_VERSION", DEFAULT_VERSION),
        )
