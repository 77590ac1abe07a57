"""Validators for declared response bodies."""

from openapi_declare.compiler.request import RequestValidatorCompiler, Validator
from openapi_declare.schema.base import Response


class ResponseValidatorCompiler(RequestValidatorCompiler):
    """Builds a validator over a response's top-level properties.

    Same field rules as request validation, except numbers coerce to float.
    """

    model_name = "ResponseBody"
    number_type = float

    def __init__(self, response: Response):
        super().__init__()
        self.response = response

    def compile(self) -> Validator | None:
        if not self.response.properties:
            return None
        return Validator(self.build_model(self.model_name, self.response.properties))
