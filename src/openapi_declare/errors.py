"""Exception types for openapi-declare.

Errors carry an optional fix suggestion so the CLI can print something
actionable instead of a bare traceback.
"""

from difflib import get_close_matches


class OpenApiDeclareError(Exception):
    """Base error with an optional fix suggestion."""

    def __init__(self, message: str, suggestion: str | None = None):
        self.suggestion = suggestion
        super().__init__(message)

    def to_message(self) -> str:
        parts = [str(self)]
        if self.suggestion:
            parts.append(f"Suggestion: {self.suggestion}")
        return " | ".join(parts)


class UnknownStatusError(OpenApiDeclareError, ValueError):
    """A response was keyed by a status symbol missing from the lookup table."""

    def __init__(self, status: object, known: list[str]):
        self.status = status
        matches = get_close_matches(str(status), known, n=1, cutoff=0.6)
        suggestion = f"did you mean '{matches[0]}'?" if matches else None
        super().__init__(f"Unknown status code symbol: {status}", suggestion)


class UnknownColumnTypeError(OpenApiDeclareError, ValueError):
    """A storage column type has no property mapping."""

    def __init__(self, sql_type: str, column: str | None = None):
        self.sql_type = sql_type
        self.column = column
        where = f" (column '{column}')" if column else ""
        super().__init__(f"Unknown sql type: {sql_type}{where}")


class DeclarationError(OpenApiDeclareError):
    """Strict compilation found malformed declarations."""

    def __init__(self, problems: dict[str, str]):
        self.problems = problems
        lines = [f"{location}: {message}" for location, message in problems.items()]
        super().__init__(
            f"{len(problems)} malformed declaration(s):\n" + "\n".join(lines),
            "run `openapi-declare check` for the full report",
        )


class RegistryLoadError(OpenApiDeclareError):
    """A CLI target could not be resolved to a Registry."""
