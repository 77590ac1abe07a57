"""Locate the Registry a CLI target points at."""

import importlib
import importlib.util
import sys
from pathlib import Path

from openapi_declare.errors import RegistryLoadError
from openapi_declare.registry import Registry

DEFAULT_ATTRIBUTE = "registry"


def split_target(target: str) -> tuple[str, str]:
    """Split ``module:attr`` into its parts; ``attr`` defaults to ``registry``.

    A Windows drive letter (``C:\\...``) is not treated as the separator.
    """
    module, sep, attr = target.rpartition(":")
    if not sep or not module or "/" in attr or "\\" in attr:
        return target, DEFAULT_ATTRIBUTE
    return module, attr or DEFAULT_ATTRIBUTE


def import_target(module: str):
    if module.endswith(".py") or "/" in module or "\\" in module:
        path = Path(module)
        if not path.exists():
            raise RegistryLoadError(f"No such file: {path}")
        spec = importlib.util.spec_from_file_location(path.stem, path)
        if spec is None or spec.loader is None:
            raise RegistryLoadError(f"Cannot import {path}")
        loaded = importlib.util.module_from_spec(spec)
        sys.modules[spec.name] = loaded
        spec.loader.exec_module(loaded)
        return loaded
    try:
        return importlib.import_module(module)
    except ImportError as e:
        raise RegistryLoadError(f"Cannot import module '{module}': {e}") from e


def load_registry(target: str) -> Registry:
    """Import ``target`` and return the Registry it names.

    ``target`` is ``package.module[:attr]`` or ``path/to/file.py[:attr]``.
    A callable attribute is treated as a factory and called with no
    arguments.
    """
    module_name, attr = split_target(target)
    module = import_target(module_name)

    value = getattr(module, attr, None)
    if value is None:
        raise RegistryLoadError(
            f"'{module_name}' has no attribute '{attr}'",
            f"point at the Registry explicitly, e.g. {module_name}:my_registry",
        )
    if callable(value) and not isinstance(value, Registry):
        value = value()
    if not isinstance(value, Registry):
        raise RegistryLoadError(f"'{target}' is {type(value).__name__}, not a Registry")
    return value
