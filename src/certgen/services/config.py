# certgen/services/config.py

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Type, TypeVar, Union

import yaml
from pydantic import BaseModel, ValidationError

from certgen.services.cert_errors import ArtifactIOError, ConfigValidationError
from certgen.utils.files import read_bytes

log = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def read_config(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Read a YAML request file into a plain mapping.

    An empty file is an empty mapping.

    Raises:
        ConfigValidationError: Unreadable file, malformed YAML or a document
            that is not a mapping.
    """
    try:
        raw = read_bytes(path)
    except ArtifactIOError as exc:
        raise ConfigValidationError("config", f"Unable to read configuration file {path}: {exc}") from exc

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ConfigValidationError("config", f"Invalid YAML in {path}: {exc}") from exc

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ConfigValidationError("config", f"Configuration file {path} must contain a mapping")

    return data


def build_request(
        model: Type[ModelT],
        data: Mapping[str, Any],
        overrides: Optional[Mapping[str, Any]] = None
    ) -> ModelT:
    """
    Validate `data` into `model`, with non-None `overrides` taking precedence.

    Overrides are keyed by field name, configuration data by alias or field
    name; both are accepted because the models populate by name.

    Raises:
        ConfigValidationError: The merged data does not fit the model.
    """
    merged = dict(data)

    for name, value in (overrides or {}).items():
        if value is None:
            continue
        alias = model.model_fields[name].alias if name in model.model_fields else None
        if alias:
            merged.pop(alias, None)
        merged[name] = value

    try:
        return model.model_validate(merged)
    except ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or "config"
        raise ConfigValidationError(field, f"{field}: {first.get('msg', 'invalid value')}") from exc


def load_request(
        path: Optional[Union[str, Path]],
        model: Type[ModelT],
        overrides: Optional[Mapping[str, Any]] = None
    ) -> ModelT:
    """
    Load a request from an optional YAML file and merge CLI overrides on top.

    Args:
        path: YAML file, or None to build the request from overrides alone.
        model: The pydantic request model to produce.
        overrides: Field-name keyed values; None values are ignored.

    Returns:
        An instance of `model`.

    Raises:
        ConfigValidationError
    """
    data: Dict[str, Any] = {}

    if path is not None:
        log.debug("Loading %s from %s", model.__name__, path)
        data = read_config(path)

    return build_request(model, data, overrides)
