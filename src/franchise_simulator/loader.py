"""Load and validate the franchise parameter set from JSON files."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping

from pydantic import ValidationError

from .errors import InvalidParameterSet
from .models.parameters import ParameterSet
from .sample_data import build_default_parameters

logger = logging.getLogger(__name__)


def parse_parameter_set(raw: Mapping[str, Any]) -> ParameterSet:
    try:
        return ParameterSet.model_validate(dict(raw))
    except ValidationError as exc:
        raise InvalidParameterSet(str(exc)) from exc


def load_parameter_set(file_path: Path | None = None) -> ParameterSet:
    """Load the parameter set from a JSON file.

    Without a path the built-in defaults are returned.
    """
    if file_path is None:
        return build_default_parameters()

    if not file_path.exists():
        raise InvalidParameterSet(f"Parameter file not found: {file_path}")

    with open(file_path, "r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise InvalidParameterSet(f"Parameter file is not valid UTF-8 JSON: {file_path}") from exc

    if not isinstance(raw, dict):
        raise InvalidParameterSet(f"Parameter file must hold a JSON object: {file_path}")

    params = parse_parameter_set(raw)
    logger.info("Loaded parameter set from %s", file_path)
    return params
