from __future__ import annotations

from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

import yaml

from gridcrawler.errors import InvalidOption, IOFailure
from gridcrawler.utils.logger import get_logger

LOG = get_logger("config")

# Options argparse collects as lists; a scalar in a params file becomes one
# or more whitespace-separated items
LIST_OPTIONS = ("sample_ids", "positions", "source_environment_commands")


def _read_yaml_mapping(path: Path, what: str) -> Dict[Any, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise IOFailure(f"Can't open '{path}': {e}") from e
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise InvalidOption(f"{what} '{path}' is not valid YAML: {e}") from e
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise InvalidOption(f"{what} '{path}' must contain a mapping at the top level.")
    return data


def load_grid(path: Path) -> Mapping[str, str]:
    """
    Load the sample_id -> variant file mapping.

    Keys and values are coerced to str so numeric sample names such as
    ``1001`` look the same as they do on the command line. The result is
    read-only.
    """
    data = _read_yaml_mapping(path, "Grid file")
    grid = {str(k): ("" if v is None else str(v)) for k, v in data.items()}
    LOG.info("Read YAML file: %s", path)
    return MappingProxyType(grid)


def load_params_file(path: Optional[Path]) -> Dict[str, Any]:
    if not path:
        return {}
    data = _read_yaml_mapping(path, "Params file")
    return {str(k).replace("-", "_"): v for k, v in data.items()}


def apply_params_defaults(args, params: Mapping[str, Any], defaults: Mapping[str, Any]) -> None:
    """
    Merge params into argparse args **only where the user left CLI at defaults**.
    CLI must always win; params just save typing.
    """
    for name, value in params.items():
        if not hasattr(args, name):
            LOG.warning("Ignoring unknown params key: %s", name)
            continue
        if name not in defaults:
            # log_file, params
            LOG.warning("Params key %s can only be set on the command line; ignoring it", name)
            continue
        if name in LIST_OPTIONS and value is not None and not isinstance(value, (list, tuple)):
            value = str(value).split()
        current = getattr(args, name)
        if current == defaults.get(name):
            setattr(args, name, value)
