"""
YAML config file discovery and loading for publishing_sync.

Three locations are searched, highest precedence first:

1. the file named by ``PUBLISHING_SYNC_CONFIG``
2. ``.publishing_sync/config.yml`` in the working directory
3. ``~/.config/publishing_sync/config.yml``

Files may pull in other files with ``!include`` and reference the
environment with ``${VAR}`` or ``${VAR:-default}``.  Top-level sections
of a higher-precedence file replace the same sections of lower ones.
"""

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "PUBLISHING_SYNC_CONFIG"
PROJECT_CONFIG = Path(".publishing_sync") / "config.yml"
GLOBAL_CONFIG = Path(".config") / "publishing_sync" / "config.yml"

_ENV_REF = re.compile(r"\$\{(?P<name>[^}:]+?)(?::-(?P<default>.*?))?\}")


def interpolate_env_vars(value: str) -> str:
    """Expand ``${VAR}`` and ``${VAR:-default}`` references in *value*.

    An unset or empty variable expands to its default, or to ``""``
    without one.  An unterminated ``${`` is kept as is.
    """

    def _expand(match: re.Match) -> str:
        return (
            os.environ.get(match["name"])
            or match["default"]
            or ""
        )

    return _ENV_REF.sub(_expand, value)


def _interpolate_recursive(obj: Any) -> Any:
    """Apply ``interpolate_env_vars`` to every string in a YAML tree."""
    match obj:
        case str():
            return interpolate_env_vars(obj)
        case dict():
            return {k: _interpolate_recursive(v) for k, v in obj.items()}
        case list():
            return [_interpolate_recursive(v) for v in obj]
        case _:
            return obj


class ConfigLoader(yaml.SafeLoader):
    """SafeLoader that understands ``!include``.

    Registered on this subclass only, so plain ``yaml.safe_load`` keeps
    rejecting the tag.
    """

    include_chain: list[Path]

    def include(self, node: yaml.ScalarNode) -> Any:
        target = Path(self.construct_scalar(node)).expanduser()
        if not target.is_absolute():
            target = Path(self.name).resolve().parent / target
        target = target.resolve()

        if target in self.include_chain:
            chain = " -> ".join(str(p) for p in [*self.include_chain, target])
            raise ValueError(f"Circular include detected: {chain}")
        if not target.exists():
            raise FileNotFoundError(
                f"Include file not found: {target} "
                f"(referenced from {Path(self.name).resolve()})"
            )

        return _load_yaml_with_includes(
            target, _include_stack=[*self.include_chain, target]
        )


ConfigLoader.add_constructor("!include", ConfigLoader.include)


def _load_yaml_with_includes(
    path: Path,
    *,
    _include_stack: list[Path] | None = None,
) -> Any:
    """Parse *path* with ``ConfigLoader``, following includes."""
    path = path.resolve()
    with open(path, "r", encoding="utf-8") as fh:
        loader = ConfigLoader(fh)
        loader.include_chain = _include_stack or [path]
        try:
            return loader.get_single_data()
        finally:
            loader.dispose()


def discover_config_files() -> list[Path]:
    """Existing config files, highest precedence first."""
    candidates: list[Path] = []

    explicit = os.environ.get(CONFIG_ENV_VAR)
    if explicit:
        candidates.append(Path(explicit).expanduser().resolve())
    candidates.append(Path.cwd() / PROJECT_CONFIG)
    candidates.append(Path.home() / GLOBAL_CONFIG)

    return [p for p in candidates if p.exists()]


def load_hierarchical_config() -> dict[str, Any]:
    """Merge every discovered config file into one dict.

    Returns ``{}`` when there is nothing to load.  Environment references
    are expanded after merging, so a project file can override a
    section that uses them.

    Raises:
        yaml.YAMLError: If a file is not valid YAML.
        FileNotFoundError: If an ``!include`` target is missing.
        ValueError: If includes form a cycle.
    """
    paths = discover_config_files()
    if not paths:
        logger.debug("No config files found, using built-in defaults")
        return {}

    merged: dict[str, Any] = {}
    for path in reversed(paths):
        logger.debug("Loading config: %s", path)
        try:
            data = _load_yaml_with_includes(path)
        except Exception:
            logger.exception("Failed to load config file %s", path)
            raise

        if isinstance(data, dict):
            merged.update(data)
        elif data is not None:
            logger.warning(
                "Ignoring config file %s: top level is a %s, not a mapping",
                path,
                type(data).__name__,
            )

    return _interpolate_recursive(merged)
