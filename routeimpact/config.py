"""Configuration for route impact analysis.

Defaults live on `AnalyzerConfig`. A project may override them with a
`.routeimpact.yaml` file in its root, and a few values can be forced via
`ROUTEIMPACT_*` environment variables. Path aliases are also picked up from
`tsconfig.json` / `jsconfig.json` `compilerOptions.paths`.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Tuple

import yaml

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".routeimpact.yaml"

DEFAULT_MAX_FILE_BYTES = 1024 * 1024

DEFAULT_SOURCE_EXTENSIONS: Tuple[str, ...] = (
    ".ts",
    ".tsx",
    ".js",
    ".jsx",
    ".mjs",
    ".cjs",
    ".svelte",
    ".vue",
)

DEFAULT_IGNORE_DIRS: Tuple[str, ...] = (
    "node_modules",
    ".git",
    "dist",
    "build",
    "coverage",
    ".next",
    "out",
    ".svelte-kit",
)


def _default_aliases() -> Dict[str, str]:
    return {"@/": "src/", "src/": "src/"}


@dataclass
class AnalyzerConfig:
    """Knobs for scanning, resolution and persistence."""

    max_file_bytes: int = DEFAULT_MAX_FILE_BYTES
    source_extensions: Tuple[str, ...] = DEFAULT_SOURCE_EXTENSIONS
    ignore_dirs: Tuple[str, ...] = DEFAULT_IGNORE_DIRS
    aliases: Dict[str, str] = field(default_factory=_default_aliases)
    cache_namespace: str = "routeimpact-cache"
    artifact_dir: str = ".routeimpact"

    def to_dict(self) -> dict:
        data = asdict(self)
        data["source_extensions"] = list(self.source_extensions)
        data["ignore_dirs"] = list(self.ignore_dirs)
        return data

    def skipped_dirs(self) -> set[str]:
        return set(self.ignore_dirs) | {Path(self.artifact_dir).name}


# =============================================================================
# Layers
# =============================================================================


def _tsconfig_aliases(root: Path) -> Dict[str, str]:
    """Read `compilerOptions.paths` wildcard aliases (`"@/*": ["./src/*"]`)."""
    for name in ("tsconfig.json", "jsconfig.json"):
        path = root / name
        if not path.is_file():
            continue
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except Exception as exc:
            # Comments and trailing commas (JSONC) land here
            logger.debug("Ignoring unreadable %s: %s", path, exc)
            continue

        options = data.get("compilerOptions") if isinstance(data, dict) else None
        paths = options.get("paths") if isinstance(options, dict) else None
        if not isinstance(paths, dict):
            logger.debug("No usable compilerOptions.paths in %s", path)
            return {}
        base_url = str(options.get("baseUrl") or ".").strip("./")
        out: Dict[str, str] = {}
        for pattern, targets in paths.items():
            if not isinstance(targets, list) or not targets:
                continue
            if not pattern.endswith("/*") or not str(targets[0]).endswith("/*"):
                continue
            target = str(targets[0])[:-1]
            if target.startswith("./"):
                target = target[2:]
            if base_url:
                target = f"{base_url}/{target}"
            out[pattern[:-1]] = target
        return out
    return {}


def _yaml_overrides(root: Path) -> Dict[str, Any]:
    path = root / CONFIG_FILE_NAME
    if not path.is_file():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except Exception as exc:
        logger.warning("Ignoring malformed %s: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring %s: expected a mapping", path)
        return {}
    return {k: v for k, v in data.items() if k in AnalyzerConfig.__dataclass_fields__}


def _env_overrides() -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    raw_max = (os.environ.get("ROUTEIMPACT_MAX_FILE_BYTES") or "").strip()
    if raw_max:
        try:
            out["max_file_bytes"] = int(raw_max)
        except ValueError:
            logger.warning("Ignoring non-integer ROUTEIMPACT_MAX_FILE_BYTES=%r", raw_max)
    namespace = (os.environ.get("ROUTEIMPACT_CACHE_NAMESPACE") or "").strip()
    if namespace:
        out["cache_namespace"] = namespace
    artifact_dir = (os.environ.get("ROUTEIMPACT_ARTIFACT_DIR") or "").strip()
    if artifact_dir:
        out["artifact_dir"] = artifact_dir
    return out


def load_config(root: Path) -> AnalyzerConfig:
    """Build the effective config for a project root. Never raises."""
    config = AnalyzerConfig()
    config.aliases.update(_tsconfig_aliases(root))

    overrides = _yaml_overrides(root)
    overrides.update(_env_overrides())
    for key, value in overrides.items():
        if key == "aliases" and isinstance(value, dict):
            config.aliases.update({str(k): str(v) for k, v in value.items()})
        elif key in {"source_extensions", "ignore_dirs"} and isinstance(value, (list, tuple)):
            setattr(config, key, tuple(str(v) for v in value))
        elif key == "max_file_bytes":
            try:
                config.max_file_bytes = int(value)
            except (TypeError, ValueError):
                logger.warning("Ignoring invalid max_file_bytes=%r", value)
        elif key in {"cache_namespace", "artifact_dir"} and value:
            setattr(config, key, str(value))
    return config


__all__ = [
    "AnalyzerConfig",
    "CONFIG_FILE_NAME",
    "DEFAULT_IGNORE_DIRS",
    "DEFAULT_MAX_FILE_BYTES",
    "DEFAULT_SOURCE_EXTENSIONS",
    "load_config",
]
