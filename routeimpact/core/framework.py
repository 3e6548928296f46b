from __future__ import annotations

import json
import logging
from pathlib import Path

from .models import Framework

logger = logging.getLogger(__name__)


def _has_app_dir(root: Path) -> bool:
    return (root / "app").is_dir() or (root / "src" / "app").is_dir()


def detect_framework(root: Path) -> Framework:
    """Classify the project's routing framework from `package.json`.

    A missing or unreadable manifest yields `Framework.UNKNOWN`.
    """
    manifest = root / "package.json"
    try:
        data = json.loads(manifest.read_text(encoding="utf-8"))
    except FileNotFoundError:
        logger.info("No package.json in %s; framework unknown", root)
        return Framework.UNKNOWN
    except Exception as exc:
        logger.warning("Could not read %s: %s", manifest, exc)
        return Framework.UNKNOWN

    if not isinstance(data, dict):
        return Framework.UNKNOWN
    deps: dict = {}
    for key in ("dependencies", "devDependencies"):
        section = data.get(key)
        if isinstance(section, dict):
            deps.update(section)

    if "react-router-dom" in deps or "react-router" in deps:
        return Framework.REACT_ROUTER
    if "next" in deps:
        return Framework.NEXTJS_APP if _has_app_dir(root) else Framework.NEXTJS_PAGES
    if "@sveltejs/kit" in deps:
        return Framework.SVELTEKIT
    return Framework.UNKNOWN
