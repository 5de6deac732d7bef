"""Root package.json maintenance — run script + workspaces entry per app.

Both additions are idempotent: existing scripts and workspace entries are
never replaced or removed, and the file is only rewritten when something
was added.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from ..outcome import APPLIED, SKIPPED_MISSING, SKIPPED_UNRECOGNIZED, UNCHANGED, StepStatus

logger = logging.getLogger(__name__)


def _ensure_workspace(manifest: dict[str, Any], project_path: str) -> bool:
    """Add project_path to the workspaces list. Returns True if added."""
    # null counts as absent
    if manifest.get("workspaces") is None:
        manifest["workspaces"] = []
    workspaces = manifest["workspaces"]
    # Yarn also accepts {"packages": [...], "nohoist": [...]}
    if isinstance(workspaces, dict):
        if workspaces.get("packages") is None:
            workspaces["packages"] = []
        workspaces = workspaces["packages"]
    if not isinstance(workspaces, list):
        logger.warning(
            "Unsupported 'workspaces' value in package.json (%s); not modified",
            type(workspaces).__name__,
        )
        return False
    if project_path in workspaces:
        return False
    workspaces.append(project_path)
    return True


def patch_manifest(
    manifest: dict[str, Any], name: str, package_name: str, project_path: str, dev_script: str
) -> bool:
    """Apply the script and workspace additions in place.

    Returns:
        True if the manifest was modified.

    Raises:
        ValueError: If 'scripts' is present but not an object.
    """
    changed = False

    if manifest.get("scripts") is None:
        manifest["scripts"] = {}
    scripts = manifest["scripts"]
    if not isinstance(scripts, dict):
        raise ValueError("'scripts' in package.json must be an object.")
    if name not in scripts:
        scripts[name] = dev_script.format(package_name=package_name)
        changed = True

    if _ensure_workspace(manifest, project_path):
        changed = True
    return changed


def update_root_manifest(
    manifest_path: Path,
    name: str,
    package_name: str,
    project_path: str,
    dev_script: str = "yarn workspace {package_name} dev",
) -> StepStatus:
    """Add the app's dev script and workspace path to the root package.json.

    A file that is not UTF-8, not valid JSON, not a JSON object, or whose
    'scripts' is not an object is logged and left untouched.
    """
    if not manifest_path.is_file():
        logger.warning("Root package.json not found: %s", manifest_path)
        return SKIPPED_MISSING

    try:
        manifest = json.loads(manifest_path.read_bytes().decode("utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning("Could not parse %s (%s); add '%s' manually", manifest_path, e, name)
        return SKIPPED_UNRECOGNIZED
    if not isinstance(manifest, dict):
        logger.warning("%s does not contain a JSON object; add '%s' manually", manifest_path, name)
        return SKIPPED_UNRECOGNIZED

    try:
        changed = patch_manifest(manifest, name, package_name, project_path, dev_script)
    except ValueError as e:
        logger.warning("%s (%s); add '%s' manually", e, manifest_path, name)
        return SKIPPED_UNRECOGNIZED
    if not changed:
        logger.info("Root package.json already lists '%s'", name)
        return UNCHANGED

    manifest_path.write_text(
        json.dumps(manifest, indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
    )
    logger.info("Updated root package.json: %s", manifest_path)
    return APPLIED
