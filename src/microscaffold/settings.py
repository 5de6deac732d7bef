"""Workspace settings — reads .env + optional microscaffold.toml.

The template's current placeholder values live in an immutable
TemplateDescriptor that the pipeline receives; nothing here is mutated at
runtime.

Key entities:
  - TemplateDescriptor: the template's own name, package name, port, title, path.
  - ScaffoldSettings: frozen dataclass with the resolved workspace layout.
  - load_settings(): parse .env + microscaffold.toml → ScaffoldSettings.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

SETTINGS_FILE = "microscaffold.toml"

# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TemplateDescriptor:
    """Placeholder values currently baked into the reference template."""

    path: str = "projects/child-test-manage"  # relative to workspace root
    name: str = "test"
    package_name: str = "child-test-manage"
    port: str = "6015"
    title: str = "测试微应用"


_DEFAULT_REGISTRY_CANDIDATES = (
    "projects/main-portal/src/config.js",
    "projects/main-portal/src/config.ts",
    "src/config.js",
    "src/config.ts",
    "main/src/config.js",
    "main/src/config.ts",
)


@dataclass(frozen=True)
class ScaffoldSettings:
    """Resolved configuration for one workspace.

    All path attributes derive from workspace_root; no further env lookups
    happen after load_settings() returns.
    """

    workspace_root: Path = field(default_factory=Path.cwd)
    template: TemplateDescriptor = field(default_factory=TemplateDescriptor)
    projects_dir: str = "projects"

    # Host route table
    registry_candidates: tuple[str, ...] = _DEFAULT_REGISTRY_CANDIDATES
    registry_path: str | None = None  # explicit override, skips probing
    registry_collection: str = "microSet"

    # Root package.json script; formatted with package_name
    dev_script: str = "yarn workspace {package_name} dev"

    # Clone filters
    excluded_dirs: frozenset[str] = frozenset(
        {"node_modules", "dist", ".git", ".vite"}
    )
    excluded_files: tuple[str, ...] = (".eslintcache*", "*.mjs*", ".DS_Store")

    @property
    def template_dir(self) -> Path:
        return self.workspace_root / self.template.path

    @property
    def manifest_path(self) -> Path:
        return self.workspace_root / "package.json"

    def project_path_for(self, package_name: str) -> str:
        """Workspace-relative POSIX path, as listed in package.json workspaces."""
        return f"{self.projects_dir.strip('/')}/{package_name}"

    def target_dir_for(self, package_name: str) -> Path:
        return self.workspace_root / self.projects_dir / package_name


# ---------------------------------------------------------------------------
# load_settings
# ---------------------------------------------------------------------------

_TEMPLATE_KEYS = {"path", "name", "package_name", "port", "title"}
_WORKSPACE_KEYS = {
    "projects_dir",
    "registry_candidates",
    "registry_path",
    "registry_collection",
    "dev_script",
    "excluded_dirs",
    "excluded_files",
}


def load_settings(
    workspace_root: Path | None = None, registry_path: str | None = None
) -> ScaffoldSettings:
    """Read .env + microscaffold.toml and return the workspace settings.

    Args:
        workspace_root: Workspace directory. Defaults to $MICROSCAFFOLD_WORKSPACE,
                        then the current working directory.
        registry_path: Explicit host registration file; wins over
                       $MICROSCAFFOLD_REGISTRY and the toml value.

    Raises:
        ValueError: If microscaffold.toml contains unknown keys or bad types.
    """
    local_env = Path(".env")
    if local_env.is_file():
        load_dotenv(local_env)

    if workspace_root is None:
        env_root = os.getenv("MICROSCAFFOLD_WORKSPACE", "")
        workspace_root = Path(env_root).expanduser() if env_root else Path.cwd()
    workspace_root = workspace_root.resolve()

    root_env = workspace_root / ".env"
    if root_env.is_file():
        load_dotenv(root_env)

    raw: dict = {}
    toml_path = workspace_root / SETTINGS_FILE
    if toml_path.is_file():
        with open(toml_path, "rb") as f:
            raw = tomllib.load(f)
        logger.debug("Loaded settings from %s", toml_path)

    template = _build_template(raw.get("template", {}))
    workspace = _check_section(raw.get("workspace", {}), _WORKSPACE_KEYS, "workspace")

    kwargs: dict = {"workspace_root": workspace_root, "template": template}
    for key in ("projects_dir", "registry_collection", "dev_script"):
        if key in workspace:
            kwargs[key] = _as_str(workspace[key], f"workspace.{key}")
    if "registry_candidates" in workspace:
        kwargs["registry_candidates"] = _as_str_tuple(
            workspace["registry_candidates"], "workspace.registry_candidates"
        )
    if "excluded_dirs" in workspace:
        kwargs["excluded_dirs"] = frozenset(
            _as_str_tuple(workspace["excluded_dirs"], "workspace.excluded_dirs")
        )
    if "excluded_files" in workspace:
        kwargs["excluded_files"] = _as_str_tuple(
            workspace["excluded_files"], "workspace.excluded_files"
        )

    # Explicit argument > env > toml
    resolved_registry = (
        registry_path
        or os.getenv("MICROSCAFFOLD_REGISTRY", "")
        or workspace.get("registry_path")
    )
    if resolved_registry:
        kwargs["registry_path"] = _as_str(resolved_registry, "registry_path")

    return ScaffoldSettings(**kwargs)


def _check_section(section: object, allowed: set[str], name: str) -> dict:
    if not isinstance(section, dict):
        raise ValueError(f"[{name}] in {SETTINGS_FILE} must be a table.")
    unknown = set(section) - allowed
    if unknown:
        raise ValueError(
            f"Unknown key(s) in [{name}] of {SETTINGS_FILE}: "
            + ", ".join(sorted(unknown))
        )
    return section


def _build_template(section: object) -> TemplateDescriptor:
    """Merge [template] overrides onto the default descriptor."""
    values = _check_section(section, _TEMPLATE_KEYS, "template")
    # ports may be written as bare integers in toml
    return TemplateDescriptor(
        **{k: _as_str(v, f"template.{k}", allow_int=True) for k, v in values.items()}
    )


def _as_str(value: object, key: str, allow_int: bool = False) -> str:
    if allow_int and isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    if not isinstance(value, str) or not value:
        raise ValueError(f"'{key}' must be a non-empty string.")
    return value


def _as_str_tuple(value: object, key: str) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"'{key}' must be a list of strings.")
    return tuple(value)
