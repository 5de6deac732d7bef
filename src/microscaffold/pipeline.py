"""Creation pipeline — clone the template, customise it, register the new app.

Stages run strictly in order. Only the two preconditions are fatal
(template present, target absent); every later step degrades to a skipped
outcome when its file is missing. There is no rollback once cloning starts.

Key function: create_microapp().
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from . import replacements
from .app_spec import AppSpec
from .outcome import APPLIED, SKIPPED_MISSING, SKIPPED_UNRECOGNIZED, UNCHANGED, StepOutcome
from .registry.host import register_app
from .registry.manifest import update_root_manifest
from .settings import ScaffoldSettings, TemplateDescriptor
from .workspace.cloner import clone_tree
from .workspace.editor import apply_replacements, locate_config

logger = logging.getLogger(__name__)


class TemplateNotFoundError(FileNotFoundError):
    """The reference template directory does not exist."""


class TargetExistsError(FileExistsError):
    """The directory for the new app already exists."""


@dataclass
class CreationReport:
    """Aggregated outcome of one create_microapp() run."""

    spec: AppSpec
    target_dir: Path
    outcomes: list[StepOutcome] = field(default_factory=list)
    next_steps: list[str] = field(default_factory=list)

    @property
    def warnings(self) -> list[StepOutcome]:
        return [o for o in self.outcomes if o.skipped]

    def outcome(self, step: str) -> StepOutcome | None:
        for o in self.outcomes:
            if o.step == step:
                return o
        return None


# ---------------------------------------------------------------------------
# Template file rewrites
# ---------------------------------------------------------------------------

ReplacementBuilder = Callable[[TemplateDescriptor, AppSpec], dict[str, str]]


@dataclass(frozen=True)
class RewriteStep:
    """One template file to rewrite.

    ``path`` is relative to the new app directory; when ``basename`` is set the
    file is looked up as ``path/basename.{ts,js}`` instead.
    """

    name: str
    path: str
    build: ReplacementBuilder
    basename: str | None = None

    def resolve(self, target_dir: Path) -> Path | None:
        if self.basename is not None:
            return locate_config(target_dir / self.path, self.basename)
        candidate = target_dir / self.path
        return candidate if candidate.is_file() else None

    def display_path(self) -> str:
        if self.basename is None:
            return self.path
        prefix = f"{self.path}/" if self.path not in ("", ".") else ""
        return f"{prefix}{self.basename}.(ts|js)"


REWRITE_STEPS: tuple[RewriteStep, ...] = (
    RewriteStep("package.json", "package.json", replacements.package_manifest),
    RewriteStep("vite.config", ".", replacements.build_config, basename="vite.config"),
    RewriteStep("presets/index", "presets", replacements.presets, basename="index"),
    RewriteStep("index.html", "index.html", replacements.html_entry),
    RewriteStep("src/main", "src", replacements.entry_module, basename="main"),
    RewriteStep(
        "src/plugins/router", "src/plugins", replacements.router_module, basename="router"
    ),
)


def run_rewrite(
    step: RewriteStep, target_dir: Path, template: TemplateDescriptor, spec: AppSpec
) -> StepOutcome:
    path = step.resolve(target_dir)
    if path is None:
        logger.warning("%s not found, skipping", step.display_path())
        return StepOutcome(step.name, SKIPPED_MISSING, detail=step.display_path())

    logger.info("Rewriting %s...", path.relative_to(target_dir))
    try:
        changed = apply_replacements(path, step.build(template, spec))
    except UnicodeDecodeError:
        logger.warning("%s is not UTF-8 text, skipping", path)
        return StepOutcome(step.name, SKIPPED_UNRECOGNIZED, path, "not UTF-8 text")
    return StepOutcome(step.name, APPLIED if changed else UNCHANGED, path)


# ---------------------------------------------------------------------------
# Registries
# ---------------------------------------------------------------------------


def resolve_registry_path(settings: ScaffoldSettings) -> Path | None:
    """Explicit override first, else the first existing conventional location."""
    if settings.registry_path:
        path = Path(settings.registry_path).expanduser()
        return path if path.is_absolute() else settings.workspace_root / path

    for candidate in settings.registry_candidates:
        path = settings.workspace_root / candidate
        if path.is_file():
            return path
    return None


def register_in_host(settings: ScaffoldSettings, spec: AppSpec) -> StepOutcome:
    config_path = resolve_registry_path(settings)
    if config_path is None:
        logger.warning("Host registration file not found; register '%s' manually", spec.name)
        return StepOutcome(
            "host registration",
            SKIPPED_MISSING,
            detail="no host registration file found",
        )
    status = register_app(config_path, spec, settings.registry_collection)
    return StepOutcome("host registration", status, config_path)


def update_workspace_manifest(settings: ScaffoldSettings, spec: AppSpec) -> StepOutcome:
    status = update_root_manifest(
        settings.manifest_path,
        spec.name,
        spec.package_name,
        settings.project_path_for(spec.package_name),
        settings.dev_script,
    )
    return StepOutcome("root package.json", status, settings.manifest_path)


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


def next_steps(report: CreationReport) -> list[str]:
    """Manual follow-up instructions for the user."""
    spec = report.spec
    lines = [
        f"cd {report.target_dir}",
        "yarn install  (run in the workspace root)",
        f"yarn {spec.name}  (start the micro app)",
        f"open http://localhost:{spec.port} or the host app's /{spec.name} route",
    ]
    for o in report.warnings:
        target = o.path or o.detail or o.step
        lines.append(f"finish manually: {o.step} ({target})")
    return lines


def create_microapp(spec: AppSpec, settings: ScaffoldSettings) -> CreationReport:
    """Create a new micro app from the workspace template.

    Raises:
        TemplateNotFoundError: The template directory does not exist.
        TargetExistsError: The target directory already exists. Nothing is
            written in that case.
        OSError: Cloning failed; the target may be partially populated.
    """
    template = settings.template
    template_dir = settings.template_dir
    target_dir = settings.target_dir_for(spec.package_name)

    if not template_dir.is_dir():
        raise TemplateNotFoundError(f"Template directory not found: {template_dir}")
    if target_dir.exists():
        raise TargetExistsError(f"Target directory already exists: {target_dir}")

    logger.info(
        "Creating micro app '%s' (package %s, port %s, title %s) from %s",
        spec.name,
        spec.package_name,
        spec.port,
        spec.title,
        template.path,
    )
    report = CreationReport(spec=spec, target_dir=target_dir)

    logger.info("Copying template directory...")
    copied = clone_tree(
        template_dir, target_dir, settings.excluded_dirs, settings.excluded_files
    )
    report.outcomes.append(
        StepOutcome("clone template", APPLIED, target_dir, f"{len(copied)} files")
    )

    for step in REWRITE_STEPS:
        report.outcomes.append(run_rewrite(step, target_dir, template, spec))

    logger.info("Registering in host app...")
    report.outcomes.append(register_in_host(settings, spec))

    logger.info("Updating root package.json...")
    report.outcomes.append(update_workspace_manifest(settings, spec))

    report.next_steps = next_steps(report)
    if report.warnings:
        logger.warning(
            "Micro app '%s' created with %d skipped step(s)", spec.name, len(report.warnings)
        )
    else:
        logger.info("Micro app '%s' created", spec.name)
    return report
