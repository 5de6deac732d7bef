"""Command-line entry point — collects the app identity and runs the pipeline.

Usage:
  microscaffold [create]   interactive prompts, then create the micro app
  microscaffold --help     show this help

The workspace root is $MICROSCAFFOLD_WORKSPACE or the current directory;
$MICROSCAFFOLD_REGISTRY overrides the host registration file.
"""

import logging
import sys
from collections.abc import Callable

from .app_spec import (
    DEFAULT_PORT,
    DEFAULT_TITLE,
    AppSpec,
    default_package_name,
    validation_error,
)

USAGE = """\
Usage: microscaffold [create]

Creates a new micro app under projects/ from the workspace template,
registers it in the host app and adds it to the root package.json.

Environment:
  MICROSCAFFOLD_WORKSPACE   workspace root (default: current directory)
  MICROSCAFFOLD_REGISTRY    host registration file (default: auto-detect)
"""


def _ask(
    prompt: str,
    field: str,
    default: str | None = None,
    read: Callable[[str], str] | None = None,
) -> str:
    """Prompt until the answer passes validation. Empty input takes the default."""
    read = read or input
    suffix = f" [{default}]" if default else ""
    while True:
        answer = read(f"{prompt}{suffix}: ").strip()
        if not answer and default:
            answer = default
        error = validation_error(field, answer)
        if error is None:
            return answer
        print(f"Error: {error}")


def collect_app_spec(read: Callable[[str], str] | None = None) -> AppSpec:
    """Ask for name → package name → port → title and build the AppSpec."""
    name = _ask("Micro app name (used for routing, e.g. exam, art)", "name", read=read)
    package_name = _ask(
        "Package name", "package_name", default_package_name(name), read=read
    )
    port = _ask("Dev server port", "port", DEFAULT_PORT, read=read)
    title = _ask("Display title", "title", DEFAULT_TITLE, read=read)
    return AppSpec(name=name, package_name=package_name, port=port, title=title)


def _create() -> None:
    from .pipeline import TargetExistsError, TemplateNotFoundError, create_microapp
    from .settings import load_settings

    try:
        settings = load_settings()
    except (OSError, ValueError) as e:
        print(f"Error: {e}\n")
        print("Check your microscaffold.toml configuration.")
        sys.exit(1)

    print("=== Create Micro App ===\n")
    try:
        spec = collect_app_spec()
    except (EOFError, KeyboardInterrupt):
        print("\nCancelled.")
        sys.exit(1)

    try:
        report = create_microapp(spec, settings)
    except (TemplateNotFoundError, TargetExistsError) as e:
        print(f"Error: {e}")
        sys.exit(1)
    except (OSError, ValueError) as e:
        print(f"Error: creation stopped part-way: {e}")
        sys.exit(1)

    print()
    for outcome in report.outcomes:
        print(f"  {outcome.describe()}")
    print(f"\nMicro app '{spec.name}' created at {report.target_dir}\n")
    print("Next steps:")
    for i, line in enumerate(report.next_steps, 1):
        print(f"  {i}. {line}")


def main() -> None:
    """Main entry point."""
    args = sys.argv[1:]
    if args and args[0] in ("-h", "--help", "help"):
        print(USAGE)
        return
    if args and args[0] != "create":
        print(f"Unknown command: {args[0]}\n")
        print(USAGE)
        sys.exit(2)

    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.INFO,
    )
    _create()


if __name__ == "__main__":
    main()
