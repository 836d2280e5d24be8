"""CLI entry point for lvgl-studio.

This module acts as the central entry point for the project's CLI tools.
Most commands take a saved project file and delegate to the studio
packages.
"""

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

from studio.config import EnvVar, get_available_llm_providers, get_environment
from studio.core import get_logger, setup_logging

# Load environment variables from .env file
load_dotenv()

logger = get_logger("cli")

LANGUAGE_FILES = {"c": "ui.c", "micropython": "ui.py"}


def _load(path: Path):
    """Load a project file, logging the reason on failure."""
    from studio.serialize import ProjectFormatError, load_project

    try:
        return load_project(path)
    except ProjectFormatError as e:
        logger.error(str(e))
        return None


def _generate_code(project, args: argparse.Namespace) -> tuple[str, bool]:
    from studio.codegen import AISettings, CodeGenerator

    settings = AISettings.from_environment(
        provider=args.provider,
        model=args.model,
        api_key=args.api_key,
        base_url=args.base_url,
    )
    outcome = CodeGenerator(settings).run(project, args.language)
    return outcome.text, outcome.ok


def _add_ai_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--language",
        "-l",
        choices=sorted(LANGUAGE_FILES),
        default="c",
        help="Target language (default: c)",
    )
    parser.add_argument(
        "--provider",
        "-p",
        choices=["gemini", "openai", "anthropic", "ollama", "custom"],
        help="Code generation provider (default: LLM_PROVIDER)",
    )
    parser.add_argument("--model", "-m", help="Model name (default: provider default)")
    parser.add_argument("--api-key", help="API key (default: provider env var)")
    parser.add_argument("--base-url", help="Custom OpenAI-compatible endpoint")


# =============================================================================
# Generate Command
# =============================================================================


def cmd_generate(args: argparse.Namespace) -> int:
    """Handle the generate command."""
    project = _load(args.project)
    if project is None:
        return 1

    code, ok = _generate_code(project, args)

    if args.output:
        args.output.write_text(code + "\n", encoding="utf-8")
        logger.info(f"Code saved to {args.output}")
    else:
        print(code)
    return 0 if ok else 1


def handle_generate_command(argv: list[str]) -> int:
    parser = argparse.ArgumentParser(
        prog="python . generate",
        description="Generate LVGL code for a saved project",
    )
    parser.add_argument("project", type=Path, help="Project file (.json)")
    _add_ai_arguments(parser)
    parser.add_argument("--output", "-o", type=Path, help="Write code to this file")
    args = parser.parse_args(argv)
    return cmd_generate(args)


# =============================================================================
# Validate Command
# =============================================================================


def cmd_validate(args: argparse.Namespace) -> int:
    """Report structural problems in a project file."""
    from studio.model import validate_project

    project = _load(args.project)
    if project is None:
        return 1

    issues = validate_project(project)
    if not issues:
        logger.info(f"{args.project}: no issues found")
        return 0

    for issue in issues:
        print(f"[{issue.issue_type}] {issue.ref_id}: {issue.message}")
    logger.warning(f"{args.project}: {len(issues)} issue(s)")
    return 1


def handle_validate_command(argv: list[str]) -> int:
    parser = argparse.ArgumentParser(
        prog="python . validate",
        description="Check a project file for broken invariants",
    )
    parser.add_argument("project", type=Path, help="Project file (.json)")
    return cmd_validate(parser.parse_args(argv))


# =============================================================================
# Info Command
# =============================================================================


def cmd_info(args: argparse.Namespace) -> int:
    """Summarize screens, layers and widgets in paint order."""
    from studio.layers import render_order

    project = _load(args.project)
    if project is None:
        return 1

    settings = project.settings
    print(f"Project: {settings.project_name}")
    print(f"Canvas:  {settings.width}x{settings.height} (rotation {settings.rotation})")
    if settings.target_device:
        print(f"Device:  {settings.target_device}")
    print(f"Theme:   {settings.theme}")

    for screen in project.screens:
        print(f"\nScreen '{screen.name}' ({screen.id}), {len(screen.widgets)} widget(s)")
        for layer in reversed(screen.layers):
            flags = "".join(
                [" hidden" if not layer.visible else "", " locked" if layer.locked else ""]
            )
            count = sum(1 for w in screen.widgets if w.layer_id == layer.id)
            print(f"  Layer '{layer.name}'{flags}: {count} widget(s)")
        for index, widget in enumerate(render_order(screen)):
            print(
                f"    {index:>3} {widget.type.value:<12} {widget.name:<20} "
                f"({widget.x}, {widget.y}) {widget.width}x{widget.height}"
            )
    return 0


def handle_info_command(argv: list[str]) -> int:
    parser = argparse.ArgumentParser(
        prog="python . info",
        description="Show a project summary",
    )
    parser.add_argument("project", type=Path, help="Project file (.json)")
    return cmd_info(parser.parse_args(argv))


# =============================================================================
# Package Command
# =============================================================================


def _parse_options(pairs: list[str]) -> dict[str, str] | None:
    options: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep:
            logger.error(f"Invalid option '{pair}', expected KEY=VALUE")
            return None
        options[key.strip()] = value.strip()
    return options


def cmd_package(args: argparse.Namespace) -> int:
    """Generate code for a project and bundle it for a board."""
    from studio.packaging import (
        PackagingError,
        build_project_archive,
        fallback_manifest,
        fetch_manifest,
        find_board,
    )

    config = _parse_options(args.option)
    if config is None:
        return 1

    live = get_environment(EnvVar.STUDIO_LIVE_MANIFEST, override=args.live_manifest or None)
    boards = fetch_manifest() if live else fallback_manifest()
    if args.list_boards:
        for board in boards:
            print(f"{board.name}: {board.description}")
            for option in board.options:
                choices = ", ".join(c.value for c in option.choices)
                print(f"    --option '{option.label}=<{choices}>'")
        return 0

    if not (args.project and args.board and args.output):
        logger.error("PROJECT, --board and --output are required")
        return 1

    project = _load(args.project)
    if project is None:
        return 1

    try:
        board = find_board(boards, args.board)
        code, ok = _generate_code(project, args)
        if not ok:
            logger.error("Code generation failed, not packaging")
            print(code)
            return 1
        data = build_project_archive(board, {LANGUAGE_FILES[args.language]: code}, config)
    except PackagingError as e:
        logger.error(str(e))
        return 1

    args.output.parent.mkdir(parents=True, exist_ok=True)
    args.output.write_bytes(data)
    logger.info(f"Project archive saved to {args.output} ({len(data)} bytes)")
    return 0


def handle_package_command(argv: list[str]) -> int:
    parser = argparse.ArgumentParser(
        prog="python . package",
        description="Bundle generated code with a board configuration",
    )
    parser.add_argument("project", type=Path, nargs="?", help="Project file (.json)")
    parser.add_argument("--board", "-b", help="Target board name")
    parser.add_argument(
        "--option",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Board option, repeatable (e.g. 'Color Depth=32')",
    )
    parser.add_argument("--output", "-o", type=Path, help="Output zip path")
    parser.add_argument(
        "--live-manifest",
        action="store_true",
        help="Fetch the board manifest from the LVGL project creator",
    )
    parser.add_argument("--list-boards", action="store_true", help="List boards and exit")
    _add_ai_arguments(parser)
    return cmd_package(parser.parse_args(argv))


# =============================================================================
# Samples Command
# =============================================================================


def cmd_samples(args: argparse.Namespace) -> int:
    """List the built-in sample projects, or save one as a project file."""
    from studio.model import SAMPLE_PROJECTS
    from studio.serialize import default_filename, save_project

    if args.sample is None:
        for sample in SAMPLE_PROJECTS.values():
            screens = len(sample.project.screens)
            print(f"{sample.id:<14} {sample.name:<20} {screens} screen(s)  {sample.description}")
        return 0

    sample = SAMPLE_PROJECTS.get(args.sample)
    if sample is None:
        logger.error(f"Unknown sample '{args.sample}', choose from: {', '.join(SAMPLE_PROJECTS)}")
        return 1

    output = args.output
    if output is None:
        directory = get_environment(EnvVar.STUDIO_PROJECT_DIR) or Path.cwd()
        output = directory / default_filename(sample.project)
    save_project(sample.project, output)
    print(output)
    return 0


def handle_samples_command(argv: list[str]) -> int:
    parser = argparse.ArgumentParser(
        prog="python . samples",
        description="List sample projects or save one to start from",
    )
    parser.add_argument("sample", nargs="?", help="Sample id to save (omit to list)")
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        help="Project file to write (default: STUDIO_PROJECT_DIR or the current directory)",
    )
    return cmd_samples(parser.parse_args(argv))


# =============================================================================
# Providers Command
# =============================================================================


def cmd_providers(_argv: list[str]) -> int:
    """List configured code generation providers."""
    from studio.codegen.backend import PROVIDER_SPECS

    available = get_available_llm_providers()
    selected = get_environment(EnvVar.LLM_PROVIDER)

    logger.info("Code generation providers:")
    for provider, spec in PROVIDER_SPECS.items():
        status = "available" if provider.value in available else "not configured"
        marker = "*" if provider.value == selected else " "
        print(f" {marker} {provider.value:<10} {spec.default_model:<20} {status}")
    return 0


# =============================================================================
# Main
# =============================================================================


def show_help() -> None:
    """Display CLI help message."""
    print("Usage: python . {command} [args]")
    print("\n=== Commands ===")
    print("  generate   Generate LVGL code for a project file")
    print("  validate   Check a project file for broken invariants")
    print("  info       Show screens, layers and widgets of a project")
    print("  package    Bundle generated code for a target board")
    print("  samples    List or save the built-in sample projects")
    print("  providers  List code generation providers")
    print("\nExamples:")
    print("  python . generate my_ui.json -l micropython -o ui.py")
    print("  python . generate my_ui.json -p ollama -m qwen3")
    print("  python . validate my_ui.json")
    print("  python . package my_ui.json -b ESP32-S3-BOX --option 'Color Depth=32' -o esp.zip")
    print("  python . package --list-boards")
    print("  python . samples wifi_settings -o menu.json")


def main() -> int:
    """Main entry point for the CLI."""
    if len(sys.argv) < 2:
        show_help()
        return 1

    command = sys.argv[1]
    rest_args = sys.argv[2:]

    if command in ("-h", "--help"):
        show_help()
        return 0

    commands = {
        "generate": lambda: handle_generate_command(rest_args),
        "validate": lambda: handle_validate_command(rest_args),
        "info": lambda: handle_info_command(rest_args),
        "package": lambda: handle_package_command(rest_args),
        "samples": lambda: handle_samples_command(rest_args),
        "providers": lambda: cmd_providers(rest_args),
    }

    if command in commands:
        setup_logging(get_environment(EnvVar.STUDIO_LOG_LEVEL))
        return commands[command]()

    logger.error(f"Unknown command: {command}")
    show_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
