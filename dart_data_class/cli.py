"""
Command-line interface for the Dart data class generator.

Reads buffers from disk, asks for confirmations, and writes the edited buffer
or the files generated from JSON.
"""

import argparse
import logging
import time
from pathlib import Path
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
from rich.prompt import Confirm
from rich.syntax import Syntax
from rich.table import Table

from .codegen import (
    GeneratedFile,
    GenerationResult,
    MemberKind,
    ProjectContext,
    generate_data_classes,
    generate_from_json,
)
from .codegen.core.config import (
    EXAMPLE_CONFIG,
    ConfigError,
    ConfigManager,
    Flavor,
    GeneratorConfig,
    SeparatePolicy,
    load_config,
)
from .codegen.core.generator import ConfirmCallback, UserCancelledError
from .logging_config import configure_logging, get_logger
from .utils import (
    JSONLoaderError,
    find_package_name,
    load_json,
    read_text_file,
    write_text_file,
)

logger = get_logger(__name__)


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


# Initialize rich console
console = Console()


def make_confirm(assume_yes: bool) -> Optional[ConfirmCallback]:
    """Build the confirmation callback; ``--yes`` accepts everything."""
    if assume_yes:
        return None

    def confirm(question: str) -> Optional[bool]:
        try:
            return Confirm.ask(question, console=console, default=True)
        except (KeyboardInterrupt, EOFError):
            console.print()
            return None

    return confirm


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="dart-data-class",
        description="Generate Dart data class members, or Dart classes from JSON",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  dart-data-class generate lib/models/user.dart
  dart-data-class generate lib/models/user.dart --member copyWith --class User
  dart-data-class from-json response.json --name User --separate always
  dart-data-class from-json --url https://example.com/user.json --name User
  dart-data-class config --example
        """.strip(),
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )

    subparsers = parser.add_subparsers(dest="command")

    # generate
    generate = subparsers.add_parser(
        "generate", help="Generate data class members in a Dart file"
    )
    generate.add_argument("file", help="Dart file to update")
    generate.add_argument(
        "--member",
        choices=[kind.value for kind in MemberKind],
        help="Generate only this member",
    )
    generate.add_argument("--class", dest="class_name", help="Only update this class")
    _add_common_args(generate)
    generate.set_defaults(func=handle_generate)

    # from-json
    from_json = subparsers.add_parser(
        "from-json", help="Generate Dart data classes from JSON"
    )
    input_group = from_json.add_mutually_exclusive_group(required=True)
    input_group.add_argument("file", nargs="?", help="JSON file to convert")
    input_group.add_argument("--url", help="URL to fetch JSON from")
    from_json.add_argument("--name", required=True, help="Name of the root class")
    from_json.add_argument(
        "--separate",
        choices=[policy.value for policy in SeparatePolicy],
        help="Write one file per class (default: from config)",
    )
    from_json.add_argument(
        "--output-dir", help="Directory for generated files (default: next to input)"
    )
    from_json.add_argument(
        "--detect-timestamps",
        action="store_true",
        help="Infer DateTime fields from date-like strings",
    )
    _add_common_args(from_json)
    from_json.set_defaults(func=handle_from_json)

    # config
    config = subparsers.add_parser("config", help="Show or write configuration")
    config.add_argument("--config", help="Configuration file path (JSON)")
    config.add_argument("--example", action="store_true", help="Start from the example settings")
    config.add_argument("--output", "-o", help="Write the configuration to this file")
    config.set_defaults(func=handle_config)

    return parser


def _add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", help="Configuration file path (JSON)")
    parser.add_argument("--package-name", help="Package name of the project")
    parser.add_argument(
        "--flavor",
        choices=[flavor.value for flavor in Flavor],
        default=Flavor.AUTO.value,
        help="Project flavor (default: detect from imports)",
    )
    parser.add_argument("--yes", "-y", action="store_true", help="Answer yes to every question")
    parser.add_argument(
        "--dry-run", action="store_true", help="Print the result instead of writing it"
    )
    parser.add_argument("--verbose", action="store_true", help="Show generation metadata")


def _build_config(args: argparse.Namespace) -> GeneratorConfig:
    """Build configuration from the config file and CLI arguments."""
    overrides = {}
    if getattr(args, "separate", None):
        overrides["json_separate"] = args.separate
    if getattr(args, "detect_timestamps", False):
        overrides["json_detect_timestamps"] = True

    try:
        config = load_config(custom_config=overrides, config_file=args.config)
    except ConfigError as e:
        raise CLIError(f"Configuration error: {e}")

    for warning in ConfigManager().validate_config(config):
        console.print(f"[yellow]⚠️  {warning}[/yellow]")
    return config


def _build_context(args: argparse.Namespace, anchor: Optional[Path]) -> ProjectContext:
    package_name = args.package_name
    if package_name is None and anchor is not None:
        package_name = find_package_name(anchor)
        if package_name:
            logger.info("Detected package name %s", package_name)
    return ProjectContext(package_name=package_name, flavor=Flavor(args.flavor))


def handle_generate(args: argparse.Namespace) -> int:
    """Handle the generate subcommand."""
    path = Path(args.file)
    text = read_text_file(path)
    config = _build_config(args)
    context = _build_context(args, path)
    selector = MemberKind(args.member) if args.member else None

    result = generate_data_classes(
        text,
        config=config,
        context=context,
        selector=selector,
        class_name=args.class_name,
        confirm=make_confirm(args.yes),
    )
    if not _report(result, args):
        return 1

    if not result.edits:
        console.print("[green]✓[/green] Everything is up to date")
        return 0

    if args.dry_run:
        console.print(Syntax(result.code, "dart", theme="monokai", line_numbers=True))
        return 0

    write_text_file(path, result.code)
    console.print(
        f"[green]✓[/green] Updated [cyan]{path}[/cyan] ({len(result.edits)} edits)"
    )
    return 0


def handle_from_json(args: argparse.Namespace) -> int:
    """Handle the from-json subcommand."""
    source, text = load_json(file_path=args.file, url=args.url)
    console.print(f"Loaded: {source}")

    config = _build_config(args)
    anchor = Path(args.file) if args.file else None
    context = _build_context(args, anchor)

    result = generate_from_json(
        text, args.name, config=config, context=context, confirm=make_confirm(args.yes)
    )
    if not _report(result, args):
        return 1

    if args.dry_run:
        for generated in result.files:
            console.print(
                Panel(
                    Syntax(generated.content, "dart", theme="monokai"),
                    title=generated.name,
                    border_style="green" if generated.is_current_buffer else "blue",
                )
            )
        return 0

    if args.output_dir:
        output_dir = Path(args.output_dir)
    elif anchor is not None:
        output_dir = anchor.parent
    else:
        output_dir = Path.cwd()

    written: List[Path] = []
    try:
        write_generated_files(
            result.files, output_dir, config.json_write_delay, make_confirm(args.yes), written
        )
    except UserCancelledError as e:
        console.print(f"[yellow]⚠️  {e}[/yellow]")
        _print_written(written)
        return 1

    _print_written(written)
    return 0


def write_generated_files(
    files: List[GeneratedFile],
    output_dir: Path,
    delay: float,
    confirm: Optional[ConfirmCallback] = None,
    written: Optional[List[Path]] = None,
) -> List[Path]:
    """
    Write generated files in order, pausing between writes.

    Existing files are only overwritten after confirmation; declining stops
    the remaining writes, files already written are kept.

    Args:
        files: Files in emission order
        output_dir: Target directory
        delay: Seconds to wait between two writes
        confirm: Asked before overwriting; None overwrites silently
        written: Collects the written paths, also when writing stops early

    Returns:
        Paths that were written

    Raises:
        UserCancelledError: If an overwrite is declined or cancelled
    """
    if written is None:
        written = []
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("[cyan]Writing files...", total=len(files))

        for index, generated in enumerate(files):
            target = output_dir / generated.name
            if target.exists() and confirm is not None:
                progress.stop()
                answer = confirm(f"{target} exists. Overwrite it?")
                progress.start()
                if not answer:
                    raise UserCancelledError(f"Stopped before writing {target}")

            write_text_file(target, generated.content)
            written.append(target)
            progress.advance(task)

            if index < len(files) - 1 and delay > 0:
                time.sleep(delay)

    logger.info("Wrote %d files to %s", len(written), output_dir)
    return written


def _print_written(paths: List[Path]) -> None:
    if not paths:
        return
    table = Table(title="📄 Generated Files", box=box.SIMPLE, header_style="bold cyan")
    table.add_column("#", style="dim")
    table.add_column("File", style="cyan")
    for i, path in enumerate(paths, start=1):
        table.add_row(str(i), str(path))
    console.print(table)


def _report(result: GenerationResult, args: argparse.Namespace) -> bool:
    """Print errors, warnings and metadata; False when generation failed."""
    if not result.success:
        if result.cancelled:
            console.print(f"[yellow]⚠️  {result.error_message}[/yellow]")
        else:
            console.print(f"[red]✗[/red] {result.error_message}")
        return False

    if args.verbose and result.metadata:
        metadata_table = Table(
            title="📊 Generation Metadata",
            box=box.SIMPLE,
            show_header=True,
            header_style="bold cyan",
        )
        metadata_table.add_column("Property", style="bold")
        metadata_table.add_column("Value", style="green")
        for key, value in result.metadata.items():
            metadata_table.add_row(key.replace("_", " ").title(), str(value))
        console.print(metadata_table)

    if result.warnings:
        console.print("\n[yellow]⚠️  Warnings:[/yellow]")
        for warning in result.warnings:
            console.print(f"  [yellow]•[/yellow] {warning}")
        console.print()

    return True


def handle_config(args: argparse.Namespace) -> int:
    """Show the effective configuration, optionally writing it to a file."""
    custom = EXAMPLE_CONFIG if args.example else None
    try:
        config = load_config(custom_config=custom, config_file=args.config)
    except ConfigError as e:
        raise CLIError(f"Configuration error: {e}")

    table = Table(title="⚙️  Configuration", box=box.SIMPLE, header_style="bold cyan")
    table.add_column("Setting", style="bold")
    table.add_column("Value", style="green")
    for key, value in config.to_dict().items():
        table.add_row(key, str(value))
    console.print(table)

    if args.output:
        try:
            ConfigManager().save_config(config, args.output)
        except ConfigError as e:
            raise CLIError(str(e))
        console.print(f"[green]✓[/green] Configuration saved to [cyan]{args.output}[/cyan]")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point of the ``dart-data-class`` command."""
    parser = create_parser()
    args = parser.parse_args(argv)
    configure_logging(getattr(logging, args.log_level))

    if not getattr(args, "func", None):
        parser.print_help()
        return 1

    try:
        return args.func(args)
    except (CLIError, JSONLoaderError, FileNotFoundError) as e:
        console.print(f"[red]✗ Error:[/red] {e}")
        return 1
    except OSError as e:
        console.print(f"[red]✗ File error:[/red] {e}")
        return 1
