"""Command line interface for the Shadowreel project."""

from __future__ import annotations

import copy
import difflib
from pathlib import Path
from typing import Any, Iterable

import click
import yaml
from click.core import ParameterSource
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from shadowreel.config import (
    ConfigError,
    ConfigManager,
    ShadowreelConfig,
    assign_nested,
    resolve_with_precedence,
)
from shadowreel.logging_setup import configure_logging
from shadowreel.shadows import (
    GenerationReport,
    ProjectPaths,
    ShadowTranscoder,
    SyncResult,
    Tier,
    build_project_index,
    delete_shadow,
    generate_all_projects,
    generate_project_shadows,
    move_shadow,
    project_counts,
    rename_shadow,
)

console = Console()

_TIER_CHOICE = click.Choice([tier.value for tier in Tier])


def _handle_cli_error(
    message: str,
    *,
    code: str,
    json_output: bool,
    details: Any | None = None,
    original: Exception | None = None,
) -> None:
    """Emit a standardized error and terminate the command.

    Raises:
        SystemExit: In JSON mode, after printing the error payload.
        click.ClickException: Otherwise.
    """
    if json_output:
        payload: dict[str, Any] = {"error": {"code": code, "message": message}}
        if details is not None:
            payload["error"]["details"] = details
        console.print_json(data=payload)
        raise SystemExit(1)

    if isinstance(original, click.ClickException):
        raise original

    raise click.ClickException(message) from original


def _emit_message(message: Any, *, mode: str, quiet: bool, summary_only: bool) -> None:
    """Print ``message`` unless quiet or summary-only mode hides its ``mode``.

    Modes are ``detail``, ``summary``, ``warning`` and ``error``; errors are
    always shown.
    """
    if quiet and mode != "error":
        return
    if summary_only and mode not in {"summary", "warning", "error"}:
        return
    console.print(message)


def _format_summary_line(command: str, root: Path | str, metrics: dict[str, Any]) -> str:
    parts = ", ".join(f"{key}={value}" for key, value in metrics.items())
    return f"[green]{command} summary for {escape(str(root))}: {parts}.[/green]"


def _emit_errors(errors: Iterable[str], *, quiet: bool, summary_only: bool) -> None:
    entries = list(errors)
    if not entries:
        return
    _emit_message("[red]Errors encountered:[/red]", mode="error", quiet=quiet, summary_only=summary_only)
    for entry in entries:
        _emit_message(f"  - {escape(entry)}", mode="error", quiet=quiet, summary_only=summary_only)


def _load_config() -> ShadowreelConfig:
    """Load the effective configuration and configure logging from it.

    Raises:
        click.ClickException: If configuration cannot be loaded.
    """
    manager = ConfigManager()
    try:
        manager.ensure_exists()
        config = manager.load()
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    configure_logging(config.logging)
    return config


def _output_modes(
    ctx: click.Context,
    config: ShadowreelConfig,
    *,
    json_output: bool,
    quiet: bool,
    summary_mode: bool,
) -> tuple[bool, bool]:
    """Combine flags with configured defaults into ``(quiet, summary_only)``.

    Raises:
        click.ClickException: If the requested modes conflict.
    """
    explicit_quiet = ctx.get_parameter_source("quiet") == ParameterSource.COMMANDLINE
    explicit_summary = ctx.get_parameter_source("summary_mode") == ParameterSource.COMMANDLINE

    quiet_enabled = quiet if explicit_quiet else config.cli.quiet_default
    summary_only = summary_mode if explicit_summary else config.cli.summary_default

    if json_output:
        if explicit_quiet and quiet_enabled:
            raise click.ClickException("--json cannot be combined with --quiet.")
        if explicit_summary and summary_only:
            raise click.ClickException("--json cannot be combined with --summary.")
        return False, False

    if quiet_enabled and summary_only:
        raise click.ClickException(
            "Quiet and summary modes cannot both be enabled. Adjust CLI defaults or flags."
        )
    return quiet_enabled, summary_only


def _project_paths(project: str, config: ShadowreelConfig) -> ProjectPaths:
    return ProjectPaths.from_root(Path(project).expanduser().resolve(), config.layout)


def _report_metrics(report: GenerationReport) -> dict[str, int]:
    return {"created": report.created, "skipped": report.skipped, "errors": len(report.errors)}


def _emit_sync_result(
    result: SyncResult,
    *,
    action: str,
    base_name: str,
    json_output: bool,
) -> None:
    if json_output:
        payload = {"action": action, "base_name": base_name, **result.model_dump(mode="json")}
        console.print_json(data=payload)
        return
    if result.success:
        console.print(f"[green]{action.capitalize()}d shadow for {escape(base_name)}.[/green]")
        return
    if result.not_found:
        console.print(f"[yellow]No shadow found for {escape(base_name)}; nothing to do.[/yellow]")
        return
    raise click.ClickException(f"Could not {action} shadow for {base_name}: {result.error}")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="shadowreel")
def cli() -> None:
    """Shadowreel keeps low-resolution shadow copies of master video recordings."""


@cli.command()
@click.argument("project", type=click.Path(exists=True, file_okay=False, path_type=str))
@click.option("--json", "json_output", is_flag=True, help="Emit counts as JSON.")
def status(project: str, json_output: bool) -> None:
    """Show master, shadow, and missing-shadow counts for PROJECT."""
    config = _load_config()
    paths = _project_paths(project, config)
    try:
        counts = project_counts(paths, config.shadows)
    except OSError as exc:
        _handle_cli_error(
            f"Unable to read project directories: {exc}",
            code="filesystem_error",
            json_output=json_output,
            original=exc,
        )
        return

    if json_output:
        console.print_json(data={"project": str(paths.root), "counts": counts.model_dump()})
        return

    table = Table(title=f"Shadows for {escape(paths.root.name)}")
    table.add_column("Masters", justify="right")
    table.add_column("Shadows", justify="right")
    table.add_column("Missing", justify="right")
    table.add_row(str(counts.masters), str(counts.shadows), str(counts.missing))
    console.print(table)


@cli.command()
@click.argument("project", type=click.Path(exists=True, file_okay=False, path_type=str))
@click.option("--tier", type=_TIER_CHOICE, help="Limit output to one tier.")
@click.option("--json", "json_output", is_flag=True, help="Emit the index as JSON.")
def index(project: str, tier: str | None, json_output: bool) -> None:
    """List every recording of PROJECT with its master and shadow presence."""
    config = _load_config()
    paths = _project_paths(project, config)
    try:
        indexed = build_project_index(paths, config.shadows)
    except OSError as exc:
        _handle_cli_error(
            f"Unable to read project directories: {exc}",
            code="filesystem_error",
            json_output=json_output,
            original=exc,
        )
        return

    tiers = [Tier(tier)] if tier else list(Tier)

    if json_output:
        payload = {
            selected.value: [
                entry.model_dump(mode="json")
                for _, entry in sorted(indexed[selected].items())
            ]
            for selected in tiers
        }
        console.print_json(data=payload)
        return

    table = Table(title=f"Recordings in {escape(paths.root.name)}")
    table.add_column("Tier")
    table.add_column("Base name")
    table.add_column("Kind")
    table.add_column("Shadow")
    for selected in tiers:
        for name, entry in sorted(indexed[selected].items()):
            table.add_row(
                selected.value,
                escape(name),
                entry.kind.value,
                "yes" if entry.has_shadow else "[red]missing[/red]",
            )
    console.print(table)


@cli.command()
@click.argument("project", type=click.Path(exists=True, file_okay=False, path_type=str))
@click.option("--json", "json_output", is_flag=True, help="Emit the generation report as JSON.")
@click.option("--summary", "summary_mode", is_flag=True, help="Only emit summary lines.")
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
@click.pass_context
def generate(
    ctx: click.Context,
    project: str,
    json_output: bool,
    summary_mode: bool,
    quiet: bool,
) -> None:
    """Create shadows for every master in PROJECT that does not have one yet."""
    config = _load_config()
    quiet_enabled, summary_only = _output_modes(
        ctx, config, json_output=json_output, quiet=quiet, summary_mode=summary_mode
    )
    paths = _project_paths(project, config)
    transcoder = ShadowTranscoder(config.shadows, config.tools)

    def _progress(position: int, total: int, label: str) -> None:
        if json_output:
            return
        _emit_message(
            f"[cyan][{position}/{total}][/cyan] {escape(label)}",
            mode="detail",
            quiet=quiet_enabled,
            summary_only=summary_only,
        )

    try:
        report = generate_project_shadows(paths, _progress, transcoder=transcoder)
    except OSError as exc:
        _handle_cli_error(
            f"Unable to read project directories: {exc}",
            code="filesystem_error",
            json_output=json_output,
            original=exc,
        )
        return

    if json_output:
        console.print_json(data={"project": str(paths.root), **report.model_dump()})
        return

    _emit_errors(report.errors, quiet=quiet_enabled, summary_only=summary_only)
    _emit_message(
        _format_summary_line("Generate", paths.root, _report_metrics(report)),
        mode="summary",
        quiet=quiet_enabled,
        summary_only=summary_only,
    )


@cli.command("generate-all")
@click.argument("root", required=False, type=click.Path(exists=True, file_okay=False, path_type=str))
@click.option("--json", "json_output", is_flag=True, help="Emit the aggregate report as JSON.")
@click.option("--summary", "summary_mode", is_flag=True, help="Only emit summary lines.")
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
@click.pass_context
def generate_all(
    ctx: click.Context,
    root: str | None,
    json_output: bool,
    summary_mode: bool,
    quiet: bool,
) -> None:
    """Create missing shadows for every project below ROOT.

    ROOT defaults to the configured ``projects.root``.
    """
    config = _load_config()
    quiet_enabled, summary_only = _output_modes(
        ctx, config, json_output=json_output, quiet=quiet, summary_mode=summary_mode
    )
    target = root or config.projects.root
    if not target:
        _handle_cli_error(
            "No ROOT given and projects.root is not configured.",
            code="missing_root",
            json_output=json_output,
        )
        return
    projects_root = Path(target).expanduser().resolve()
    if not projects_root.is_dir():
        _handle_cli_error(
            f"Projects root {projects_root} is not a directory.",
            code="missing_root",
            json_output=json_output,
        )
        return

    def _progress(project: str, position: int, total: int, label: str) -> None:
        if json_output:
            return
        _emit_message(
            f"[cyan]{escape(project)} [{position}/{total}][/cyan] {escape(label)}",
            mode="detail",
            quiet=quiet_enabled,
            summary_only=summary_only,
        )

    try:
        report = generate_all_projects(
            projects_root,
            _progress,
            transcoder=ShadowTranscoder(config.shadows, config.tools),
            layout=config.layout,
        )
    except OSError as exc:
        _handle_cli_error(
            f"Unable to read project directories: {exc}",
            code="filesystem_error",
            json_output=json_output,
            original=exc,
        )
        return

    if json_output:
        console.print_json(data={"root": str(projects_root), **report.model_dump()})
        return

    _emit_errors(report.errors, quiet=quiet_enabled, summary_only=summary_only)
    metrics = {"projects": report.projects, **_report_metrics(report)}
    _emit_message(
        _format_summary_line("Generate-all", projects_root, metrics),
        mode="summary",
        quiet=quiet_enabled,
        summary_only=summary_only,
    )


@cli.command()
@click.argument("project", type=click.Path(exists=True, file_okay=False, path_type=str))
@click.argument("old_name")
@click.argument("new_name")
@click.option("--tier", type=_TIER_CHOICE, default=Tier.ACTIVE.value, show_default=True)
@click.option("--json", "json_output", is_flag=True, help="Emit the result as JSON.")
def rename(project: str, old_name: str, new_name: str, tier: str, json_output: bool) -> None:
    """Rename the shadow of OLD_NAME to NEW_NAME after its master was renamed."""
    config = _load_config()
    paths = _project_paths(project, config)
    result = rename_shadow(
        old_name,
        new_name,
        paths.shadows_dir(Tier(tier)),
        settings=config.shadows,
    )
    _emit_sync_result(result, action="rename", base_name=old_name, json_output=json_output)


@cli.command()
@click.argument("project", type=click.Path(exists=True, file_okay=False, path_type=str))
@click.argument("base_name")
@click.option("--from", "from_tier", type=_TIER_CHOICE, required=True, help="Current tier.")
@click.option("--to", "to_tier", type=_TIER_CHOICE, required=True, help="Destination tier.")
@click.option("--json", "json_output", is_flag=True, help="Emit the result as JSON.")
def move(project: str, base_name: str, from_tier: str, to_tier: str, json_output: bool) -> None:
    """Move the shadow of BASE_NAME between tiers after its master moved."""
    config = _load_config()
    paths = _project_paths(project, config)
    result = move_shadow(
        base_name,
        paths.shadows_dir(Tier(from_tier)),
        paths.shadows_dir(Tier(to_tier)),
        settings=config.shadows,
    )
    _emit_sync_result(result, action="move", base_name=base_name, json_output=json_output)


@cli.command()
@click.argument("project", type=click.Path(exists=True, file_okay=False, path_type=str))
@click.argument("base_name")
@click.option("--tier", type=_TIER_CHOICE, default=Tier.ACTIVE.value, show_default=True)
@click.option("--json", "json_output", is_flag=True, help="Emit the result as JSON.")
def delete(project: str, base_name: str, tier: str, json_output: bool) -> None:
    """Delete the shadow of BASE_NAME."""
    config = _load_config()
    paths = _project_paths(project, config)
    result = delete_shadow(
        base_name,
        paths.shadows_dir(Tier(tier)),
        settings=config.shadows,
    )
    _emit_sync_result(result, action="delete", base_name=base_name, json_output=json_output)


@cli.group()
def config() -> None:
    """Manage Shadowreel configuration files and overrides."""


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when displaying output.")
def config_view(no_env: bool) -> None:
    """Display the effective configuration after applying precedence rules."""
    manager = ConfigManager()
    try:
        manager.ensure_exists()
        loaded = manager.load(include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    yaml_text = yaml.safe_dump(loaded.model_dump(mode="python"), sort_keys=False)
    console.print(Syntax(yaml_text, "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="Value to assign to KEY.")
def config_set(key: str, value: str) -> None:
    """Persist a configuration value expressed as a dotted KEY.

    VALUE is parsed as a YAML literal, so ``180`` is stored as an integer.
    """
    manager = ConfigManager()
    manager.ensure_exists()

    before = manager.read_text().splitlines()
    segments = [segment.strip() for segment in key.split(".") if segment.strip()]
    if not segments:
        raise click.ClickException("KEY must specify a dotted path such as 'shadows.resolution'.")

    try:
        parsed_value = yaml.safe_load(value)
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Unable to parse value: {exc}") from exc

    try:
        previous = manager.load_file_overrides()
        file_data = copy.deepcopy(previous)
        assign_nested(file_data, segments, parsed_value)
        resolve_with_precedence(defaults=ShadowreelConfig(), file_overrides=file_data)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    if file_data == previous:
        console.print("[yellow]No changes applied; value already up to date.[/yellow]")
        return

    manager.save(file_data)
    after = manager.read_text().splitlines()

    diff = list(
        difflib.unified_diff(
            before,
            after,
            fromfile="config.yaml (before)",
            tofile="config.yaml (after)",
            lineterm="",
        )
    )
    console.print(Syntax("\n".join(diff), "diff", word_wrap=False))
    console.print(f"[green]Updated {'.'.join(segments)}.[/green]")


@config.command("edit")
def config_edit() -> None:
    """Open the configuration file in an editor and validate the result."""
    manager = ConfigManager()
    manager.ensure_exists()

    original = manager.read_text()
    edited = click.edit(original, extension=".yaml")

    if edited is None:
        console.print("[yellow]Edit cancelled; no changes applied.[/yellow]")
        return

    if edited == original:
        console.print("[yellow]No changes detected.[/yellow]")
        return

    try:
        parsed = yaml.safe_load(edited) or {}
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Invalid YAML: {exc}") from exc

    if not isinstance(parsed, dict):
        raise click.ClickException("Configuration file must contain a top-level mapping.")

    try:
        resolve_with_precedence(defaults=ShadowreelConfig(), file_overrides=parsed)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    manager.save(parsed)
    console.print("[green]Configuration updated successfully.[/green]")


def main() -> None:
    """Invoke the Click CLI as the console script entry point."""
    cli()


if __name__ == "__main__":
    main()
