"""inputdefense CLI — exercise the input-defense layer from a terminal."""

import json
import logging
from dataclasses import replace
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from inputdefense import __version__
from inputdefense.config import ConfigError, SecurityConfig, load_config

console = Console()


class _State:
    def __init__(self, config: SecurityConfig) -> None:
        self.config = config

    def backend(self):
        from inputdefense.storage.backends import JsonFileBackend

        return JsonFileBackend(self.config.data_path())

    def store(self):
        from inputdefense.storage.secure_store import SecureStore

        return SecureStore(self.backend(), namespace=self.config.storage.namespace)


pass_state = click.make_pass_decorator(_State)


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "config_path", default=None, help="YAML configuration file")
@click.option("--data-dir", default=None, help="Directory for persisted state")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, config_path: str | None, data_dir: str | None, verbose: bool):
    """inputdefense — sanitize, validate, throttle and store user input."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    try:
        config = load_config(config_path)
    except ConfigError as e:
        raise click.ClickException(str(e))
    if data_dir:
        config = replace(config, storage=replace(config.storage, data_dir=data_dir))
    ctx.obj = _State(config)


def _print_errors(errors: list[str]) -> None:
    for error in errors:
        console.print(f"  [red]x[/] {error}")


# ── Validation ───────────────────────────────────────────────────────


@main.command("check-text")
@click.argument("text")
@click.option("--max-length", type=int, default=None, help="Override the maximum length")
@pass_state
def check_text(state: _State, text: str, max_length: int | None):
    """Validate TEXT and print its sanitized form."""
    from inputdefense.validation.validator import validate_input

    result = validate_input(text, max_length=max_length, config=state.config)
    console.print(f"Sanitized: {result.sanitized}", markup=False)
    if result.is_valid:
        console.print("[green]Valid[/]")
        return
    console.print("[red]Rejected:[/]")
    _print_errors(result.errors)
    raise SystemExit(1)


@main.command("check-file")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--type", "content_type", default=None, help="Reported MIME type (guessed if omitted)")
@pass_state
def check_file(state: _State, path: str, content_type: str | None):
    """Check whether the file at PATH would be accepted for upload."""
    from inputdefense.validation.file_validator import validate_file
    from inputdefense.validation.models import FileCandidate

    candidate = FileCandidate.from_path(path, content_type=content_type)
    result = validate_file(candidate, config=state.config)

    table = Table(title=candidate.name)
    table.add_column("Size", justify="right")
    table.add_column("Type")
    table.add_row(str(candidate.size), candidate.content_type or "-")
    console.print(table)

    if result.is_valid:
        console.print("[green]Accepted[/]")
        return
    console.print("[red]Rejected:[/]")
    _print_errors(result.errors)
    raise SystemExit(1)


# ── Rate limiting ────────────────────────────────────────────────────


@main.command("rate-limit")
@click.argument("key")
@click.option("--reset", is_flag=True, help="Forget the window instead of counting")
@pass_state
def rate_limit(state: _State, key: str, reset: bool):
    """Count one attempt against the KEY bucket."""
    from inputdefense.ratelimit.limiter import RateLimiter

    limiter = RateLimiter(state.backend(), config=state.config)
    if reset:
        limiter.reset(key)
        console.print(f"Window for [cyan]{key}[/] cleared")
        return

    decision = limiter.check(key)
    status = "[green]allowed[/]" if decision.allowed else "[red]denied[/]"
    console.print(
        f"{status} remaining={decision.remaining_requests} reset_time={decision.reset_time}"
    )
    if not decision.allowed:
        raise SystemExit(1)


# ── Storage ──────────────────────────────────────────────────────────


@main.group()
def store():
    """Read and write namespaced persisted values."""


@store.command("set")
@click.argument("key")
@click.argument("value")
@click.option("--encode", is_flag=True, help="Base64-obfuscate the stored value")
@pass_state
def store_set(state: _State, key: str, value: str, encode: bool):
    """Store VALUE (parsed as JSON when possible) under KEY."""
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError:
        parsed = value
    state.store().set(key, parsed, encode=encode)
    console.print(f"Stored [cyan]{key}[/]")


@store.command("get")
@click.argument("key")
@click.option("--decode", is_flag=True, help="Value was stored with --encode")
@pass_state
def store_get(state: _State, key: str, decode: bool):
    """Print the value stored under KEY."""
    value = state.store().get(key, decode=decode)
    if value is None:
        console.print(f"[yellow]No value for {key}[/]")
        return
    console.print_json(json.dumps(value))


@store.command("remove")
@click.argument("key")
@pass_state
def store_remove(state: _State, key: str):
    """Remove KEY."""
    state.store().remove(key)
    console.print(f"Removed [cyan]{key}[/]")


@store.command("clear")
@pass_state
def store_clear(state: _State):
    """Remove every namespaced value."""
    removed = state.store().clear_all()
    console.print(f"Removed {removed} entries")


# ── Violations ───────────────────────────────────────────────────────


@main.group()
def violations():
    """Inspect violation reports received by the collector."""


def _violation_log(state: _State):
    from inputdefense.reporting.violation_log import ViolationLog

    return ViolationLog(Path(state.config.data_path()) / "violations")


@violations.command("list")
@click.option("--directive", default=None, help="Only show this violated directive")
@click.option("--limit", default=50, help="Maximum number of reports")
@pass_state
def violations_list(state: _State, directive: str | None, limit: int):
    """List received violation reports, newest first."""
    records = _violation_log(state).get_events(directive=directive, limit=limit)
    if not records:
        console.print("[yellow]No violation reports.[/]")
        return

    table = Table(title=f"Violation Reports ({len(records)})")
    table.add_column("Received", style="dim")
    table.add_column("Directive", style="cyan")
    table.add_column("Blocked URI")
    table.add_column("User Agent")
    for r in records:
        table.add_row(r.received_at, r.violated_directive, r.blocked_uri, r.user_agent[:40])
    console.print(table)


@violations.command("export")
@click.option("--format", "fmt", default="json", type=click.Choice(["json", "csv"]))
@click.option("--directive", default=None)
@pass_state
def violations_export(state: _State, fmt: str, directive: str | None):
    """Export received violation reports."""
    click.echo(_violation_log(state).export_events(fmt, directive=directive))


if __name__ == "__main__":
    main()
