"""Click CLI for gemini-consistency: repeat a prompt and measure agreement."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn
from rich.table import Table

from gemini_consistency.config.defaults import DEFAULT_EXPORT_NAME
from gemini_consistency.config.hierarchy import load_config_hierarchy

if TYPE_CHECKING:
    from gemini_consistency.core import ConsistencyTester
    from gemini_consistency.templates import TemplateRegistry
    from gemini_consistency.types import RowEvent, RunConfig, RunReport

console = Console()
error_console = Console(stderr=True)

_STATUS_STYLES = {"ok": "green", "error": "red", "cancelled": "yellow"}


def _setup_logging(verbosity: int, default_level: str = "WARNING") -> None:
    """Configure logging based on verbosity level."""
    level = logging.getLevelName(default_level.upper())
    if not isinstance(level, int):
        level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_time=False, show_path=False)],
    )


@click.group()
@click.version_option(package_name="gemini-consistency")
def cli() -> None:
    """gemini-consistency: measure how stable Gemini's answers are across runs."""


@cli.command()
@click.option("-p", "--prompt", type=str, default=None, help="Prompt text.")
@click.option(
    "--prompt-file", type=click.Path(exists=True, dir_okay=False), help="Read the prompt from a file."
)
@click.option("-t", "--template", type=str, default=None, help="Use a named prompt template.")
@click.option("-i", "--image", "images", multiple=True, type=click.Path(exists=True, dir_okay=False),
              help="Attach an image or PDF (repeatable).")
@click.option("--model", type=str, default=None, help="Gemini model name.")
@click.option("-n", "--runs", type=click.IntRange(min=1), default=None, help="Number of calls.")
@click.option("--temperature", type=click.FloatRange(0.0, 2.0), default=None)
@click.option("--top-p", type=click.FloatRange(0.0, 1.0), default=None, help="0 leaves topP unset.")
@click.option("--timeout-ms", type=click.IntRange(min=1), default=None, help="Per-call timeout.")
@click.option("--delay-ms", type=click.IntRange(min=0), default=None, help="Pause between calls.")
@click.option("--api-key", type=str, default=None, help="Gemini API key (else env or saved key).")
@click.option("--save-key", is_flag=True, default=False, help="Remember --api-key for later runs.")
@click.option("--no-sdk", is_flag=True, default=False, help="Skip the SDK path, use REST only.")
@click.option("--export", "export_path", type=click.Path(dir_okay=False), default=None,
              help=f"Write results as JSON (e.g. {DEFAULT_EXPORT_NAME}).")
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug).")
def run(
    prompt: str | None,
    prompt_file: str | None,
    template: str | None,
    images: tuple[str, ...],
    model: str | None,
    runs: int | None,
    temperature: float | None,
    top_p: float | None,
    timeout_ms: int | None,
    delay_ms: int | None,
    api_key: str | None,
    save_key: bool,
    no_sdk: bool,
    export_path: str | None,
    verbose: int,
) -> None:
    """Send the same prompt N times and report consistency metrics."""
    config = load_config_hierarchy(
        model=model,
        runs=runs,
        temperature=temperature,
        top_p=top_p,
        timeout_ms=timeout_ms,
        delay_ms=delay_ms,
    )
    _setup_logging(verbose, str(config.get("log_level", "WARNING")))

    from gemini_consistency.core import resolve_api_key
    from gemini_consistency.errors.exceptions import GeminiConsistencyError
    from gemini_consistency.store.credentials import CredentialStore
    from gemini_consistency.types import RunConfig

    try:
        prompt_text = _resolve_prompt(prompt, prompt_file, template, config)
    except (KeyError, GeminiConsistencyError) as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)

    with CredentialStore(Path(config["settings_db"])) as store:
        if save_key and api_key:
            store.save_api_key(api_key)
        resolved_key = resolve_api_key(api_key, config, store)

    try:
        run_config = RunConfig(
            api_key=resolved_key,
            model=config["model"],
            prompt=prompt_text,
            runs=config["runs"],
            temperature=config["temperature"],
            top_p=config["top_p"],
            timeout_ms=config["timeout_ms"],
            delay_ms=config["delay_ms"],
            media_paths=[Path(p) for p in images],
        )
    except ValidationError as e:
        error_console.print(f"[red]Invalid settings:[/red] {escape(str(e))}")
        sys.exit(1)
    _print_attachments(run_config.media_paths)
    try:
        report, tester = asyncio.run(
            _run_with_progress({**config, "api_key": resolved_key}, run_config, use_sdk=not no_sdk)
        )
    except GeminiConsistencyError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)

    if report.refused:
        error_console.print(f"[red]Error:[/red] {escape(report.refused)}")
        sys.exit(1)

    _print_summary(report)

    if export_path:
        written = tester.export(export_path)
        console.print(f"[green]Written to {written}[/green]")


async def _run_with_progress(
    config: dict, run_config: RunConfig, use_sdk: bool
) -> tuple[RunReport, ConsistencyTester]:
    """Drive one run with a live progress bar; Ctrl-C cancels between calls."""
    from gemini_consistency.core import ConsistencyTester
    from gemini_consistency.reporting import StatusLine
    from gemini_consistency.utils.formatting import truncate

    progress = Progress(
        TextColumn("{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        console=error_console,
        transient=True,
    )
    task_id = progress.add_task("Idle.", total=run_config.runs)

    def on_status(text: str) -> None:
        progress.update(task_id, description=escape(text))

    def on_row(row: RowEvent) -> None:
        style = _STATUS_STYLES.get(row.status.value, "white")
        latency = f"{row.latency_ms} ms" if row.latency_ms is not None else "–"
        progress.console.print(
            f"{row.index:>3}  [{style}]{row.status.value:<9}[/{style}] {latency:>9}  "
            f"{escape(truncate(row.text))}"
        )

    def on_progress(done: int, total: int) -> None:
        progress.update(task_id, completed=done)

    tester = ConsistencyTester.from_config(
        config, use_sdk=use_sdk, status=StatusLine(on_change=on_status)
    )

    loop = asyncio.get_running_loop()
    with contextlib.suppress(NotImplementedError):
        loop.add_signal_handler(signal.SIGINT, tester.cancel)
    try:
        with progress:
            report = await tester.run_async(run_config, on_row=on_row, on_progress=on_progress)
    finally:
        with contextlib.suppress(NotImplementedError):
            loop.remove_signal_handler(signal.SIGINT)
        await tester.close()
    return report, tester


def _resolve_prompt(
    prompt: str | None,
    prompt_file: str | None,
    template: str | None,
    config: dict,
) -> str:
    if prompt:
        return prompt
    if prompt_file:
        return Path(prompt_file).read_text(encoding="utf-8")
    if template:
        return _template_registry(config).get(template).prompt
    return ""


def _template_registry(config: dict) -> TemplateRegistry:
    from gemini_consistency.templates import TemplateRegistry

    user_path = config.get("templates_path")
    return TemplateRegistry(user_paths=[Path(user_path)] if user_path else None)


def _print_attachments(paths: list[Path]) -> None:
    from gemini_consistency.utils.formatting import format_bytes

    for path in paths:
        error_console.print(f"[dim]Attached {escape(path.name)} ({format_bytes(path.stat().st_size)})[/dim]")


def _print_summary(report: RunReport) -> None:
    """Print the consistency metrics for a finished run."""
    from gemini_consistency.utils.formatting import format_rate

    metrics = report.metrics
    n = metrics.sample_size

    table = Table(title="Consistency Summary", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value")

    table.add_row("Successful calls", f"{report.success_count}/{len(report.results)}")
    table.add_row("Exact agreement", format_rate(metrics.exact_agreement_rate, n))
    table.add_row("Avg. Jaccard similarity", format_rate(metrics.average_similarity, n))
    table.add_row("Majority (normalized)", escape(metrics.majority_normalized_text) if n else "–")
    if report.cancelled:
        table.add_row("Cancelled at", f"[yellow]run {report.cancelled_at}[/yellow]")

    console.print(table)


@cli.command("templates")
def list_templates() -> None:
    """List available prompt templates."""
    from gemini_consistency.utils.formatting import truncate

    registry = _template_registry(load_config_hierarchy())

    table = Table(title="Prompt Templates", show_header=True)
    table.add_column("Name", style="cyan")
    table.add_column("Source")
    table.add_column("Prompt")

    for tpl in sorted(registry.list_templates(), key=lambda t: t.name):
        table.add_row(
            tpl.name,
            "builtin" if registry.is_builtin(tpl.name) else "user",
            escape(truncate(" ".join(tpl.prompt.split()), 60)),
        )

    console.print(table)


@cli.group()
def key() -> None:
    """Manage the saved Gemini API key."""


@key.command("set")
@click.option("--api-key", prompt="Gemini API key", hide_input=True)
def key_set(api_key: str) -> None:
    """Save an API key for later runs."""
    from gemini_consistency.store.credentials import CredentialStore

    with CredentialStore(Path(load_config_hierarchy()["settings_db"])) as store:
        store.save_api_key(api_key)
    console.print("[green]API key saved.[/green]")


@key.command("show")
def key_show() -> None:
    """Show the saved API key (masked)."""
    from gemini_consistency.store.credentials import CredentialStore

    with CredentialStore(Path(load_config_hierarchy()["settings_db"])) as store:
        saved = store.load_api_key()
    if not saved:
        console.print("[yellow]No API key saved.[/yellow]")
        return
    console.print(f"{saved[:4]}…{saved[-4:]}" if len(saved) > 8 else "****")


@key.command("clear")
@click.confirmation_option(prompt="Are you sure you want to delete the saved API key?")
def key_clear() -> None:
    """Delete the saved API key."""
    from gemini_consistency.config.defaults import API_KEY_SETTING
    from gemini_consistency.store.credentials import CredentialStore

    with CredentialStore(Path(load_config_hierarchy()["settings_db"])) as store:
        store.delete(API_KEY_SETTING)
    console.print("[green]API key cleared.[/green]")


def main() -> None:
    """Entry point for the CLI."""
    cli()
