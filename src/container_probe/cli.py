"""CLI for the container probe.

Provides a command-line interface using Typer for:
- Sampling a running container into a JSON-lines or CSV stream
- Generating a sample configuration file
"""

from __future__ import annotations

import signal
from pathlib import Path

import typer
from rich.console import Console

from container_probe.core.config import build_config
from container_probe.core.errors import ConfigurationError, FetchError, OutputError
from container_probe.core.schemas import OutputFormat, ProbeConfig
from container_probe.monitoring.stats_source import DockerStatsSource
from container_probe.output.renderers import get_renderer
from container_probe.output.sink import OutputSink
from container_probe.sampler import Sampler
from container_probe.utils.logging import setup_logging

app = typer.Typer(
    name="container-probe",
    help="Sample CPU and memory utilization of a running container",
    add_completion=False,
)

# stdout may carry the sample stream
console = Console(stderr=True)


@app.command()
def run(
    container: str | None = typer.Option(
        None, "--container", "-c", help="Name or ID of the container to monitor"
    ),
    output_format: OutputFormat | None = typer.Option(
        None, "--output-format", "-f", help="Output format: json | csv [default: json]"
    ),
    interval: int | None = typer.Option(
        None, "--interval", "-i", min=1, help="Collection interval in seconds [default: 10]"
    ),
    file: str | None = typer.Option(
        None,
        "--file",
        help="Output file [default: /tmp/containerlog]; pass an empty string for stdout",
    ),
    count: int | None = typer.Option(
        None, "--count", "-n", min=1, help="Stop after this many samples"
    ),
    config: Path | None = typer.Option(
        None, "--config", help="Configuration file (YAML/JSON); flags take precedence"
    ),
    max_retries: int | None = typer.Option(
        None, "--max-retries", min=0, help="Retries for transient fetch errors [default: 3]"
    ),
    retry_backoff: float | None = typer.Option(
        None, "--retry-backoff", help="Initial retry backoff in seconds [default: 1.0]"
    ),
    log_level: str = typer.Option("INFO", "--log-level", "-l", help="Logging level"),
    log_file: Path | None = typer.Option(
        None, "--log-file", help="Write logs to file in addition to the console"
    ),
    json_logs: bool = typer.Option(
        False, "--json-logs", help="Output logs in JSON format (for programmatic parsing)"
    ),
) -> None:
    """Sample a container's CPU and memory utilization at a fixed interval."""
    setup_logging(
        level=log_level, log_file=log_file, json_format=json_logs, rich_console=not json_logs
    )

    try:
        probe_config = build_config(
            config,
            {
                "container": container,
                "output_format": output_format,
                "interval_seconds": interval,
                "output_path": file,
                "max_retries": max_retries,
                "retry_backoff_seconds": retry_backoff,
                "max_samples": count,
            },
        )
    except ConfigurationError as e:
        console.print(f"[bold red]Configuration error:[/] {e}")
        raise typer.Exit(2) from e

    try:
        written = _run_probe(probe_config)
    except FetchError as e:
        console.print(f"[bold red]Failed to fetch stats for {e.container_id}:[/] {e}")
        raise typer.Exit(1) from e
    except OutputError as e:
        console.print(f"[bold red]Cannot write output to {e.destination}:[/] {e}")
        raise typer.Exit(1) from e

    console.print(f"[bold green]Wrote {written} samples[/]")


def _run_probe(probe_config: ProbeConfig) -> int:
    """Wire the source, renderer, sink and sampler, and run until stopped."""
    renderer = get_renderer(probe_config.output_format)
    source = DockerStatsSource(probe_config.container)
    sink = OutputSink(probe_config.output_path, header=renderer.header())
    sampler = Sampler(
        source,
        renderer,
        sink,
        interval_seconds=probe_config.interval_seconds,
        max_retries=probe_config.max_retries,
        retry_backoff_seconds=probe_config.retry_backoff_seconds,
    )

    def _handle_signal(signum: int, frame: object) -> None:
        sampler.stop()

    previous_handlers = {
        sig: signal.signal(sig, _handle_signal) for sig in (signal.SIGINT, signal.SIGTERM)
    }
    try:
        with sink:
            return sampler.run(max_samples=probe_config.max_samples)
    finally:
        for sig, handler in previous_handlers.items():
            signal.signal(sig, handler)
        source.close()


@app.command()
def init_config(
    output: Path = typer.Option(
        Path("probe.yaml"), "--output", "-o", help="Output configuration file"
    ),
) -> None:
    """Generate a sample configuration file."""
    sample_config = """\
# Container probe configuration
# Flags given on the command line override these values.

# Name or ID of the container to monitor
container: my-container

# json (one object per line) or csv (header + rows)
output_format: json

# Collection interval (seconds)
interval_seconds: 10

# Output file; use "" to write to stdout
output_path: /tmp/containerlog

# Transient Docker errors are retried with exponential backoff
max_retries: 3
retry_backoff_seconds: 1.0

# Stop after this many samples (omit to run until interrupted)
# max_samples: 60
"""
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(sample_config)
    console.print(f"[bold green]Sample configuration written to {output}[/]")


if __name__ == "__main__":
    app()
