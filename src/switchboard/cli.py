"""CLI entry point for switchboard."""

from __future__ import annotations

import asyncio
import json
import logging

import typer

from switchboard.config import SwitchboardConfig

app = typer.Typer(
    name="switchboard",
    help="Local AI assistant that routes each request to the best-suited agent.",
    no_args_is_help=True,
)


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _load_config(config_file: str | None, model: str | None) -> SwitchboardConfig:
    config = SwitchboardConfig.load(config_file)
    if model:
        config.llm.model = model
    return config


@app.command()
def ask(
    text: str = typer.Argument(help="The request to send."),
    model: str | None = typer.Option(
        None,
        "--model",
        "-m",
        help="LLM model to use (default: from env/config).",
    ),
    metrics: bool = typer.Option(
        False, "--metrics", help="Print the agent performance report afterwards."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug logging."
    ),
    config_file: str | None = typer.Option(
        None, "--config", "-c", help="Config file path."
    ),
) -> None:
    """Send one request through the dispatcher and print the result."""
    from switchboard.session import Assistant

    setup_logging(verbose)
    config = _load_config(config_file, model)
    assistant = Assistant(config)

    try:
        turn = asyncio.run(assistant.chat(text))
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if turn.agent_chain:
        typer.echo(f"[{' -> '.join(turn.agent_chain)}]")
    typer.echo(turn.text)

    if metrics:
        typer.echo("---")
        typer.echo(assistant.agents.metrics.format_report())

    if any(o.result.is_error for o in turn.tool_results):
        raise typer.Exit(1)


@app.command()
def agents(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug logging."
    ),
    config_file: str | None = typer.Option(
        None, "--config", "-c", help="Config file path."
    ),
) -> None:
    """List registered agents in dispatch order."""
    from switchboard.session import setup_assistant

    setup_logging(verbose)
    setup = setup_assistant(_load_config(config_file, None))
    default = setup.agents.default_agent
    for info in setup.agents.list_agents():
        marker = " (default)" if info.name == default else ""
        typer.echo(f"{info.priority:>4}  {info.name}{marker}: {info.description}")
        if info.capabilities:
            typer.echo(f"      capabilities: {', '.join(info.capabilities)}")


@app.command()
def tools(
    format: str = typer.Option(
        "openai",
        "--format",
        "-f",
        help="Output shape: 'openai' or 'anthropic'.",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug logging."
    ),
    config_file: str | None = typer.Option(
        None, "--config", "-c", help="Config file path."
    ),
) -> None:
    """Print the tool catalogue as JSON."""
    from switchboard.session import setup_assistant

    setup_logging(verbose)
    registry = setup_assistant(_load_config(config_file, None)).tools
    if format == "openai":
        specs = registry.to_openai_format()
    elif format == "anthropic":
        specs = registry.to_anthropic_format()
    else:
        typer.echo(f"Error: Unknown format: {format}", err=True)
        raise typer.Exit(2)
    typer.echo(json.dumps(specs, indent=2))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
