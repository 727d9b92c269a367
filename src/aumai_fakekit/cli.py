"""CLI entry point for aumai-fakekit."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import click
import yaml

from aumai_fakekit import __version__
from aumai_fakekit.arrangement import (
    InjectedFailure,
    MemberNotFoundError,
    build_recorders,
    get_member,
    load_config,
)
from aumai_fakekit.core import (
    PropertyRecorder,
    Recorder,
    ReturnValueResolver,
    UnarrangedMockError,
)
from aumai_fakekit.models import ArrangementConfig


def _load_or_exit(config_path: str) -> ArrangementConfig:
    try:
        return load_config(config_path)
    except Exception as exc:
        click.echo(f"Failed to load config: {exc}", err=True)
        sys.exit(1)


def _invoke(recorder: Recorder, args: Any) -> Any:
    """Exercise *recorder* the way a fake's member would."""
    if isinstance(recorder, PropertyRecorder):
        return recorder.get()
    if isinstance(recorder, ReturnValueResolver):
        return recorder.record_call_and_return_or_fail(args)
    recorder.record_call_and_maybe_fail(args)
    return None


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging.")
def main(verbose: bool) -> None:
    """AumAI FakeKit CLI — inspect and exercise declarative mock arrangements."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
        )


@main.command("check")
@click.option(
    "--config",
    "-c",
    "config_path",
    required=True,
    type=click.Path(exists=True),
    help="Path to the arrangement file (YAML or JSON).",
)
def check_command(config_path: str) -> None:
    """Validate an arrangement file and list its members."""
    config = _load_or_exit(config_path)
    click.echo(f"{len(config.members)} member(s) arranged")
    for member in config.members:
        details = [member.kind.value]
        if member.stubs:
            details.append(f"{len(member.stubs)} stub(s)")
        if member.has_default:
            details.append("default")
        if member.has_value:
            details.append("value")
        if member.failure is not None:
            details.append("fails")
        click.echo(f"  {member.name}: {', '.join(details)}")


@main.command("call")
@click.option(
    "--config",
    "-c",
    "config_path",
    required=True,
    type=click.Path(exists=True),
    help="Path to the arrangement file (YAML or JSON).",
)
@click.option(
    "--member",
    "-m",
    "member_name",
    required=True,
    help="Name of the arranged member to exercise.",
)
@click.option(
    "--args",
    "-a",
    "args_json",
    default=None,
    help="JSON value passed as the call's arguments (omit for no arguments).",
)
@click.option(
    "--times",
    "-n",
    default=1,
    show_default=True,
    type=click.IntRange(min=1),
    help="Number of times to exercise the member.",
)
def call_command(
    config_path: str,
    member_name: str,
    args_json: str | None,
    times: int,
) -> None:
    """Exercise an arranged member and print the result with its state.

    Functions are called through the fail-capable path; properties are read.
    """
    args: Any = ()
    if args_json is not None:
        try:
            args = json.loads(args_json)
        except json.JSONDecodeError as exc:
            click.echo(f"Invalid JSON for --args: {exc}", err=True)
            sys.exit(1)

    config = _load_or_exit(config_path)
    recorders = build_recorders(config)
    try:
        recorder = get_member(recorders, member_name)
    except MemberNotFoundError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    result: Any = None
    error: str | None = None
    for _ in range(times):
        try:
            result = _invoke(recorder, args)
            error = None
        except InjectedFailure as exc:
            result = None
            error = str(exc)
        except UnarrangedMockError as exc:
            click.echo(f"Error: {exc}", err=True)
            sys.exit(1)

    output = {
        "member": member_name,
        "result": result,
        "error": error,
        "state": recorder.snapshot().model_dump(mode="json"),
    }
    click.echo(json.dumps(output, indent=2, default=str))


@main.command("init-config")
@click.option(
    "--output",
    "-o",
    default="mocks.yaml",
    show_default=True,
    help="Destination config file.",
)
@click.option("--force", is_flag=True, default=False, help="Overwrite if exists.")
def init_config_command(output: str, force: bool) -> None:
    """Generate an example arrangement file."""
    destination = Path(output)
    if destination.exists() and not force:
        click.echo(f"File already exists: {output}. Use --force to overwrite.", err=True)
        sys.exit(1)

    example: dict[str, object] = {
        "members": [
            {
                "name": "current_speed(unit)",
                "kind": "returning",
                "stubs": [
                    {"value": 80.0, "when": "mph"},
                    {"value": 130.0},
                ],
            },
            {
                "name": "lookup(query)",
                "kind": "returning",
                "default": None,
                "stubs": [
                    {"value": {"id": 42}, "when": {"key": "answer"}},
                ],
            },
            {
                "name": "turn_on()",
                "kind": "function",
                "failure": "out of gas",
            },
            {
                "name": "capacity",
                "kind": "property",
                "value": 90.0,
            },
        ],
    }
    content = yaml.dump(example, default_flow_style=False, sort_keys=False, allow_unicode=True)
    destination.write_text(content, encoding="utf-8")
    click.echo(f"Created {output}")


if __name__ == "__main__":
    main()
