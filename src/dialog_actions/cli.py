"""Command-line interface for previewing stored actions."""

from __future__ import annotations

import json
import logging
from typing import Any

import click

from dialog_actions.actions import (
    ActionBase,
    ActionError,
    ApiAction,
    CardAction,
    RenderedActionArgument,
    to_typed_action,
)

logger = logging.getLogger(__name__)


@click.group()
@click.option(
    "--log-level",
    default=None,
    help="Logging level (default: log_level from --config, else WARNING).",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """dialog-actions -- render conversational agent actions."""
    ctx.ensure_object(dict)["log_level"] = log_level
    _configure_logging(log_level or "WARNING")


def _configure_logging(level: str) -> None:
    logging.basicConfig(format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    logging.getLogger("dialog_actions").setLevel(
        getattr(logging, level.upper(), logging.WARNING)
    )


def _load_action(path: str) -> ActionBase:
    with open(path, "r", encoding="utf-8") as f:
        try:
            record = json.load(f)
        except json.JSONDecodeError as exc:
            raise click.BadParameter(f"{path} is not valid JSON: {exc}") from exc
    if not isinstance(record, dict):
        raise click.BadParameter(f"{path} must contain a JSON object")
    try:
        return ActionBase.from_record(record)
    except ValueError as exc:
        raise click.BadParameter(f"{path} is not an action record: {exc}") from exc


def _parse_entity_flags(pairs: tuple[str, ...]) -> dict[str, str]:
    values: dict[str, str] = {}
    for pair in pairs:
        entity_id, sep, value = pair.partition("=")
        if not sep or not entity_id:
            raise click.BadParameter(f"expected ID=VALUE, got {pair!r}", param_hint="--entity")
        values[entity_id] = value
    return values


def _echo_arguments(title: str, rendered: list[RenderedActionArgument]) -> None:
    click.echo(click.style(f"{title}:", fg="cyan"))
    if not rendered:
        click.echo("  (none)")
    for argument in rendered:
        click.echo(f"  {argument.parameter} = {argument.value}")


# ------------------------------------------------------------------
# dialog-actions render
# ------------------------------------------------------------------


@cli.command()
@click.argument("action_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--config",
    "config_path",
    default=None,
    type=click.Path(exists=False),
    help="Path to config YAML.",
)
@click.option(
    "--entities",
    "entities_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help="YAML or JSON file mapping entity IDs to values.",
)
@click.option("--entity", "entity_pairs", multiple=True, help="Entity value as ID=VALUE.")
@click.option(
    "--fallback/--no-fallback",
    default=None,
    help="Render unresolved mentions as their authored text.",
)
@click.pass_context
def render(
    ctx: click.Context,
    action_file: str,
    config_path: str | None,
    entities_path: str | None,
    entity_pairs: tuple[str, ...],
    fallback: bool | None,
) -> None:
    """Render an action with the given entity values."""
    from dialog_actions.config.loader import load_config, load_entities, merge_configs

    config = load_config(config_path)
    if ctx.obj.get("log_level") is None:
        _configure_logging(config.log_level)
    if fallback is not None:
        config = merge_configs(config, {"render": {"fallback_to_original": fallback}})

    overrides: dict[str, str] = {}
    if entities_path is not None:
        try:
            overrides.update(load_entities(entities_path))
        except ValueError as exc:
            raise click.BadParameter(str(exc), param_hint="--entities") from exc
    overrides.update(_parse_entity_flags(entity_pairs))
    entity_values = config.entities.resolve(overrides)
    options = config.render.to_options()

    action = _load_action(action_file)
    logger.info(
        "Rendering %s action %r with %d entity value(s)",
        action.action_type,
        action.action_id,
        len(entity_values),
    )

    try:
        click.echo(ActionBase.get_payload(action, entity_values, options))
        typed = to_typed_action(action)
    except ActionError as exc:
        raise click.ClickException(str(exc)) from exc

    if isinstance(typed, CardAction):
        _echo_arguments("Arguments", typed.render_arguments(entity_values, options))
    elif isinstance(typed, ApiAction):
        _echo_arguments("Logic arguments", typed.render_logic_arguments(entity_values, options))
        _echo_arguments("Render arguments", typed.render_render_arguments(entity_values, options))


# ------------------------------------------------------------------
# dialog-actions inspect
# ------------------------------------------------------------------


@cli.command("inspect")
@click.argument("action_file", type=click.Path(exists=True, dir_okay=False))
def inspect_action(action_file: str) -> None:
    """Show an action's type, target, arguments and referenced entities."""
    action = _load_action(action_file)

    try:
        typed = to_typed_action(action)
        entity_ids = action.payload_entity_ids() if typed is not None else []
    except ActionError as exc:
        raise click.ClickException(str(exc)) from exc

    summary: dict[str, Any] = {
        "id": action.action_id,
        "type": action.action_type,
        "terminal": action.is_terminal,
    }
    if isinstance(typed, CardAction):
        summary["template"] = typed.template_name
        summary["arguments"] = [a.parameter for a in typed.arguments]
    elif isinstance(typed, ApiAction):
        summary["callback"] = typed.name
        summary["logic_arguments"] = [a.parameter for a in typed.logic_arguments]
        summary["render_arguments"] = [a.parameter for a in typed.render_arguments]
    elif typed is None:
        summary["raw_payload"] = action.payload
    summary["entities"] = entity_ids

    click.echo(click.style(f"=== Action {action.action_id or '(no id)'} ===", fg="cyan", bold=True))
    for key, value in summary.items():
        if isinstance(value, list):
            value = ", ".join(value) if value else "(none)"
        click.echo(f"  {key}: {value}")
