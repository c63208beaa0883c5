"""Typer CLI entrypoint."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

import typer

from telldus_bridge.core.capabilities import CharacteristicKind
from telldus_bridge.core.config_loader import load_config
from telldus_bridge.core.errors import TelldusBridgeError
from telldus_bridge.core.model_table import MODEL_TABLE
from telldus_bridge.core.platform import TelldusPlatform

app = typer.Typer(help="Expose Telldus hub devices as smart-home accessories")

_TRUE = {"1", "true", "on", "yes"}
_FALSE = {"0", "false", "off", "no"}


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log hub traffic and every characteristic call"),
) -> None:
    # force rebinds the handler to the current stderr on repeated invocations
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        force=True,
    )


def _build_platform(config: Path | None) -> TelldusPlatform:
    return TelldusPlatform(load_config(config))


def _parse_kind(text: str) -> CharacteristicKind:
    try:
        return CharacteristicKind.parse(text)
    except ValueError:
        valid = ", ".join(kind.value for kind in CharacteristicKind)
        raise typer.BadParameter(f"Unknown characteristic '{text}'. Valid: {valid}") from None


def _parse_value(kind: CharacteristicKind, text: str) -> Any:
    lowered = text.strip().lower()
    if kind is CharacteristicKind.ON:
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
        raise typer.BadParameter(f"'{text}' is not a boolean value")
    try:
        number = float(lowered)
    except ValueError:
        raise typer.BadParameter(f"'{text}' is not a number") from None
    return int(number) if number.is_integer() else number


@app.command("models")
def list_models() -> None:
    """List the telldus models that map to accessory services."""
    for entry in MODEL_TABLE:
        services = "; ".join(
            f"{d.service.value}({', '.join(c.value for c in d.characteristics)})" for d in entry.definitions
        )
        typer.echo(f"{entry.model}: {services}")


@app.command("accessories")
def list_accessories(
    config: Path | None = typer.Option(None, "--config", "-c", help="Path to config.yaml"),
) -> None:
    """List the accessories built from the hub's sensors and devices."""

    async def _run() -> None:
        async with _build_platform(config) as platform:
            accessories = await platform.accessories()
        if not accessories:
            typer.echo("No accessories found")
            return
        for accessory in accessories:
            typer.echo(f"{accessory.id} {accessory.name} ({accessory.model}:{accessory.manufacturer})")
            for service in accessory.services:
                names = ", ".join(kind.value for kind in service.characteristics)
                typer.echo(f"  {service.kind.value}: {names}")

    try:
        asyncio.run(_run())
    except TelldusBridgeError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("get")
def get_value(
    accessory: str,
    characteristic: str,
    config: Path | None = typer.Option(None, "--config", "-c", help="Path to config.yaml"),
) -> None:
    """Read a characteristic of an accessory from the hub."""
    kind = _parse_kind(characteristic)

    async def _run() -> Any:
        async with _build_platform(config) as platform:
            return await platform.read(accessory, kind)

    try:
        value = asyncio.run(_run())
    except TelldusBridgeError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None
    typer.echo(f"{accessory} {kind.value}={value}")


@app.command("set")
def set_value(
    accessory: str,
    characteristic: str,
    value: str,
    config: Path | None = typer.Option(None, "--config", "-c", help="Path to config.yaml"),
) -> None:
    """Write a characteristic of an accessory through the hub."""
    kind = _parse_kind(characteristic)
    parsed = _parse_value(kind, value)

    async def _run() -> None:
        async with _build_platform(config) as platform:
            await platform.write(accessory, kind, parsed)

    try:
        asyncio.run(_run())
    except TelldusBridgeError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None
    typer.echo(f"Sent {kind.value}={parsed} to {accessory}")


@app.command("identify")
def identify(
    accessory: str,
    config: Path | None = typer.Option(None, "--config", "-c", help="Path to config.yaml"),
) -> None:
    """Run the identify handshake for an accessory."""

    async def _run() -> str:
        async with _build_platform(config) as platform:
            found = await platform.find_accessory(accessory)
        found.identify()
        return found.name

    try:
        name = asyncio.run(_run())
    except TelldusBridgeError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None
    typer.echo(f"Identified {accessory} ({name})")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
