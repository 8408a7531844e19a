"""
CLI commands: call, watch, config.
"""

import asyncio
import json
from pathlib import Path
from typing import Any, Optional

import typer

from rpcsession.client import create_session
from rpcsession.config import load_config
from rpcsession.schema import ObjectApi, RpcRequest


def _load_schema(path: Optional[Path]) -> dict[str, Any] | None:
    if path is None:
        return None
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        typer.echo(f"❌ Could not read schema {path}: {e}")
        raise typer.Exit(code=1)


def _parse_params(params: Optional[str]) -> list[Any] | dict[str, Any]:
    if not params:
        return []
    try:
        parsed = json.loads(params)
    except json.JSONDecodeError:
        typer.echo(f"❌ Invalid JSON params: {params}")
        raise typer.Exit(code=1)
    if not isinstance(parsed, (list, dict)):
        typer.echo("❌ Params must be a JSON array or object")
        raise typer.Exit(code=1)
    return parsed


def _describe(value: Any) -> str:
    if isinstance(value, ObjectApi):
        return json.dumps(
            {"qHandle": value.handle, "qType": value.type, "qGenericId": value.id}
        )
    return json.dumps(value, indent=2, default=str)


async def _call(url: str, method: str, handle: int, params, schema) -> Any:
    session = create_session(schema=schema, config=load_config(url=url))
    await session.open()
    try:
        return await session.send(RpcRequest(method=method, handle=handle, params=params))
    finally:
        await session.close()


async def _watch(url: str, traffic: bool, schema) -> None:
    session = create_session(schema=schema, config=load_config(url=url))
    stopped = asyncio.Event()

    session.events.on(
        "notification:*",
        lambda method, params: typer.echo(f"🔔 {method} {json.dumps(params)}"),
    )
    if traffic:
        session.events.on(
            "traffic:*",
            lambda direction, data: typer.echo(f"{'→' if direction == 'sent' else '←'} {json.dumps(data)}"),
        )
    session.events.on("socket-error", lambda error: typer.echo(f"⚠️  {error}"))
    session.events.on("closed", lambda event: stopped.set())

    await session.open()
    typer.echo(f"📡 Watching {url} (Ctrl+C to stop)")
    try:
        await stopped.wait()
    finally:
        await session.close()


def register_commands(app: typer.Typer):
    """Register the top-level commands on ``app``."""

    @app.command()
    def call(
        method: str = typer.Argument(help="Engine method (e.g., GetActiveDoc)"),
        handle: int = typer.Option(-1, "--handle", help="Target handle (-1 = Global)"),
        params: Optional[str] = typer.Option(
            None, "--params", "-p", help='JSON params (e.g., \'["My App.qvf"]\')'
        ),
        url: Optional[str] = typer.Option(None, "--url", help="Engine WebSocket URL"),
        schema: Optional[Path] = typer.Option(None, "--schema", help="Schema JSON file"),
    ):
        """Open a session, send one request and print the result."""
        from rpcsession.errors import RpcSessionError

        parsed = _parse_params(params)
        definition = _load_schema(schema)
        config = load_config(url=url)
        try:
            result = asyncio.run(_call(config.url, method, handle, parsed, definition))
        except RpcSessionError as e:
            typer.echo(f"❌ {type(e).__name__}: {e}")
            raise typer.Exit(code=1)
        typer.echo(_describe(result))

    @app.command()
    def watch(
        url: Optional[str] = typer.Option(None, "--url", help="Engine WebSocket URL"),
        traffic: bool = typer.Option(False, "--traffic", "-t", help="Also print raw traffic"),
        schema: Optional[Path] = typer.Option(None, "--schema", help="Schema JSON file"),
    ):
        """Print engine notifications until the connection closes."""
        from rpcsession.errors import RpcSessionError

        config = load_config(url=url)
        try:
            asyncio.run(_watch(config.url, traffic, _load_schema(schema)))
        except RpcSessionError as e:
            typer.echo(f"❌ {type(e).__name__}: {e}")
            raise typer.Exit(code=1)
        except KeyboardInterrupt:
            typer.echo("🛑 Stopped.")

    @app.command("config")
    def show_config():
        """Show the effective configuration."""
        config = load_config()
        for key, value in config.model_dump().items():
            typer.echo(f"{key}: {value}")
