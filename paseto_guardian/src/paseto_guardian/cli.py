"""Typer-based command line interface."""
from __future__ import annotations

import json
from pathlib import Path
from typing import NoReturn, Optional

import click
import typer

from .api import decode, encode
from .claims import Claims
from .config import AppConfig, load_config
from .core.exceptions import PasetoError
from .keys import LocalKey, SecretKey
from .logging import configure_logging
from .models import Purpose, Version
from .paserk import key_id, parse_key, serialize_key

app = typer.Typer(help="PASETO token and PASERK key tools")


@app.callback()
def main(ctx: typer.Context, config: Optional[Path] = typer.Option(None, "--config", metavar="PATH")) -> None:
    ctx.obj = load_config(config)
    configure_logging(ctx.obj.logging.normalized_level())


def _config() -> AppConfig:
    return click.get_current_context().obj


def _fail(exc: Exception) -> NoReturn:
    typer.echo(f"error: {type(exc).__name__}: {exc}", err=True)
    raise typer.Exit(code=2)


def _load_json_object(text: str, label: str) -> dict:
    try:
        data = json.loads(text)
    except ValueError as exc:
        raise ValueError(f"{label} is not valid JSON") from exc
    if not isinstance(data, dict):
        raise ValueError(f"{label} must be a JSON object")
    return data


@app.command()
def keygen(
    version: Optional[str] = typer.Option(None, "--version", "-v", help="Protocol version, e.g. v4"),
    purpose: str = typer.Option("local", "--purpose", "-p", help="local or public"),
) -> None:
    """Generate a key and print it as PASERK (public keys also print the public half)."""
    try:
        selected = Version.parse(version) if version else _config().tokens.default_version
        if Purpose.parse(purpose) is Purpose.LOCAL:
            typer.echo(serialize_key(LocalKey.generate(selected)))
            return
        secret = SecretKey.generate(selected)
        typer.echo(serialize_key(secret))
        typer.echo(serialize_key(secret.public_key()))
    except PasetoError as exc:
        _fail(exc)


@app.command("key-id")
def key_id_command(paserk: str = typer.Argument(..., help="local, secret or public PASERK")) -> None:
    """Print the lid, sid or pid of a key."""
    try:
        typer.echo(key_id(parse_key(paserk)))
    except PasetoError as exc:
        _fail(exc)


@app.command("encode")
def encode_command(
    key: str = typer.Option(..., "--key", "-k", help="local or secret PASERK"),
    claims: str = typer.Option("{}", "--claims", "-c", help="Claims as a JSON object"),
    footer: Optional[str] = typer.Option(None, "--footer", "-f", help="Footer as a JSON object"),
    assertion: str = typer.Option("", "--assertion", "-a", help="Implicit assertion"),
    issue: bool = typer.Option(False, "--issue", help="Add iat, nbf, exp and jti"),
    include_key_id: Optional[bool] = typer.Option(None, "--kid/--no-kid", help="Add the key id to the footer"),
) -> None:
    """Encode claims into a token."""
    config = _config()
    try:
        parsed_key = parse_key(key)
        payload = Claims.from_mapping(_load_json_object(claims, "claims"))
        if issue:
            payload = Claims.issue(
                ttl=config.tokens.ttl,
                exp=payload.exp,
                nbf=payload.nbf,
                iss=payload.iss,
                sub=payload.sub,
                aud=payload.aud,
                jti=payload.jti,
                **payload.custom,
            )
        footer_data = _load_json_object(footer, "footer") if footer is not None else None
        token = encode(
            parsed_key,
            payload,
            footer_data,
            assertion.encode("utf-8"),
            include_key_id=include_key_id,
            config=config,
        )
    except (PasetoError, ValueError) as exc:
        _fail(exc)
    typer.echo(token)


@app.command("decode")
def decode_command(
    token: str = typer.Argument(..., help="Token string"),
    key: str = typer.Option(..., "--key", "-k", help="local or public PASERK"),
    assertion: str = typer.Option("", "--assertion", "-a", help="Implicit assertion"),
) -> None:
    """Verify a token and print its claims and footer as JSON."""
    try:
        decoded = decode(parse_key(key), token, assertion.encode("utf-8"), config=_config())
    except (PasetoError, ValueError) as exc:
        _fail(exc)
    footer_claims = decoded.footer_claims
    footer = dict(footer_claims) if footer_claims is not None else decoded.footer.decode("utf-8", "replace")
    typer.echo(
        json.dumps(
            {
                "version": decoded.version.value,
                "purpose": decoded.purpose.value,
                "claims": decoded.claims.as_dict(),
                "footer": footer,
            },
            ensure_ascii=False,
            indent=2,
        )
    )


if __name__ == "__main__":  # pragma: no cover
    app()
