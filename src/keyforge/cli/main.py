"""Typer-based command line interface for keyforge."""
from __future__ import annotations

import os
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import click
import typer

from ..config import AppConfig, load_config, write_default_config
from ..envelope import PEM_BEGIN, decode_private, encode_private, is_encrypted, read_public_part
from ..exceptions import KeyforgeError
from ..fingerprint import fingerprint_line
from ..generate import generate_key
from ..keys import PrivateKey, PublicKey, format_public_line, parse_public_line
from ..logging import configure_logging, get_logger

app = typer.Typer(help="OpenSSH key toolkit")
logger = get_logger("keyforge.cli")

PRIVATE_MODE = 0o600


@app.callback()
def main(ctx: typer.Context, config: Optional[Path] = typer.Option(None, "--config", metavar="PATH")) -> None:
    try:
        ctx.obj = load_config(config)
    except ValueError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    configure_logging(ctx.obj.logging.normalized_level())


@contextmanager
def _reporting_errors() -> Iterator[None]:
    try:
        yield
    except (KeyforgeError, ValueError) as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc


def _config() -> AppConfig:
    return click.get_current_context().obj


def _write_private(path: Path, text: str) -> None:
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, PRIVATE_MODE)
    with os.fdopen(fd, "w", encoding="utf-8") as handle:
        handle.write(text)
    os.chmod(path, PRIVATE_MODE)


def _public_path(path: Path) -> Path:
    return path.with_name(path.name + ".pub")


def _load_private(path: Path, passphrase: Optional[str]) -> PrivateKey:
    text = path.read_text(encoding="utf-8")
    if passphrase is None and is_encrypted(text):
        passphrase = typer.prompt(f"Enter passphrase for {path}", hide_input=True)
    return decode_private(text, passphrase)


def _load_any_public(path: Path) -> PublicKey:
    text = path.read_text(encoding="utf-8")
    if PEM_BEGIN not in text:
        return parse_public_line(text)
    if is_encrypted(text):
        sidecar = _public_path(path)
        if sidecar.is_file():
            return parse_public_line(sidecar.read_text(encoding="utf-8"))
        return read_public_part(text)
    return decode_private(text).public_key()


def _ask_new_passphrase() -> str:
    return typer.prompt(
        "Enter new passphrase (empty for no passphrase)",
        default="",
        hide_input=True,
        confirmation_prompt=True,
        show_default=False,
    )


@app.command()
def keygen(
    filename: Path = typer.Option(..., "-f", "--file", help="Private key output path"),
    key_type: Optional[str] = typer.Option(None, "-t", "--type", help="rsa|dsa|ecdsa|ed25519 or a full key type name"),
    bits: Optional[int] = typer.Option(None, "-b", "--bits", help="Key size"),
    comment: str = typer.Option("", "-C", "--comment", help="Key comment"),
    passphrase: Optional[str] = typer.Option(None, "-N", "--new-passphrase", help="Passphrase, empty for none"),
    cipher: Optional[str] = typer.Option(None, "-Z", "--cipher", help="Cipher for the private key file"),
    rounds: Optional[int] = typer.Option(None, "-a", "--rounds", help="KDF rounds"),
    force: bool = typer.Option(False, "--force", help="Overwrite existing files"),
) -> None:
    config = _config()
    if filename.exists() and not force:
        typer.echo(f"error: {filename} already exists", err=True)
        raise typer.Exit(code=1)
    key_type = key_type or config.keygen.key_type
    if bits is None:
        bits = config.keygen.bits_for(key_type)
    if passphrase is None:
        passphrase = _ask_new_passphrase()
    with _reporting_errors():
        key = generate_key(key_type, bits, comment)
        key.set_passphrase(
            passphrase,
            cipher=cipher or config.envelope.cipher,
            kdf=config.envelope.kdf,
            rounds=rounds or config.envelope.rounds,
        )
        _write_private(filename, encode_private(key))
        _public_path(filename).write_text(format_public_line(key) + "\n", encoding="utf-8")
    logger.info(
        "cli.keygen",
        key_type=key.name,
        bits=key.bits,
        cipher=key.envelope.cipher_name,
        kdf=key.envelope.kdf_name,
    )
    typer.echo(f"Your identification has been saved in {filename}")
    typer.echo(f"Your public key has been saved in {_public_path(filename)}")
    typer.echo("The key fingerprint is:")
    typer.echo(fingerprint_line(key, config.fingerprint.hash))


@app.command()
def fingerprint(
    filename: Path = typer.Option(..., "-f", "--file", exists=True, readable=True),
    hash_name: Optional[str] = typer.Option(None, "-E", "--hash", help="md5|sha1|sha256"),
) -> None:
    with _reporting_errors():
        key = _load_any_public(filename)
        typer.echo(fingerprint_line(key, hash_name or _config().fingerprint.hash))


@app.command()
def public(
    filename: Path = typer.Option(..., "-f", "--file", exists=True, readable=True),
    passphrase: Optional[str] = typer.Option(None, "-P", "--passphrase"),
) -> None:
    with _reporting_errors():
        key = _load_private(filename, passphrase)
        typer.echo(format_public_line(key))


@app.command()
def passwd(
    filename: Path = typer.Option(..., "-f", "--file", exists=True, readable=True),
    old_passphrase: Optional[str] = typer.Option(None, "-P", "--passphrase"),
    new_passphrase: Optional[str] = typer.Option(None, "-N", "--new-passphrase"),
    cipher: Optional[str] = typer.Option(None, "-Z", "--cipher"),
    rounds: Optional[int] = typer.Option(None, "-a", "--rounds"),
) -> None:
    config = _config()
    with _reporting_errors():
        key = _load_private(filename, old_passphrase)
        if new_passphrase is None:
            new_passphrase = _ask_new_passphrase()
        key.set_passphrase(
            new_passphrase,
            cipher=cipher or config.envelope.cipher,
            kdf=config.envelope.kdf,
            rounds=rounds or config.envelope.rounds,
        )
        _write_private(filename, encode_private(key))
    logger.info("cli.passwd", key_type=key.name, cipher=key.envelope.cipher_name, kdf=key.envelope.kdf_name)
    typer.echo("Your identification has been saved with the new passphrase.")


@app.command()
def comment(
    filename: Path = typer.Option(..., "-f", "--file", exists=True, readable=True),
    new_comment: str = typer.Option(..., "-C", "--comment"),
    passphrase: Optional[str] = typer.Option(None, "-P", "--passphrase"),
) -> None:
    with _reporting_errors():
        key = _load_private(filename, passphrase)
        old_comment = key.comment
        key.comment = new_comment
        _write_private(filename, encode_private(key))
    sidecar = _public_path(filename)
    if sidecar.is_file():
        sidecar.write_text(format_public_line(key) + "\n", encoding="utf-8")
    logger.info("cli.comment", key_type=key.name)
    typer.echo(f"Comment '{old_comment}' changed to '{new_comment}'")


@app.command("init-config")
def init_config(
    path: Optional[Path] = typer.Option(None, "--path", help="Target file, defaults to the user config directory"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
) -> None:
    try:
        written = write_default_config(path, overwrite=force)
    except FileExistsError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    typer.echo(f"Wrote default configuration to {written}")


@app.command()
def version() -> None:
    from ..version import __version__

    typer.echo(__version__)


if __name__ == "__main__":  # pragma: no cover
    app()
