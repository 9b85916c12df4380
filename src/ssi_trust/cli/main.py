"""CLI entry point for ssi-trust.

Invoked as::

    ssi-trust [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m ssi_trust.cli.main

Commands
--------
version           Show version information
identity create   Create an identity and print its public data
demo              Run the issue -> present -> verify flow end to end
verify            Verify a presentation JSON file
"""
from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console

from ssi_trust.config import ProtocolSettings

console = Console()

_DEMO_CLAIMS: dict[str, str] = {
    "name": "Maria",
    "nationality": "DO",
    "id_number": "001",
}


# ------------------------------------------------------------------
# Root group
# ------------------------------------------------------------------


@click.group()
@click.version_option(package_name="ssi-trust")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging verbosity.",
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="JSON file with protocol settings.",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str, config_file: str | None) -> None:
    """Decentralized identities, verifiable credentials, and selective disclosure"""
    logging.basicConfig(level=getattr(logging, log_level.upper()))
    try:
        settings = (
            ProtocolSettings.from_json_file(Path(config_file))
            if config_file
            else ProtocolSettings()
        )
    except ValueError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        sys.exit(1)
    ctx.obj = settings


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from ssi_trust import __version__

    console.print(f"[bold]ssi-trust[/bold] v{__version__}")


# ------------------------------------------------------------------
# identity command group
# ------------------------------------------------------------------


@cli.group(name="identity")
def identity_group() -> None:
    """Manage identities."""


@identity_group.command(name="create")
@click.argument("label")
@click.option("--json", "as_json", is_flag=True, help="Print the DID document as JSON.")
@click.pass_obj
def create_command(settings: ProtocolSettings, label: str, as_json: bool) -> None:
    """Create an identity for LABEL and print its public data.

    The private key is never printed.
    """
    from ssi_trust.did.identity import IdentityManager

    identity = IdentityManager(settings=settings).create_identity(label)
    if as_json:
        click.echo(json.dumps(identity.did_document(), indent=2))
        return

    console.print(f"[green]Created[/green] identity [bold]{label}[/bold]")
    console.print(f"  DID:        {identity.identifier}")
    console.print(f"  Public key: {identity.public_key.hex()}")
    console.print(f"  Created:    {identity.created_at.isoformat()}")


# ------------------------------------------------------------------
# demo
# ------------------------------------------------------------------


@cli.command(name="demo")
@click.option(
    "--reveal",
    "-r",
    multiple=True,
    default=("name", "nationality"),
    show_default=True,
    help="Claim to reveal (repeatable).",
)
@click.option("--revoke", is_flag=True, help="Revoke the credential before verifying.")
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON.")
@click.option("--show-ledger", is_flag=True, help="Print the ledger state after the run.")
@click.pass_obj
def demo_command(
    settings: ProtocolSettings,
    reveal: tuple[str, ...],
    revoke: bool,
    as_json: bool,
    show_ledger: bool,
) -> None:
    """Issue a national identity credential, disclose part of it, and verify it."""
    from ssi_trust.convenience import TrustNetwork
    from ssi_trust.errors import UnknownAttributeError
    from ssi_trust.reporting import render_ledger, render_report

    network = TrustNetwork(settings=settings)
    registry = network.onboard("Civil Registry")
    maria = network.onboard("Maria")
    landlord = network.onboard("Landlord")

    issued = network.issue(registry, maria.identifier, "NationalIdentity", _DEMO_CLAIMS)
    if revoke:
        network.revoke(issued.credential.id, registry, "Issued with incorrect data")

    try:
        presentation = network.present(
            maria, issued.credential, reveal, landlord.identifier, "Rental application"
        )
    except UnknownAttributeError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        sys.exit(1)

    report = network.verify(presentation)
    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
    else:
        render_report(report, console)
        if show_ledger:
            render_ledger(network.ledger, console)

    if not report.valid:
        sys.exit(1)


# ------------------------------------------------------------------
# verify
# ------------------------------------------------------------------


@cli.command(name="verify")
@click.argument("presentation_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--holder-key", required=True, help="Holder public key (hex).")
@click.option("--issuer-key", default=None, help="Issuer public key (hex).")
@click.option(
    "--revoked",
    multiple=True,
    help="Revoked credential id (repeatable).",
)
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON.")
@click.pass_obj
def verify_command(
    settings: ProtocolSettings,
    presentation_file: str,
    holder_key: str,
    issuer_key: str | None,
    revoked: tuple[str, ...],
    as_json: bool,
) -> None:
    """Verify the presentation in PRESENTATION_FILE.

    Exits with status 1 when the presentation is invalid.
    """
    from ssi_trust.presentation.models import Presentation
    from ssi_trust.reporting import render_report
    from ssi_trust.verification.engine import VerificationEngine

    try:
        holder_public_key = bytes.fromhex(holder_key)
        issuer_public_key = bytes.fromhex(issuer_key) if issuer_key else None
    except ValueError as exc:
        console.print(f"[red]Error:[/red] keys must be hex encoded: {exc}")
        sys.exit(1)

    try:
        presentation = Presentation.from_json(Path(presentation_file).read_text(encoding="utf-8"))
    except ValueError as exc:
        console.print(f"[red]Error:[/red] could not read presentation: {exc}")
        sys.exit(1)

    report = VerificationEngine(settings=settings).verify_presentation(
        presentation,
        issuer_public_key=issuer_public_key,
        holder_public_key=holder_public_key,
        revocation_set=revoked,
    )
    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
    else:
        render_report(report, console)

    if not report.valid:
        sys.exit(1)


if __name__ == "__main__":
    cli()
