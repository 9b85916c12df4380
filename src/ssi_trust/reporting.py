"""Console rendering of verification reports and ledger state.

Rendering only; nothing here changes a report or the ledger.
"""
from __future__ import annotations

from rich.console import Console
from rich.table import Table

from ssi_trust.ledger.memory import InMemoryLedger
from ssi_trust.verification.report import CheckOutcome, VerificationReport

_OUTCOME_STYLE: dict[CheckOutcome, str] = {
    CheckOutcome.PASSED: "[green]OK[/green]",
    CheckOutcome.PROVENANCE_ONLY: "[cyan]INFO[/cyan]",
    CheckOutcome.WARNING: "[yellow]WARN[/yellow]",
    CheckOutcome.FAILED: "[red]FAIL[/red]",
}

_STEP_TITLES: dict[str, str] = {
    "holder_signature": "Holder signature",
    "issuer_provenance": "Issuer provenance",
    "expiry": "Credential validity",
    "revocation": "Revocation status",
    "freshness": "Presentation freshness",
}

# Shown by render_ledger to make the on-chain/off-chain split explicit.
OFF_CHAIN_DATA: tuple[str, ...] = (
    "Claim values (names, birth dates, document numbers)",
    "Full credential contents",
    "Private keys",
    "Verifiable presentations",
    "Verification history",
)


def render_report(report: VerificationReport, console: Console | None = None) -> None:
    """Print a verification report as a table followed by the verdict."""
    console = console or Console()
    table = Table(title="Credential Verification Report", show_header=True)
    table.add_column("Result", justify="center")
    table.add_column("Check", style="cyan")
    table.add_column("Detail")
    for entry in report.steps:
        table.add_row(
            _OUTCOME_STYLE[entry.outcome],
            _STEP_TITLES.get(entry.step.value, entry.step.value),
            entry.detail,
        )
    console.print(table)

    if report.valid:
        console.print("\n  Final result: [bold green]PRESENTATION VALID[/bold green]")
    else:
        console.print("\n  Final result: [bold red]PRESENTATION INVALID[/bold red]")

    disclosure = report.disclosure
    if disclosure.revealed_attributes:
        console.print(f"  Shared data:    {', '.join(disclosure.revealed_attributes)}")
    if disclosure.hidden_attributes:
        console.print(f"  Protected data: {', '.join(disclosure.hidden_attributes)}")
    console.print(f"  Purpose:        {disclosure.purpose}")


def render_ledger(ledger: InMemoryLedger, console: Console | None = None) -> None:
    """Print the ledger's blocks and a reminder of what stays off-chain."""
    console = console or Console()
    console.print("[bold]Ledger state (on-chain data)[/bold]")
    console.print(f"  Blocks:                {len(ledger)}")
    console.print(f"  Registered identities: {len(ledger.registered_identifiers())}")
    console.print(f"  Anchored credentials:  {len(ledger.anchors())}")
    console.print(f"  Revocations:           {len(ledger.revocations())}")
    console.print(f"  Chain intact:          {ledger.verify_chain()}")

    table = Table(show_header=True)
    table.add_column("#", justify="right")
    table.add_column("Kind", style="cyan")
    table.add_column("Hash")
    for block in ledger.blocks():
        table.add_row(str(block.index), block.kind.value, f"{block.hash[:20]}...")
    console.print(table)

    console.print("[bold]Kept off-chain[/bold]")
    for item in OFF_CHAIN_DATA:
        console.print(f"  - {item}")


__all__ = ["OFF_CHAIN_DATA", "render_ledger", "render_report"]
