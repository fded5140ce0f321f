#!/usr/bin/env python3
"""
Terminal front-end for the Claim Intake API.

Usage:
    python -m src.frontend.console_app list
    python -m src.frontend.console_app list --search alex --page 2 --page-size 5
    python -m src.frontend.console_app show <claim-id>
    python -m src.frontend.console_app show CLM-2026-123456
    python -m src.frontend.console_app submit
"""

import argparse
import logging
import sys
from typing import Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from ..claims.numbering import is_claim_number
from ..claims.schema import Claim, ClaimDetail, ClaimStatus, LineOfBusiness, Priority
from ..claims.validation import FIELD_ORDER, validate_field
from ..utils.config import get_settings
from .api_client import ApiError, ClaimsApiClient, resolve_error_message
from .state import FIELD_LABELS, ClaimIntakeState

console = Console()

STATUS_STYLES = {
    ClaimStatus.SUBMITTED: "cyan",
    ClaimStatus.ASSIGNED: "yellow",
    ClaimStatus.IN_REVIEW: "magenta",
    ClaimStatus.CLOSED: "green",
}

PRIORITY_STYLES = {
    Priority.LOW: "dim",
    Priority.MEDIUM: "",
    Priority.HIGH: "bold red",
}

CHOICES = {
    "lob": [lob.value for lob in LineOfBusiness],
    "priority": [priority.value for priority in Priority],
}


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def truncate(text: str, max_len: int = 40) -> str:
    """Truncate text with ellipsis."""
    if len(text) > max_len:
        return text[:max_len - 3] + "..."
    return text


def styled(value: str, style: str) -> str:
    return f"[{style}]{value}[/{style}]" if style else value


# =============================================================================
# Rendering
# =============================================================================


def make_claims_table(claims: list, title: str = "Claims") -> Table:
    """Create summary table with key claim info."""
    table = Table(title=title, box=box.ROUNDED, header_style="bold cyan")

    table.add_column("Claim #", style="bold")
    table.add_column("Created", style="dim")
    table.add_column("Status")
    table.add_column("Priority")
    table.add_column("LOB")
    table.add_column("Insured")
    table.add_column("Policy #")
    table.add_column("Loss Date")
    table.add_column("Loss Type")
    table.add_column("ID", style="dim")

    for claim in claims:
        table.add_row(
            claim.claim_number,
            claim.created_at.strftime("%Y-%m-%d %H:%M"),
            styled(claim.status.value, STATUS_STYLES[claim.status]),
            styled(claim.priority.value, PRIORITY_STYLES[claim.priority]),
            claim.lob.value,
            truncate(claim.insured_name, 25),
            claim.policy_number,
            claim.loss_date.isoformat(),
            truncate(claim.loss_type, 20),
            claim.id,
        )

    return table


def make_claim_panel(claim: Claim) -> Panel:
    """Key/value card for a single claim."""
    table = Table(box=None, show_header=False, padding=(0, 1))
    table.add_column("Field", style="bold cyan", width=16)
    table.add_column("Value", overflow="fold")

    table.add_row("Status", styled(claim.status.value, STATUS_STYLES[claim.status]))
    table.add_row("Priority", styled(claim.priority.value, PRIORITY_STYLES[claim.priority]))
    table.add_row("Line of Business", claim.lob.value)
    table.add_row("Policy #", claim.policy_number)
    table.add_row("Insured", claim.insured_name)
    table.add_row("Contact", claim.contact_email)
    table.add_row("Loss Date", claim.loss_date.isoformat())
    table.add_row("Loss Type", claim.loss_type)
    table.add_row("Description", claim.description)
    table.add_row("Assigned To", claim.assigned_to or "-")
    table.add_row("Created", claim.created_at.isoformat())
    table.add_row("Updated", claim.updated_at.isoformat())
    table.add_row("ID", claim.id)

    return Panel(table, title=f"[bold]{claim.claim_number}[/bold]", box=box.ROUNDED)


def make_events_table(claim: ClaimDetail) -> Table:
    table = Table(title="Events", box=box.SIMPLE, header_style="bold cyan")
    table.add_column("When", style="dim")
    table.add_column("Type")
    table.add_column("Message")
    for event in claim.events:
        table.add_row(event.created_at.strftime("%Y-%m-%d %H:%M:%S"), event.type.value, event.message)
    return table


def print_error(message: str) -> None:
    console.print(f"[bold red]Error:[/bold red] {message}")


# =============================================================================
# Commands
# =============================================================================


def cmd_list(api: ClaimsApiClient, args: argparse.Namespace) -> int:
    try:
        page = api.fetch_claims(
            status=args.status,
            lob=args.lob,
            assigned_to=args.assigned_to,
            search=args.search,
            page=args.page,
            page_size=args.page_size,
        )
    except ApiError as e:
        print_error(resolve_error_message(e, "Failed to load claims"))
        return 1

    if not page.items:
        console.print("\n[dim]No claims found.[/dim]")
    else:
        console.print(make_claims_table(page.items))

    last_page = max(1, -(-page.total // page.page_size))
    console.print(f"Page {page.page} of {last_page} - {page.total} claim(s) total")
    return 0


def resolve_claim_id(api: ClaimsApiClient, reference: str) -> Optional[str]:
    """Map a claim number to its id; anything else is taken to be an id already."""
    if not is_claim_number(reference):
        return reference
    page = api.fetch_claims(search=reference)
    for claim in page.items:
        if claim.claim_number == reference:
            return claim.id
    return None


def cmd_show(api: ClaimsApiClient, args: argparse.Namespace) -> int:
    try:
        claim_id = resolve_claim_id(api, args.claim_id)
        if claim_id is None:
            print_error(f"Claim {args.claim_id} not found")
            return 1
        claim = api.get_claim(claim_id)
    except ApiError as e:
        if e.status_code == 404:
            print_error(f"Claim {args.claim_id} not found")
        else:
            print_error(resolve_error_message(e, "Failed to load claim"))
        return 1

    console.print(make_claim_panel(claim))
    console.print(make_events_table(claim))
    return 0


def prompt_field(state: ClaimIntakeState, name: str) -> None:
    """Ask for one field until the shared rules accept it."""
    while True:
        current = state.form[name] or None
        value = Prompt.ask(
            FIELD_LABELS[name],
            console=console,
            choices=CHOICES.get(name),
            default=current,
        )
        state.set_field(name, value or "")
        state.touch(name)
        message = state.field_error(name)
        if message is None:
            return
        console.print(f"  [red]{message}[/red]")


def cmd_submit(api: ClaimsApiClient, args: argparse.Namespace) -> int:
    state = ClaimIntakeState(api)

    provided = {
        "lob": args.lob,
        "policyNumber": args.policy_number,
        "insuredName": args.insured_name,
        "lossDate": args.loss_date,
        "lossType": args.loss_type,
        "description": args.description,
        "contactEmail": args.contact_email,
        "priority": args.priority,
    }

    if args.no_input:
        for name, value in provided.items():
            if value is not None:
                state.set_field(name, value)
    else:
        console.print(Panel("New claim", box=box.ROUNDED, style="bold cyan"))
        for name in FIELD_ORDER:
            if provided[name] is not None and validate_field(name, provided[name]) is None:
                state.set_field(name, provided[name])
                continue
            prompt_field(state, name)

    claim = state.submit()
    if claim is None:
        if state.error:
            print_error(state.error)
        else:
            for name, message in state.form_errors().items():
                print_error(f"{FIELD_LABELS[name]}: {message}")
        return 1

    console.print(f"\n[bold green]Claim submitted:[/bold green] {claim.claim_number}")
    console.print(make_claim_panel(claim))
    return 0


# =============================================================================
# Main Entry Point
# =============================================================================


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Claim intake terminal client")
    parser.add_argument("--api-url", default=settings.api_base_url, help="Base URL of the claims API")
    parser.add_argument("--timeout", type=float, default=settings.api_timeout, help="Request timeout in seconds")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List claims, newest first")
    list_parser.add_argument("--status", choices=[s.value for s in ClaimStatus])
    list_parser.add_argument("--lob", choices=CHOICES["lob"])
    list_parser.add_argument("--assigned-to")
    list_parser.add_argument("--search", help="Claim number, insured name or policy number")
    list_parser.add_argument("--page", type=int)
    list_parser.add_argument("--page-size", type=int)

    show_parser = subparsers.add_parser("show", help="Show a claim and its events")
    show_parser.add_argument("claim_id", help="Claim id or claim number")

    submit_parser = subparsers.add_parser("submit", help="Submit a new claim")
    submit_parser.add_argument("--lob", choices=CHOICES["lob"])
    submit_parser.add_argument("--policy-number")
    submit_parser.add_argument("--insured-name")
    submit_parser.add_argument("--loss-date", help="YYYY-MM-DD")
    submit_parser.add_argument("--loss-type")
    submit_parser.add_argument("--description")
    submit_parser.add_argument("--contact-email")
    submit_parser.add_argument("--priority", choices=CHOICES["priority"])
    submit_parser.add_argument("--no-input", action="store_true", help="Do not prompt; submit the flags as given")

    return parser.parse_args(argv)


COMMANDS = {
    "list": cmd_list,
    "show": cmd_show,
    "submit": cmd_submit,
}


def main(argv: Optional[list] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose)

    with ClaimsApiClient(base_url=args.api_url, timeout=args.timeout) as api:
        return COMMANDS[args.command](api, args)


if __name__ == "__main__":
    sys.exit(main())
