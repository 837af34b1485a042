"""
=============================================================================
passaudit - Command Line Interface
=============================================================================

Command-line interface for the password strength auditor.

Commands:
- check:   Audit a single password (prompted when not given)
- batch:   Audit a file of passwords, one per line
- presets: List the built-in policy presets

Passwords are never echoed back; tables show lengths, tiers and verdicts.

=============================================================================
"""

import json
import logging
import sys
from pathlib import Path
from typing import List, Tuple

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .auditor import Complexity, Outcome, Policy, audit, generate_report
from .config import PRESETS, load_policy

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)

# Rich console for pretty output
console = Console()


@click.group()
@click.option('--preset', '-p', default='none', type=click.Choice(list(PRESETS.keys())),
              help='Starting policy preset')
@click.option('--config', '-c', 'config_path', type=click.Path(dir_okay=False),
              help='Policy configuration file (key=value)')
@click.option('--no-env', is_flag=True, help='Ignore PASSAUDIT_* environment variables')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx, preset, config_path, no_env, verbose):
    """
    passaudit - Password Strength Auditor

    Checks passwords against length and character-class requirements and
    reports entropy and a complexity tier.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)]
    )
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose

    try:
        ctx.obj['policy'] = load_policy(
            preset=preset,
            config_path=config_path,
            use_env=not no_env
        )
    except (FileNotFoundError, ValueError) as e:
        logger.error(str(e))
        raise click.ClickException(str(e))


@cli.command()
@click.argument('password', required=False)
@click.option('--json', 'as_json', is_flag=True, help='Print the JSON report')
@click.pass_context
def check(ctx, password, as_json):
    """
    Audit a single password.

    Prompts without echo when PASSWORD is omitted. Exits with status 1 when
    the password is rejected or not strong enough.
    """
    policy: Policy = ctx.obj['policy']

    if password is None:
        password = click.prompt('Password', hide_input=True, default='',
                                show_default=False)

    outcome = audit(password, policy)

    if as_json:
        click.echo(json.dumps(generate_report(outcome, policy), indent=2))
    else:
        _display_outcome(outcome, policy)

    ctx.exit(0 if outcome.ok and outcome.strong else 1)


@cli.command()
@click.argument('password_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--output', '-o', type=click.Path(dir_okay=False),
              help='Write JSON reports to this file')
@click.pass_context
def batch(ctx, password_file, output):
    """
    Audit every password in a file, one per line.

    Blank lines are skipped. Exits with status 1 when any password is
    rejected.
    """
    policy: Policy = ctx.obj['policy']

    results: List[Tuple[int, Outcome]] = []
    try:
        with open(password_file, 'r', encoding='utf-8') as f:
            for line_num, line in enumerate(f, 1):
                password = line.rstrip('\r\n')
                if not password:
                    continue
                results.append((line_num, audit(password, policy)))
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Failed to read password file: {e}")
        raise click.ClickException(f"Failed to read password file: {e}")

    logger.info(f"Audited {len(results)} passwords from {password_file}")

    _display_batch_table(results)

    rejected = sum(1 for _, o in results if not o.ok)
    weak = sum(1 for _, o in results if o.ok and not o.strong)
    console.print(
        f"\n[bold]{len(results)}[/bold] audited, "
        f"[red]{rejected}[/red] rejected, [yellow]{weak}[/yellow] weak"
    )

    if output:
        reports = []
        for line_num, outcome in results:
            report = generate_report(outcome, policy)
            report['line'] = line_num
            reports.append(report)
        Path(output).write_text(json.dumps(reports, indent=2), encoding='utf-8')
        console.print(f"[green]✓ Reports written to {output}[/green]")

    ctx.exit(1 if rejected else 0)


@cli.command()
def presets():
    """List the built-in policy presets."""
    table = Table(title="Policy Presets")
    table.add_column("Name", style="cyan")
    table.add_column("Length", style="green")
    table.add_column("Required", style="green")
    table.add_column("Minimum Tier", style="green")

    for name, policy in PRESETS.items():
        table.add_row(
            name,
            _length_bounds(policy),
            ", ".join(_required_classes(policy)) or "-",
            Complexity(policy.minimum_complexity).name.lower(),
        )

    console.print(table)


def _length_bounds(policy: Policy) -> str:
    upper = str(policy.max_length) if policy.max_length else "∞"
    return f"{policy.min_length}-{upper}"


def _required_classes(policy: Policy) -> List[str]:
    required = []
    if policy.require_digits:
        required.append("digits")
    if policy.require_lower:
        required.append("lower")
    if policy.require_upper:
        required.append("upper")
    if policy.require_symbols:
        required.append("symbols")
    if policy.require_extended:
        required.append("extended")
    return required


def _verdict(outcome: Outcome) -> str:
    if not outcome.ok:
        return "[red bold]REJECTED[/red bold]"
    if not outcome.strong:
        return "[yellow]WEAK[/yellow]"
    return "[green]STRONG[/green]"


def _display_outcome(outcome: Outcome, policy: Policy):
    """Display a single audit outcome."""
    console.print(Panel(
        f"[bold blue]Password Audit[/bold blue]\n"
        f"Length bounds: {_length_bounds(policy)}\n"
        f"Required: {', '.join(_required_classes(policy)) or 'nothing'}",
        title="passaudit"
    ))

    table = Table(title="Audit Result")
    table.add_column("Metric", style="cyan")
    table.add_column("Value")

    table.add_row("Verdict", _verdict(outcome))
    table.add_row("Length", str(outcome.length))
    if outcome.error:
        table.add_row("Reason", outcome.error.message)
    else:
        table.add_row("Complexity", f"{outcome.complexity.name.lower()} ({int(outcome.complexity)})")
        table.add_row("Entropy", f"{outcome.entropy:.2f} bits")
        table.add_row("Extended letters", "yes" if outcome.has_extended else "no")

    console.print(table)


def _display_batch_table(results: List[Tuple[int, Outcome]]):
    """Display batch outcomes in a table."""
    if not results:
        console.print("[dim]No passwords to display[/dim]")
        return

    table = Table(title=f"Passwords ({len(results)})")
    table.add_column("Line", style="dim", justify="right")
    table.add_column("Length", justify="right")
    table.add_column("Complexity", style="cyan")
    table.add_column("Entropy", justify="right")
    table.add_column("Verdict")

    for line_num, outcome in results:
        if outcome.error:
            complexity = outcome.error.message
            entropy = "-"
        else:
            complexity = outcome.complexity.name.lower()
            entropy = f"{outcome.entropy:.1f}"
        table.add_row(str(line_num), str(outcome.length), complexity, entropy,
                      _verdict(outcome))

    console.print(table)


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
