"""Command line interface for PayoffSage."""

from __future__ import annotations

from pathlib import Path

import click

from .config import BaseConfig
from .errors import PayoffSageError
from .logging_config import setup_logging
from .models.summary import PayoffStrategy, PayoffSummary

STRATEGY_CHOICES = [strategy.value for strategy in PayoffStrategy]
NON_CONVERGENT_EXIT_CODE = 2


def _describe(summary: PayoffSummary) -> str:
    status = "converged" if summary.converged else "NON-CONVERGENT"
    return (
        f"{summary.strategy_name.value:<10} months={summary.periods_elapsed:<6} "
        f"interest={summary.total_interest_accrued:,.2f} "
        f"paid={summary.total_payments_applied:,.2f} "
        f"settled={summary.instruments_settled}/{len(summary.final_instrument_states)} "
        f"[{status}]"
    )


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Project debt payoff under snowball and avalanche strategies."""

    try:
        config = BaseConfig()
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc
    setup_logging(config)
    ctx.obj = config


@cli.command("simulate")
@click.argument("csv_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--extra", type=float, default=0.0, show_default=True, help="Extra monthly payment")
@click.option(
    "--strategy",
    type=click.Choice(STRATEGY_CHOICES, case_sensitive=False),
    default=None,
    help="Repayment order (defaults to PAYOFFSAGE_DEFAULT_STRATEGY)",
)
@click.option(
    "--export",
    "export_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the monthly schedule to this CSV file",
)
@click.pass_obj
def simulate_command(
    config: BaseConfig, csv_path: Path, extra: float, strategy: str | None, export_path: Path | None
) -> None:
    """Simulate one strategy for the debts listed in CSV_PATH."""

    from .services.debts import simulate
    from .services.export_csv import export_schedule_csv
    from .services.import_csv import load_instruments

    try:
        instruments = load_instruments(csv_path)
        summary = simulate(strategy or config.DEFAULT_STRATEGY, instruments, extra, **config.engine_options())
    except PayoffSageError as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(_describe(summary))
    for state in summary.final_instrument_states:
        outcome = summary.outcome_for(state.id)
        when = f"month {outcome.payoff_period}" if outcome.settled else "unpaid"
        click.echo(
            f"  {state.name:<24} interest={outcome.interest_accrued:,.2f} "
            f"remaining={state.principal_balance:,.2f} ({when})"
        )

    if export_path is not None:
        path = export_schedule_csv(summary=summary, output_path=export_path)
        click.echo(f"Schedule written: {path}")

    if not summary.converged:
        raise click.exceptions.Exit(NON_CONVERGENT_EXIT_CODE)


@cli.command("compare")
@click.argument("csv_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--extra", type=float, default=0.0, show_default=True, help="Extra monthly payment")
@click.pass_obj
def compare_command(config: BaseConfig, csv_path: Path, extra: float) -> None:
    """Compare snowball and avalanche for the debts listed in CSV_PATH."""

    from .services.debts import compare_strategies
    from .services.import_csv import load_instruments

    try:
        instruments = load_instruments(csv_path)
        comparison = compare_strategies(instruments, extra, **config.engine_options())
    except PayoffSageError as exc:
        raise click.ClickException(str(exc)) from exc

    for summary in comparison.summaries:
        click.echo(_describe(summary))

    if comparison.best is None:
        click.echo("No strategy pays off these debts with the current budget.")
        raise click.exceptions.Exit(NON_CONVERGENT_EXIT_CODE)
    click.echo(
        f"Recommended: {comparison.best.strategy_name.value} "
        f"(saves {comparison.interest_savings:,.2f} in interest)"
    )


def main() -> None:  # pragma: no cover - console entry point
    cli()


__all__ = ["cli", "main"]
