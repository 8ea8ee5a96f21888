import json
import logging

import click
from pydantic import ValidationError

from assetsim.config import Settings
from assetsim.logging_config import setup_logging

logger = logging.getLogger(__name__)

MODEL_CHOICES = ["gbm", "jumpDiffusion", "heston"]

SUMMARY_LABELS = {
    "initial_value": "Initial value",
    "mean_terminal_value": "Mean terminal value",
    "standard_deviation": "Std deviation",
    "min_value": "Min terminal value",
    "max_value": "Max terminal value",
    "mean_return": "Mean return",
    "sharpe_ratio": "Sharpe ratio",
    "max_drawdown": "Max drawdown",
    "value_at_risk": "VaR (95%)",
}
PERCENT_FIELDS = {"mean_return", "max_drawdown", "value_at_risk"}


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def cli(verbose: bool):
    """assetsim - Monte Carlo price path simulator"""
    setup_logging()
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


@cli.command()
def models():
    """List available model identifiers."""
    for model in MODEL_CHOICES:
        click.echo(model)


@cli.command()
@click.option("--model", "-m", "model_id", type=click.Choice(MODEL_CHOICES), default="gbm",
              show_default=True, help="Stochastic process to simulate")
@click.option("--initial-price", type=float, default=None, help="Initial price S0")
@click.option("--drift", type=float, default=None, help="Annual drift μ")
@click.option("--volatility", type=float, default=None, help="Annual volatility σ (GBM, jump diffusion)")
@click.option("--horizon", "time_horizon", type=float, default=None, help="Time horizon T in years")
@click.option("--steps", "-n", type=int, default=None, help="Number of time steps N")
@click.option("--paths", "-p", type=int, default=None, help="Number of paths M")
@click.option("--jump-intensity", type=float, default=None, help="Jumps per year λ")
@click.option("--mean-jump-size", type=float, default=None, help="Mean log jump size μJ")
@click.option("--jump-volatility", type=float, default=None, help="Log jump size volatility σJ")
@click.option("--kappa", type=float, default=None, help="Heston mean reversion speed")
@click.option("--theta", type=float, default=None, help="Heston long-run variance")
@click.option("--xi", type=float, default=None, help="Heston vol of vol")
@click.option("--rho", type=float, default=None, help="Heston price/variance correlation")
@click.option("--v0", type=float, default=None, help="Heston initial variance")
@click.option("--risk-free-rate", type=float, default=None, help="Annual risk-free rate for Sharpe")
@click.option("--seed", type=int, default=None, help="Random seed for reproducible paths")
@click.option("--export", "export_path", type=click.Path(dir_okay=False, writable=True), default=None,
              help="Write the paths to this CSV file")
@click.option("--histogram", is_flag=True, help="Also print the terminal price histogram")
@click.option("--bins", type=click.IntRange(min=1), default=None,
              help="Histogram bin count [default: ASSETSIM_EXPORT_HISTOGRAM_BINS]")
@click.option("--json", "as_json", is_flag=True, help="Print the summary as JSON")
def run(model_id: str, risk_free_rate: float | None, seed: int | None,
        export_path: str | None, histogram: bool, bins: int | None, as_json: bool,
        **param_options):
    """Simulate price paths and print risk/return statistics."""
    from assetsim.analysis.export import terminal_histogram, to_csv
    from assetsim.analysis.simulation import default_parameters, run_simulation

    settings = Settings()
    overrides = {k: v for k, v in param_options.items() if v is not None}

    try:
        params = default_parameters(model_id, settings, **overrides)
    except ValidationError as e:
        raise click.BadParameter(str(e)) from e

    result = run_simulation(
        model_id,
        params,
        risk_free_rate=settings.risk_free_rate if risk_free_rate is None else risk_free_rate,
        seed=settings.seed if seed is None else seed,
    )

    if export_path:
        to_csv(result.ensemble, export_path)
        click.echo(f"Exported {result.ensemble.n_paths} paths to {export_path}", err=as_json)

    histogram_bins = None
    if histogram:
        histogram_bins = terminal_histogram(
            result.ensemble,
            bins=settings.export_histogram_bins if bins is None else bins,
        )

    if as_json:
        payload = result.summary.model_dump(by_alias=True)
        if histogram_bins is not None:
            payload["terminalHistogram"] = histogram_bins
        click.echo(json.dumps(payload, indent=2))
        return

    click.echo(f"Model: {model_id} ({result.ensemble.n_paths} paths x {result.ensemble.n_steps} steps)")
    for field, value in result.summary.model_dump().items():
        label = SUMMARY_LABELS[field]
        if field in PERCENT_FIELDS:
            click.echo(f"  {label:<20} {value * 100:.2f}%")
        else:
            click.echo(f"  {label:<20} {value:.4f}")

    if histogram_bins is not None:
        click.echo("Terminal price histogram:")
        for b in histogram_bins:
            click.echo(f"  {b['bin_start']:>10.2f} - {b['bin_end']:<10.2f} {b['count']:>6d}  {b['percentage']:6.2f}%")


if __name__ == "__main__":
    cli()
