"""Monte Carlo simulation orchestrator.

Selects a stochastic model by identifier, runs it, and reduces the resulting
ensemble to risk/return statistics.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from assetsim.analysis.sim_models import Ensemble, SimModel, StatisticsSummary
from assetsim.analysis.sim_models.gbm import simulate_gbm
from assetsim.analysis.sim_models.heston import simulate_heston
from assetsim.analysis.sim_models.merton import simulate_jump_diffusion
from assetsim.analysis.sim_models.params import (
    PARAMS_BY_MODEL,
    GBMParams,
    HestonParams,
    JumpDiffusionParams,
)
from assetsim.analysis.sim_models.random_source import VariateSource, default_source
from assetsim.analysis.statistics import DEFAULT_RISK_FREE_RATE, summarize
from assetsim.config import Settings

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Model registry
# ---------------------------------------------------------------------------

Simulator = Callable[..., Ensemble]

SIMULATORS: dict[SimModel, Simulator] = {
    SimModel.GBM: simulate_gbm,
    SimModel.JUMP_DIFFUSION: simulate_jump_diffusion,
    SimModel.HESTON: simulate_heston,
}

ALL_MODELS = tuple(SIMULATORS)


def resolve_model(model_id: SimModel | str) -> SimModel:
    """Map a model identifier ("gbm", "jumpDiffusion", "heston") to SimModel."""
    try:
        return SimModel(model_id)
    except ValueError:
        valid = ", ".join(m.value for m in SimModel)
        raise ValueError(f"Unknown model {model_id!r}; expected one of: {valid}") from None


# ---------------------------------------------------------------------------
# Main entry points
# ---------------------------------------------------------------------------


def simulate(
    model_id: SimModel | str,
    params: Mapping[str, Any] | Any,
    source: VariateSource | None = None,
    seed: int | None = None,
) -> Ensemble:
    """Simulate an ensemble of price paths with the selected model.

    Args:
        model_id: "gbm", "jumpDiffusion" or "heston".
        params: Parameters for that model; extra keys are ignored and
            missing ones raise ``pydantic.ValidationError``.
        source: Variate source. Built from ``seed`` if omitted.
        seed: Seed for the default source; ignored when ``source`` is given.

    Returns:
        Ensemble with ``paths`` rows of ``steps + 1`` prices.
    """
    model = resolve_model(model_id)
    if source is None:
        source = default_source(seed)
    return SIMULATORS[model](params, source)


@dataclass(frozen=True)
class SimulationRun:
    """One simulate-then-summarize cycle."""

    model: SimModel
    ensemble: Ensemble
    summary: StatisticsSummary


def run_simulation(
    model_id: SimModel | str,
    params: Mapping[str, Any] | Any,
    risk_free_rate: float = DEFAULT_RISK_FREE_RATE,
    source: VariateSource | None = None,
    seed: int | None = None,
) -> SimulationRun:
    """Simulate with ``model_id`` and summarize the resulting ensemble."""
    model = resolve_model(model_id)
    ensemble = simulate(model, params, source=source, seed=seed)
    summary = summarize(ensemble, risk_free_rate=risk_free_rate)

    logger.info(
        "Generated %d paths with the %s model: mean return %.2f%%, VaR(95%%) %.2f%%",
        ensemble.n_paths,
        model.value,
        summary.mean_return * 100,
        summary.value_at_risk * 100,
    )
    return SimulationRun(model=model, ensemble=ensemble, summary=summary)


def default_parameters(
    model_id: SimModel | str,
    settings: Settings | None = None,
    **overrides: Any,
) -> GBMParams | JumpDiffusionParams | HestonParams:
    """Default parameter set for ``model_id``, built from settings.

    Keyword overrides take precedence and may use either snake_case or
    camelCase names.
    """
    model = resolve_model(model_id)
    s = settings or Settings()

    data: dict[str, Any] = {
        "initial_price": s.initial_price,
        "drift": s.drift,
        "time_horizon": s.time_horizon,
        "steps": s.steps,
        "paths": s.paths,
    }
    if model in (SimModel.GBM, SimModel.JUMP_DIFFUSION):
        data["volatility"] = s.volatility
    if model == SimModel.JUMP_DIFFUSION:
        data.update(
            jump_intensity=s.jump_intensity,
            mean_jump_size=s.mean_jump_size,
            jump_volatility=s.jump_volatility,
        )
    elif model == SimModel.HESTON:
        data.update(
            kappa=s.heston_kappa,
            theta=s.heston_theta,
            xi=s.heston_xi,
            rho=s.heston_rho,
            v0=s.heston_v0,
        )

    params_cls = PARAMS_BY_MODEL[model]
    base = params_cls.model_validate(data)
    if not overrides:
        return base
    # Merge by alias so camelCase and snake_case overrides both win
    merged = base.model_dump(by_alias=True, exclude={"model"})
    for key, value in overrides.items():
        field = params_cls.model_fields.get(key)
        merged[field.alias if field is not None and field.alias else key] = value
    return params_cls.model_validate(merged)
