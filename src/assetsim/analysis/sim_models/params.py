"""Per-model simulation parameters.

One pydantic model per stochastic process, joined into the ``ModelParameters``
tagged union on the ``model`` field. Fields accept snake_case names or the
camelCase names used by the front end (``initialPrice``, ``timeHorizon``, ...).
Unknown keys are ignored; missing or out-of-domain values raise
``pydantic.ValidationError``.
"""

from typing import Annotated, Any, Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

from . import SimModel


class _BaseParams(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    initial_price: float = Field(gt=0, description="S0, price at t=0")
    drift: float = Field(description="Annualised drift μ")
    time_horizon: float = Field(gt=0, description="T, in years")
    steps: int = Field(ge=1, description="N, number of time steps")
    paths: int = Field(ge=1, description="M, number of simulated paths")

    @property
    def dt(self) -> float:
        return self.time_horizon / self.steps


class GBMParams(_BaseParams):
    model: Literal[SimModel.GBM] = SimModel.GBM
    volatility: float = Field(ge=0, description="Annualised volatility σ")


class JumpDiffusionParams(_BaseParams):
    model: Literal[SimModel.JUMP_DIFFUSION] = SimModel.JUMP_DIFFUSION
    volatility: float = Field(ge=0, description="Annualised diffusion volatility σ")
    jump_intensity: float = Field(ge=0, description="λ, expected jumps per year")
    mean_jump_size: float = Field(description="μJ, mean log jump size")
    jump_volatility: float = Field(ge=0, description="σJ, log jump size volatility")


class HestonParams(_BaseParams):
    model: Literal[SimModel.HESTON] = SimModel.HESTON
    kappa: float = Field(gt=0, description="Mean reversion speed")
    theta: float = Field(ge=0, description="Long-run variance")
    xi: float = Field(ge=0, description="Volatility of variance")
    rho: float = Field(ge=-1, le=1, description="Price/variance correlation")
    v0: float = Field(ge=0, description="Initial variance")


ModelParameters = Annotated[
    GBMParams | JumpDiffusionParams | HestonParams,
    Field(discriminator="model"),
]

PARAMS_BY_MODEL: dict[SimModel, type[_BaseParams]] = {
    SimModel.GBM: GBMParams,
    SimModel.JUMP_DIFFUSION: JumpDiffusionParams,
    SimModel.HESTON: HestonParams,
}

_union_adapter: TypeAdapter = TypeAdapter(ModelParameters)


def parse_params(
    model: SimModel | str,
    params: Mapping[str, Any] | _BaseParams,
) -> GBMParams | JumpDiffusionParams | HestonParams:
    """Build the parameter variant for ``model`` from a mapping.

    An already-built variant is accepted as-is when its tag matches; a
    mismatched variant is re-read through its field values so that, for
    example, GBM parameters can be reused for a jump-diffusion run as long
    as the jump fields are also present.
    """
    model = SimModel(model)
    if isinstance(params, _BaseParams):
        if params.model == model:
            return params
        params = params.model_dump()
    data = {k: v for k, v in params.items() if k != "model"}
    data["model"] = model
    return _union_adapter.validate_python(data)
