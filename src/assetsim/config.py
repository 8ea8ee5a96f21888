from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="ASSETSIM_",
    )

    # Logging
    log_dir: str = "logs"
    log_file: str = "assetsim.log"

    # Statistics
    risk_free_rate: float = 0.02

    # Reproducibility (None = fresh entropy every run)
    seed: int | None = None

    # Common simulation parameters
    initial_price: float = 100.0
    drift: float = 0.1
    volatility: float = 0.2
    time_horizon: float = 3.0  # years
    steps: int = 252
    paths: int = 100

    # Jump diffusion parameters
    jump_intensity: float = 0.5
    mean_jump_size: float = 0.0
    jump_volatility: float = 0.1

    # Heston parameters
    heston_kappa: float = 2.0
    heston_theta: float = 0.04
    heston_xi: float = 0.3
    heston_rho: float = -0.7
    heston_v0: float = 0.04

    # Export
    export_histogram_bins: int = 20
