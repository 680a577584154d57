from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "env_prefix": "MORTGAGE_"}

    # App
    debug: bool = False
    log_level: str = "INFO"
    cors_origins: list[str] = ["*"]

    # APR solver (Newton-Raphson)
    apr_tolerance: float = 0.0001  # Dollars of present-value gap
    apr_max_iterations: int = 100

    # Loan comparison
    max_comparison_scenarios: int = 10


settings = Settings()
