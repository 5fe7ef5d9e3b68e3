"""
Application configuration.

Loads settings from environment variables and .env file.
Nested settings use ``__`` as delimiter, so the exception map can be
set with ``PROBLEM_DETAILS__EXCEPTION_MAP='{"myapp.errors.NotFound": 404}'``.
Settings are read once when the middleware is wired, never per request.
"""

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProblemDetailsSettings(BaseModel):
    """Problem Details specific settings.

    Attributes:
        exception_map: Error type identifier to HTTP status code.
            Identifiers are ``module.QualName``; builtins use the bare name.
    """

    exception_map: dict[str, int] = Field(default_factory=dict)


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Attributes:
        project_name: Display name for the API.
        version: Current API version string.
        debug: Development mode. Discloses traces and error identity in
            problem responses. Must be False in production.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        log_errors: Log intercepted errors before rendering them.
        problem_details: Problem Details settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    project_name: str = "problem-details"
    version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    log_errors: bool = True
    problem_details: ProblemDetailsSettings = Field(
        default_factory=ProblemDetailsSettings
    )


settings = Settings()
