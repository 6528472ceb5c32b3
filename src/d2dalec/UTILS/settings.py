"""
Runtime settings, read from the environment and an optional .env file.

Configuration sources (in order of precedence):
1. Environment variables (D2DALEC_*, or GITHUB_TOKEN for the token)
2. .env file in the working directory
3. Default values

CLI options take precedence over all of these.
"""
from typing import Optional
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PREFIX = "D2DALEC_"

class Settings(BaseSettings):
    """
    Settings for a generator run.

    Example:
        export D2DALEC_GITHUB_API_URL=https://ghe.example.com/api/v3
        export D2DALEC_REQUEST_TIMEOUT=30
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    github_token: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(ENV_PREFIX + "GITHUB_TOKEN", "GITHUB_TOKEN"),
        description="Access token, raises the API rate limit",
    )
    github_api_url: str = "https://api.github.com"
    request_timeout: float = Field(default=10.0, gt=0, description="Per-request timeout in seconds")
    dockerfile: str = "Dockerfile"
    output: str = "dalec.yml"

def load_settings(dotenv_path: Optional[str] = None) -> Settings:
    """
    Loads settings from the environment.

    :param dotenv_path: Explicit .env file to read instead of ``./.env``.
    :return: A validated Settings instance.
    :raises pydantic.ValidationError: If a variable holds an invalid value.
    """
    if dotenv_path:
        return Settings(_env_file=dotenv_path)
    return Settings()
