"""Email sending configuration.

Settings are read from ``SENDOUT_``-prefixed environment variables, and
optionally from a ``.env`` file:

* ``SENDOUT_BASE_URL`` - API endpoint of the provider (default: Postmark)
* ``SENDOUT_SERVER_TOKEN`` - server API token (required)
* ``SENDOUT_ACCOUNT_TOKEN`` - account-level API token (optional)
* ``SENDOUT_FROM_EMAIL`` - verified sender address (required)
* ``SENDOUT_TIMEOUT`` - request timeout in seconds (default: 30)
"""

from pathlib import Path

from pydantic import Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sendout.exceptions import ConfigError
from sendout.models import EmailAddress


DEFAULT_BASE_URL = "https://api.postmarkapp.com"


class ServiceConfig(BaseSettings):
    """Configuration for the email sending service.

    Tokens are stored as ``SecretStr`` so they never show up in ``repr`` or
    log output. Call ``get_secret_value()`` to read them.

    Attributes:
        base_url: API endpoint for the email service provider.
        server_token: Secret server API token used to authenticate requests.
        account_token: Optional secret account-level API token.
        from_email: The verified sender address, optionally with a display
            name (``Acme Support <support@acme.com>``). Emails appear to come
            from this address when a message does not set its own sender.
        timeout: Request timeout in seconds attached to every request.
    """

    model_config = SettingsConfigDict(
        env_prefix="SENDOUT_",
        extra="ignore",
    )

    base_url: str = Field(DEFAULT_BASE_URL, description="Provider API endpoint")
    server_token: SecretStr = Field(..., description="Server API token")
    account_token: SecretStr | None = Field(None, description="Account API token")
    from_email: EmailAddress = Field(..., description="Verified sender address")
    timeout: float = Field(30.0, gt=0, description="Request timeout in seconds")

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> "ServiceConfig":
        """Load the configuration from the environment.

        Args:
            env_file: Optional dotenv file read in addition to the process
                environment. Process environment variables take precedence.

        Returns:
            The loaded configuration.

        Raises:
            ConfigError: If a required setting is missing or invalid.
        """
        try:
            return cls(_env_file=env_file)  # type: ignore[call-arg]
        except ValidationError as err:
            fields = ", ".join(
                f"SENDOUT_{'.'.join(str(loc) for loc in error['loc']).upper()}"
                for error in err.errors()
            )
            raise ConfigError(f"missing or invalid settings: {fields}") from err
