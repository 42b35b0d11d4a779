"""Configuration management for the chat relay and its consumer."""

import os
from typing import Any

import yaml
from dotenv import load_dotenv

from chat_relay.llm.exceptions import NOT_CONFIGURED_MESSAGE, ConfigurationError


class Configuration:
    """Manages configuration and environment variables for relay and client."""

    def __init__(self, config_path: str | None = None) -> None:
        """Initialize configuration from YAML and environment variables."""
        self.load_env()  # Load .env for secrets
        self._config_path = config_path or os.path.join(
            os.path.dirname(__file__), "config.yaml"
        )
        self._config = self._load_yaml_config()

    @staticmethod
    def load_env() -> None:
        """Load environment variables from .env file."""
        load_dotenv()

    def _load_yaml_config(self) -> dict[str, Any]:
        """Load configuration from YAML file."""
        with open(self._config_path) as file:
            config = yaml.safe_load(file)
            if not isinstance(config, dict):
                raise ValueError(
                    f"Config file must be YAML dict, got {type(config)}"
                )
            return config

    @property
    def gateway_api_key(self) -> str:
        """Get the upstream gateway credential.

        Read from the environment on every access so a missing secret fails
        the request that needs it rather than the process.

        Raises:
            ConfigurationError: If the credential is not set.
        """
        env_key = self.get_gateway_config()["api_key_env"]
        api_key = os.getenv(env_key)
        if not api_key:
            raise ConfigurationError(NOT_CONFIGURED_MESSAGE)
        return api_key

    @property
    def consumer_access_token(self) -> str:
        """Bearer token the consumer attaches to relay calls (opaque)."""
        env_key = self.get_consumer_config()["access_token_env"]
        return os.getenv(env_key, "")

    def get_config_dict(self) -> dict[str, Any]:
        """Get the full configuration dictionary."""
        return self._config

    def get_gateway_config(self) -> dict[str, Any]:
        """Get upstream gateway configuration from YAML.

        Raises:
            ValueError: If required gateway parameters are missing.
        """
        gateway_config = self._config.get("gateway", {})

        for key in ["url", "model", "api_key_env"]:
            if not gateway_config.get(key):
                raise ValueError(
                    f"gateway.{key} must be explicitly configured in config.yaml"
                )

        return gateway_config

    def get_http_client_config(self) -> dict[str, Any]:
        """Get HTTP client configuration for the gateway connection.

        Returns:
            HTTP client configuration dictionary with validated values.

        Raises:
            ValueError: If required HTTP client parameters are missing or invalid.
        """
        http_config = self.get_gateway_config().get("http_client", {})

        required_keys = [
            "max_connections", "max_keepalive", "connect_timeout",
            "read_timeout", "write_timeout", "pool_timeout",
        ]
        for key in required_keys:
            if key not in http_config:
                raise ValueError(
                    f"gateway.http_client.{key} must be explicitly configured "
                    "in config.yaml"
                )

        max_conn = http_config["max_connections"]
        if max_conn < 1:
            raise ValueError("http_client.max_connections must be at least 1")
        if http_config["max_keepalive"] > max_conn:
            raise ValueError("http_client.max_keepalive must be <= max_connections")

        return http_config

    def get_relay_config(self) -> dict[str, Any]:
        """Get relay server configuration from YAML.

        Raises:
            ValueError: If required relay parameters are missing or invalid.
        """
        relay_config = self._config.get("relay", {})

        for key in ["host", "port", "path"]:
            if key not in relay_config:
                raise ValueError(
                    f"relay.{key} must be explicitly configured in config.yaml"
                )

        if not str(relay_config["path"]).startswith("/"):
            raise ValueError("relay.path must start with '/'")

        return relay_config

    def get_consumer_config(self) -> dict[str, Any]:
        """Get stream consumer configuration from YAML.

        Raises:
            ValueError: If required consumer parameters are missing.
        """
        consumer_config = self._config.get("consumer", {})

        for key in ["relay_url", "access_token_env"]:
            if key not in consumer_config:
                raise ValueError(
                    f"consumer.{key} must be explicitly configured in config.yaml"
                )

        return consumer_config

    def get_logging_config(self) -> dict[str, Any]:
        """Get logging configuration from YAML."""
        return self._config.get("logging", {})
