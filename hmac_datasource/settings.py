"""
Per-instance data source settings.

Plain settings (server URL, base path, auth method) and secure settings
(client id, secret key) arrive separately from the hosting application;
both can also be read from the environment for scripts and tests.
"""

import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from .constants import DEFAULT_CONFIG
from .exceptions import ConfigurationError
from .signing import RoutingParams


@dataclass
class PluginSettings:
    """Settings for one data source instance."""
    server_url: str = ""
    auth_method: str = DEFAULT_CONFIG['auth_method']
    base_path: str = DEFAULT_CONFIG['base_path']
    client_id: str = field(default="", repr=False)
    secret_key: str = field(default="", repr=False)
    timeout: Optional[float] = DEFAULT_CONFIG['timeout']

    def __post_init__(self):
        self.server_url = self.server_url.rstrip('/')
        self._validate_config()

    def _validate_config(self):
        """Validate settings that are wrong regardless of completeness."""
        if self.timeout is not None and self.timeout <= 0:
            raise ConfigurationError("timeout must be positive")

    @classmethod
    def from_instance_settings(
        cls,
        json_data: Union[str, bytes, Mapping[str, Any], None],
        secure_json_data: Optional[Mapping[str, str]] = None,
        **config,
    ) -> "PluginSettings":
        """
        Load settings from the host's instance settings.

        Args:
            json_data: Plain settings as a dict or JSON document
            secure_json_data: Decrypted secure settings
            **config: Overrides (timeout)

        Raises:
            ConfigurationError: If ``json_data`` is not a JSON object
        """
        if isinstance(json_data, (str, bytes)):
            try:
                json_data = json.loads(json_data)
            except ValueError as e:
                raise ConfigurationError(f"could not parse settings json: {e}") from e
        json_data = json_data or {}
        if not isinstance(json_data, Mapping):
            raise ConfigurationError("settings json must be an object")
        secure_json_data = secure_json_data or {}

        return cls(
            server_url=json_data.get('serverUrl') or "",
            base_path=json_data.get('basePath') or DEFAULT_CONFIG['base_path'],
            auth_method=json_data.get('authMethod') or DEFAULT_CONFIG['auth_method'],
            client_id=secure_json_data.get('clientId') or "",
            secret_key=secure_json_data.get('secretKey') or "",
            **config,
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **config) -> "PluginSettings":
        """Load settings from SERVER_URL, CLIENT_ID, SECRET_KEY, AUTH_METHOD and BASE_PATH."""
        environ = os.environ if environ is None else environ
        return cls(
            server_url=environ.get('SERVER_URL', ""),
            base_path=environ.get('BASE_PATH', DEFAULT_CONFIG['base_path']),
            auth_method=environ.get('AUTH_METHOD') or DEFAULT_CONFIG['auth_method'],
            client_id=environ.get('CLIENT_ID', ""),
            secret_key=environ.get('SECRET_KEY', ""),
            **config,
        )

    def missing_fields(self) -> List[str]:
        """Describe missing settings, most important first."""
        problems = []
        if not self.secret_key:
            problems.append("HMAC signing key is missing")
        if not self.client_id:
            problems.append("Client ID is missing")
        if not self.server_url:
            problems.append("Server URL is missing")
        if not self.base_path:
            problems.append("BasePath is missing")
        if not self.auth_method:
            problems.append("AuthMethod is missing")
        return problems

    @property
    def routing(self) -> RoutingParams:
        return RoutingParams(
            auth_method=self.auth_method,
            client_id=self.client_id,
            secret_key=self.secret_key,
        )

    def to_json_data(self) -> Dict[str, Any]:
        """Plain settings in the host's JSON shape; secrets are left out."""
        return {
            'serverUrl': self.server_url,
            'basePath': self.base_path,
            'authMethod': self.auth_method,
        }
