"""
Pydantic model for the forwarder's environment-driven configuration
"""

import os
from typing import Dict, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from scalyr_forwarder.errors import ConfigurationError

DEFAULT_PARSER_NAME = 'cloudWatchLogs'
DEFAULT_BASE_URL = 'https://www.scalyr.com'
DEFAULT_HTTP_TIMEOUT_SECONDS = 30.0

SERVER_ATTRIBUTE_PREFIX = 'SERVER_'
SERVER_LOG_STREAM_KEY = 'SERVER_LOG_STREAM'


class ForwarderConfig(BaseModel):
    """Resolved configuration for one forwarder process"""
    parser_name: str = Field(default=DEFAULT_PARSER_NAME, description="Scalyr parser applied to uploaded logs")
    use_add_events_api: bool = Field(default=False, description="Send to addEvents instead of uploadLogs")
    encrypted_api_key: Optional[str] = Field(default=None, description="Base64 KMS ciphertext of the Scalyr Write Logs key")
    base_url: str = Field(default=DEFAULT_BASE_URL, description="Scalyr server base URL")
    http_timeout: float = Field(default=DEFAULT_HTTP_TIMEOUT_SECONDS, gt=0, description="HTTP timeout in seconds")
    encode_server_attributes: bool = Field(default=False, description="URL-encode server attribute values")
    log_level: str = Field(default='INFO', description="Logging level")
    aws_region: Optional[str] = Field(default=None, description="Region for the KMS client")
    server_variables: Dict[str, str] = Field(default_factory=dict, description="SERVER_* entries in environment order")

    @field_validator('parser_name')
    @classmethod
    def default_empty_parser_name(cls, v):
        """An empty parser name falls back to the default"""
        return v or DEFAULT_PARSER_NAME

    @field_validator('base_url')
    @classmethod
    def validate_base_url(cls, v):
        """Validate the Scalyr server URL"""
        if not v.startswith(('https://', 'http://')):
            raise ValueError('base_url must be an http(s) URL')
        return v.rstrip('/')

    @property
    def add_events_url(self) -> str:
        return f"{self.base_url}/addEvents"

    @property
    def upload_logs_url(self) -> str:
        return f"{self.base_url}/api/uploadLogs"

    @classmethod
    def from_environ(cls, environ: Optional[Mapping[str, str]] = None) -> 'ForwarderConfig':
        """
        Build the configuration from environment variables

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            ForwarderConfig instance

        Raises:
            ConfigurationError: If a variable holds an invalid value
        """
        if environ is None:
            environ = os.environ

        timeout_value = environ.get('HTTP_TIMEOUT_SECONDS')
        try:
            http_timeout = float(timeout_value) if timeout_value else DEFAULT_HTTP_TIMEOUT_SECONDS
        except ValueError:
            raise ConfigurationError(f"HTTP_TIMEOUT_SECONDS must be a number, got '{timeout_value}'")

        server_variables = {
            key: value for key, value in environ.items()
            if key.startswith(SERVER_ATTRIBUTE_PREFIX)
        }

        try:
            return cls(
                parser_name=environ.get('PARSER_NAME') or DEFAULT_PARSER_NAME,
                use_add_events_api=environ.get('USE_ADD_EVENTS_API') == 'true',
                encrypted_api_key=environ.get('SCALYR_WRITE_LOGS_KEY') or None,
                base_url=environ.get('SCALYR_BASE_URL') or DEFAULT_BASE_URL,
                http_timeout=http_timeout,
                encode_server_attributes=environ.get('ENCODE_SERVER_ATTRIBUTES') == 'true',
                log_level=environ.get('LOG_LEVEL') or 'INFO',
                aws_region=environ.get('AWS_REGION') or None,
                server_variables=server_variables
            )
        except ValidationError as e:
            raise ConfigurationError(f"Invalid forwarder configuration: {str(e)}")
