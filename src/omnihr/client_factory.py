from typing import Optional

import requests

from omnihr.api_client import OmniHRAPIClient
from omnihr.auth import OmniHRAuth
from omnihr.directory import EmployeeDirectory
from shared_modules.config import Config


def build_client(config: Config, session: Optional[requests.Session] = None) -> OmniHRAPIClient:
    """
    Wires credentials (environment) and API settings (YAML) into a client.

    Raises:
        ConfigurationError: If the credentials are incomplete.
    """
    credentials = config.api_credentials()
    auth = OmniHRAuth(
        credentials,
        token_endpoint=config.api.endpoints.token,
        session=session,
        timeout=config.api.timeout,
    )
    return OmniHRAPIClient(auth, config.api)


def build_directory(config: Config, client: OmniHRAPIClient) -> EmployeeDirectory:
    return EmployeeDirectory(client, config.directory)
