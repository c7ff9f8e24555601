from typing import Dict, Optional

import requests
from loguru import logger
from pydantic import ValidationError

from omnihr.errors import AuthenticationError
from pydantic_models.config.api_config import ApiCredentials
from pydantic_models.data.api_responses import TokenResponse


class OmniHRAuth:
    """
    Exchanges username/password for a bearer token and keeps it for the
    lifetime of the instance (one CLI invocation). There is no refresh: an
    expired token surfaces as an AuthenticationError on the next call.
    """

    def __init__(
        self,
        credentials: ApiCredentials,
        token_endpoint: str = "/auth/token/",
        session: Optional[requests.Session] = None,
        timeout: float = 30.0,
    ):
        self.credentials = credentials
        self.base_url = credentials.base_url.rstrip("/")
        self.token_endpoint = token_endpoint
        self.session = session or requests.Session()
        self.timeout = timeout
        self.token: Optional[str] = None

    @property
    def subdomain(self) -> str:
        return self.credentials.subdomain

    def login(self) -> str:
        """
        Posts the form-encoded credentials to the token endpoint.

        Raises:
            AuthenticationError: On a non-2xx response or a body without token.
        """
        login_url = f"{self.base_url}{self.token_endpoint}"
        logger.debug(f"Requesting token from {login_url} for subdomain '{self.subdomain}'.")
        try:
            response = self.session.post(
                login_url,
                data={"username": self.credentials.username, "password": self.credentials.password},
                headers={
                    "Content-Type": "application/x-www-form-urlencoded",
                    "x-subdomain": self.subdomain,
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise AuthenticationError(f"Login request failed: {e}") from e

        if not response.ok:
            raise AuthenticationError(f"Login failed with status {response.status_code}: {response.text}")

        try:
            self.token = TokenResponse.model_validate(response.json()).token
        except (ValueError, ValidationError) as e:
            raise AuthenticationError(f"No token found in response: {e}") from e

        logger.info("Authenticated against OmniHR.")
        return self.token

    def get_token(self) -> str:
        if not self.token:
            self.login()
        return self.token

    def get_auth_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.get_token()}",
            "x-subdomain": self.subdomain,
            "Content-Type": "application/json",
        }
