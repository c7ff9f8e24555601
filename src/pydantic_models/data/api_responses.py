from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, model_validator


class TokenResponse(BaseModel):
    """
    Body of the token endpoint. The token may come as `access`, `token` or
    `access_token`; a body without any of them is rejected.
    """
    token: str

    @model_validator(mode="before")
    @classmethod
    def pick_token_field(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            raise ValueError("Token response is not a JSON object")
        token = data.get("access") or data.get("token") or data.get("access_token")
        if not token or not isinstance(token, str):
            raise ValueError("No token found in response")
        return {"token": token}


class PageResponse(BaseModel):
    """
    One page of a paginated list endpoint, or a bare array treated as the
    only page.
    """
    results: List[Dict[str, Any]] = Field(default_factory=list)
    next: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def accept_bare_list(cls, data: Any) -> Any:
        if isinstance(data, list):
            return {"results": data, "next": None}
        if isinstance(data, dict) and "results" in data:
            return data
        raise ValueError(f"Unexpected page shape: {type(data).__name__}")
