# models/session.py

from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass(frozen=True)
class Session:
    """Authenticated context passed explicitly to every backend call."""

    backend_url: str
    token: Optional[str] = None
    user_id: Optional[str] = None
    community_id: Optional[str] = None
    timeout: float = 30
    language: str = field(default="en")

    def headers(self, json_body: bool = False) -> Dict[str, str]:
        headers = {
            "Accept": "application/json",
            "Accept-Language": self.language,
        }
        if json_body:
            headers["Content-Type"] = "application/json"
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def url(self, path: str) -> str:
        return f"{self.backend_url.rstrip('/')}/{path.lstrip('/')}"
