from typing import Dict, Optional


class AuthSession:
    """Bearer credentials for the current operator."""

    def __init__(self):
        self.username: Optional[str] = None
        self.access_token: Optional[str] = None
        self.refresh_token: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.access_token)

    def start(self, username: str, access_token: str, refresh_token: Optional[str] = None):
        self.username = username
        self.access_token = access_token
        self.refresh_token = refresh_token

    def clear(self):
        self.username = None
        self.access_token = None
        self.refresh_token = None

    def bearer_header(self) -> Dict[str, str]:
        if not self.access_token:
            return {}
        return {"Authorization": f"Bearer {self.access_token}"}
