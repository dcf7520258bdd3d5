import time
from dataclasses import dataclass
from typing import Optional

import httpx
import jwt

from prbridge.errors import GitHubAPIError
from prbridge.logger import get_logger


logger = get_logger("prbridge.github.auth")

GITHUB_ACCEPT = "application/vnd.github+json"


@dataclass(frozen=True)
class Authentication:
    type: str
    token: str
    app_id: int
    installation_id: Optional[int] = None


def create_jwt(app_id: int, private_key: str) -> str:
    now = int(time.time())
    payload = {
        # Backdated to tolerate clock drift with GitHub
        "iat": now - 60,
        "exp": now + 9 * 60,
        "iss": str(app_id),
    }
    return jwt.encode(payload, private_key, algorithm="RS256")


class AppAuth:
    """
    GitHub App credentials for one publish call.

    With an installation id the App acts as that installation;
    without one it authenticates as the bare App. Tokens are never
    cached: build a new AppAuth for every call.
    """

    def __init__(
        self,
        app_id: int,
        private_key: str,
        installation_id: Optional[int] = None,
    ):
        self.app_id = app_id
        self.private_key = private_key
        self.installation_id = installation_id

    @property
    def mode(self) -> str:
        return "installation" if self.installation_id is not None else "app"

    def app_jwt(self) -> str:
        return create_jwt(self.app_id, self.private_key)

    async def authenticate(self, client: httpx.AsyncClient) -> Authentication:
        app_token = self.app_jwt()

        if self.mode == "app":
            return Authentication(type="app", token=app_token, app_id=self.app_id)

        endpoint = f"/app/installations/{self.installation_id}/access_tokens"
        response = await client.post(
            endpoint,
            headers={
                "Authorization": f"Bearer {app_token}",
                "Accept": GITHUB_ACCEPT,
            },
        )

        if response.is_error:
            raise GitHubAPIError(
                f"Installation token exchange failed with {response.status_code}",
                status_code=response.status_code,
                url=str(response.request.url),
                response_body=response.text,
            )

        data = response.json()
        logger.info("GitHub installation token obtained for %s", self.installation_id)

        return Authentication(
            type="installation",
            token=data["token"],
            app_id=self.app_id,
            installation_id=self.installation_id,
        )
