from typing import Any, Optional

import httpx

from prbridge.errors import GitHubAPIError
from prbridge.github.auth import GITHUB_ACCEPT
from prbridge.logger import get_logger


GITHUB_API_VERSION = "2022-11-28"

logger = get_logger("prbridge.github.api")


class GitHubClient:
    """
    Thin async wrapper over the GitHub REST endpoints this service uses.

    Requests are signed per call with whichever token the caller passes,
    since ``GET /app`` needs the App JWT while comments need the
    installation token.
    """

    def __init__(self, http: httpx.AsyncClient):
        self._http = http

    async def _request(
        self,
        method: str,
        endpoint: str,
        token: str,
        json: Optional[dict] = None,
    ) -> Any:
        headers = {
            "Authorization": f"Bearer {token}",
            "Accept": GITHUB_ACCEPT,
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        }

        response = await self._http.request(method, endpoint, headers=headers, json=json)
        status = response.status_code

        if response.is_error:
            logger.warning("GitHub API error %s for %s %s", status, method, endpoint)
            raise GitHubAPIError(
                f"GitHub API returned {status} for {method} {endpoint}",
                status_code=status,
                url=str(response.request.url),
                response_body=response.text,
            )

        if status == 204:
            return None

        return response.json()

    async def get_app(self, app_jwt: str) -> Any:
        return await self._request("GET", "/app", app_jwt)

    async def create_issue_comment(
        self,
        token: str,
        owner: str,
        repo: str,
        issue_number: int,
        body: str,
    ) -> Any:
        # Pull requests share the issue comment endpoint
        return await self._request(
            "POST",
            f"/repos/{owner}/{repo}/issues/{issue_number}/comments",
            token,
            json={"body": body},
        )


def make_http_client(
    base_url: str,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=base_url,
        transport=transport,
        follow_redirects=True,
    )
