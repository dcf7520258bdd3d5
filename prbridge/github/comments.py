from typing import Any, Dict, Optional

import httpx

from prbridge.errors import CommentPublishError, GitHubAPIError
from prbridge.github.api import GitHubClient, make_http_client
from prbridge.github.auth import AppAuth
from prbridge.logger import get_logger
from prbridge.settings import Settings


logger = get_logger("prbridge.github.comments")

MISSING_CREDENTIALS = "Missing GITHUB_APP_ID or GITHUB_PRIVATE_KEY environment variables"
MISSING_APP_DATA = "Failed to retrieve app data"
PUBLISH_FAILED = "Failed to create review comment"


def build_app_auth(settings: Settings) -> AppAuth:
    installation_id = settings.github_installation_id
    return AppAuth(
        app_id=int(settings.github_app_id),
        private_key=settings.github_private_key,
        installation_id=int(installation_id) if installation_id else None,
    )


async def publish_comment(
    settings: Settings,
    owner: str,
    repo: str,
    pr_number: int,
    body: str,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Dict[str, Any]:
    """
    Post ``body`` as a comment on a pull request, acting as the GitHub App.

    Each call authenticates from scratch, confirms the App identity with
    ``GET /app`` and then creates the comment. A single attempt, no retries.

    Raises CommentPublishError (500) on missing credentials or any
    upstream failure; upstream detail is only logged.
    """
    logger.info("Publishing comment on %s/%s#%s", owner, repo, pr_number)

    if not settings.has_app_credentials:
        logger.error(MISSING_CREDENTIALS)
        raise CommentPublishError(500, MISSING_CREDENTIALS)

    try:
        auth = build_app_auth(settings)

        async with make_http_client(settings.github_api_url, transport) as http:
            authentication = await auth.authenticate(http)
            logger.info("Authenticated successfully: %s", authentication.type)

            client = GitHubClient(http)

            app_data = await client.get_app(auth.app_jwt())
            if not app_data:
                logger.error("GET /app returned no data")
                raise CommentPublishError(500, MISSING_APP_DATA)

            logger.info("Authenticated as GitHub App: %s", app_data.get("slug"))

            comment = await client.create_issue_comment(
                authentication.token, owner, repo, pr_number, body
            )

        comment_id = comment["id"]
        comment_url = comment["html_url"]

    except CommentPublishError:
        raise
    except GitHubAPIError as exc:
        logger.exception(
            "Error creating review comment: GitHub answered %s for %s: %s",
            exc.status_code,
            exc.url,
            exc.response_body,
        )
        raise CommentPublishError(500, PUBLISH_FAILED) from exc
    except Exception as exc:
        logger.exception("Error creating review comment")
        raise CommentPublishError(500, PUBLISH_FAILED) from exc

    logger.info("Created review comment on PR #%s: %s", pr_number, comment_id)

    return {
        "ok": True,
        "message": "Review comment created successfully",
        "commentId": comment_id,
        "commentUrl": comment_url,
    }
