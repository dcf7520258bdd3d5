from typing import Optional


class BridgeError(Exception):
    """
    Error that terminates a single request or call.

    ``error`` is the message the caller sees; anything more detailed
    stays in the server logs.
    """

    def __init__(self, status_code: int, error: str):
        self.status_code = status_code
        self.error = error
        super().__init__(error)

    def to_body(self) -> dict:
        return {"error": self.error}


class WebhookRejected(BridgeError):
    """Raised when a webhook delivery fails validation."""


class CommentPublishError(BridgeError):
    """Raised when a pull request comment cannot be published."""


class GitHubAPIError(Exception):
    """
    Raised when the GitHub REST API answers with a non-2xx status.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
        response_body: Optional[str] = None,
    ):
        self.status_code = status_code
        self.url = url
        self.response_body = response_body
        super().__init__(message)
