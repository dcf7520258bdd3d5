from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from prbridge.logger import get_logger


logger = get_logger("prbridge.github.events")


class _TolerantModel(BaseModel):
    """
    Every field optional and unknown fields ignored. A nested object
    field with the wrong shape becomes None instead of failing the
    whole payload.
    """

    model_config = ConfigDict(extra="ignore")

    @field_validator("*", mode="wrap")
    @classmethod
    def _drop_invalid(cls, value: Any, handler):
        try:
            return handler(value)
        except ValidationError:
            return None


class GitHubUser(_TolerantModel):
    login: Any = None


class PullRequestInfo(_TolerantModel):
    # Scalars are logged as received, whatever their type
    number: Any = None
    title: Any = None
    user: Optional[GitHubUser] = None
    # Only meaningful on "closed"
    merged: Any = None


class PullRequestEvent(_TolerantModel):
    action: Any = None
    pull_request: Optional[PullRequestInfo] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "PullRequestEvent":
        if not isinstance(payload, dict):
            return cls()
        return cls.model_validate(payload)

    @property
    def number(self) -> Any:
        return self.pull_request.number if self.pull_request else None

    @property
    def title(self) -> Any:
        return self.pull_request.title if self.pull_request else None

    @property
    def author(self) -> Any:
        if self.pull_request and self.pull_request.user:
            return self.pull_request.user.login
        return None

    @property
    def merged(self) -> Any:
        return self.pull_request.merged if self.pull_request else None


def _fmt(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def describe_pull_request(event: PullRequestEvent) -> List[str]:
    """
    Build the log lines for a pull_request delivery: a summary line and
    one line for the specific action.
    """
    number = _fmt(event.number)
    action = _fmt(event.action)
    author = _fmt(event.author)

    lines = [
        f"Pull request #{number}: {_fmt(event.title)} ({action}) by {author}"
    ]

    if event.action == "opened":
        lines.append(f"New pull request #{number} opened by {author}")
    elif event.action == "closed":
        lines.append(f"Pull request #{number} closed (merged: {_fmt(event.merged)})")
    elif event.action == "reopened":
        lines.append(f"Pull request #{number} reopened")
    elif event.action == "synchronize":
        lines.append(f"Pull request #{number} updated with new commits")
    else:
        lines.append(f"Pull request #{number} action: {action}")

    return lines


def handle_event(event_type: str, payload: Any) -> None:
    """
    Dispatch a verified, parsed delivery.

    Only pull_request events are acted on; everything else is
    acknowledged by the caller without further logging.
    """
    if event_type != "pull_request":
        return

    event = PullRequestEvent.from_payload(payload)

    for line in describe_pull_request(event):
        logger.info(line)
