import logging

from prbridge.github.events import PullRequestEvent, describe_pull_request, handle_event


def _event(action, **pull_request):
    payload = {"action": action, "pull_request": pull_request}
    return PullRequestEvent.from_payload(payload)


def test_opened_lines():
    event = _event("opened", number=42, title="Fix bug", user={"login": "alice"})

    assert describe_pull_request(event) == [
        "Pull request #42: Fix bug (opened) by alice",
        "New pull request #42 opened by alice",
    ]


def test_closed_merged():
    lines = describe_pull_request(_event("closed", number=7, merged=True))
    assert lines[-1] == "Pull request #7 closed (merged: true)"


def test_closed_not_merged():
    lines = describe_pull_request(_event("closed", number=7, merged=False))
    assert lines[-1] == "Pull request #7 closed (merged: false)"


def test_reopened_and_synchronize():
    assert describe_pull_request(_event("reopened", number=3))[-1] == (
        "Pull request #3 reopened"
    )
    assert describe_pull_request(_event("synchronize", number=3))[-1] == (
        "Pull request #3 updated with new commits"
    )


def test_other_action_is_generic():
    lines = describe_pull_request(_event("labeled", number=5))
    assert lines[-1] == "Pull request #5 action: labeled"


def test_absent_fields_do_not_raise():
    event = PullRequestEvent.from_payload({"action": "opened"})

    assert event.number is None
    assert event.author is None
    assert describe_pull_request(event) == [
        "Pull request #None: None (opened) by None",
        "New pull request #None opened by None",
    ]


def test_wrongly_shaped_user_becomes_absent():
    event = PullRequestEvent.from_payload(
        {"action": "opened", "pull_request": {"number": 9, "user": "not-an-object"}}
    )

    assert event.number == 9
    assert event.author is None


def test_scalar_fields_keep_their_raw_values():
    event = PullRequestEvent.from_payload(
        {"action": "opened", "pull_request": {"number": "12", "title": 123}}
    )

    assert event.number == "12"
    assert event.title == 123
    assert describe_pull_request(event)[0] == "Pull request #12: 123 (opened) by None"


def test_non_object_payload():
    event = PullRequestEvent.from_payload(["not", "a", "dict"])
    assert event.action is None
    assert event.pull_request is None


def test_handle_event_logs_pull_request(caplog):
    caplog.set_level(logging.INFO, logger="prbridge")

    handle_event(
        "pull_request",
        {"action": "closed", "pull_request": {"number": 11, "merged": True}},
    )

    assert "Pull request #11 closed (merged: true)" in caplog.messages


def test_handle_event_ignores_other_events(caplog):
    caplog.set_level(logging.INFO, logger="prbridge")

    handle_event("push", {"action": "opened", "pull_request": {"number": 1}})

    assert caplog.messages == []
