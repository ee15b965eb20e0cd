import pytest
from slack_sdk.errors import SlackApiError

from pharmassist.integrations.contracts.pharmacy import AdminNotification, Priority
from pharmassist.integrations.slack.admin_notifier import SlackAdminNotifier


class FakeResponse:
    def __init__(self, data):
        self.data = data

    def get(self, key, default=None):
        return self.data.get(key, default)


class FakeSlackClient:
    def __init__(self):
        self.messages = []

    def chat_postMessage(self, channel: str, text: str):
        payload = {"ok": True, "channel": channel, "text": text, "ts": str(len(self.messages) + 1)}
        self.messages.append(payload)
        return FakeResponse(payload)


class FailingSlackClient:
    def chat_postMessage(self, channel: str, text: str):
        raise SlackApiError("channel_not_found", FakeResponse({"ok": False, "error": "channel_not_found"}))


def _notification(priority=Priority.HIGH):
    return AdminNotification(
        name="Amoxil 500mg",
        medicine_id="17",
        reason="Out of stock",
        priority=priority,
        reference="NOTIFY-1",
    )


def test_send_posts_formatted_message_to_channel():
    fake = FakeSlackClient()
    notifier = SlackAdminNotifier(token="x", channel="C1", client=fake)

    out = notifier.send(_notification())

    assert out["reference"] == "NOTIFY-1"
    assert fake.messages[0]["channel"] == "C1"
    assert "[admin][high][ref:NOTIFY-1] Out of stock for Amoxil 500mg (medicine_id: 17)" in fake.messages[0]["text"]


def test_format_message_tags_priority():
    high = SlackAdminNotifier.format_message(_notification(Priority.HIGH))
    low = SlackAdminNotifier.format_message(_notification(Priority.LOW))
    assert high.startswith(":red_circle:")
    assert low.startswith(":white_circle:")


def test_slack_errors_become_runtime_errors():
    notifier = SlackAdminNotifier(token="x", channel="C1", client=FailingSlackClient())
    with pytest.raises(RuntimeError, match="Slack API error"):
        notifier.send(_notification())
