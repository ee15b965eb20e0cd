from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError

from pharmassist.integrations.contracts.pharmacy import AdminNotification, Priority

_PRIORITY_TAGS = {
    Priority.HIGH: ":red_circle:",
    Priority.MEDIUM: ":large_orange_circle:",
    Priority.LOW: ":white_circle:",
}


class SlackAdminNotifier:
    """Posts pharmacy admin notifications (out of stock, low inventory) to a Slack channel."""

    def __init__(self, token: str, channel: str, client: WebClient = None):
        self.client = client or WebClient(token=token)
        self.channel = channel

    @staticmethod
    def format_message(notification: AdminNotification) -> str:
        tag = _PRIORITY_TAGS.get(notification.priority, "")
        return (
            f"{tag} [admin][{notification.priority.value}][ref:{notification.reference}] "
            f"{notification.reason} for {notification.name} (medicine_id: {notification.medicine_id})"
        ).strip()

    def send(self, notification: AdminNotification) -> dict:
        try:
            response = self.client.chat_postMessage(
                channel=self.channel,
                text=self.format_message(notification),
            )
            data = dict(response.data)
            data["reference"] = notification.reference
            return data
        except SlackApiError as e:
            raise RuntimeError(f"Slack API error: {self._extract_slack_error(e)}") from e

    @staticmethod
    def _extract_slack_error(exc: Exception) -> str:
        response = getattr(exc, "response", None)
        if isinstance(response, dict):
            return str(response.get("error", "unknown_error"))
        try:
            return str(response["error"])  # type: ignore[index]
        except Exception:
            return str(exc)
