from .admin_notifier import SlackAdminNotifier

__all__ = ["SlackAdminNotifier"]
