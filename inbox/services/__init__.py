"""Business logic services for the unified inbox."""

# Service modules are imported individually where needed
# to avoid circular imports

__all__ = [
    "auth",
    "conversation",
    "customer",
    "dispatch",
    "inbox",
    "instagram",
    "message",
    "notification",
    "permissions",
    "staff",
    "whatsapp",
]
