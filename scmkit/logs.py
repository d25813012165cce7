"""Names and values used in structured log records."""

from enum import Enum

ACTION = "action"
AUDIT = "audit"
DEBUG_LEVEL = 1


class ActionLogValue(str, Enum):
    """Possible values of the ``action`` log field."""

    VIEW = "VIEW"
    ADD = "ADD"
    UPDATE = "UPDATE"
    DELETE = "DELETE"