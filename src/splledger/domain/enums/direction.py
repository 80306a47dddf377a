from enum import Enum


class TransferDirection(str, Enum):
    """Direction of a transfer relative to the tracked wallet."""

    SENT = "sent"
    RECEIVED = "received"
