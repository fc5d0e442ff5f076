from stockroom.plugins.timestamps import TimestampsMixin, next_timestamp

__all__ = [
    "TimestampsMixin",
    "next_timestamp",
]
