from datetime import datetime, timedelta


class FakeClock:
    """Settable clock; call it to read the current time."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta):
        self.now = self.now + delta
