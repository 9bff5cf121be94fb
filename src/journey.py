import time
from dataclasses import dataclass, field

from failures import AssertionFailed


DEFAULT_USER_NAME = "Selenium User"
DEFAULT_PASSWORD = "password123"


def timestamp_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class JourneyContext:
    """State shared by reference across the scenarios of one run.

    The account is fixed when the context is made. Design names are recorded
    once by the scenario that creates them and only read afterwards.
    """

    name: str
    email: str
    password: str
    entities: dict[str, str] = field(default_factory=dict)

    @classmethod
    def fresh(cls, ts: int | None = None, name: str = DEFAULT_USER_NAME, password: str = DEFAULT_PASSWORD) -> "JourneyContext":
        ts = timestamp_ms() if ts is None else ts
        return cls(name=name, email=f"selenium_{ts}@test.com", password=password)

    def remember(self, key: str, value: str) -> str:
        if key in self.entities:
            raise ValueError(f"{key!r} was already recorded as {self.entities[key]!r}")
        self.entities[key] = value
        return value

    def recall(self, key: str) -> str:
        try:
            return self.entities[key]
        except KeyError:
            raise AssertionFailed(f"No {key!r} recorded; the scenario that creates it has not run") from None

    def unique_name(self, prefix: str) -> str:
        return f"{prefix} {timestamp_ms()}"
