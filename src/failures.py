"""Failure types raised by the journey runner.

Everything derives from AssertionError so a scenario failure reads the same
way whether it came from a locator, a wait or an explicit check.
"""


class JourneyFailure(AssertionError):
    pass


class ElementNotFound(JourneyFailure):
    def __init__(self, locator, detail: str = ""):
        self.locator = locator
        description = getattr(locator, "description", None) or str(locator)
        message = f"Element not found: {description}"
        if detail:
            message += f" ({detail})"
        super().__init__(message)


class TimeoutExceeded(JourneyFailure):
    def __init__(self, message: str, timeout_ms: int, last_error: Exception | None = None, last_value=None):
        self.timeout_ms = timeout_ms
        self.last_error = last_error
        self.last_value = last_value
        text = f"{message} (timed out after {timeout_ms} ms)"
        if last_error is not None:
            text += f"; last observation: {last_error}"
        super().__init__(text)


class AssertionFailed(JourneyFailure):
    pass


class GestureNotConfirmed(AssertionFailed):
    """The drag completed without error but its effect never showed up."""


class SessionLifecycleError(JourneyFailure):
    pass


class NotYet(Exception):
    """Raised by wait conditions to report what they saw instead of a match."""


def expect(condition, message: str) -> None:
    if not condition:
        raise AssertionFailed(message)


def expect_equal(actual, expected, message: str) -> None:
    if actual != expected:
        raise AssertionFailed(f"{message}: expected {expected!r}, got {actual!r}")
