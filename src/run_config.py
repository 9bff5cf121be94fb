import os
from dataclasses import dataclass


DEFAULT_BASE_URL = "http://localhost:5173"
DRAG_STRATEGIES = ("mouse", "html5")


def _env_int(environ, name: str, default: int) -> int:
    try:
        return int(environ.get(name, str(default)))
    except (TypeError, ValueError):
        return default


def _env_flag(environ, name: str, default: bool = False) -> bool:
    raw = environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class RunConfig:
    """Options consumed when the browser session starts."""

    base_url: str = DEFAULT_BASE_URL
    headless: bool = False
    window_width: int = 1920
    window_height: int = 1080
    no_sandbox: bool = True
    disable_dev_shm: bool = True
    ignore_certificate_errors: bool = True
    short_timeout_ms: int = 5000
    long_timeout_ms: int = 10000
    poll_interval_ms: int = 100
    settle_ms: int = 1000
    drag_strategy: str = "mouse"
    catalog_item: str = "Lounge Sofa"
    screenshot_delay_ms: int = 2000
    verbose: bool = False

    @classmethod
    def from_env(cls, environ=None) -> "RunConfig":
        environ = os.environ if environ is None else environ
        drag_strategy = environ.get("JOURNEY_DRAG_STRATEGY", "mouse")
        if drag_strategy not in DRAG_STRATEGIES:
            drag_strategy = "mouse"
        return cls(
            base_url=environ.get("JOURNEY_BASE_URL", DEFAULT_BASE_URL),
            headless=_env_flag(environ, "JOURNEY_HEADLESS"),
            drag_strategy=drag_strategy,
            screenshot_delay_ms=_env_int(environ, "SCREENSHOT_DELAY_MS", 2000),
        )

    def url(self, path: str = "/") -> str:
        if path.startswith("http"):
            return path
        return self.base_url.rstrip("/") + "/" + path.lstrip("/")

    def launch_args(self) -> list[str]:
        args = []
        if self.no_sandbox:
            args.append("--no-sandbox")
        if self.disable_dev_shm:
            args.append("--disable-dev-shm-usage")
        if self.ignore_certificate_errors:
            args.append("--ignore-certificate-errors")
        args.append(f"--window-size={self.window_width},{self.window_height}")
        return args
