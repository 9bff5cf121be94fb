import time
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable

from browser_session import browser_session
from diagnostics import capture, failure_paths, persist
from journey import JourneyContext
from run_config import RunConfig


@dataclass(frozen=True)
class Scenario:
    name: str
    body: Callable[..., Awaitable[None]]

    @property
    def slug(self) -> str:
        return self.body.__name__


async def _record_failure(session, scenario: Scenario, index: int, error: Exception, run_dir: Path) -> tuple[str, str]:
    text_path, shot_path = failure_paths(run_dir, index, scenario.name)
    report = await capture(session, error, screenshot_path=shot_path)
    try:
        persist(report, text_path)
    except Exception as e:
        print(f"⚠️ Could not write diagnostics for {scenario.name}: {e}")
        return "", report.screenshot
    if session.verbose:
        print(f"📝 Diagnostics written: {text_path}")
    return str(text_path), report.screenshot


async def run_scenarios(session, context: JourneyContext, scenarios: list[Scenario], run_dir: Path, stop_on_failure: bool = False) -> dict:
    """Run scenarios in order over one session and shared context.

    A failing scenario is recorded and, unless ``stop_on_failure`` is set, the
    run carries on; later scenarios will usually fail too since each builds on
    the state the previous ones left behind.
    """
    run_dir = Path(run_dir)
    results = []
    halted = False
    for index, scenario in enumerate(scenarios, start=1):
        record = {
            "name": scenario.name,
            "slug": scenario.slug,
            "status": "passed",
            "error": "",
            "error_type": "",
            "duration_ms": 0,
            "diagnostics": "",
            "screenshot": "",
        }
        if halted:
            record["status"] = "skipped"
            results.append(record)
            print(f"↷ Skipped: {scenario.name}")
            continue

        if session.verbose:
            print(f"\n===== Running Scenario {index}/{len(scenarios)}: {scenario.name} =====")
        started = time.monotonic()
        try:
            await scenario.body(context, session)
        except Exception as e:
            record["status"] = "failed"
            record["error"] = str(e) or type(e).__name__
            record["error_type"] = type(e).__name__
            try:
                current_url = session.page.url
            except Exception:
                current_url = ""
            print(f"✖ Scenario failed: {scenario.name} ({record['error_type']}, url={current_url})")
            record["diagnostics"], record["screenshot"] = await _record_failure(session, scenario, index, e, run_dir)
            halted = stop_on_failure
        record["duration_ms"] = int((time.monotonic() - started) * 1000)
        results.append(record)

        if record["status"] == "passed":
            print(f"✓ Passed: {scenario.name}")
        else:
            error = record["error"]
            err_excerpt = error if len(error) < 300 else (error[:297] + "...")
            print(f"✖ Failed: {scenario.name} — {err_excerpt}")

    return {
        "account": {"name": context.name, "email": context.email},
        "entities": dict(context.entities),
        "tests": results,
    }


async def run_journey(config: RunConfig, run_dir: Path, scenarios: list[Scenario] | None = None, context: JourneyContext | None = None, stop_on_failure: bool = False) -> dict:
    if scenarios is None:
        from scenarios import SCENARIOS
        scenarios = SCENARIOS
    context = context or JourneyContext.fresh()
    if config.verbose:
        print(f"→ Journey account: {context.email}")
    async with browser_session(config) as session:
        return await run_scenarios(session, context, scenarios, run_dir, stop_on_failure=stop_on_failure)
