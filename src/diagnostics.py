"""Failure snapshots: URL, visible page text, control inventory, screenshot.

Capturing happens on a page that is already in a bad state, so every read is
allowed to fail; the failure is written into the report instead of raised.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class DiagnosticReport:
    error_message: str
    current_url: str = ""
    page_text: str = ""
    controls: dict = field(default_factory=dict)
    screenshot: str = ""
    capture_errors: list[str] = field(default_factory=list)

    def render(self) -> str:
        lines = [f"Error: {self.error_message}"]
        if self.current_url:
            lines.append(f"URL: {self.current_url}")
        if self.page_text:
            lines.append(f"Body: {self.page_text}")
        for role, labels in self.controls.items():
            if labels:
                lines.append(f"Visible {role}: {', '.join(labels)}")
        if self.screenshot:
            lines.append(f"Screenshot: {self.screenshot}")
        for err in self.capture_errors:
            lines.append(f"Could not get page info: {err}")
        return "\n".join(lines) + "\n"


def sanitize_for_filename(text: str) -> str:
    text = re.sub(r"[^\w\s-]", "", text)
    text = re.sub(r"[-\s]+", "_", text)
    return text.strip("_").lower()[:100]


def failure_paths(run_dir: Path, index: int, scenario_name: str) -> tuple[Path, Path]:
    stem = f"{index:02d}_{sanitize_for_filename(scenario_name)}_failure"
    return run_dir / "diagnostics" / f"{stem}.txt", run_dir / "screenshots" / f"{stem}.png"


async def collect_controls(page, limit: int = 50) -> dict:
    """Labels of visible buttons and links, to help fix a locator that broke."""
    inventory: dict[str, list] = {"buttons": [], "links": []}
    for tag, key in (("button", "buttons"), ("a", "links")):
        for el in (await page.locator(tag).all())[:limit]:
            try:
                if not await el.is_visible():
                    continue
                txt = " ".join((await el.inner_text()).split())
            except Exception:
                continue
            if txt and txt not in inventory[key]:
                inventory[key].append(txt)
    return inventory


async def capture(session, error: BaseException, screenshot_path: Path | None = None) -> DiagnosticReport:
    page = session.page
    report = DiagnosticReport(error_message=str(error) or type(error).__name__)
    try:
        report.current_url = page.url
    except Exception as e:
        report.capture_errors.append(f"url: {e}")
    try:
        report.page_text = await page.locator("body").inner_text(timeout=5000)
    except Exception as e:
        report.capture_errors.append(f"body text: {e}")
    try:
        report.controls = await collect_controls(page)
    except Exception as e:
        report.capture_errors.append(f"controls: {e}")
    if screenshot_path is not None:
        try:
            delay_ms = session.config.screenshot_delay_ms
            if delay_ms > 0:
                await page.wait_for_timeout(delay_ms)
            screenshot_path.parent.mkdir(parents=True, exist_ok=True)
            await page.screenshot(path=str(screenshot_path), full_page=True)
            report.screenshot = str(screenshot_path)
            if session.verbose:
                print(f"📸 Failure screenshot saved: {screenshot_path.name}")
        except Exception as e:
            report.capture_errors.append(f"screenshot: {e}")
    return report


def persist(report: DiagnosticReport, destination: Path) -> Path:
    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(report.render(), encoding="utf-8")
    return destination
