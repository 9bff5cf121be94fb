#!/usr/bin/env python3

import argparse
import asyncio
import csv
import html
import json
import os
import sys
import zipfile
from datetime import datetime
from pathlib import Path

from journey import DEFAULT_PASSWORD, DEFAULT_USER_NAME, JourneyContext
from run_config import DRAG_STRATEGIES, RunConfig
from runner import run_journey
from scenarios import SCENARIOS, select_scenarios


def write_html_report(results_json: dict, html_path: Path):
    tests = results_json.get("tests", [])
    passed = sum(1 for r in tests if r.get("status") == "passed")
    failed = sum(1 for r in tests if r.get("status") == "failed")
    skipped = sum(1 for r in tests if r.get("status") == "skipped")
    account = results_json.get("account", {})

    report = f"""
<html><head><title>RoomCraft Journey Report</title>
<style>
body {{ font-family: Arial, sans-serif; padding: 20px; }}
.summary {{ margin-bottom: 16px; }}
.passed {{ color: #0a7b44; }}
.failed {{ color: #b00020; }}
.skipped {{ color: #777; }}
pre {{ background: #f6f8fa; padding: 12px; border-radius: 6px; overflow: auto; }}
</style>
</head><body>
  <h1>RoomCraft Journey Report</h1>
  <div class="summary">
    <strong>Account:</strong> {html.escape(account.get('email', ''))} &nbsp;
    <strong>Total:</strong> {len(tests)} &nbsp; <strong class="passed">Passed:</strong> {passed} &nbsp;
    <strong class="failed">Failed:</strong> {failed} &nbsp; <strong class="skipped">Skipped:</strong> {skipped}
  </div>
  <hr />
  {''.join(render_test_result(tr, Path(html_path).parent) for tr in tests)}
</body></html>
"""
    with open(html_path, "w", encoding="utf-8") as f:
        f.write(report)


def relative_link(path: str, base: Path) -> str:
    """Link target for an artifact, relative to the directory holding the report."""
    if not path:
        return ""
    return Path(os.path.relpath(path, base)).as_posix()


def render_test_result(test_result: dict, base: Path = Path(".")) -> str:
    status = test_result.get("status", "unknown")
    name = html.escape(test_result.get("name", "Unnamed Scenario"))
    error = test_result.get("error", "")
    screenshot = relative_link(test_result.get("screenshot", ""), base)
    diagnostics = relative_link(test_result.get("diagnostics", ""), base)
    img_tag = f"<div><img src=\"{html.escape(screenshot)}\" style=\"max-width: 100%; border: 1px solid #ddd;\" /></div>" if screenshot else ""
    error_block = f"<pre>{html.escape(test_result.get('error_type', ''))}: {html.escape(error)}</pre>" if error else ""
    diag_link = f"<p><a href=\"{html.escape(diagnostics)}\">Diagnostics</a></p>" if diagnostics else ""
    return f"""
  <section>
    <h3 class="{status}">{name} — {status.upper()} ({test_result.get('duration_ms', 0)} ms)</h3>
    {error_block}
    {diag_link}
    {img_tag}
  </section>
  <hr />
"""


def archive_files(zip_path: Path, files: list[Path]):
    # Keep the run directory layout so report links resolve inside the archive
    root = zip_path.parent
    with zipfile.ZipFile(zip_path, "w") as zf:
        for f in files:
            if f.exists():
                try:
                    arcname = f.relative_to(root).as_posix()
                except ValueError:
                    arcname = f.name
                zf.write(f, arcname=arcname)


def log_to_csv(log_path: Path, timestamp: str, results_json: dict, artifacts: dict):
    tests = results_json.get("tests", [])
    csv_exists = log_path.exists()
    with open(log_path, "a", newline="") as csvfile:
        writer = csv.writer(csvfile)
        if not csv_exists:
            writer.writerow(["Timestamp", "Passed", "Failed", "Skipped", "Results", "Report", "Archive"])
        writer.writerow([
            timestamp,
            sum(1 for r in tests if r.get("status") == "passed"),
            sum(1 for r in tests if r.get("status") == "failed"),
            sum(1 for r in tests if r.get("status") == "skipped"),
            str(artifacts.get("results")),
            str(artifacts.get("report")),
            str(artifacts.get("archive")),
        ])


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="RoomCraft end-to-end journey runner")
    parser.add_argument("--base-url", help="Base URL of the app under test (default: $JOURNEY_BASE_URL or http://localhost:5173)")
    parser.add_argument("--headless", action="store_true", default=None, help="Run Chromium headless")
    parser.add_argument("--verbose", action="store_true", help="Print step-level logs")
    parser.add_argument("--scenario", action="append", dest="scenarios", metavar="SLUG", help="Run only this scenario (repeatable)")
    parser.add_argument("--list", action="store_true", help="List scenario slugs and exit")
    parser.add_argument("--user-name", default=DEFAULT_USER_NAME, help="Display name of the journey account")
    parser.add_argument("--email", help="Reuse an existing account instead of a fresh timestamped one")
    parser.add_argument("--password", default=DEFAULT_PASSWORD, help="Password of the journey account")
    parser.add_argument("--drag-strategy", choices=DRAG_STRATEGIES, help="How the furniture drag is synthesized")
    parser.add_argument("--fail-fast", action="store_true", help="Skip the remaining scenarios after the first failure")
    parser.add_argument("--output-dir", default="data/runs", help="Where run directories are created")
    return parser


def build_config(args: argparse.Namespace, environ=None) -> RunConfig:
    config = RunConfig.from_env(environ)
    if args.base_url:
        config.base_url = args.base_url
    if args.headless is not None:
        config.headless = args.headless
    if args.drag_strategy:
        config.drag_strategy = args.drag_strategy
    config.verbose = args.verbose
    return config


def build_context(args: argparse.Namespace) -> JourneyContext:
    if args.email:
        return JourneyContext(name=args.user_name, email=args.email, password=args.password)
    return JourneyContext.fresh(name=args.user_name, password=args.password)


def main(argv=None):
    args = build_parser().parse_args(argv)

    if args.list:
        for s in SCENARIOS:
            print(f"{s.slug:28} {s.name}")
        return

    try:
        scenarios = select_scenarios(args.scenarios)
    except ValueError as e:
        raise SystemExit(str(e))

    config = build_config(args)
    context = build_context(args)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    output_dir = Path(args.output_dir)
    run_dir = output_dir / f"run_{timestamp}"
    run_dir.mkdir(parents=True, exist_ok=True)

    print(f"🏃 Running {len(scenarios)} scenario(s) against {config.base_url} as {context.email}...")
    results_json = asyncio.run(run_journey(
        config,
        run_dir,
        scenarios=scenarios,
        context=context,
        stop_on_failure=args.fail_fast,
    ))

    results_path = run_dir / "results.json"
    with open(results_path, "w", encoding="utf-8") as f:
        json.dump(results_json, f, indent=2)
    print(f"📊 Results written: {results_path}")
    artifacts = {"results": results_path}

    report_path = run_dir / "report.html"
    write_html_report(results_json, report_path)
    artifacts["report"] = report_path
    print(f"📝 HTML report: {report_path}")

    archive_path = run_dir / "archive.zip"
    failure_files = [
        Path(r[key])
        for r in results_json["tests"]
        for key in ("diagnostics", "screenshot")
        if r.get(key)
    ]
    archive_files(archive_path, [results_path, report_path] + failure_files)
    artifacts["archive"] = archive_path
    print(f"📦 Archive: {archive_path}")

    log_to_csv(output_dir / "run_log.csv", timestamp, results_json, artifacts)

    tests = results_json.get("tests", [])
    passed = sum(1 for r in tests if r.get("status") == "passed")
    failed = sum(1 for r in tests if r.get("status") == "failed")
    skipped = sum(1 for r in tests if r.get("status") == "skipped")
    print(f"✅ Done. Total: {len(tests)}, Passed: {passed}, Failed: {failed}, Skipped: {skipped}")
    if failed:
        sys.exit(1)


if __name__ == "__main__":
    main()
