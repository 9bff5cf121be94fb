"""Unit tests for the scenario sequencer."""

import json
from unittest.mock import AsyncMock, patch

import pytest

from diagnostics import DiagnosticReport
from failures import AssertionFailed
from journey import JourneyContext
from runner import Scenario, run_journey, run_scenarios


def _ctx():
    return JourneyContext.fresh(ts=1700000000000)


async def create_design(ctx, session):
    ctx.remember("design", "Room A")


async def read_design(ctx, session):
    ctx.recall("design")


async def broken(ctx, session):
    raise AssertionFailed("Welcome heading missing")


@pytest.fixture
def no_capture():
    report = DiagnosticReport(error_message="x", screenshot="")
    with patch("runner.capture", new=AsyncMock(return_value=report)) as mock:
        yield mock


class TestRunScenarios:
    @pytest.mark.asyncio
    async def test_runs_in_order_with_shared_context(self, fake_session, tmp_path, no_capture):
        order = []

        async def first(ctx, session):
            order.append("first")
            ctx.remember("design", "Room A")

        async def second(ctx, session):
            order.append("second")
            assert ctx.recall("design") == "Room A"

        ctx = _ctx()
        result = await run_scenarios(fake_session, ctx, [Scenario("one", first), Scenario("two", second)], tmp_path)

        assert order == ["first", "second"]
        assert [t["status"] for t in result["tests"]] == ["passed", "passed"]
        assert result["entities"] == {"design": "Room A"}
        assert result["account"]["email"] == "selenium_1700000000000@test.com"
        no_capture.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failure_is_recorded_with_diagnostics_and_run_continues(self, fake_session, tmp_path, no_capture):
        scenarios = [Scenario("breaks", broken), Scenario("creates", create_design)]

        result = await run_scenarios(fake_session, _ctx(), scenarios, tmp_path)

        failed, passed = result["tests"]
        assert failed["status"] == "failed"
        assert failed["error"] == "Welcome heading missing"
        assert failed["error_type"] == "AssertionFailed"
        assert failed["diagnostics"].endswith("01_breaks_failure.txt")
        assert (tmp_path / "diagnostics" / "01_breaks_failure.txt").read_text(encoding="utf-8").startswith("Error: x")
        assert passed["status"] == "passed"
        no_capture.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_stop_on_failure_skips_the_rest(self, fake_session, tmp_path, no_capture):
        calls = []

        async def never(ctx, session):
            calls.append("never")

        scenarios = [Scenario("breaks", broken), Scenario("never", never)]

        result = await run_scenarios(fake_session, _ctx(), scenarios, tmp_path, stop_on_failure=True)

        assert [t["status"] for t in result["tests"]] == ["failed", "skipped"]
        assert calls == []

    @pytest.mark.asyncio
    async def test_dependent_scenario_fails_when_prerequisite_missing(self, fake_session, tmp_path, no_capture):
        result = await run_scenarios(fake_session, _ctx(), [Scenario("reads", read_design)], tmp_path)

        assert result["tests"][0]["status"] == "failed"
        assert "has not run" in result["tests"][0]["error"]

    @pytest.mark.asyncio
    async def test_persist_failure_does_not_change_verdict(self, fake_session, tmp_path, no_capture):
        with patch("runner.persist", side_effect=OSError("read-only file system")):
            result = await run_scenarios(fake_session, _ctx(), [Scenario("breaks", broken)], tmp_path)

        record = result["tests"][0]
        assert record["status"] == "failed"
        assert record["error"] == "Welcome heading missing"
        assert record["diagnostics"] == ""

    @pytest.mark.asyncio
    async def test_results_are_json_serializable(self, fake_session, tmp_path, no_capture):
        result = await run_scenarios(fake_session, _ctx(), [Scenario("breaks", broken)], tmp_path)

        assert json.loads(json.dumps(result))["tests"][0]["slug"] == "broken"


class TestRunJourney:
    @pytest.mark.asyncio
    async def test_wraps_scenarios_in_one_session(self, fake_session, tmp_path):
        entered = []

        class FakeManager:
            async def __aenter__(self):
                entered.append("enter")
                return fake_session

            async def __aexit__(self, *exc):
                entered.append("exit")
                return False

        ctx = _ctx()
        with patch("runner.browser_session", return_value=FakeManager()):
            result = await run_journey(fake_session.config, tmp_path, scenarios=[Scenario("creates", create_design)], context=ctx)

        assert entered == ["enter", "exit"]
        assert result["tests"][0]["status"] == "passed"
        assert ctx.entities == {"design": "Room A"}
