"""Tests for the usage portal and router admin flows against a scripted engine."""

import pytest

from pppoe_rotator.automation.sites import portal as portal_site
from pppoe_rotator.automation.sites import router as router_site
from pppoe_rotator.automation.sites import RouterFlow, UsagePortalFlow, parse_minutes
from pppoe_rotator.automation.types import AutomationError, UsageParseError

PORTAL_URL = "http://portal.test/index.php/home/login"


class EngineRecorder:
    """Engine factory that hands out scripted engines and keeps them for inspection."""

    def __init__(self, make_engine, *scripts):
        self.make_engine = make_engine
        self.scripts = list(scripts)
        self.engines = []

    def __call__(self):
        engine = self.make_engine(**(self.scripts.pop(0) if self.scripts else {}))
        self.engines.append(engine)
        return engine


@pytest.fixture
def sleeps():
    return []


@pytest.mark.unit
class TestParseMinutes:
    @pytest.mark.parametrize(
        "text, expected",
        [("3577 Minute", 3577), ("3,577 Minute", 3577), ("  12000  Minutes", 12000), ("0", 0)],
    )
    def test_parses_leading_number(self, text, expected):
        assert parse_minutes(text) == expected

    @pytest.mark.parametrize("text", ["", "   ", "N/A Minute", "-5 Minute", "12.5 Minute"])
    def test_rejects_non_counts(self, text):
        with pytest.raises(UsageParseError):
            parse_minutes(text)

    def test_parse_error_is_automation_error(self):
        assert issubclass(UsageParseError, AutomationError)


@pytest.mark.unit
class TestUsagePortalFlow:
    def test_logs_in_and_reads_total_use(self, make_engine, sleeps):
        factory = EngineRecorder(make_engine, {"texts": {portal_site.TOTAL_USE_CELL: "9,512 Minute"}})
        flow = UsagePortalFlow(PORTAL_URL, factory, settle_wait=2.0, sleep=sleeps.append)

        minutes = flow.probe_usage("alice", "pw-a")

        engine = factory.engines[0]
        assert minutes == 9512
        assert ("goto", PORTAL_URL) in engine.actions
        assert ("type", portal_site.USERNAME_FIELD, "alice") in engine.actions
        assert ("type", portal_site.PASSWORD_FIELD, "pw-a") in engine.actions
        assert ("click", portal_site.SUBMIT_BUTTON) in engine.actions
        assert engine.started and engine.stopped
        assert sleeps == [2.0]

    def test_presses_enter_without_submit_button(self, make_engine):
        factory = EngineRecorder(
            make_engine,
            {"texts": {portal_site.TOTAL_USE_CELL: "10 Minute"}, "missing": {portal_site.SUBMIT_BUTTON}},
        )
        flow = UsagePortalFlow(PORTAL_URL, factory, settle_wait=0)

        flow.probe_usage("alice", "pw-a")

        assert ("press", portal_site.PASSWORD_FIELD, "Enter") in factory.engines[0].actions

    def test_presses_enter_when_click_fails(self, make_engine):
        factory = EngineRecorder(
            make_engine,
            {"texts": {portal_site.TOTAL_USE_CELL: "10 Minute"}, "click_error": RuntimeError("covered")},
        )
        flow = UsagePortalFlow(PORTAL_URL, factory, settle_wait=0)

        assert flow.probe_usage("alice", "pw-a") == 10
        assert ("press", portal_site.PASSWORD_FIELD, "Enter") in factory.engines[0].actions

    def test_missing_usage_cell_raises_and_stops_browser(self, make_engine):
        factory = EngineRecorder(make_engine, {"missing": {portal_site.TOTAL_USE_CELL}})
        flow = UsagePortalFlow(PORTAL_URL, factory, settle_wait=0)

        with pytest.raises(AutomationError, match="Total Use cell not found"):
            flow.probe_usage("alice", "pw-a")
        assert factory.engines[0].stopped

    def test_each_probe_uses_a_fresh_session(self, make_engine):
        script = {"texts": {portal_site.TOTAL_USE_CELL: "1 Minute"}}
        factory = EngineRecorder(make_engine, script, script)
        flow = UsagePortalFlow(PORTAL_URL, factory, settle_wait=0)

        flow.probe_usage("a", "pa")
        flow.probe_usage("b", "pb")

        assert len(factory.engines) == 2
        assert all(e.stopped for e in factory.engines)

    def test_headless_flag_reaches_engine(self, make_engine):
        factory = EngineRecorder(make_engine, {"texts": {portal_site.TOTAL_USE_CELL: "1 Minute"}})
        flow = UsagePortalFlow(PORTAL_URL, factory, headless=False, settle_wait=0)

        flow.probe_usage("a", "pa")

        assert factory.engines[0].actions[0] == ("start", False)


@pytest.mark.unit
class TestRouterFlow:
    def test_urls(self, make_engine):
        flow = RouterFlow("192.168.1.1", "admin", make_engine)

        assert flow.login_url == "http://192.168.1.1/info/Login.html"
        assert flow.internet_url == "http://192.168.1.1/Internet.html"

    def test_inspect_active_identity(self, make_engine):
        factory = EngineRecorder(make_engine, {"values": {router_site.PPPOE_USERNAME_FIELD: "  bob \n"}})
        flow = RouterFlow("192.168.1.1", "admin", factory, settle_wait=0)

        assert flow.inspect_active_identity() == "bob"

        engine = factory.engines[0]
        assert ("type", router_site.ADMIN_PASSWORD_FIELD, "admin") in engine.actions
        assert ("click", router_site.LOGIN_BUTTON) in engine.actions
        assert ("goto", "http://192.168.1.1/Internet.html") in engine.actions
        assert engine.stopped

    def test_inspect_fails_without_pppoe_field(self, make_engine):
        factory = EngineRecorder(make_engine, {"missing": {router_site.PPPOE_USERNAME_FIELD}})
        flow = RouterFlow("192.168.1.1", "admin", factory, settle_wait=0)

        with pytest.raises(AutomationError, match="PPPoE username field not found"):
            flow.inspect_active_identity()

    def test_apply_identity_saves_and_verifies(self, make_engine, sleeps):
        factory = EngineRecorder(
            make_engine,
            {},
            {"values": {router_site.PPPOE_USERNAME_FIELD: "carol"}},
        )
        flow = RouterFlow("192.168.1.1", "admin", factory, apply_wait=35, settle_wait=1, sleep=sleeps.append)

        assert flow.apply_identity("carol", "pw-c") is True

        save_session = factory.engines[0]
        assert ("type", router_site.PPPOE_USERNAME_FIELD, "carol") in save_session.actions
        assert ("type", router_site.PPPOE_PASSWORD_FIELD, "pw-c") in save_session.actions
        assert ("click", router_site.SAVE_BUTTON) in save_session.actions
        assert 35 in sleeps
        assert len(factory.engines) == 2
        assert all(e.stopped for e in factory.engines)

    def test_apply_identity_reports_rejection(self, make_engine):
        factory = EngineRecorder(
            make_engine,
            {},
            {"values": {router_site.PPPOE_USERNAME_FIELD: "alice"}},
        )
        flow = RouterFlow("192.168.1.1", "admin", factory, apply_wait=0, settle_wait=0)

        assert flow.apply_identity("carol", "pw-c") is False

    def test_apply_identity_missing_save_button_raises(self, make_engine):
        factory = EngineRecorder(make_engine, {"missing": {router_site.SAVE_BUTTON}})
        flow = RouterFlow("192.168.1.1", "admin", factory, apply_wait=0, settle_wait=0)

        with pytest.raises(AutomationError, match="Submit button not found"):
            flow.apply_identity("carol", "pw-c")
        assert factory.engines[0].stopped
