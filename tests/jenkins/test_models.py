"""
Tests for parsing decoded webhook bodies into Jenkins event records.
"""
import pytest

from relay.jenkins.models import (
    InboundShape,
    JenkinsEvent,
    LegacyJenkinsEvent,
    PayloadError,
    detect_shape,
    parse_event,
)


class TestDetectShape:

    def test_build_object_is_nested(self):
        assert detect_shape({"name": "asgard", "build": {}}) is InboundShape.NESTED

    def test_flat_keys_are_legacy(self):
        assert detect_shape({"projectName": "asgard", "event": "success"}) is InboundShape.LEGACY

    def test_build_wins_over_flat_keys(self):
        assert detect_shape({"build": {}, "event": "success"}) is InboundShape.NESTED

    def test_empty_object_defaults_to_nested(self):
        assert detect_shape({}) is InboundShape.NESTED


class TestParseNested:

    def test_full_payload(self):
        payload = {
            "name": "asgard",
            "displayName": "Asgard",
            "url": "job/asgard/",
            "build": {
                "number": 42,
                "queueId": 7,
                "timestamp": 1700000000123,
                "duration": 125000,
                "result": "SUCCESS",
                "status": "COMPLETED",
                "url": "http://jenkins.local/job/asgard/42/",
                "fullDisplayName": "Asgard #42",
                "cause": "Started by timer",
                "parameters": {"BRANCH": "main"},
                "changeSets": [{"items": []}],
            },
            "culprits": ["alice"],
        }

        event = parse_event(payload)

        assert isinstance(event, JenkinsEvent)
        assert event.shape is InboundShape.NESTED
        assert event.display_name == "Asgard"
        assert event.build.number == 42
        assert event.build.queue_id == 7
        assert event.build.timestamp == 1700000000123
        assert event.build.result == "SUCCESS"
        assert event.build.status == "COMPLETED"
        assert event.build.full_display_name == "Asgard #42"
        assert event.build.cause == "Started by timer"
        assert event.build.extras == {"parameters": {"BRANCH": "main"}, "changeSets": [{"items": []}]}
        assert event.extras == {"culprits": ["alice"]}

    def test_snake_case_aliases(self):
        payload = {
            "display_name": "Asgard",
            "build": {
                "queue_id": 9,
                "full_url": "http://jenkins.local/job/asgard/3/",
                "full_display_name": "Asgard #3",
                "phase": "STARTED",
            },
        }

        event = parse_event(payload)

        assert event.display_name == "Asgard"
        assert event.build.queue_id == 9
        assert event.build.url == "http://jenkins.local/job/asgard/3/"
        assert event.build.full_display_name == "Asgard #3"
        assert event.build.status == "STARTED"

    def test_nulls_mean_absent(self):
        event = parse_event({"name": None, "build": {"result": None, "duration": None, "queueId": None}})

        assert event.name == ""
        assert event.build.result == ""
        assert event.build.duration == 0
        assert event.build.queue_id is None

    def test_missing_build_uses_defaults(self):
        event = parse_event({"name": "asgard"})

        assert event.build.number == 0
        assert event.build.status == ""

    def test_integral_float_accepted(self):
        assert parse_event({"build": {"duration": 5000.0}}).build.duration == 5000

    def test_java_long_bounds_accepted(self):
        build = parse_event({"build": {"duration": 2 ** 63 - 1, "timestamp": -(2 ** 63)}}).build

        assert build.duration == 2 ** 63 - 1
        assert build.timestamp == -(2 ** 63)

    @pytest.mark.parametrize("payload", [
        [],
        "text",
        42,
        {"build": "not-an-object"},
        {"build": {"number": "42"}},
        {"build": {"number": True}},
        {"build": {"duration": 1.5}},
        {"build": {"duration": 1e20}},
        {"build": {"timestamp": 2 ** 63}},
        {"build": {"number": -(2 ** 63) - 1}},
        {"build": {"result": 1}},
        {"name": ["asgard"]},
    ])
    def test_structural_errors(self, payload):
        with pytest.raises(PayloadError):
            parse_event(payload)


class TestParseLegacy:

    def test_flat_payload(self):
        payload = {
            "projectName": "asgard",
            "buildName": "#18",
            "buildUrl": "http://jenkins.local/job/asgard/18/",
            "buildVars": "{BRANCH=main}",
            "event": "success",
        }

        event = parse_event(payload)

        assert isinstance(event, LegacyJenkinsEvent)
        assert event.shape is InboundShape.LEGACY
        assert event.project_name == "asgard"
        assert event.build_vars == "{BRANCH=main}"
        assert event.event == "success"

    def test_forced_shape(self):
        event = parse_event({}, shape=InboundShape.LEGACY)

        assert isinstance(event, LegacyJenkinsEvent)
        assert event.project_name == ""

    def test_wrong_type(self):
        with pytest.raises(PayloadError):
            parse_event({"projectName": 5})
