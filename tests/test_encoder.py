"""Tests for the one-hot categorical encoder"""
import pytest

from collectors.encoder import encode_onehot, SERVICE_STATES, SERVICE_START_MODES, SERVICE_STATUSES
from metrics.registry import GaugeRegistry, StagedWrites


class TestVocabularies:
    """Test the built-in vocabularies"""

    def test_vocabulary_sizes(self):
        assert len(SERVICE_STATES) == 8
        assert len(SERVICE_START_MODES) == 5
        assert len(SERVICE_STATUSES) == 12

    def test_vocabulary_order(self):
        assert SERVICE_STATES[3] == "running"
        assert SERVICE_START_MODES == ("boot", "system", "auto", "manual", "disabled")
        assert SERVICE_STATUSES[0] == "ok"
        assert SERVICE_STATUSES[-1] == "lost comm"


class TestEncodeOnehot:
    """Test one-hot encoding against a vocabulary"""

    def setup_method(self):
        self.registry = GaugeRegistry()
        self.family = self.registry.create_gauge_family("windows", "service", "state", "A state", ("name", "state"))

    def test_single_hot_entry(self):
        emitted = encode_onehot("MyService", "Running", SERVICE_STATES, 100.0, self.family, self.registry)

        assert len(emitted) == len(SERVICE_STATES)
        hot = [obs for obs in emitted if obs.value == 1.0]
        assert len(hot) == 1
        assert hot[0].label_values == ("MyService", "running")
        assert self.family.get(("MyService", "running")) == 1.0
        assert self.family.get(("MyService", "stopped")) == 0.0

    def test_emits_in_vocabulary_order(self):
        emitted = encode_onehot("svc", "paused", SERVICE_STATES, 1.0, self.family, self.registry)

        assert [obs.label_values[1] for obs in emitted] == list(SERVICE_STATES)

    @pytest.mark.parametrize("observed", ["RUNNING", "running", "RuNnInG"])
    def test_case_insensitive_match(self, observed):
        emitted = encode_onehot("svc", observed, SERVICE_STATES, 1.0, self.family, self.registry)

        assert [obs.value for obs in emitted] == [1.0 if s == "running" else 0.0 for s in SERVICE_STATES]

    @pytest.mark.parametrize("observed", ["weird", "", "run", "running "])
    def test_unknown_value_is_all_cold(self, observed):
        emitted = encode_onehot("svc", observed, SERVICE_STATES, 1.0, self.family, self.registry)

        assert len(emitted) == 8
        assert all(obs.value == 0.0 for obs in emitted)

    def test_none_value_is_all_cold(self):
        emitted = encode_onehot("svc", None, SERVICE_STATES, 1.0, self.family, self.registry)

        assert all(obs.value == 0.0 for obs in emitted)

    def test_reencoding_is_identical(self):
        first = encode_onehot("svc", "weird", SERVICE_STATES, 5.0, self.family, self.registry)
        second = encode_onehot("svc", "weird", SERVICE_STATES, 5.0, self.family, self.registry)

        assert first == second

    def test_shares_timestamp(self):
        sink = StagedWrites()
        emitted = encode_onehot("svc", "auto", SERVICE_START_MODES, 42.5, self.family, sink)

        assert {obs.timestamp for obs in emitted} == {42.5}
        assert len(sink) == len(SERVICE_START_MODES)

    def test_returns_observations_recorded_by_sink(self):
        sink = StagedWrites()
        emitted = encode_onehot("svc", "ok", SERVICE_STATUSES, 7.0, self.family, sink)

        assert len(emitted) == len(sink.observations)
        assert all(a is b for a, b in zip(emitted, sink.observations))

    def test_custom_vocabulary(self):
        vocabulary = ("red", "green")
        emitted = encode_onehot("light", "GREEN", vocabulary, 0.0, self.family, self.registry)

        assert [(obs.label_values, obs.value) for obs in emitted] == [
            (("light", "red"), 0.0),
            (("light", "green"), 1.0),
        ]
