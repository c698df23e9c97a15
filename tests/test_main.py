"""Tests for the host runner"""
from unittest.mock import Mock, patch

from config import Config
from collectors.service import WindowsServiceCollector
from metrics.registry import GaugeRegistry
import main


class TestRun:
    """Test the init / cycle / exit loop"""

    def setup_method(self):
        self.config = Config()
        self.registry = GaugeRegistry()
        self.sleep = Mock()

    def test_runs_requested_cycles(self, fake_transport, service_row):
        fake_transport.rows = [service_row]
        collector = WindowsServiceCollector(fake_transport, self.config)

        assert main.run(self.config, collector, self.registry, max_cycles=3, sleep=self.sleep) == 0

        assert fake_transport.log.count(("acquire_session",)) == 3
        assert self.sleep.call_count == 2
        self.sleep.assert_called_with(30)
        assert len(self.registry.collect()) == 1 + 8 + 5 + 12

    def test_failed_cycles_do_not_stop_the_loop(self, fake_transport):
        fake_transport.fail_session = True
        collector = WindowsServiceCollector(fake_transport, self.config)

        with patch.object(collector, "exit") as exit_spy:
            assert main.run(self.config, collector, self.registry, max_cycles=2, sleep=self.sleep) == 0

        assert fake_transport.log.count(("acquire_session",)) == 2
        state = exit_spy.call_args[0][0]
        assert state.failed_cycles == 2
        assert state.last_error == "cannot connect"

    def test_cycle_stats_are_logged(self, fake_transport, service_row):
        fake_transport.rows = [service_row]
        collector = WindowsServiceCollector(fake_transport, self.config)

        with patch("main.log_metrics_collection") as log_cycle:
            main.run(self.config, collector, self.registry, max_cycles=1, sleep=self.sleep)

        _, name, state = log_cycle.call_args[0]
        assert name == "service"
        assert state.last_cycle.observations == 1 + 8 + 5 + 12
        assert state.last_cycle.rows == 1

    def test_exit_called_on_interrupt(self, fake_transport):
        collector = WindowsServiceCollector(fake_transport, self.config)
        self.sleep.side_effect = KeyboardInterrupt

        with patch.object(collector, "exit", wraps=collector.exit) as exit_spy:
            assert main.run(self.config, collector, self.registry, sleep=self.sleep) == 0

        exit_spy.assert_called_once()

    def test_init_failure(self, fake_transport):
        self.registry.create_gauge_family("windows", "service", "info", "taken", ("name",))
        collector = WindowsServiceCollector(fake_transport, self.config)

        assert main.run(self.config, collector, self.registry, max_cycles=1, sleep=self.sleep) == 1
        assert fake_transport.log == []


class TestMain:
    """Test the entry point"""

    def test_disabled_collector(self):
        with patch.dict("os.environ", {"ENABLED_COLLECTORS_STR": "cpu"}), \
                patch("main.setup_structured_logging"), \
                patch("main.run") as run:
            assert main.main() == 0

        run.assert_not_called()

    def test_startup_failure(self):
        with patch("main.Config", side_effect=RuntimeError("bad env")):
            assert main.main() == 1
