#!/usr/bin/env python3
"""Main entry point for the Windows service exporter"""
import sys
import time
from config import Config
from collectors.errors import CollectorInitError, CycleStatus
from collectors.service import WindowsServiceCollector
from metrics.registry import GaugeRegistry
from transport.wmi import WmiTransport
from logging_config import setup_structured_logging, get_logger, log_collector_startup, log_metrics_collection, log_error


def run(config: Config, collector: WindowsServiceCollector, registry: GaugeRegistry,
        max_cycles: int = None, sleep=time.sleep) -> int:
    """Initialize the collector and run cycles until interrupted or max_cycles is reached"""
    logger = get_logger(__name__)

    try:
        state = collector.init(registry)
    except CollectorInitError as e:
        log_error(logger, e, {"component": "collector", "phase": "init"})
        return 1

    cycles = 0
    try:
        while max_cycles is None or cycles < max_cycles:
            status = collector.run_cycle(state)
            cycles += 1
            if status == CycleStatus.OK:
                log_metrics_collection(logger, collector.name, state)
            else:
                logger.warning("Cycle did not complete", status=status.name,
                               consecutive_failures=state.consecutive_failures,
                               failed_cycles=state.failed_cycles, event_type="collection_error")

            if max_cycles is None or cycles < max_cycles:
                sleep(config.collection_interval)
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down", event_type="shutdown")
    finally:
        collector.exit(state)

    return 0


def main():
    """Main application entry point"""
    try:
        config = Config()

        setup_structured_logging(config)
        logger = get_logger(__name__)
        log_collector_startup(logger, config)

        transport = WmiTransport(config.wmi_host, config.wmi_namespace)
        collector = WindowsServiceCollector(transport, config)
        if not collector.is_enabled():
            logger.warning("Service collector disabled, nothing to do", event_type="exporter_idle")
            return 0

        return run(config, collector, GaugeRegistry())

    except Exception as e:
        logger = get_logger(__name__)
        log_error(logger, e, {"component": "main", "phase": "startup"})
        return 1


if __name__ == '__main__':
    sys.exit(main())
