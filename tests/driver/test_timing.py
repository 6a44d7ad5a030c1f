"""Tests for the verbose timing accumulator."""

from unittest.mock import patch

from wclang.driver.timing import TimingLog


class TestTimingLog:
    def test_report_format(self):
        timing = TimingLog(start=10.0)
        with patch("wclang.driver.timing.time.perf_counter", side_effect=[10.0015, 10.25]):
            timing.mark("start")
            timing.mark("command prepared")

        assert timing.report() == ["start +1.500 ms", "command prepared +250.000 ms"]

    def test_instances_are_independent(self):
        first = TimingLog()
        first.mark("a")
        assert TimingLog().report() == []
        assert len(first.report()) == 1
