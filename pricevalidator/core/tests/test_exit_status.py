"""Tests for the process-wide exit status."""

import threading

from pricevalidator.core import exit_status


class TestExitStatus:
    def test_starts_successful(self):
        assert exit_status.exit_code() == 0
        assert not exit_status.has_failed()

    def test_mark_failed_sets_nonzero_code(self):
        exit_status.mark_failed()

        assert exit_status.exit_code() == 1
        assert exit_status.has_failed()

    def test_failure_is_sticky(self):
        """A later success can never clear an earlier failure."""
        exit_status.mark_failed(3)
        exit_status.mark_failed()

        assert exit_status.exit_code() != 0

    def test_reset_clears_failure(self):
        exit_status.mark_failed()
        exit_status.reset()

        assert exit_status.exit_code() == 0

    def test_concurrent_failures(self):
        threads = [threading.Thread(target=exit_status.mark_failed) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert exit_status.has_failed()
