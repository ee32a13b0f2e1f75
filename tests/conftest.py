"""Shared fixtures for gouse tests.

## Fake build reporters

Orchestrator and extraction tests never run the Go toolchain. They use
`FakeReporter`, which returns canned `BuildReport`s in order and records
every code buffer it was asked to build:

```python
def test_something(make_reporter):
    reporter = make_reporter(BuildReport(success=True, output=""))
    Toggler(reporter=reporter).toggle(b"package main\n")
    assert len(reporter.calls) == 1
```
"""

import pytest

from gouse.engine.build import BuildReport


class FakeReporter:
    """BuildReporter returning canned reports in call order."""

    def __init__(self, *reports: BuildReport) -> None:
        self.reports = list(reports)
        self.calls: list[bytes] = []

    def build(self, code: bytes) -> BuildReport:
        self.calls.append(code)
        if not self.reports:
            raise AssertionError("Unexpected build call")
        return self.reports.pop(0)


def failed(*lines: str) -> BuildReport:
    """Create a failed BuildReport from diagnostic lines."""
    return BuildReport(success=False, output="\n".join(["# command-line-arguments", *lines, ""]))


@pytest.fixture
def make_reporter() -> type[FakeReporter]:
    """Factory for FakeReporter instances."""
    return FakeReporter


@pytest.fixture
def failed_report():
    """Factory for failed BuildReports (see failed())."""
    return failed


@pytest.fixture
def ok_report() -> BuildReport:
    """Report of a successful build."""
    return BuildReport(success=True, output="")
