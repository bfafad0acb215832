"""Prometheus metrics helpers for the result registry."""

from prometheus_client import Counter

MODULES_STARTED = Counter(
    "qresults_modules_total", "Number of test modules registered."
)

TESTS_STARTED = Counter(
    "qresults_tests_total", "Number of tests registered."
)

# Assertions reported by released tests.
ASSERTIONS = Counter(
    "qresults_assertions_total",
    "Total number of assertions evaluated by released tests.",
)

ASSERTION_FAILURES = Counter(
    "qresults_assertion_failures_total",
    "Total number of failed assertions reported by released tests.",
)
