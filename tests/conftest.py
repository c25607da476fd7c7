"""Shared test fixtures for routewatch."""

from __future__ import annotations

import threading
from pathlib import Path

import pytest

ROUTE_A = (
    "Destination: 1.0.0.0/24          \n"
    "     Protocol: IBGP               Process ID: 0              \n"
    "   Preference: 255                      Cost: 0              \n"
    "      NextHop: 172.31.251.131      Neighbour: 172.31.251.131\n"
    "        State: Active Adv Relied         Age: 27d02h01m21s        \n"
)

ROUTE_B = (
    "Destination: 10.0.0.0/8\n"
    "     Protocol: Static             Process ID: 0\n"
    "      NextHop: 172.31.254.50       Interface: Global-VE1.75\n"
    "\n"
)

PREAMBLE = "Route Flags: R - relay, D - download to fib\n"


def route(destination: str, *body: str) -> str:
    """Build one route block ending with a newline."""
    return "\n".join([f"Destination: {destination}", *body]) + "\n"


@pytest.fixture
def routes_file(tmp_path: Path) -> Path:
    """A routing-table dump with two records: 1.0.0.0/24 and 10.0.0.0/8."""
    path = tmp_path / "routes.txt"
    path.write_text(PREAMBLE + ROUTE_A + ROUTE_B)
    return path


class CallRecorder:
    """Thread-safe callback that counts calls and lets tests wait for them."""

    def __init__(self) -> None:
        self.calls = 0
        self._cond = threading.Condition()

    def __call__(self) -> None:
        with self._cond:
            self.calls += 1
            self._cond.notify_all()

    def wait_for(self, count: int, timeout: float = 2.0) -> bool:
        with self._cond:
            return self._cond.wait_for(lambda: self.calls >= count, timeout=timeout)


@pytest.fixture
def recorder() -> CallRecorder:
    return CallRecorder()
