"""Fixtures for earthquake relay tests.

Provides an in-memory QuakeSource so cache, poller and endpoint tests never
touch the network, and a trimmed copy of the PHIVOLCS bulletin markup.
"""

import asyncio

import pytest

from app.quakes.interface import QuakeSource

BULLETIN_HTML = """
<html><body>
<table class="MsoNormalTable">
  <tbody>
    <tr><th>Date - Time (Philippine Time)</th><th>Latitude (ºN)</th><th>Longitude (ºE)</th>
        <th>Depth (km)</th><th>Mag</th><th>Location</th></tr>
    <tr>
      <td><a href="2024_Earthquake_Information\\October\\2024_1021_0215_B1.html">21 October 2024 - 10:15 AM</a></td>
      <td>8.41</td><td>126.30</td><td>017</td><td>2.0</td>
      <td>005 km N 45° W of Hinatuan (Surigao Del Sur)</td>
    </tr>
    <tr>
      <td> 20 October 2024 - 11:02 PM </td>
      <td>13.95</td><td>120.61</td><td>105</td><td>3.4</td>
      <td>011 km S 67° W of Calatagan (Batangas)</td>
    </tr>
    <tr><td>Note</td><td>only</td><td>three</td></tr>
    <tr>
      <td>20 October 2024 - 09:00 PM</td>
      <td>n/a</td><td>121.00</td><td>010</td><td>1.5</td><td>Somewhere</td>
    </tr>
  </tbody>
</table>
</body></html>
"""


class FakeSource(QuakeSource):
    """QuakeSource that replays scripted outcomes.

    Each outcome is a list of records or an exception to raise. The last
    outcome repeats once the script is exhausted.
    """

    def __init__(self, *outcomes, gate: asyncio.Event | None = None) -> None:
        self.outcomes = list(outcomes)
        self.calls = 0
        self.closed = False
        self.gate = gate

    async def fetch_snapshot(self, max_attempts=None):
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return list(outcome)

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def bulletin_html() -> str:
    return BULLETIN_HTML


@pytest.fixture
def make_source():
    """Factory for FakeSource instances."""
    return FakeSource
