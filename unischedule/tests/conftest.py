import sys
import os

# Add project root to sys.path to allow imports like 'from unischedule...'
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

import pytest
from bs4 import BeautifulSoup

from unischedule.models.models import Group, Session


# Two schedule tables: a weekday table whose Wednesday slot splits into two
# subgroups, and a weekend table without subgroups. The unnumbered table at
# the top is page chrome and must be ignored.
SCHEDULE_HTML = """
<html><body>
<table class="legend"><tr><td>Legend</td></tr></table>

<table id="table_1">
  <thead>
    <tr><th colspan="4">Y2.S2.WD.SE</th></tr>
    <tr><th></th><th class="xAxis">Monday</th><th class="xAxis">Tuesday</th><th class="xAxis">Wednesday</th></tr>
  </thead>
  <tbody>
    <tr>
      <th class="yAxis">08:00</th>
      <td rowspan="2">Software Engineering<br>Dr. Popescu<br>Room 204</td>
      <td>-x-</td>
      <td rowspan="2">
        <table class="detailed">
          <tr><td>SE.1</td><td>SE.2</td></tr>
          <tr><td>Algorithms</td><td>Statistics</td></tr>
          <tr><td>Dr. A</td><td></td></tr>
          <tr><td>Room 1</td><td>Room 2</td></tr>
        </table>
      </td>
    </tr>
    <tr>
      <th class="yAxis">09:00</th>
      <td>Databases<br>Ms. Ionescu<br>Lab 3</td>
    </tr>
    <tr>
      <th class="yAxis">10:00</th>
      <td>Software Engineering<br>Dr. Popescu<br>Room 204</td>
      <td>Databases<br>Ms. Ionescu<br>Lab 3</td>
      <td>Networks</td>
    </tr>
    <tr>
      <th class="yAxis">11:00</th>
      <td>Ethics<br>Dr. B<br>Aula</td>
    </tr>
  </tbody>
</table>

<table id="table_2">
  <thead>
    <tr><th colspan="3">Y1.S2.WE.GEN</th></tr>
    <tr><th></th><th class="xAxis">Saturday</th><th class="xAxis">Sunday</th></tr>
  </thead>
  <tbody>
    <tr>
      <th class="yAxis">9:00</th>
      <td rowspan="3">Math<br>Prof. X<br>A1</td>
      <td>Physics, Lab; Intro<br>Prof. Y</td>
    </tr>
    <tr>
      <th class="yAxis">10:00</th>
      <td>---</td>
    </tr>
    <tr>
      <th class="yAxis">noon</th>
      <td>History<br>Prof. Z<br>B2</td>
    </tr>
  </tbody>
</table>
</body></html>
"""


@pytest.fixture
def schedule_html() -> str:
    return SCHEDULE_HTML


def make_tag(html: str, name: str = "td"):
    """Parses a fragment and returns its first `name` tag."""
    if name == "td":
        # Keep table cells inside a table so the parser leaves them alone
        html = f"<table><tr>{html}</tr></table>"
    return BeautifulSoup(html, "lxml").find(name)


@pytest.fixture
def tag_factory():
    return make_tag


@pytest.fixture
def sample_group() -> Group:
    return Group(
        id="SE.1",
        label="SE.1 (Y2.S2.WD.SE)",
        parent_group="Y2.S2.WD.SE",
        events=[
            Session(day="Monday", start="08:00", duration_minutes=180, title="Software Engineering",
                    location="Room 204", description="Dr. Popescu"),
            Session(day="Wednesday", start="14:00", duration_minutes=90, title="Algorithms",
                    location="Room 1", description="Dr. A\nGroup SE.1"),
            Session(day="Friday", start="10:00", duration_minutes=60, title="Seminar"),
        ],
    )
