"""Shared fixtures for the binding pipeline tests."""

import pytest

from choropleth.colors.schemes import get_scheme
from choropleth.data.loader import load_table

STATES_CSV = """State,Population,Note
California,39,west
Texas,29,south
Calfornia,40,typo
Oregon,4,
Atlantis,abc,myth
"""

STATES_SVG = """<?xml version="1.0" encoding="UTF-8"?>
<svg xmlns="http://www.w3.org/2000/svg" id="svg2" viewBox="0 0 100 100">
  <defs id="defs4"><linearGradient id="linearGradient1"/></defs>
  <metadata id="metadata7"/>
  <g id="states" class="st0 region-group">
    <path id="California" class="state west" d="M0 0h10v10z"/>
    <path id="Texas" class="state south" d="M10 0h10v10z"/>
    <path id='Oregon' class="state west st1" d="M20 0h10v10z"/>
  </g>
</svg>
"""


@pytest.fixture
def states_csv():
    return STATES_CSV


@pytest.fixture
def states_svg():
    return STATES_SVG


@pytest.fixture
def states_table():
    return load_table(STATES_CSV)


@pytest.fixture
def candidates():
    return ["California", "Oregon", "Texas"]


@pytest.fixture
def blues():
    return get_scheme("buenos-aries")
