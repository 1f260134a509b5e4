from __future__ import annotations

import pytest

from samples import AGORA_SVG, ITAU_SVG, SIMPLE_SVG


@pytest.fixture
def simple_svg() -> str:
    return SIMPLE_SVG


@pytest.fixture
def itau_svg() -> str:
    return ITAU_SVG


@pytest.fixture
def agora_svg() -> str:
    return AGORA_SVG
