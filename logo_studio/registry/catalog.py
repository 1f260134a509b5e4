"""Ordered catalog of the bank logos shipped with the studio."""

from __future__ import annotations

import re

CATALOG_FOLDER = "logos_bancos"

BANK_LOGOS: tuple[str, ...] = (
    "agora-investimentos",
    "banco-bradesco",
    "banco-brasil",
    "banco-itau",
    "btg-pactual",
    "caixa-economica",
    "xp-investimentos",
)

_DISPLAY_NAMES: dict[str, str] = {
    "agora-investimentos": "Ágora Investimentos",
    "banco-bradesco": "Banco Bradesco",
    "banco-brasil": "Banco do Brasil",
    "banco-itau": "Banco Itaú",
    "btg-pactual": "BTG Pactual",
    "caixa-economica": "Caixa Econômica",
    "xp-investimentos": "XP Investimentos",
}

_WORD_START = re.compile(r"\b\w")


def display_name(identifier: str) -> str:
    """Return the human readable name for a logo *identifier*."""
    known = _DISPLAY_NAMES.get(identifier)
    if known:
        return known
    spaced = identifier.replace("-", " ")
    return _WORD_START.sub(lambda match: match.group(0).upper(), spaced)


def asset_filename(identifier: str, size: int, extension: str) -> str:
    """Return the export file name ``{identifier}-{size}px.{extension}``."""
    return f"{identifier}-{size}px.{extension}"
