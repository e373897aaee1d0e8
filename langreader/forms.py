from __future__ import annotations

import unicodedata
from typing import Optional


def normalize_form(term: Optional[str]) -> Optional[str]:
    """Fold a word for comparisons: decompose, casefold, drop accents.

    ``"Acción"`` and ``"accion"`` share the form ``"accion"``.
    """

    if term is None:
        return None
    decomposed = unicodedata.normalize("NFD", str(term).strip()).casefold()
    return "".join(char for char in decomposed if unicodedata.category(char) != "Mn")
