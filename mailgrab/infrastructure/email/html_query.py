# infrastructure/email/html_query.py
from __future__ import annotations
from bs4 import BeautifulSoup


def select_text(html: str, selector: str) -> str:
    """
    Concatena el texto de todos los elementos que casan con `selector`,
    en orden de documento. Las entidades HTML llegan ya decodificadas.
    """
    soup = BeautifulSoup(html, "html.parser")
    return "".join(node.get_text() for node in soup.select(selector))
