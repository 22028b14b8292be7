# catalog_enricher/src/catalog_enricher/core/text_utils.py
"""
Utilitaires pour le nettoyage de chaînes de caractères.
"""

import html
import re


def clean_html_text(html_content: str) -> str:
    """Nettoie le HTML pour extraire le texte."""
    if not html_content:
        return ""
    # Supprimer les balises HTML
    text = re.sub(r"<[^>]+>", " ", html_content)
    text = html.unescape(text)
    # Supprimer les espaces multiples
    text = re.sub(r"\s+", " ", text)
    return text.strip()


def clean_text(text) -> str:
    """Normalise une valeur quelconque en chaîne sans espaces superflus."""
    if text is None:
        return ""
    text = re.sub(r"\s+", " ", str(text))
    return text.strip()


def force_https(url: str) -> str:
    """Convertit une URL http:// en https://."""
    if url and url.startswith("http://"):
        return "https://" + url[len("http://"):]
    return url or ""


def truncate(text: str, max_length: int, marker: str = "…") -> str:
    """Tronque un texte à max_length caractères, marqueur inclus."""
    if max_length <= 0 or len(text) <= max_length:
        return text
    return text[: max_length - len(marker)].rstrip() + marker
