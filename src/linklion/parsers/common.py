"""Shared text cleaning and selector helpers for page parsers."""

from __future__ import annotations

import html as html_mod
import re


def clean_text(text: str | None) -> str | None:
    """Strip whitespace, collapse internal runs, remove zero-width chars."""
    if not text:
        return None
    text = re.sub(r"[\u200b\u200c\u200d\ufeff]", "", text)
    text = re.sub(r"\s+", " ", text).strip()
    return text or None


def css_first(el: object, selector: str) -> object | None:
    """Safe css_first that works on both Adaptor and Adaptors objects."""
    try:
        if hasattr(el, "css_first"):
            return el.css_first(selector)
        results = el.css(selector)
        return results[0] if results else None
    except Exception:
        return None


def first_node(el: object, selectors: list[str] | tuple[str, ...]) -> object | None:
    """First element matched by any of *selectors*, in selector order."""
    for selector in selectors:
        node = css_first(el, selector)
        if node is not None:
            return node
    return None


def safe_css(el: object, selector: str) -> list:
    try:
        return list(el.css(selector) or [])
    except Exception:
        return []


def full_text(el: object | None) -> str:
    """Flattened text of an element including its children.

    ``get_all_text()`` misses some nested children, so stripping tags from
    ``html_content`` is tried first.
    """
    if el is None:
        return ""
    if hasattr(el, "html_content"):
        raw = el.html_content
        if isinstance(raw, str):
            return clean_text(html_mod.unescape(re.sub(r"<[^>]+>", " ", raw))) or ""
    if hasattr(el, "get_all_text"):
        return clean_text(el.get_all_text()) or ""
    if hasattr(el, "text"):
        return clean_text(el.text) or ""
    return ""


def attr(el: object | None, name: str) -> str | None:
    if el is None or not hasattr(el, "attrib"):
        return None
    value = el.attrib.get(name)
    return clean_text(str(value)) if value is not None else None


def first_text(el: object, selectors: list[str] | tuple[str, ...]) -> str | None:
    """Text of the first selector that yields a non-empty element."""
    for selector in selectors:
        text = full_text(css_first(el, selector))
        if text:
            return text
    return None


def texts(el: object, selector: str) -> list[str]:
    """Non-empty flattened texts of every match, in document order."""
    out: list[str] = []
    for node in safe_css(el, selector):
        text = full_text(node)
        if text:
            out.append(text)
    return out


def dedupe(values: list[str]) -> list[str]:
    out: list[str] = []
    seen: set[str] = set()
    for v in values:
        if not v or v in seen:
            continue
        seen.add(v)
        out.append(v)
    return out


def split_title_company(headline: str | None) -> tuple[str | None, str | None]:
    """Best-effort split of 'Title at Company' into (title, company).

    Returns (headline, None) if no separator found.
    """
    if not headline:
        return None, None
    for sep in (" at ", " @ ", " - ", " | "):
        if sep in headline:
            parts = headline.split(sep, 1)
            return clean_text(parts[0]), clean_text(parts[1])
    return headline, None


def extract_count(text: str | None, noun: str) -> str | None:
    """Pull a count like '500+' or '12,345' that precedes *noun* in *text*."""
    if not text:
        return None
    m = re.search(
        rf"(\d[\d,.]*\s?[KkMm]?\+?)\s+(?:\w+\s+)?{noun}",
        text,
        re.IGNORECASE,
    )
    return m.group(1).replace(" ", "") if m else None


def split_date_range(text: str | None) -> tuple[str | None, str | None, str | None]:
    """Split 'Jan 2020 - Present · 4 yrs' into (start, end, duration)."""
    if not text:
        return None, None, None
    duration = None
    if "·" in text:
        text, duration = (part.strip() for part in text.split("·", 1))
        duration = duration or None
    parts = re.split(r"\s+[-–—]\s+", text, maxsplit=1)
    start = clean_text(parts[0])
    end = clean_text(parts[1]) if len(parts) > 1 else None
    return start, end, duration


def looks_like_date_range(text: str | None) -> bool:
    if not text:
        return False
    if re.search(r"\b(19|20)\d{2}\b", text) and (re.search(r"\s[-–—]\s", text) or "·" in text):
        return True
    return bool(re.search(r"\b(present|yrs?|mos?)\b", text, re.IGNORECASE) and re.search(r"\d", text))
