import re

_WS = re.compile(r"\s+")


def clean_text(text: str | None) -> str:
    """Collapse runs of whitespace (including nbsp) to single spaces and trim."""
    if not text:
        return ""
    return _WS.sub(" ", text.replace("\xa0", " ")).strip()


def shorten(text: str, limit: int = 80) -> str:
    text = clean_text(text)
    if len(text) <= limit:
        return text
    return text[: limit - 1].rstrip() + "…"
