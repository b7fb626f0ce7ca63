import re


# ```json at the start of a line, and whatever whitespace follows it.
OPENING_FENCE = re.compile(r"^```[\w+-]*\s*", re.MULTILINE)
CLOSING_FENCE = re.compile(r"\s*```$", re.MULTILINE)


def sanitize(raw: str) -> str:
    """Strip markdown fences and stray backticks from a model response."""
    cleaned = OPENING_FENCE.sub("", raw)
    cleaned = CLOSING_FENCE.sub("", cleaned)
    cleaned = cleaned.replace("`", "")
    return cleaned.strip()
