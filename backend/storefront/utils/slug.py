import re

_WHITESPACE = re.compile(r"\s+")


def make_slug(name: str) -> str:
    # "Black Leather Belt" -> "black-leather-belt"
    return _WHITESPACE.sub("-", name.strip().lower())
