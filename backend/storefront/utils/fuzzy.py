from typing import Optional


def fuzzy_match(query: Optional[str], target: Optional[str]) -> bool:
    """
    Case-insensitive subsequence test.

    Every character of ``query`` (spaces included) must occur in ``target``
    in the same relative order, not necessarily adjacent: "blk wlt" matches
    "black wallet". An empty query matches everything; a missing target is
    treated as the empty string.
    """
    if not query:
        return True
    needle = query.lower()
    haystack = (target or "").lower()
    i = 0
    for ch in haystack:
        if ch == needle[i]:
            i += 1
            if i == len(needle):
                return True
    return False
