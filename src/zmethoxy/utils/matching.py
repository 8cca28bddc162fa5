"""Ordered path-component matching of user tokens."""

from __future__ import annotations

from collections.abc import Sequence


def matches(directory_path: str, user_tokens: Sequence[str]) -> tuple[bool, bool]:
    """Test whether ``user_tokens`` pick out ``directory_path``.

    Each token must be a substring of some path component strictly after the
    component matched by the previous token. A failed token does not stop the
    scan. The last token must also be contained in the last component.

    Returns ``(ordered_match, last_token_exact)``, where the second flag is
    set when the last token equals the last component.
    """
    components = directory_path.split("/")
    ordered = True
    cursor = -1
    for token in user_tokens:
        for i in range(cursor + 1, len(components)):
            if token in components[i]:
                cursor = i
                break
        else:
            ordered = False

    exact = False
    if user_tokens:
        last_component = components[-1]
        last_token = user_tokens[-1]
        if last_token not in last_component:
            ordered = False
        exact = last_component == last_token
    return ordered, exact
