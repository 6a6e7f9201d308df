"""Cell text normalization.

Some bank exports wrap every field in double quotes (``"ACME GmbH"``). A cell
is decoded as a JSON string literal when possible so that one layer of quoting
and its backslash escapes go away; anything that is not a well-formed,
non-empty string literal is kept verbatim.
"""

from __future__ import annotations

import json

_QUOTE = '"'


def normalize_cell(raw: str) -> str:
    """Return the unquoted cell value, or ``raw`` unchanged.

    Only cells wrapped in double quotes are decoded, so bare numbers, arrays
    and plain text never reach the JSON decoder. ``raw`` is returned as-is
    when it is not a valid string literal (unbalanced quotes, bad escapes) or
    when it decodes to the empty string, so a literal ``""`` cell survives as
    the two-character text.
    """

    if len(raw) < 2 or not (raw.startswith(_QUOTE) and raw.endswith(_QUOTE)):
        return raw
    try:
        decoded = json.loads(raw)
    except ValueError:
        return raw
    if isinstance(decoded, str) and decoded:
        return decoded
    return raw


__all__ = ["normalize_cell"]
