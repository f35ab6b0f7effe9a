from __future__ import annotations

import json
from typing import Any


def normalize_response(data: Any) -> Any:
    """
    The service sometimes answers with a JSON document and sometimes with the
    same document encoded once more as a JSON string. Decode the string form,
    leave anything else alone.
    """
    if not isinstance(data, (str, bytes, bytearray)):
        return data
    try:
        return json.loads(data)
    except ValueError:
        return data
