import json
from typing import Any

from starlette.responses import JSONResponse


class PrettyJSONResponse(JSONResponse):
    """JSON response indented by two spaces, non-ASCII left unescaped."""

    def render(self, content: Any) -> bytes:
        return json.dumps(
            content,
            ensure_ascii=False,
            allow_nan=False,
            indent=2,
        ).encode("utf-8")
