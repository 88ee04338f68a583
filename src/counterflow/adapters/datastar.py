from typing import Any, Dict

from datastar_py import SSE_HEADERS
from datastar_py import ServerSentEventGenerator as SSE
from fasthtml.common import Script, to_xml
from starlette.requests import Request

from ..core.state import CounterState

datastar_script = Script(src="https://cdn.jsdelivr.net/gh/starfederation/datastar@v1.0.0-beta.11/bundles/datastar.js", type="module")


def is_datastar_request(request: Request) -> bool:
    """Check if the request was issued by Datastar."""
    if "Datastar-Request" in request.headers:
        return True
    return False


def state_signals_event(state: CounterState) -> str:
    """SSE event merging the snapshot's signals into the page."""
    return SSE.merge_signals(state.signals)


def fragment_event(fragment: Any, selector: str = None, merge_mode: str = "morph") -> str:
    """SSE event merging an FT component (or raw HTML) into the page."""
    html = to_xml(fragment) if not isinstance(fragment, str) else fragment
    if selector:
        return SSE.merge_fragments(html, selector=selector, merge_mode=merge_mode)
    return SSE.merge_fragments(html, merge_mode=merge_mode)


def sse_headers() -> Dict[str, str]:
    return dict(SSE_HEADERS)
