"""
FastHTML Web Adapter

Presentation layer for the counter: one POST route per engine action,
a JSON snapshot route, a live SSE stream of snapshots and the page that
binds to them through Datastar signals.
"""

import json
import logging
import secrets
from typing import AsyncGenerator, Callable, Dict, Optional

from fasthtml.common import Button, Div, H1, Main, P, Span, Title, fast_app
from starlette.requests import Request
from starlette.responses import JSONResponse, StreamingResponse

from ..app.configurator import build_engine
from ..config import ApplicationConfig, get_config
from ..core.actions import ActionInfo, CounterAction
from ..core.engine import CounterEngine
from ..core.errors import EngineClosedError
from ..core.state import CounterState
from .datastar import datastar_script, fragment_event, is_datastar_request, sse_headers, state_signals_event

logger = logging.getLogger(__name__)

TOAST_ID = "toast"


def trigger(info: ActionInfo) -> str:
    """Datastar expression that fires the action's route."""
    return f"@{info.method.lower()}('{info.route}')"


class CounterDispatcher:
    """
    Routes HTTP requests to engine actions and turns snapshots into responses.

    1. Registers a route for every @action on the engine
    2. Executes the action via engine.submit()
    3. Converts the resulting snapshot to SSE (Datastar) or JSON
    """

    def __init__(self, engine: CounterEngine):
        self.engine = engine
        self.action_routes: Dict[str, CounterAction] = {}

    def include_actions(self, router) -> None:
        """Register one route per engine action with the router."""
        for kind, info in self.engine.actions.items():
            handler = self._create_route_handler(info)
            router(info.route, methods=[info.method])(handler)
            self.action_routes[info.route] = kind
            logger.debug(f"Registered {info.method} {info.route} -> {info.name}: {info.description}")

    def _create_route_handler(self, info: ActionInfo) -> Callable:
        async def handler(request: Request):
            try:
                state = await self.engine.submit(info.kind)
            except EngineClosedError as e:
                return JSONResponse({'success': False, 'action': info.kind.value, 'error': str(e)}, status_code=503)
            return self.state_to_response(state, info, request)

        handler.__name__ = f"counter_{info.kind.value}"
        handler._action_info = info
        return handler

    def state_to_response(self, state: CounterState, info: ActionInfo, request: Request):
        """
        Convert a snapshot to the response the caller expects.

        Datastar requests get an SSE response merging the new signals;
        everything else gets JSON.
        """
        if is_datastar_request(request):
            async def sse_stream():
                yield state_signals_event(state)
            return StreamingResponse(sse_stream(), media_type="text/event-stream", headers=sse_headers())

        return JSONResponse({
            'success': True,
            'action': info.kind.value,
            'state': state.model_dump(),
        })

    async def live_stream(self) -> AsyncGenerator[str, None]:
        """
        SSE stream of every published snapshot.

        A snapshot carrying a transient message is shown once as a toast and
        then acknowledged, the way a mobile view consumes a one-shot event.
        """
        async for state in self.engine.stream.updates():
            yield state_signals_event(state)
            if state.transient_message:
                yield fragment_event(Div(state.transient_message, id=TOAST_ID), selector=f"#{TOAST_ID}")
                try:
                    await self.engine.message_consumed()
                except EngineClosedError:
                    return


def counter_page(engine: CounterEngine):
    """Counter screen bound to the engine's signals."""
    state = engine.state
    actions = engine.actions

    return Main(
        Div({"data-signals": json.dumps(state.signals)}, id=CounterState.namespace),
        Div({"data-on-load": "@get('/counter/live')"}),
        H1("Counter"),
        P("Counter Value: ", Span(str(state.count), data_text=CounterState.Scount), id="count"),
        Div(
            P("Reset pending..."),
            Button("Cancel", data_on_click=trigger(actions[CounterAction.CANCEL_CLEAR])),
            data_show=CounterState.Sis_clear_pending,
            id="pending",
        ),
        Button("Increment",
               data_on_click=trigger(actions[CounterAction.INCREMENT]),
               data_attr_disabled=f"!{CounterState.Sis_increment_enabled}"),
        Button("Decrement",
               data_on_click=trigger(actions[CounterAction.DECREMENT]),
               data_attr_disabled=f"!{CounterState.Sis_decrement_enabled}"),
        Button("Clear",
               data_on_click=trigger(actions[CounterAction.CLEAR]),
               data_attr_disabled=CounterState.Sis_clear_pending),
        Div(id=TOAST_ID),
        id="content",
    )


def create_app(config: Optional[ApplicationConfig] = None, engine: Optional[CounterEngine] = None):
    """
    Build the FastHTML app serving one counter engine.

    ```python
    from counterflow.adapters.fasthtml import create_app
    app = create_app()
    ```
    """
    config = config or get_config()
    engine = engine or build_engine(config)

    app, rt = fast_app(
        debug=config.debug,
        pico=False,
        hdrs=(datastar_script,),
        secret_key=config.web.secret_key or secrets.token_hex(32),
    )
    app.state.counter_engine = engine

    dispatcher = CounterDispatcher(engine)
    dispatcher.include_actions(rt)

    @rt("/counter/state", methods=["GET"])
    def counter_state():
        return JSONResponse(engine.state.model_dump())

    @rt("/counter/live", methods=["GET"])
    def counter_live():
        return StreamingResponse(dispatcher.live_stream(), media_type="text/event-stream", headers=sse_headers())

    @rt("/", methods=["GET"])
    def index():
        return Title("Counter"), counter_page(engine)

    logger.info(f"Web adapter ready with {len(dispatcher.action_routes)} action routes")
    return app
