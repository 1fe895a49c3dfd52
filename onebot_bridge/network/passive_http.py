"""
Passive HTTP Server Adapter
===========================

Serves the action registry over HTTP. Every method is accepted on
``/<action>[/...]``; the first path segment names the action.

REQUEST FLOW:
-------------
  CORS ──► request context ──► body parse (400) ──► auth gate (403)
       ──► state check ──► normalize ──► dispatch ──► JSON envelope (200)

LIFECYCLE:
----------
  STOPPED ── open() ──► LISTENING ── close() ──► STOPPED

close() releases the listening socket right away. Connections accepted
before it keep running on uvicorn's graceful shutdown in the background;
wait_closed() waits for them.

The listener is an embedded uvicorn server running as an asyncio task on a
socket bound by the adapter itself, so a bind failure is an ordinary OSError
that open() logs instead of uvicorn exiting the process.

The adapter is receive-only; it never pushes events.
"""

import asyncio
import logging
import socket
import time
from contextlib import contextmanager
from typing import Any, Optional, Union

import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.middleware.base import BaseHTTPMiddleware

from onebot_bridge.application.actions import ActionMap
from onebot_bridge.config.logging_config import adapter_name_var, correlation_id_var
from onebot_bridge.config.network_config import HttpServerConfig
from onebot_bridge.config.settings import Config
from onebot_bridge.domain.exceptions import MalformedPayloadError
from onebot_bridge.network.base import AdapterState, NetworkAdapter, NetworkReloadType
from onebot_bridge.network.pipeline import (
    action_name_from_path,
    authorize,
    check_body_size,
    dispatch_action,
    is_form_body,
    normalize_payload,
    parse_body,
    server_closed_envelope,
)
from onebot_bridge.network.reload import plan_reload
from onebot_bridge.observability.metrics import (
    RejectionReason,
    increment_rejection,
    observe_action,
    set_adapter_listening,
)

logger = logging.getLogger(__name__)

LOG_PREFIX = "[OneBot] [HTTP Server Adapter]"
ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Middleware to set correlation ID and adapter name for logging."""

    def __init__(self, app, adapter_name: str):
        super().__init__(app)
        self.adapter_name = adapter_name

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get("X-Correlation-ID", "NO Correlation ID")
        correlation_id_var.set(correlation_id)
        adapter_name_var.set(self.adapter_name)

        response = await call_next(request)

        response.headers["X-Correlation-ID"] = correlation_id
        return response


class _EmbeddedServer(uvicorn.Server):
    """uvicorn server that leaves process signals to the owning process."""

    @contextmanager
    def capture_signals(self):
        yield


def _bind_socket(host: str, port: int) -> socket.socket:
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
    except OSError:
        sock.close()
        raise
    sock.set_inheritable(True)
    return sock


def _clone_config(config: Union[HttpServerConfig, dict[str, Any]]) -> HttpServerConfig:
    """Copy caller-owned config so later mutation on their side cannot leak in."""
    if isinstance(config, HttpServerConfig):
        return config.model_copy(deep=True)
    return HttpServerConfig.model_validate(config)


def create_passive_http_app(adapter: "PassiveHttpAdapter") -> FastAPI:
    """
    Build the ASGI app served by an adapter.

    Docs and OpenAPI routes are disabled so that every path reaches dispatch.
    """
    app = FastAPI(
        title=f"OneBot HTTP adapter {adapter.name}",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    app.add_middleware(RequestContextMiddleware, adapter_name=adapter.name)

    # CORS is the outermost layer
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.api_route("/{path:path}", methods=ALL_METHODS)
    async def handle(request: Request):
        # One config snapshot per request; a reload swaps the adapter's reference
        config = adapter.config

        try:
            raw = await request.body()
            if is_form_body(request.headers.get("content-type")):
                check_body_size(raw, Config.MAX_BODY_BYTES)
                # Starlette replays the cached body into the form parser
                body = dict(await request.form())
            else:
                body = parse_body(raw, Config.MAX_BODY_BYTES)
        except MalformedPayloadError as e:
            increment_rejection(adapter.name, RejectionReason.MALFORMED_BODY)
            return PlainTextResponse(e.message, status_code=400)

        if not authorize(
            config.token,
            request.query_params.get("access_token"),
            request.headers.get("authorization"),
        ):
            increment_rejection(adapter.name, RejectionReason.AUTH)
            return JSONResponse(
                status_code=403, content={"message": "token verify failed!"}
            )

        envelope = await adapter.handle_request(
            request.method, request.url.path, dict(request.query_params), body
        )
        return JSONResponse(content=jsonable_encoder(envelope))

    return app


class PassiveHttpAdapter(NetworkAdapter):
    """HTTP server adapter: clients call actions, nothing is pushed back."""

    def __init__(
        self,
        name: str,
        config: Union[HttpServerConfig, dict[str, Any]],
        actions: ActionMap,
    ):
        super().__init__(name, _clone_config(config), actions)
        self._app: Optional[FastAPI] = None
        self._server: Optional[_EmbeddedServer] = None
        self._serve_task: Optional[asyncio.Task] = None
        self._socket: Optional[socket.socket] = None
        self._lock = asyncio.Lock()
        # Bumped by every close(); an open() that sees it change aborts
        self._close_requests = 0
        self._draining: set[asyncio.Task] = set()

    @property
    def bound_port(self) -> Optional[int]:
        """Port the listener is bound to (resolves a configured port 0)."""
        if self._socket is None:
            return None
        return self._socket.getsockname()[1]

    # ==================== LIFECYCLE ====================

    async def open(self) -> None:
        close_requests = self._close_requests
        async with self._lock:
            if self.is_listening:
                logger.error(
                    f"{LOG_PREFIX} {self.name} is already listening on port {self.bound_port}"
                )
                return

            try:
                await self._start_server()
            except Exception as e:
                logger.error(f"{LOG_PREFIX} Boot Error: {e}")
                await self._stop_server()
                return

            if self._close_requests != close_requests:
                logger.info(f"{LOG_PREFIX} {self.name} closed while starting")
                await self._stop_server()
                return

            self.state = AdapterState.LISTENING
            set_adapter_listening(self.name, True)
            logger.info(f"{LOG_PREFIX} Start On Port {self.bound_port}")

    async def close(self) -> None:
        """
        Stop accepting connections and release the listener.

        Returns once the listening socket is closed; requests already running
        finish in the background (see wait_closed).
        """
        self._close_requests += 1
        # Requests already inside the app see STOPPED from here on
        self.state = AdapterState.STOPPED
        set_adapter_listening(self.name, False)

        async with self._lock:
            if self._server is None:
                return
            await self._stop_server()
            logger.info(f"{LOG_PREFIX} {self.name} closed")

    async def reload(
        self, new_config: Union[HttpServerConfig, dict[str, Any]]
    ) -> NetworkReloadType:
        was_listening = self.is_listening
        old_config = self.config
        self.config = _clone_config(new_config)

        plan = plan_reload(was_listening, old_config, self.config)
        if plan.close:
            await self.close()
        if plan.open:
            await self.open()

        logger.info(f"{LOG_PREFIX} {self.name} reloaded: {plan.outcome.value}")
        return plan.outcome

    async def _start_server(self) -> None:
        self._socket = _bind_socket(self.config.host, self.config.port)
        self._app = create_passive_http_app(self)

        server_config = uvicorn.Config(
            self._app,
            host=self.config.host,
            port=self.config.port,
            lifespan="off",
            log_config=None,
            timeout_graceful_shutdown=Config.GRACEFUL_SHUTDOWN_TIMEOUT,
        )
        self._server = _EmbeddedServer(server_config)
        self._serve_task = asyncio.create_task(self._server.serve(sockets=[self._socket]))

        while not self._server.started:
            if self._serve_task.done():
                # Re-raises whatever stopped uvicorn during startup
                self._serve_task.result()
                raise RuntimeError("HTTP server exited during startup")
            await asyncio.sleep(0.01)

    async def _stop_server(self) -> None:
        server, task, sock = self._server, self._serve_task, self._socket
        self._server = None
        self._serve_task = None
        self._socket = None
        self._app = None

        if server is not None:
            server.should_exit = True
            # Stop accepting now; uvicorn only notices should_exit on its next tick
            for listener in getattr(server, "servers", []):
                listener.close()
        if sock is not None:
            sock.close()

        if task is not None and not task.done():
            self._draining.add(task)
            task.add_done_callback(self._on_drained)

    def _on_drained(self, task: asyncio.Task) -> None:
        self._draining.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"{LOG_PREFIX} Shutdown Error: {exc}")

    async def wait_closed(self) -> None:
        """Wait until connections accepted before close() have drained."""
        if self._draining:
            await asyncio.gather(*self._draining, return_exceptions=True)

    # ==================== REQUESTS ====================

    async def handle_request(
        self,
        method: str,
        path: str,
        query: dict[str, Any],
        body: dict[str, Any],
    ) -> dict[str, Any]:
        """Dispatch an authorized request; always returns an envelope."""
        if not self.is_listening:
            logger.info(f"{LOG_PREFIX} Server is closed")
            increment_rejection(self.name, RejectionReason.SERVER_CLOSED)
            return server_closed_envelope()

        payload = normalize_payload(method, query, body)
        action_name = action_name_from_path(path)

        started = time.perf_counter()
        envelope = await dispatch_action(self.actions, action_name, payload, self.name)
        observe_action(
            self.name,
            action_name if action_name in self.actions else "unsupported",
            str(envelope.get("status", "unknown")),
            time.perf_counter() - started,
        )
        return envelope
