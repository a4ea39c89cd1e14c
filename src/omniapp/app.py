"""omniapp application class — the lifecycle controller.

Owns the process-wide state of one application (config, start time,
initialized flag, middleware chain) and drives every request through::

    init → run → call → dispatch → {stop | pass | not found | error} → shutdown

Handlers leave early by raising signals (``Stop``, ``Pass``); ``call()``
translates them into an ``Outcome`` in exactly one place and interprets
that outcome with an exhaustive ``match``.

Process model:
    One App is shared by every request its process serves. Config, routes
    and middleware are mutated during setup only and must be treated as
    read-only once ``run()`` starts. The capture buffer and the output sink
    are per request but not per task: the core is not request-isolated.
"""

from __future__ import annotations

import atexit
import logging
import os
import sys
import time
import warnings
from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager, nullcontext
from enum import Enum
from typing import TYPE_CHECKING, Any, NoReturn, TextIO, assert_never

from omniapp.buffer import OutputBuffer
from omniapp.config import AppConfig, ConfigLike, coerce_config
from omniapp.dispatch import Dispatcher
from omniapp.errors import ConfigurationError, Pass, Signal, Stop
from omniapp.events import EventBus, EventHandler
from omniapp.http.request import Request
from omniapp.middleware.builtin import RunTime
from omniapp.middleware.chain import MiddlewareChain
from omniapp.middleware.protocol import Middleware
from omniapp.mode import Mode, detect_mode
from omniapp.outcome import Completed, Failed, Missed, Outcome, Passed
from omniapp.output import ConsoleOutput, HTTPResponse, Output
from omniapp.routing.route import Route, RouteMatch
from omniapp.routing.router import Router
from omniapp.server.asgi import Receive, Scope, Send, send_response
from omniapp.server.errors import format_fatal_line, log_failure

if TYPE_CHECKING:
    from kida import Environment

logger = logging.getLogger("omniapp.app")

NOT_FOUND_TEXT = "Page not found"
ERROR_TEXT = "Error occurred"


class AppState(Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    RUNNING = "running"
    DISPATCHING = "dispatching"
    STOPPED = "stopped"
    NOT_FOUND = "not_found"
    ERRED = "erred"
    SHUT_DOWN = "shut_down"


class App:
    """The omniapp application.

    Usage::

        app = App(mode=Mode.CLI)
        app.init({"debug": False})

        @app.route("/hello/{name}")
        def hello(name: str) -> str:
            return f"Hello, {name}!"

        app.run(argv=["prog", "hello", "world"])

    Debug mode and the error handler are mutually exclusive: with
    ``debug=True`` a handler failure propagates out of ``run()`` and no
    response is produced; with ``debug=False`` it becomes a 500 rendered
    by the registered error handler (or a fallback line).
    """

    __slots__ = (
        "_argv",
        "_config_routes",
        "_excepthook",
        "_fatal",
        "_initialized",
        "_middleware_factories",
        "_output_sent",
        "_previous_excepthook",
        "_shut_down",
        "_shutdown_registered",
        "_start_time",
        "_stream",
        "_view_env",
        "buffer",
        "chain",
        "config",
        "dispatcher",
        "events",
        "mode",
        "output_sink",
        "request",
        "router",
        "state",
    )

    def __init__(
        self,
        config: ConfigLike = None,
        *,
        mode: Mode | None = None,
        stream: TextIO | None = None,
    ) -> None:
        self.config: AppConfig = coerce_config(config)
        self.mode: Mode = mode or detect_mode()
        self.events = EventBus()
        self.router = Router()
        self.dispatcher = Dispatcher(self)
        self.buffer = OutputBuffer()
        self.chain = MiddlewareChain(self, terminal=self.call)
        self.output_sink: Output = self._new_sink()
        self.request: Request | None = None
        self.state = AppState.UNINITIALIZED

        self._middleware_factories: dict[str, Callable[[], Middleware]] = {}
        self._config_routes: list[Route] = []
        self._argv: list[str] | None = None
        self._stream = stream
        self._view_env: Environment | None = None
        self._start_time: float | None = None
        self._initialized = False
        self._shutdown_registered = False
        self._shut_down = False
        self._excepthook: Any = None
        self._previous_excepthook: Any = None
        self._fatal: BaseException | None = None
        self._output_sent = False

    # -- Process state --

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def start_time(self) -> float | None:
        """Wall-clock time recorded by ``init()``."""
        return self._start_time

    def run_time(self) -> str:
        """Seconds since ``init()``, formatted with six decimals."""
        if self._start_time is None:
            msg = "App has not initialized"
            raise ConfigurationError(msg)
        return f"{time.time() - self._start_time:.6f}"

    # -- Setup --

    def init(self, config: ConfigLike = None, *, reinit: bool = False) -> None:
        """Initialize the app: config, default middleware, start time.

        A second call raises ``ConfigurationError`` unless ``reinit=True``,
        in which case config, middleware and config routes are discarded
        and rebuilt.
        """
        if self._initialized:
            if not reinit:
                msg = "App is already initialized. Pass reinit=True to reset it."
                raise ConfigurationError(msg)
            logger.warning("Re-initializing app; previous config and middleware are discarded")
            for route in self._config_routes:
                self.router.discard(route)
            self._config_routes.clear()

        self.events.fire("init")

        if config is not None:
            self.config = coerce_config(config)

        for path, handler in self.config.route.items():
            self._config_routes.append(self.router.on(path, handler))
        for name, controller in self.config.controllers.items():
            self.dispatcher.register(name, controller)

        if self.config.timezone:
            _apply_timezone(self.config.timezone)

        if not self._shutdown_registered:
            atexit.register(self.shutdown)
            self._shutdown_registered = True
        if self.config.error:
            self._install_excepthook()

        self._start_time = time.time()

        self.chain = MiddlewareChain(self, terminal=self.call)
        self.chain.prepend(RunTime())
        self._view_env = None

        self._initialized = True
        self.state = AppState.INITIALIZED
        logger.debug("app initialized (mode=%s)", self.mode.value)

    def add(self, middleware: Middleware | type | str) -> Middleware:
        """Wrap the current chain in *middleware*.

        Accepts a middleware instance or function, a class (constructed
        with no arguments), or a name registered with
        ``register_middleware()``. Must be called after ``init()``.
        """
        if not self._initialized:
            msg = "Cannot add middleware before init(). Call app.init() first."
            raise ConfigurationError(msg)
        unit = self._build_middleware(middleware)
        self.chain.prepend(unit)
        return unit

    def register_middleware(self, name: str, factory: Callable[[], Middleware]) -> None:
        """Make ``app.add(name)`` construct middleware through *factory*."""
        self._middleware_factories[name] = factory

    def map(self, path: str, handler: Any, *, name: str | None = None) -> Route:
        """Map a path pattern to a handler (callable or controller reference)."""
        return self.router.on(path, handler, name=name)

    def route(self, path: str, *, name: str | None = None) -> Callable[[Any], Any]:
        """Register a route handler via decorator."""

        def decorator(handler: Any) -> Any:
            self.map(path, handler, name=name)
            return handler

        return decorator

    def controller(self, name: str) -> Callable[[type], type]:
        """Register a named controller via decorator."""

        def decorator(cls: type) -> type:
            self.dispatcher.register(name, cls)
            return cls

        return decorator

    def on(self, event: str, handler: EventHandler | None = None) -> Any:
        """Attach an event handler. Without *handler*, works as a decorator."""
        if handler is not None:
            return self.events.attach(event, handler)

        def decorator(func: EventHandler) -> EventHandler:
            return self.events.attach(event, func)

        return decorator

    def register_not_found(self, handler: Any) -> None:
        """Set the handler rendered for requests no route can serve."""
        self.router.register_not_found(handler)

    def register_error(self, handler: Any) -> None:
        """Set the handler rendered for failures. It receives the error."""
        self.router.register_error(handler)

    # -- Request lifecycle --

    def run(self, request: Request | None = None, *, argv: list[str] | None = None) -> Output:
        """Handle one request end to end and return its output sink.

        In console mode the body is also written to the app's stream.
        """
        if not self._initialized:
            msg = "App has not initialized. Call app.init() before app.run()."
            raise ConfigurationError(msg)

        self.request = request
        self._argv = argv
        self.output_sink = self._new_sink()
        self._output_sent = False
        self.state = AppState.RUNNING

        self.events.fire("run")

        with self._error_bridge():
            try:
                self.chain.invoke_head()
            except Signal as signal:
                # A middleware stopped the request outside call()'s boundary.
                logger.debug("%s raised by middleware", type(signal).__name__)

        if self.mode is Mode.CLI:
            self._write_stream(self.output_sink.flush().decode(self.output_sink.charset))

        self.events.fire("end")
        return self.output_sink

    def call(self) -> Outcome:
        """Resolve the request path, dispatch, and settle the outcome.

        The terminal step of the middleware chain.
        """
        path = self.path()
        candidates = self.router.matches(path)

        self.events.fire("start")
        self.state = AppState.DISPATCHING

        outcome = self._dispatch_candidates(candidates)
        if isinstance(outcome, Missed):
            logger.debug("404 %s", path)
            outcome = self._guarded(self.trigger_not_found)

        match outcome:
            case Completed(body=body):
                self.output_sink.write(body)
                if self.state is AppState.DISPATCHING:
                    self.state = AppState.STOPPED
                self.events.fire("stop")
            case Failed(error=error):
                self.state = AppState.ERRED
                if self.config.debug:
                    self.events.fire("exception")
                    raise error
                log_failure(error, path)
                try:
                    self.trigger_error(error)
                except Stop:
                    pass
                self.events.fire("exception")
            case Missed() | Passed():
                # Only reachable when the not-found handler itself passed.
                self.output_sink.set_status(404)
                self.events.fire("stop")
            case _:
                assert_never(outcome)

        return outcome

    def path(self) -> str:
        """The path this request routes on.

        Console: ``"/" + "/".join(argv[1:])``. HTTP: the request path.
        """
        if self.mode is Mode.CLI:
            argv = self._argv if self._argv is not None else sys.argv
            return "/" + "/".join(argv[1:])
        if self.request is None:
            msg = "HTTP mode needs a Request. Pass one to app.run()."
            raise ConfigurationError(msg)
        return self.request.path

    def dispatch(self, handler: Any, params: tuple[Any, ...] = ()) -> bool:
        """Invoke *handler* with *params*; False when it is not dispatchable."""
        return self.dispatcher.dispatch(handler, params)

    def _dispatch_candidates(self, candidates: Iterator[RouteMatch]) -> Outcome:
        passes = 0
        for match in candidates:
            outcome = self._guarded(lambda m=match: self.dispatch(m.handler, m.params))
            if not isinstance(outcome, Passed):
                return outcome
            passes += 1
            if passes >= self.config.pass_limit:
                logger.debug("pass limit (%d) reached", self.config.pass_limit)
                break
        return Missed()

    def _guarded(self, step: Callable[[], bool | None]) -> Outcome:
        """Run *step* inside a fresh capture scope and classify how it ended."""
        with self.buffer.capture() as captured:
            try:
                if step() is False:
                    return Missed()
            except Stop:
                pass
            except Pass:
                return Passed()
            except ConfigurationError:
                raise
            except Exception as exc:
                return Failed(exc)
            return Completed(captured.getvalue())

    # -- Signals and terminal responses --

    def stop(self) -> NoReturn:
        """End the request now, keeping the output captured so far."""
        raise Stop

    def pass_(self) -> NoReturn:
        """Skip this route: discard its output and fall through to the next match."""
        self.buffer.clean()
        raise Pass

    def trigger_not_found(self) -> NoReturn:
        """Render the not-found handler (or fallback text) with status 404."""
        self.state = AppState.NOT_FOUND
        self._output_sent = False
        self.buffer.clean()
        with self.buffer.capture() as captured:
            handler = self.router.not_found_handler
            try:
                if handler is None or not self.dispatch(handler):
                    self.buffer.write(NOT_FOUND_TEXT)
            except Stop:
                # A handler that called output() has already chosen the response.
                if self._output_sent:
                    raise
        self.output(404, captured.getvalue())

    def trigger_error(self, error: BaseException | None = None) -> NoReturn:
        """Render the error handler (or fallback text) with status 500."""
        self._output_sent = False
        self.buffer.clean()
        with self.buffer.capture() as captured:
            handler = self.router.error_handler
            try:
                if handler is None or not self.dispatch(handler, (error,)):
                    self.buffer.write(ERROR_TEXT)
            except Stop:
                if self._output_sent:
                    raise
        self.output(500, captured.getvalue())

    def output(self, status: int, data: str | bytes) -> NoReturn:
        """Replace the response with *data* and *status*, then stop.

        The single exit gate for terminal responses. Pending captured
        output is discarded first.
        """
        self.buffer.clean()
        sink = self.output_sink
        if self.mode is Mode.HTTP:
            sink.set_content_type("text/plain")
        sink.clear()
        sink.write(data)
        sink.set_status(status)
        self._output_sent = True
        raise Stop

    # -- Emitting output --

    def echo(self, text: str) -> None:
        """Write *text* to the current capture scope, or straight to the sink."""
        if not self.buffer.write(text):
            self.output_sink.write(text)

    def render(self, template: str, /, **params: Any) -> None:
        """Render a kida template from ``config.views`` into the current scope."""
        from omniapp.views import create_environment, render_template

        if self._view_env is None:
            self._view_env = create_environment(self.config)
        self.echo(render_template(self._view_env, template, params))

    # -- Shutdown --

    def shutdown(self) -> None:
        """Last step of the process. Registered with ``atexit`` by ``init()``.

        Removes the process exception hook and the ``atexit`` registration,
        then reports a fatal error recorded by that hook when the ``error``
        flag is set. Runs once.
        """
        if self._shut_down:
            return
        self._shut_down = True
        self._release_process_hooks()

        self.events.fire("shutdown")
        if not self._initialized:
            return
        self.state = AppState.SHUT_DOWN

        if self.config.error and self._fatal is not None:
            self.buffer.reset()
            self.output_sink.clear()
            self._write_stream(format_fatal_line(self._fatal) + "\n")

    def record_fatal(self, exc: BaseException) -> None:
        """Remember an exception that is about to end the process."""
        if isinstance(exc, (KeyboardInterrupt, SystemExit)):
            return
        self._fatal = exc

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Handles lifespan directly, runs HTTP scopes through ``run()``.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        if scope["type"] != "http":
            return

        if self.mode is not Mode.HTTP:
            msg = "ASGI requests need an App created with mode=Mode.HTTP."
            raise ConfigurationError(msg)

        # The core is synchronous: run() blocks the event loop for the whole request.
        response = self.run(Request.from_asgi(scope))
        assert isinstance(response, HTTPResponse)
        await send_response(response, send)

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Initialize at startup (if needed), shut down at shutdown."""
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    if not self._initialized:
                        self.init()
                except Exception as exc:
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                self.shutdown()
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _new_sink(self) -> Output:
        return HTTPResponse() if self.mode is Mode.HTTP else ConsoleOutput()

    def _build_middleware(self, ref: Middleware | type | str) -> Middleware:
        if isinstance(ref, str):
            factory = self._middleware_factories.get(ref)
            if factory is None:
                msg = f"No middleware registered under {ref!r}."
                raise ConfigurationError(msg)
            return factory()
        if isinstance(ref, type):
            return ref()
        if callable(ref):
            return ref
        msg = f"{ref!r} is not a middleware (expected a callable, class, or registered name)."
        raise ConfigurationError(msg)

    def _error_bridge(self) -> AbstractContextManager[object]:
        if not self.config.error:
            return nullcontext()
        return _warnings_as_errors()

    def _install_excepthook(self) -> None:
        if self._excepthook is not None:
            return
        previous = sys.excepthook

        def hook(exc_type: type[BaseException], exc: BaseException, tb: Any) -> None:
            self.record_fatal(exc)
            previous(exc_type, exc, tb)

        sys.excepthook = hook
        self._excepthook = hook
        self._previous_excepthook = previous

    def _release_process_hooks(self) -> None:
        """Undo what init() registered process-wide, so the app can be collected."""
        if self._shutdown_registered:
            atexit.unregister(self.shutdown)
            self._shutdown_registered = False
        if self._excepthook is not None:
            # A hook installed on top of ours stays in place.
            if sys.excepthook is self._excepthook:
                sys.excepthook = self._previous_excepthook
            self._excepthook = None
            self._previous_excepthook = None

    def _write_stream(self, text: str) -> None:
        if not text:
            return
        stream = self._stream if self._stream is not None else sys.stdout
        stream.write(text)
        stream.flush()


@contextmanager
def _warnings_as_errors() -> Iterator[None]:
    """Raise warnings as exceptions for the duration of the block."""
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        yield


def _apply_timezone(name: str) -> None:
    os.environ["TZ"] = name
    if hasattr(time, "tzset"):
        time.tzset()
