"""Junction ASGI application.

Mutable during setup (route registration, lifecycle hooks).
Frozen when the first ASGI scope arrives.
"""

import threading
from collections.abc import Callable, Mapping
from typing import Any

from junction._internal.asgi import Receive, Scope, Send
from junction._internal.invoke import resolve
from junction.config import AppConfig
from junction.routing.route import Producer
from junction.routing.router import Router
from junction.server.handler import handle_request


class App:
    """An ASGI 3.0 application serving one Router.

    Registration methods mirror :class:`Router` and refuse to run once
    the app has started serving, which is the point after which the
    route table is read concurrently::

        app = App()
        app.get("/user/:id", show_user)

        # uvicorn module:app

    Thread safety:
        The freeze flag is flipped under a Lock, since several ASGI
        worker threads can deliver first requests at once. Registering
        on ``app.router`` directly bypasses the check.
    """

    __slots__ = (
        "_freeze_lock",
        "_frozen",
        "_shutdown_hooks",
        "_startup_hooks",
        "config",
        "router",
    )

    def __init__(self, config: AppConfig | None = None, *, router: Router | None = None) -> None:
        self.config: AppConfig = config or AppConfig()
        self.router: Router = router if router is not None else Router()
        self._startup_hooks: list[Callable[[], Any]] = []
        self._shutdown_hooks: list[Callable[[], Any]] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

    # -- Route registration --

    def route(self, template: str, methods: Mapping[str, Producer]) -> None:
        """Register *template* for several methods at once."""
        self._check_not_frozen()
        self.router.route(template, methods)

    def get(self, template: str, producer: Producer) -> None:
        self._check_not_frozen()
        self.router.get(template, producer)

    def post(self, template: str, producer: Producer) -> None:
        self._check_not_frozen()
        self.router.post(template, producer)

    def put(self, template: str, producer: Producer) -> None:
        self._check_not_frozen()
        self.router.put(template, producer)

    def delete(self, template: str, producer: Producer) -> None:
        self._check_not_frozen()
        self.router.delete(template, producer)

    def patch(self, template: str, producer: Producer) -> None:
        self._check_not_frozen()
        self.router.patch(template, producer)

    # -- Lifecycle hooks --

    def on_startup(self, func: Callable[[], Any]) -> Callable[[], Any]:
        """Register a sync or async function to run at ASGI lifespan startup."""
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[[], Any]) -> Callable[[], Any]:
        """Register a sync or async function to run at ASGI lifespan shutdown."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        self._ensure_frozen()

        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        await handle_request(scope, receive, send, router=self.router, config=self.config)

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol: startup hooks, then shutdown hooks."""
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    await self._run_hooks(self._startup_hooks)
                except Exception as exc:
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                await self._run_hooks(self._shutdown_hooks)
                await send({"type": "lifespan.shutdown.complete"})
                return

    @staticmethod
    async def _run_hooks(hooks: list[Callable[[], Any]]) -> None:
        for hook in hooks:
            await resolve(hook())

    # -- Internal --

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _ensure_frozen(self) -> None:
        """Flip the frozen flag exactly once, with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = "Cannot modify the app after it has started serving."
            raise RuntimeError(msg)
