# src/tasklist/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
import queue
import threading

from ..cli.commands import add_text
from ..cli.commands import registry as command_registry
from ..cli.render import render_board
from ..core.ports import ConsoleIO
from ..core.state import AppState

logger = logging.getLogger(__name__)

PROMPT = "> "


class StdConsoleIO:
    """ConsoleIO on stdin/stdout."""

    def emit(self, text: str) -> None:
        print(text, flush=True)

    def confirm(self, question: str) -> bool:
        try:
            ans = input(f"{question} [y/N]: ").strip().lower()
        except EOFError:
            return False
        return ans in ("y", "yes")


class _LineReader:
    """
    Reads stdin lines on a daemon thread, one line per request.

    The thread only calls input() while a readline() is awaiting, so a
    synchronous confirm() on the loop thread never races it for stdin.
    Being a daemon, a thread still blocked in input() does not hold up exit.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop
        self._requests: queue.Queue[tuple[str, asyncio.Future[str]]] = queue.Queue()
        self._thread = threading.Thread(target=self._run, name="console-reader", daemon=True)
        self._thread.start()

    def _run(self) -> None:
        while True:
            prompt, fut = self._requests.get()
            try:
                line = input(prompt)
            except Exception as e:
                # EOF (or a closed stdin): hand it to the awaiting coroutine and stop reading.
                self._loop.call_soon_threadsafe(_fail, fut, e)
                return
            self._loop.call_soon_threadsafe(_resolve, fut, line)

    async def readline(self, prompt: str) -> str:
        fut: asyncio.Future[str] = self._loop.create_future()
        self._requests.put((prompt, fut))
        return await fut


def _resolve(fut: asyncio.Future[str], line: str) -> None:
    if not fut.done():
        fut.set_result(line)


def _fail(fut: asyncio.Future[str], exc: Exception) -> None:
    if not fut.done():
        fut.set_exception(exc)


def handle_line(state: AppState, line: str, io: ConsoleIO) -> str | None:
    """
    Turn one input line into a reply.

    Commands go through the registry; any other non-empty line becomes a new task.
    """
    line = line.strip()
    if not line:
        return None

    try:
        reply = command_registry.handle(state, line, io)
        if reply is None:
            reply = add_text(state, line)
    except Exception:
        logger.exception("Command handler crashed.")
        reply = "Internal error while handling a command."
    return reply


async def _console_main(state: AppState, io: ConsoleIO) -> None:
    loop = asyncio.get_running_loop()
    reader = _LineReader(loop)

    def on_search_settled(_value: str) -> None:
        io.emit(render_board(state))

    state.filters.set_search_listener(on_search_settled)
    io.emit(render_board(state))

    try:
        while True:
            try:
                line = await reader.readline(PROMPT)
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break

            if line.strip().lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            reply = handle_line(state, line, io)
            if reply is not None:
                io.emit(reply)
    finally:
        # No dangling debounce timer once the console is gone.
        state.filters.set_search_listener(None)
        state.filters.close()


def run_console_loop(state: AppState, io: ConsoleIO | None = None) -> None:
    io = io or StdConsoleIO()
    logger.info("Console connector started (tasks=%s).", state.task_store.total)
    io.emit("Type a task to add it. Use /help for commands. Use /exit to quit.\n")

    try:
        asyncio.run(_console_main(state, io))
    except KeyboardInterrupt:
        io.emit("")
        logger.info("Console KeyboardInterrupt, exiting.")

    logger.info("Console connector finished.")
