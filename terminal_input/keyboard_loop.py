from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Optional, Protocol

from prompt_toolkit.input import Input
from prompt_toolkit.keys import Keys
from prompt_toolkit.output import Output

from terminal_input.keypress import (
    KeyEvent,
    KeypressSubscription,
    create_error_output,
    create_terminal_input,
)

logger = logging.getLogger(__name__)


class KeypressHandler(Protocol):
    """
    Protocol for the state machine driven by a ``KeyboardLoop``.
    """

    def on_start(self, loop: KeyboardLoop) -> None:
        """Called once, before the first keystroke. Renders the initial prompt."""
        ...

    def on_keypress(self, loop: KeyboardLoop, event: KeyEvent) -> None:
        """
        Called once per keystroke, in arrival order.

        This is the only place where the handler changes state. Call
        ``loop.resolve(result)`` to finish the loop.
        """
        ...


@dataclass
class LoopState:
    resolved: bool = False
    result: Any = None


class KeyboardLoop:
    """
    Runs a ``KeypressHandler`` against raw keystrokes until it resolves.

    ``start()`` suspends the calling coroutine without blocking the event
    loop; keystrokes are dispatched from the loop's reader callback.
    """

    def __init__(
        self,
        handler: KeypressHandler,
        input: Optional[Input] = None,
        output: Optional[Output] = None,
    ):
        self.handler = handler
        self.state = LoopState()
        self._input = input
        self._output = output
        self._subscription: Optional[KeypressSubscription] = None
        self._future: Optional[asyncio.Future] = None
        self._cursor_hidden = False
        self._interrupted = False

    @property
    def output(self) -> Output:
        if self._output is None:
            self._output = create_error_output()
        return self._output

    async def start(self) -> Any:
        """
        Renders the prompt and waits until the handler resolves.

        Returns:
            The value passed to ``resolve()``.

        Raises:
            KeyboardInterrupt: If Ctrl-C was pressed.
            EOFError: If the input was closed before the prompt resolved.
        """
        if self._future is not None:
            raise RuntimeError("KeyboardLoop.start() can only be called once.")

        input = self._input if self._input is not None else create_terminal_input()
        self._future = asyncio.get_running_loop().create_future()
        self._subscription = KeypressSubscription(input, self._on_input_ready)

        try:
            self._subscription.acquire()
            logger.debug("Keyboard loop started for %s.", type(self.handler).__name__)
            self.handler.on_start(self)
            self.output.flush()
            result = await self._future
        finally:
            self._subscription.release()
            if self._cursor_hidden:
                self.unhide_cursor()
            self.output.flush()

        if self._interrupted:
            logger.info("Prompt interrupted by user.")
            raise KeyboardInterrupt
        return result

    def resolve(self, result: Any = None) -> None:
        """
        Finishes the loop with ``result``.

        Releases the keypress subscription (restoring the terminal mode) and
        wakes up ``start()``. Calling it again after resolution does nothing.
        """
        if self.state.resolved:
            return
        self.state.resolved = True
        self.state.result = result
        if self._subscription is not None:
            self._subscription.release()
        if self._future is not None and not self._future.done():
            self._future.set_result(result)
        logger.debug("Keyboard loop resolved.")

    def hide_cursor(self) -> None:
        self._cursor_hidden = True
        self.output.hide_cursor()

    def unhide_cursor(self) -> None:
        self._cursor_hidden = False
        self.output.show_cursor()

    def _fail(self, error: BaseException) -> None:
        if self.state.resolved:
            return
        self.state.resolved = True
        if self._subscription is not None:
            self._subscription.release()
        if self._future is not None and not self._future.done():
            self._future.set_exception(error)

    def _on_input_ready(self) -> None:
        subscription = self._subscription
        if subscription is None or not subscription.active:
            return

        try:
            for event in subscription.drain():
                # Keys after the resolving one in the same batch are dropped.
                if self.state.resolved:
                    break
                if event.key_name == Keys.ControlC.value:
                    self._interrupt()
                    break
                self.handler.on_keypress(self, event)
        except Exception as e:
            logger.error(f"Keypress handler failed: {e}", exc_info=True)
            self._fail(e)
        finally:
            self.output.flush()

        if not self.state.resolved and subscription.closed:
            logger.info("Input stream closed before the prompt was answered.")
            self._fail(EOFError("Input stream closed."))

    def _interrupt(self) -> None:
        self._interrupted = True
        self.output.write_raw("\n")
        self.resolve(None)
