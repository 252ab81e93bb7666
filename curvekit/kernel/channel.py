"""
Named message channels.

The geometry modules never print. Anything worth reporting (a bisection running out of iterations, a flattener
hitting its step floor, radii that had to be enlarged) is sent to a named channel, and applications decide what
to do with it by watching that channel:

    from curvekit.kernel import channel
    channel("flatten").watch(print)

A channel nobody watches and which keeps no buffer evaluates to False, so the senders check it before formatting
anything:

    chan = channel("flatten")
    if chan:
        chan(f"step floor reached at t={t}")
"""
import weakref
from collections import deque
from datetime import datetime
from typing import Callable, Dict, Optional, Union

MAX_DEPTH = 10


class SimpleLogger:
    """Last resort output for problems of the channels themselves."""

    def __init__(self, name: str):
        self.name = name

    def log(self, message: str):
        print(f"[{self.name}-Info] {message}")

    def warning(self, message: str):
        print(f"[{self.name}-Warning] {message}")


logger = SimpleLogger(__name__)


class Channel:
    """
    A channel delivers every message to its watchers in the order they were added.

    Watchers are plain callables taking the message. They can be held by weak reference, in which case they
    disappear from the channel once collected. A watcher raising an exception is reported to the module logger
    and does not stop delivery to the others. A watcher sending into the channel it is watching is cut off after
    MAX_DEPTH nested deliveries.

    With a buffer_size the last messages are kept and replayed to watchers added later. Text messages are
    indented by default, and line_end and timestamp decorate them further unless the channel is pure. Bytes are
    delivered untouched.

    Channels are not safe for simultaneous writers from several threads.
    """

    def __init__(
        self,
        name: str,
        buffer_size: int = 0,
        line_end: Optional[str] = None,
        timestamp: bool = False,
        pure: bool = False,
    ):
        self.name = name
        self.watchers = []
        self.greet = None
        self.line_end = line_end
        self.timestamp = timestamp
        self.pure = pure
        self.buffer_size = buffer_size
        self.buffer = deque(maxlen=buffer_size) if buffer_size else None
        self._depth = 0

    def __repr__(self):
        return f"Channel({self.name!r}, buffer_size={self.buffer_size}, line_end={self.line_end!r})"

    def __call__(self, message: Union[str, bytes, bytearray], *args, indent: bool = True, **kwargs):
        if self._depth > MAX_DEPTH:
            logger.warning(f"Channel '{self.name}' is sending to itself, message dropped")
            return
        self._depth += 1
        try:
            if isinstance(message, str) and not self.pure:
                message = self._decorate(message, indent)
            for watcher in list(self.watchers):
                self._deliver(watcher, message)
            if self.buffer is not None:
                self.buffer.append(message)
        finally:
            self._depth -= 1

    def _decorate(self, message, indent):
        if self.line_end is not None:
            message += self.line_end
        if indent:
            message = "    " + message.replace("\n", "\n    ")
        if self.timestamp:
            stamp = datetime.now().strftime("[%H:%M:%S] ")
            message = stamp + message.replace("\n", "\n" + stamp)
        return message

    def __len__(self):
        return self.buffer_size

    def __iadd__(self, other):
        self.watch(other)
        return self

    def __isub__(self, other):
        self.unwatch(other)
        return self

    def __bool__(self):
        return bool(self.watchers) or self.buffer_size != 0

    def _find(self, monitor_function):
        for w in self.watchers:
            if w is monitor_function or (isinstance(w, weakref.ref) and w() is monitor_function):
                yield w

    def watch(self, monitor_function: Callable, weak: bool = False):
        """
        Deliver the messages of this channel to monitor_function. Adding the same function twice has no effect.

        The greeting, if any, and the buffered messages are sent to the new watcher right away.
        """
        if any(True for _ in self._find(monitor_function)):
            return
        watcher = monitor_function
        if weak:
            try:
                watcher = weakref.ref(monitor_function, self._forget)
            except TypeError:
                logger.warning(f"{monitor_function} cannot be weakly referenced, kept strongly")
        self.watchers.append(watcher)

        if self.greet is not None:
            self._deliver(monitor_function, str(self.greet))
        if self.buffer is not None:
            for line in list(self.buffer):
                self._deliver(monitor_function, line)

    def unwatch(self, monitor_function: Callable):
        found = list(self._find(monitor_function))
        if not found:
            logger.warning(f"{monitor_function} does not watch channel '{self.name}'")
        for w in found:
            self.watchers.remove(w)

    def _deliver(self, watcher, message):
        if isinstance(watcher, weakref.ref):
            target = watcher()
            if target is None:
                self._forget(watcher)
                return
        else:
            target = watcher
        try:
            target(message)
        except Exception as e:
            logger.warning(f"Watcher of channel '{self.name}' failed: {type(e).__name__}: {e}")

    def _forget(self, ref):
        if ref in self.watchers:
            self.watchers.remove(ref)

    def resize_buffer(self, new_size: int):
        """Keep the last new_size messages from now on, 0 stops buffering."""
        if new_size == 0:
            self.buffer = None
        elif self.buffer is None:
            self.buffer = deque(maxlen=new_size)
        else:
            self.buffer = deque(self.buffer, maxlen=new_size)
        self.buffer_size = new_size


_channels: Dict[str, Channel] = {}


def channel(name: str, *args, **kwargs) -> Channel:
    """
    The channel of that name, created with the given arguments on first use. Every later call returns the same
    object, so watchers added by an application hear what the geometry modules send.
    """
    chan = _channels.get(name)
    if chan is None:
        chan = _channels[name] = Channel(name, *args, **kwargs)
    elif isinstance(kwargs.get("timestamp"), bool):
        chan.timestamp = kwargs["timestamp"]
    return chan


def channels():
    """Names of the channels opened so far."""
    return list(_channels)
