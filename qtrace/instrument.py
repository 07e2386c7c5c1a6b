"""instrument.py - ``q()`` and ``@trace``, the call-site front-end.

Both resolve the caller's file, function and line from the frame stack and
hand them to the shared Logger (see ``core.get_logger()``).

Usage::

    from qtrace import q, trace

    q()                             # >
    q(name)                         # > 'SteadBytes'
    q(total, expr="price * qty")    # > price * qty = 12.5
    greeting = q(hello(name))       # q() returns its argument

    @trace
    def hello(name):
        return f"Hello, {name}!"

    hello("world")                  # > hello(name='world') = 'Hello, world!'

Python can't recover the source text of an argument without reading the
source file, so the expression form of ``q()`` takes the text explicitly via
``expr=``. ``@trace`` builds its own expression text from the function's
qualified name and bound arguments.
"""

import inspect
from functools import wraps
from typing import Any, Callable, Optional

from .callsite import caller
from .core import get_logger


def q(*values: Any, expr: Optional[str] = None) -> Any:
    """Log a marker, a literal or an expression at the caller's line.

    - ``q()`` logs ``>`` and returns ``None``.
    - ``q(value)`` logs ``> repr(value)`` and returns ``value``.
    - ``q(value, expr="text")`` logs ``> text = repr(value)``.
    - ``q(a, b, ...)`` logs the tuple ``(a, b, ...)`` and returns it.

    Raises:
        TypeError: If ``expr`` is given without a value.
        SinkWriteError: If the shared logger's sink can't be written.
    """
    site = caller()
    log = get_logger()

    if not values:
        if expr is not None:
            raise TypeError("q() got expr= without a value to log")
        log.log_marker(site)
        return None

    value = values[0] if len(values) == 1 else values
    if expr is None:
        log.log_literal(value, site)
    else:
        log.log_expr(value, expr, site)
    return value


def _call_text(func: Callable, args: tuple, kwargs: dict) -> str:
    """Render ``func(arg=value, ...)`` for the expression line."""
    try:
        bound = inspect.signature(func).bind(*args, **kwargs)
        bound.apply_defaults()
        arg_str = ", ".join(f"{k}={v!r}" for k, v in bound.arguments.items())
    except (TypeError, ValueError):
        # No signature (C extensions) or arguments that don't bind.
        arg_str = "..."
    return f"{func.__qualname__}({arg_str})"


def trace(func: Callable) -> Callable:
    """Decorator that logs each call of ``func`` as an expression line.

    The line is written after ``func`` returns, at the line that called it::

        > Calc.multiply(self=<Calc object at 0x...>, x=2, y=3) = 6

    Args:
        func: The callable to wrap. Regular functions and methods only.

    Returns:
        A wrapped callable with the same name and docstring as ``func``.

    Raises:
        Whatever ``func`` raises, unchanged. Nothing is logged in that case.
    """

    @wraps(func)
    def wrapper(*args, **kwargs):
        site = caller()
        text = _call_text(func, args, kwargs)
        result = func(*args, **kwargs)
        get_logger().log_expr(result, text, site)
        return result

    return wrapper
