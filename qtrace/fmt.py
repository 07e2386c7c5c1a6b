"""fmt.py - Line formatting for qtrace output.

Output format::

    [20:05:32 app/payments.py app.payments.charge:42]
    >
    > 'a literal'
    > amount * rate = 12.5

The first line is a header and is only written when the Logger decides the
context changed. Every other line is a body line produced by one of
``marker()``, ``literal()`` or ``expr()``.

Values are rendered with ``repr()``, so strings come out quoted and
containers show their shape.
"""

from datetime import datetime
from typing import Any

from .callsite import CallSite


class Formatter:
    """Stateless builder for header and body lines.

    Every method is a pure function of its arguments, so one instance can be
    shared between threads without locking.
    """

    def header(self, now: datetime, call_site: CallSite) -> str:
        """Return the context header for a call at ``call_site`` at ``now``.

        Example:
            >>> from datetime import datetime
            >>> Formatter().header(
            ...     datetime(2020, 6, 22, 20, 5, 32),
            ...     CallSite("src/lib", "pkg::mod::func", 42),
            ... )
            '[20:05:32 src/lib pkg::mod::func:42]'
        """
        return (
            f"[{now.strftime('%H:%M:%S')} {call_site.file_path} "
            f"{call_site.function_path}:{call_site.line_number}]"
        )

    def marker(self) -> str:
        return ">"

    def literal(self, value: Any) -> str:
        """Return a body line for a literal value.

        Example:
            >>> Formatter().literal("Test message")
            "> 'Test message'"
        """
        return f"> {value!r}"

    def expr(self, value: Any, expr_text: str) -> str:
        """Return a body line for ``expr_text`` having evaluated to ``value``.

        Example:
            >>> Formatter().expr(5, "2 + 3")
            '> 2 + 3 = 5'
        """
        return f"> {expr_text} = {value!r}"
