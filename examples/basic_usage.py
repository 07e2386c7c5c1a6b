"""examples/basic_usage.py - qtrace quick tour.

Run, then look at the output file:
    python examples/basic_usage.py
    cat /tmp/q
"""

import logging

from qtrace import QHandler, q, trace

logging.basicConfig(level=logging.DEBUG)
logger = logging.getLogger("app")
# Standard logging calls show up in the same stream.
logger.addHandler(QHandler())


@trace
def greet(name: str) -> str:
    return f"Hello, {name}!"


def hello(name: str) -> str:
    q(name)
    return greet(name)


def main() -> None:
    # No message
    q()

    # A value
    name = "SteadBytes"
    q(name)

    # Returns its argument, with the expression text supplied
    greeting = q(hello(name), expr="hello(name)")
    q(greeting)

    q(None)
    q(len(greeting), expr="len(greeting)")

    logger.info("done greeting %s", name)


if __name__ == "__main__":
    main()
