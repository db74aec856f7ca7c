#!/usr/bin/env python3
"""
Standalone `apple-jwt` command.

Wraps the invoke task collection in an invoke Program so the tasks run without an
installed tasks.py:

    apple-jwt generate -k ABC123DEF4 -t XYZ789GHI0 -p ./AuthKey_ABC123DEF4.p8
    apple-jwt --help generate
    apple-jwt --version
"""

from invoke import Collection, Program

from . import __version__, tasks

namespace = Collection.from_module(tasks)

program = Program(
    name='Apple JWT Generator',
    binary='apple-jwt',
    namespace=namespace,
    version=__version__,
)


def main():
    program.run()


if __name__ == '__main__':
    main()
