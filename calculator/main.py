"""Uses the pure lambda calculus and the keyword language on top of it to run .lc files or the command-line mode. Also
uses the error handling context manager. Called from the lc console script.

Python version must be >=3.8: error handling relies on insertion-ordered dicts.
"""

import argparse

from calculator.lang.error import ErrorHandler
from calculator.lang.session import Session
from calculator.lang.shell import Shell


def main(argv=None):
    """Runs the lambda calculator. Called from the lc console script."""
    with ErrorHandler() as error_handler:
        parser = argparse.ArgumentParser(prog="lc", description="Untyped lambda calculus calculator.")
        parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
        parser.add_argument("--no-prelude", help="start without the default keywords", action="store_true")
        args = parser.parse_args(argv)

        if args.file is not None:
            sess = Session(error_handler, args.file, prelude=not args.no_prelude)
            sess.run()

            while sess.results:
                text, __ = sess.pop()
                print(text)

        else:
            Shell(Session(error_handler, Session.SH_FILE, prelude=not args.no_prelude)).cmdloop()


if __name__ == "__main__":
    main()
