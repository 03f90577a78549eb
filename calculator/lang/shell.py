"""Handles interactive/command-line mode for the lambda calculator. Uses cmd as backend."""

import cmd

from termcolor import colored

from calculator.lang.error import InvalidKeyword


class Shell(cmd.Cmd):
    """Lambda calculator shell."""
    intro = "Lambda calculator :: Python backend\nType '?' or 'help' for more information."
    prompt = "λ> "
    secondary_prompt = ". "  # shown while a statement has unclosed parentheses
    _tmp_prompt = prompt

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""
        self.line_num = 0

    def default(self, line):
        """Reduces an arbitrary expression, or registers a keyword if line contains ':='."""
        with self.sess.error_handler:  # an uncaught exception would end cmdloop
            self.line_num += 1
            line, add_to_prev = self.sess.preprocess_line(f"{self._tmp_line} {line}")

            if add_to_prev:
                self._tmp_line = line
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt
            if not line:
                return

            self.sess.add(line, self.line_num)
            self.sess.run()

            while self.sess.results:
                text, num = self.sess.pop()
                if num is not None:
                    text += colored(f"  ({num})", attrs=["dark"])
                print(text)

    def do_keywords(self, arg):
        """Lists the keywords of this session."""
        for name, expression in self.sess.parser.sources.items():
            print(f"{colored(name, attrs=['bold'])} := {expression}")

    def do_remove(self, arg):
        """Removes the keyword named arg."""
        with self.sess.error_handler:
            if arg.strip() not in self.sess.parser.keywords:
                raise InvalidKeyword(arg.strip())
            self.sess.parser.remove_keyword(arg)

    def do_help(self, arg):
        """Prints a short intro instead of the command list."""
        print("Welcome to the lambda calculator!\n\n"
              "Type a λ-term to reduce it to its normal form, e.g. '(λx.x) a' gives 'a'. '\\' can be typed \n"
              "instead of 'λ', and numbers are read as Church numerals.\n\n"
              "'NAME := λ-term' defines a keyword, which is expanded wherever NAME is used later on. \n"
              "'keywords' lists the defined keywords and 'remove NAME' deletes one. Try 'add 2 3'.")

    def emptyline(self):
        """An empty line does nothing instead of repeating the last command."""
        return ""

    def do_EOF(self, arg):
        """Ends the session on end of input (Ctrl-D)."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Ends the session."""
        return True
