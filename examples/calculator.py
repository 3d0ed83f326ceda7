# calculator.py
#
# Integer calculator, one line at a time:
#
#   line:      expr { "," expr } eol
#   expr:      factor { ("+" | "-") factor }
#   factor:    primary { ("*" | "/") primary }
#   primary:   identifier "(" [ expr { "," expr } ] ")"
#            | identifier
#            | "(" expr ")"
#            | ("-" | "+") primary
#            | integer
#
# A bare identifier is looked up in the environment.
import os
import random
import sys

from uparse import Scanner, eol, ident, integer

MAX_ARGS = 10


def fn_min(args):
    if not args:
        raise ValueError("min() needs at least one argument")
    return min(args)


def fn_max(args):
    if not args:
        raise ValueError("max() needs at least one argument")
    return max(args)


def fn_rnd(args):
    if args:
        raise ValueError("no arguments for rnd() function")
    return random.randint(0, 2**31 - 1)


BUILTINS = {"min": fn_min, "max": fn_max, "rnd": fn_rnd}


class Calculator:
    def __init__(self, env=None):
        self.scanner = Scanner()
        self.env = os.environ if env is None else env

    def evaluate(self, line):
        """Return the values of the comma-separated expressions on ``line``.

        Raises ParseError through the scanner's recovery point, so callers
        wrap this in ``calc.scanner.recovery()``.
        """
        self.scanner.feed(line)
        return self.values()

    def values(self):
        s = self.scanner
        values = []
        while not s.accept(eol):
            values.append(self.expr())
            s.expect(eol, ",")
        return values

    def expr(self):
        s = self.scanner
        n = self.factor()
        while True:
            if s.accept("+"):
                n += self.factor()
            elif s.accept("-"):
                n -= self.factor()
            else:
                return n

    def factor(self):
        s = self.scanner
        n = self.primary()
        while True:
            if s.accept("*"):
                n *= self.primary()
            elif s.accept("/"):
                d = self.primary()
                if d == 0:
                    s.error("division by zero")
                # truncate toward zero
                q = abs(n) // abs(d)
                n = q if (n < 0) == (d < 0) else -q
            else:
                return n

    def primary(self):
        s = self.scanner

        if s.accept_all(ident, "("):
            name = s.captures[0].substr(20)
            fn = BUILTINS.get(name)
            if fn is None:
                s.error("undefined function %s", name)
            args = []
            while not s.accept(")"):
                if len(args) >= MAX_ARGS:
                    s.error("function %s: too many args", name)
                args.append(self.expr())
                if s.accept(","):
                    continue
                if s.accept(eol):
                    s.error("unclosed paren on function call %s", name)
            try:
                return fn(args)
            except ValueError as e:
                s.error("%s", e)

        if s.accept(ident):
            name = s.captures[0].substr(20)
            value = self.env.get(name)
            if value is None:
                s.error("%s not found in environment", name)
            try:
                return int(value)
            except ValueError:
                s.error("%s is not an integer", name)

        if s.accept("("):
            n = self.expr()
            s.expect(")")
            return n

        if s.accept("-"):
            return -self.primary()

        if s.accept("+"):
            return self.primary()

        if s.accept(integer):
            return s.captures[0].value

        s.error("syntax error at %s", s.rest[:1] or "end of line")


def main(stream=sys.stdin):
    calc = Calculator()
    s = calc.scanner
    for line in stream:
        s.feed(line)
        if s.accept("q", "quit"):
            break
        with s.recovery() as failed:
            for value in calc.values():
                print(" =", value)
        if failed:
            print(s.message)


if __name__ == "__main__":
    main()
