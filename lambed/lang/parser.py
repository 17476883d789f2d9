"""Surface syntax for lambed terms.

```
<term> ::= <integer> | <float> | <string>   ; literals: 42, -7, 3.14, "hello\n"
         | <name>                           ; any run of characters other than whitespace and { } | " : [ ]
         | "{" <term> <term>+ "}"           ; application, associating by left: {f a b} = {{f a} b}
         | "|" <param>+ "|" <term>          ; abstraction, curried: |x y| M = |x| |y| M
<param> ::= <name> [":" <name>]             ; optional annotation, carried but never checked
```

Abstraction bodies are exactly one term, so `{|x| x 5}` applies `|x| x` to `5`. Let nodes have no surface syntax: they
only ever come out of the evaluator.
"""

import re

from lambed.lang.error import ParseError
from lambed.pure.term import Value, Var, abstraction, application


class Parser:
    """Tokenizes and parses a single term. Errors are raised as ParseErrors that point into the original text."""
    NAME_CHARS = r"[^\s{}|\":\[\]]"
    TOKEN = re.compile(rf"""
        (?P<space>\s+)
      | (?P<float>-?\d+\.\d+)(?!{NAME_CHARS})
      | (?P<integer>-?\d+)(?!{NAME_CHARS})
      | (?P<string>"(?:[^"\\]|\\.)*")
      | (?P<punct>[{{}}|:])
      | (?P<name>{NAME_CHARS}+)
    """, re.VERBOSE)
    ESCAPES = {"\\": "\\", '"': '"', "n": "\n", "t": "\t"}

    def __init__(self, text):
        self.text = text
        self.tokens = self.tokenize(text)
        self.pos = 0

    def error(self, msg, token=None, exprs=()):
        start = token[2] if token else len(self.text)
        end = start + len(token[1]) if token else start + 1
        return ParseError(msg, (self.text, *exprs), start=start, end=end)

    def tokenize(self, text):
        """Returns a list of (kind, text, start) tuples, whitespace dropped."""
        tokens = []
        pos = 0
        while pos < len(text):
            match = Parser.TOKEN.match(text, pos)
            if match is None:
                if text[pos] == '"':
                    raise ParseError("'{}' has an unterminated string", text, start=pos, end=len(text))
                raise ParseError("'{}' has unexpected character '{}'", (text, text[pos]), start=pos, end=pos + 1)
            if match.lastgroup != "space":
                tokens.append((match.lastgroup, match.group(), pos))
            pos = match.end()
        return tokens

    def peek(self):
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def next(self, context="term"):
        token = self.peek()
        if token is None:
            raise self.error("'{}' ended in the middle of a {}", exprs=(context,))
        self.pos += 1
        return token

    def unescape(self, token):
        body = token[1][1:-1]
        result = ""
        idx = 0
        while idx < len(body):
            char = body[idx]
            if char == "\\":
                escaped = body[idx + 1]
                if escaped not in Parser.ESCAPES:
                    start = token[2] + 1 + idx
                    raise ParseError("'{}' has unknown escape '{}'", (self.text, "\\" + escaped), start=start,
                                     end=start + 2)
                result += Parser.ESCAPES[escaped]
                idx += 2
            else:
                result += char
                idx += 1
        return result

    def term(self):
        token = self.next()
        kind, text, __ = token

        if kind == "integer":
            return Value(int(text))
        if kind == "float":
            return Value(float(text))
        if kind == "string":
            return Value(self.unescape(token))
        if kind == "name":
            return Var(text)
        if text == "{":
            return self.application(token)
        if text == "|":
            return self.abstraction(token)
        raise self.error("'{}' has unexpected '{}'", token, (text,))

    def application(self, opening):
        fun = self.term()
        args = []
        while True:
            token = self.peek()
            if token is None:
                raise ParseError("'{}' has unbalanced braces", self.text, start=opening[2], end=opening[2] + 1)
            if token[1] == "}":
                self.pos += 1
                break
            args.append(self.term())

        if not args:
            raise ParseError("'{}' has an application without arguments", self.text, start=opening[2],
                             end=opening[2] + 1)
        return application(fun, *args)

    def abstraction(self, opening):
        params = []
        while True:
            token = self.next("parameter list")
            if token[1] == "|":
                break
            if token[0] != "name":
                raise self.error("'{}' expected a parameter name, found '{}'", token, (token[1],))

            annotation = None
            if self.peek() is not None and self.peek()[1] == ":":
                self.pos += 1
                annotation_token = self.next("parameter list")
                if annotation_token[0] != "name":
                    raise self.error("'{}' expected an annotation, found '{}'", annotation_token,
                                     (annotation_token[1],))
                annotation = annotation_token[1]
            params.append((token[1], annotation))

        if not params:
            raise ParseError("'{}' has an abstraction without parameters", self.text, start=opening[2],
                             end=opening[2] + 2)
        return abstraction(params, self.term())

    def parse(self):
        if not self.tokens:
            raise ParseError("term cannot be empty", self.text, diagnosis=False)

        term = self.term()
        trailing = self.peek()
        if trailing is not None:
            raise ParseError("'{}' has trailing input after the term", self.text, start=trailing[2],
                             end=len(self.text.rstrip()))
        return term


def parse(text):
    """Parses text into exactly one term."""
    return Parser(text).parse()
