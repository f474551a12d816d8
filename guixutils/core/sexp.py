# -*- coding: utf-8 -*-
"""
Read S-expressions printed by guix (package records, manifests, system
configurations) and print them again, indented so they fit in a given width.

The reader keeps atoms and strings exactly as they were written, it does not
try to interpret numbers, characters or escapes. Printing a parsed tree flat
gives back the original text apart from whitespace and comments.

.. code-block:: python

    >>> print(pretty_print('(package (name "hello") (version "2.10"))', 30))
    (package
      (name "hello")
      (version "2.10"))
"""
import io
import logging
from guixutils import DEFAULT_WIDTH
from guixutils.core.exceptions import SexpSyntaxError

LOG = logging.getLogger(__name__)

CLOSERS = {'(': ')', '[': ']', '#(': ')'}

#: Longest prefixes first, ``,@`` must win over ``,``.
QUOTE_PREFIXES = ('#$@', ',@', '#~', '#$', '#+', "'", '`', ',')

#: Characters that end an atom.
DELIMITERS = frozenset(' \t\n\r\f\v()[]";')

#: Forms whose body is indented by two columns rather than aligned with the
#: first argument, with the number of arguments that stay on the first line.
BODY_FORMS = {
    'define': 1,
    'define*': 1,
    'define-public': 1,
    'lambda': 1,
    'let': 1,
    'let*': 1,
    'letrec': 1,
    'package': 0,
    'origin': 0,
    'operating-system': 0,
    'service': 1,
    'modify-phases': 1,
    'when': 1,
    'unless': 1,
    'with-imported-modules': 1,
    'match': 1,
}


class Node(object):
    """Base class of the parsed nodes, compares by type and fields."""

    __slots__ = ()

    def _fields(self):
        return tuple(getattr(self, name) for name in self.__slots__)

    def __eq__(self, other):
        return type(self) is type(other) and self._fields() == other._fields()

    def __ne__(self, other):
        return not self == other

    def __repr__(self):
        return "{}({})".format(
            type(self).__name__, ", ".join(repr(f) for f in self._fields())
        )


class Atom(Node):
    """Symbol, number, keyword, boolean or character, as written."""

    __slots__ = ('text',)

    def __init__(self, text):
        self.text = text


class String(Node):
    """String literal including its quotes and escapes."""

    __slots__ = ('text',)

    def __init__(self, text):
        self.text = text


class List(Node):
    """A list, vector (``#(``) or bracketed list."""

    __slots__ = ('items', 'opener')

    def __init__(self, items, opener='('):
        self.items = items
        self.opener = opener

    @property
    def closer(self):
        return CLOSERS[self.opener]


class Quoted(Node):
    """A node with a quote, quasiquote, unquote or gexp prefix."""

    __slots__ = ('prefix', 'node')

    def __init__(self, prefix, node):
        self.prefix = prefix
        self.node = node


class _Reader(object):
    """Recursive descent reader over a string, tracks line and column."""

    def __init__(self, text):
        self.text = text
        self.pos = 0
        self.line = 1
        self.column = 1

    def _eof(self):
        return self.pos >= len(self.text)

    def _startswith(self, prefix):
        return self.text.startswith(prefix, self.pos)

    def _advance(self, count=1):
        for char in self.text[self.pos:self.pos + count]:
            if char == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
        self.pos = min(self.pos + count, len(self.text))

    def _error(self, msg, line=None, column=None):
        return SexpSyntaxError(
            msg,
            self.line if line is None else line,
            self.column if column is None else column
        )

    def _skip_blank(self):
        """Skip whitespace and comments, including datum comments."""
        while not self._eof():
            char = self.text[self.pos]
            if char.isspace():
                self._advance()
            elif char == ';':
                end = self.text.find('\n', self.pos)
                if end == -1:
                    end = len(self.text)
                self._advance(end - self.pos)
            elif self._startswith('#|'):
                line, column = self.line, self.column
                end = self.text.find('|#', self.pos + 2)
                if end == -1:
                    raise self._error("Unterminated block comment", line,
                                      column)
                self._advance(end + 2 - self.pos)
            elif self._startswith('#;'):
                self._advance(2)
                self.read()
            else:
                return

    def read_all(self):
        """Read all top-level forms."""
        nodes = []
        while True:
            self._skip_blank()
            if self._eof():
                return nodes
            nodes.append(self.read())

    def read(self):
        """Read one form."""
        self._skip_blank()
        if self._eof():
            raise self._error("Unexpected end of input")
        for prefix in QUOTE_PREFIXES:
            if self._startswith(prefix):
                self._advance(len(prefix))
                return Quoted(prefix, self.read())
        if self._startswith('#('):
            return self._read_list('#(')
        char = self.text[self.pos]
        if char in '([':
            return self._read_list(char)
        if char in ')]':
            raise self._error("Unexpected '{}'".format(char))
        if char == '"':
            return self._read_string()
        return self._read_atom()

    def _read_list(self, opener):
        line, column = self.line, self.column
        closer = CLOSERS[opener]
        self._advance(len(opener))
        items = []
        while True:
            self._skip_blank()
            if self._eof():
                raise self._error("Unclosed '{}'".format(opener), line, column)
            char = self.text[self.pos]
            if char in ')]':
                if char != closer:
                    raise self._error(
                        "Expected '{}' but found '{}'".format(closer, char)
                    )
                self._advance()
                return List(items, opener)
            items.append(self.read())

    def _read_string(self):
        line, column = self.line, self.column
        start = self.pos
        self._advance()
        while True:
            if self._eof():
                raise self._error("Unterminated string", line, column)
            char = self.text[self.pos]
            if char == '\\':
                self._advance(2)
            elif char == '"':
                self._advance()
                return String(self.text[start:self.pos])
            else:
                self._advance()

    def _read_atom(self):
        start = self.pos
        if self._startswith('#\\'):
            # The character after the backslash may be a delimiter: #\(
            self._advance(3)
        while not self._eof() and self.text[self.pos] not in DELIMITERS:
            self._advance()
        return Atom(self.text[start:self.pos])


def parse(text):
    """
    Read all forms in ``text``.

    :param str text: S-expression text.
    :raises SexpSyntaxError: On unbalanced brackets or unterminated strings.
    :return list: Parsed top-level nodes.
    """
    return _Reader(text).read_all()


def to_string(node):
    """Render ``node`` on one line."""
    if isinstance(node, Quoted):
        return node.prefix + to_string(node.node)
    if isinstance(node, List):
        return "{}{}{}".format(
            node.opener, " ".join(to_string(item) for item in node.items),
            node.closer
        )
    return node.text


def pretty_format(node, width=DEFAULT_WIDTH, indent=0):
    """
    Render ``node`` so that it fits in ``width`` columns where possible.

    :param Node node: Parsed node.
    :param int width: Maximum line length.
    :param int indent: Column the first line starts at, following lines are
        indented relative to it.
    :return str: Formatted text, the first line is not indented.
    """
    flat = to_string(node)
    if indent + len(flat) <= width:
        return flat
    if isinstance(node, Quoted):
        return node.prefix + pretty_format(
            node.node, width, indent + len(node.prefix)
        )
    if not isinstance(node, List) or not node.items:
        return flat

    inner = indent + len(node.opener)
    head, rest = node.items[0], node.items[1:]
    if isinstance(head, Atom) and rest:
        if head.text in BODY_FORMS:
            keep = BODY_FORMS[head.text]
            first_line, body = [head] + rest[:keep], rest[keep:]
            body_column = indent + 2
        else:
            first_line, body = [head, rest[0]], rest[1:]
            body_column = inner + len(head.text) + 1
    else:
        first_line, body = [head], rest
        body_column = inner

    text = ""
    column = inner
    for item in first_line:
        if text:
            text += " "
            column += 1
        formatted = pretty_format(item, width, column)
        text += formatted
        if "\n" in formatted:
            column = len(formatted.rsplit("\n", 1)[1])
        else:
            column += len(formatted)
    for item in body:
        text += "\n" + " " * body_column + pretty_format(
            item, width, body_column
        )
    return node.opener + text + node.closer


def pretty_print(text, width=DEFAULT_WIDTH):
    """
    Parse ``text`` and return its forms pretty formatted.

    :param str text: S-expression text.
    :param int width: Maximum line length.
    :return str: The forms separated by blank lines, ending with a newline,
        or an empty string if there are no forms.
    """
    nodes = parse(text)
    if not nodes:
        return ""
    return "\n\n".join(pretty_format(node, width) for node in nodes) + "\n"


def pretty_print_file(path, width=DEFAULT_WIDTH, in_place=False):
    """
    Pretty print the S-expressions in a file.

    :param str path: File to read.
    :param int width: Maximum line length.
    :param bool in_place: Write the result back to ``path``.
    :return str: The pretty printed text.
    """
    with io.open(path, 'r', encoding='utf-8') as file_handle:
        text = pretty_print(file_handle.read(), width)
    if in_place:
        with io.open(path, 'w', encoding='utf-8') as file_handle:
            file_handle.write(text)
        LOG.info("Pretty printed %s", path)
    return text
