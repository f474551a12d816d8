"""
Test reading and pretty printing of S-expressions.
"""

# pylint: disable=no-self-use
# pylint: disable=invalid-name

import re
import pytest
from guixutils.core.exceptions import SexpSyntaxError
from guixutils.core.sexp import Atom
from guixutils.core.sexp import List
from guixutils.core.sexp import Quoted
from guixutils.core.sexp import String
from guixutils.core.sexp import parse
from guixutils.core.sexp import pretty_format
from guixutils.core.sexp import pretty_print
from guixutils.core.sexp import pretty_print_file
from guixutils.core.sexp import to_string

PACKAGE = (
    '(package (name "hello") (version "2.10") '
    '(source (origin (method url-fetch) (uri (string-append '
    '"mirror://gnu/hello/hello-" version ".tar.gz")) (sha256 (base32 '
    '"0ssi1wpaf7plaswqqjwigppsg5fyh99vdlb9kzl7c9lng89ndq1i")))) '
    '(build-system gnu-build-system) (synopsis "Hello, GNU world") '
    '(license gpl3+))'
)


class TestParse(object):
    """
    Test the reader.
    """

    def test_atoms_and_strings(self):
        """Atoms and strings are kept as written."""
        assert parse('hello 42 #:key #t "a \\"b\\"" #\\a') == [
            Atom('hello'), Atom('42'), Atom('#:key'), Atom('#t'),
            String('"a \\"b\\""'), Atom('#\\a'),
        ]

    def test_lists(self):
        """
        Test nested lists:
         - Round and square brackets and vectors.
         - Dotted pairs are atoms in a list.
        """
        assert parse('(a [b . c] #(1 2) ())') == [
            List([
                Atom('a'),
                List([Atom('b'), Atom('.'), Atom('c')], '['),
                List([Atom('1'), Atom('2')], '#('),
                List([]),
            ])
        ]

    def test_quotes(self):
        """Quote prefixes, including gexp ones, wrap the next form."""
        assert parse("'a `(b ,c ,@d) #~(e #$f #$@g)") == [
            Quoted("'", Atom('a')),
            Quoted('`', List([
                Atom('b'),
                Quoted(',', Atom('c')),
                Quoted(',@', Atom('d')),
            ])),
            Quoted('#~', List([
                Atom('e'),
                Quoted('#$', Atom('f')),
                Quoted('#$@', Atom('g')),
            ])),
        ]

    def test_comments(self):
        """Line, block and datum comments are skipped."""
        text = (
            ";; header\n"
            "(a ; trailing\n"
            " #| block\n comment |# b #;(ignored form) c)"
        )
        assert parse(text) == [List([Atom('a'), Atom('b'), Atom('c')])]

    def test_character_delimiters(self):
        """A character literal may be a delimiter."""
        assert parse('(#\\( #\\space)') == [
            List([Atom('#\\('), Atom('#\\space')])
        ]

    def test_empty(self):
        """Whitespace and comments only give no forms."""
        assert parse("  ; nothing\n") == []

    @pytest.mark.parametrize("text,message,line,column", [
        ("(a (b)", "Unclosed '('", 1, 1),
        ("(a\n  b))", "Unexpected ')'", 2, 5),
        ("(a ]", "Expected ')' but found ']'", 1, 4),
        ('(a "b)', "Unterminated string", 1, 4),
        ("'", "Unexpected end of input", 1, 2),
        ("#| x", "Unterminated block comment", 1, 1),
    ])
    def test_syntax_errors(self, text, message, line, column):
        """Bad input raises SexpSyntaxError with its position."""
        pattern = re.escape(message)
        with pytest.raises(SexpSyntaxError, match=pattern) as excinfo:
            parse(text)
        assert excinfo.value.line == line
        assert excinfo.value.column == column


class TestPrettyPrint(object):
    """
    Test flat and pretty formatting.
    """

    def test_to_string(self):
        """Flat rendering gives the text back with normalised spaces."""
        text = "(a  [b\n c] #(1) '(d ,e) \"s t\")"
        assert to_string(parse(text)[0]) == "(a [b c] #(1) '(d ,e) \"s t\")"

    def test_fits_on_one_line(self):
        """Forms that fit are printed flat."""
        assert pretty_print("(a\n  b\n  c)") == "(a b c)\n"

    def test_align_with_first_argument(self):
        """Arguments of a call are aligned under the first one."""
        assert pretty_format(
            parse("(string-append aaaa bbbb cccc)")[0], width=20
        ) == (
            "(string-append aaaa\n"
            "               bbbb\n"
            "               cccc)"
        )

    def test_body_forms(self):
        """The body of body forms is indented by two columns."""
        assert pretty_format(
            parse("(define (f x) (g x) (h x))")[0], width=16
        ) == (
            "(define (f x)\n"
            "  (g x)\n"
            "  (h x))"
        )

    def test_list_head(self):
        """Lists that don't start with an atom have one item per line."""
        assert pretty_format(
            parse("((a 1) (b 2) (c 3))")[0], width=10
        ) == (
            "((a 1)\n"
            " (b 2)\n"
            " (c 3))"
        )

    def test_quoted(self):
        """The prefix stays in front of the broken form."""
        assert pretty_format(parse("'(alpha beta gamma)")[0], width=12) == (
            "'(alpha beta\n"
            "        gamma)"
        )

    def test_package(self):
        """
        A package record:
         - Fields are indented by two columns.
         - Every line fits, except the one with the hash, strings are never
           broken.
        """
        text = pretty_print(PACKAGE, width=60)
        lines = text.splitlines()
        assert lines[0] == "(package"
        assert lines[1] == '  (name "hello")'
        assert lines[2] == '  (version "2.10")'
        assert lines[3] == "  (source (origin"
        assert lines[4] == " " * 12 + "(method url-fetch)"
        assert lines[-1] == "  (license gpl3+))"
        assert all(len(line) <= 60 or "0ssi1" in line for line in lines)
        assert to_string(parse(text)[0]) == to_string(parse(PACKAGE)[0])

    def test_forms_separated_by_blank_line(self):
        """Top-level forms are separated by a blank line."""
        assert pretty_print("(a) (b)") == "(a)\n\n(b)\n"
        assert pretty_print("") == ""

    def test_long_atom_is_not_broken(self):
        """An atom longer than the width is printed as it is."""
        assert pretty_format(Atom("x" * 30), width=10) == "x" * 30

    def test_pretty_print_file(self, tmp_path):
        """
        Test pretty_print_file:
         - Returns the pretty printed text.
         - Only changes the file with in_place.
        """
        path = tmp_path / "manifest.scm"
        path.write_text("(specifications->manifest\n  '(\"hello\"))\n")
        expected = "(specifications->manifest '(\"hello\"))\n"
        assert pretty_print_file(str(path)) == expected
        assert path.read_text() != expected
        assert pretty_print_file(str(path), in_place=True) == expected
        assert path.read_text() == expected
