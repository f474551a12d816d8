# -*- coding: utf-8 -*-
"""
Just a module containing some useful auxiliary functions for building
command strings and names to show to the user.
"""

import re

#: Characters that don't need a backslash in a shell argument.
PAT_SHELL_UNSAFE = re.compile(r'[^a-zA-Z0-9\-=,./\n]')

#: Prefix of every composed name.
NAME_PREFIX = 'Guix'

#: Shown in place of values that are not set.
EMPTY_STRING = '–'


def shell_quote_argument(argument):
    """
    Quote a shell command argument.

    This is similar to :func:`shlex.quote` but less strict: letters, digits
    and ``-=,./`` are left alone so the resulting command stays readable,
    every other character is escaped with a backslash. Newlines can't be
    escaped like that, they are put between single quotes.

    :param str argument: The argument to quote.
    :return str: Quoted argument.
    """
    if argument == '':
        return "''"
    escaped = PAT_SHELL_UNSAFE.sub(lambda match: '\\' + match.group(0),
                                   argument)
    return escaped.replace('\n', "'\n'")


def command_string(args=None, program='guix'):
    """
    Return a ``guix ARGS ...`` string with quoted shell arguments.

    :param list args: Arguments of the command, may be empty.
    :param str program: The program to put in front.
    :return str: Command that can be pasted into a shell.
    """
    quoted = [shell_quote_argument(str(arg)) for arg in args or ()]
    return " ".join([program] + quoted)


def compose_name(*parts):
    """
    Compose a name like ``*Guix Package Info*`` from its parts.

    Parts that are ``None`` or empty are skipped.

    :param str parts: Words that make up the name.
    :return str: Composed name.
    """
    words = [NAME_PREFIX] + [str(part) for part in parts if part]
    return "*{}*".format(" ".join(words))


def unique_name(name, taken):
    """
    Return ``name`` or, if it is already taken, ``name<N>`` with the lowest
    ``N`` starting from 2 that is free.

    :param str name: Preferred name.
    :param collections.Container taken: Names that are in use.
    :return str: A name that is not in ``taken``.
    """
    if name not in taken:
        return name
    number = 2
    while "{}<{}>".format(name, number) in taken:
        number += 1
    return "{}<{}>".format(name, number)


def symbol_title(symbol):
    """
    Make a human readable title from a symbol name: ``foo-bar`` becomes
    ``Foo bar``.

    :param str symbol: Symbol name.
    :return str: Title.
    """
    words = symbol.strip('-').replace('-', ' ')
    return words[:1].upper() + words[1:]


def concat_strings(strings, separator=" ", location=None):
    """
    Join the non-empty strings of ``strings`` with ``separator``.

    :param list strings: Strings to join, ``None`` and empty ones are left
        out.
    :param str separator: Put between the strings.
    :param str location: Also add the separator ``left``, ``right`` or
        ``both`` of the result.
    :return str: Joined string, empty when there is nothing to join.
    """
    strings = [string for string in strings if string]
    if not strings:
        return ""
    joined = separator.join(strings)
    if location in ('left', 'both'):
        joined = separator + joined
    if location in ('right', 'both'):
        joined = joined + separator
    return joined


def value_to_string(value):
    """
    Convert a value from guix output to a string that can be displayed.

    :param object value: Usually a string, number, bool or a list of those.
    :return str: The value as text, :attr:`EMPTY_STRING` if it is not set.
    """
    if value is True:
        return "Yes"
    if value is None or value is False:
        return EMPTY_STRING
    if isinstance(value, (list, tuple)):
        if not value:
            return EMPTY_STRING
        return " ".join(str(item) for item in value)
    return str(value)


def unique(seq, preserve_order=True):
    """
    Return the unique values of a sequence in the type of the input sequence.

    Does not support sets and dicts, as they are already unique.

    :param list|tuple seq: Data to return unique values from.
    :param bool preserve_order: Preserve order of seq? (Default: True)
    :returns list|tuple: Whatever unique values you fed into ``seq``.
    """
    if preserve_order:
        return type(seq)(unique_generator(seq))

    if isinstance(seq, (set, dict)):
        raise TypeError("{} types are always unique".format(type(seq)))

    return type(seq)(set(seq))


def unique_generator(seq):
    """
    Remove duplicates from an iterable sequence.

    Does not support sets and dicts, as they are already unique.

    :param list|tuple seq: Data to yield unique values from.
    :yields object: Whatever unique values you fed into ``seq``.
    """
    if isinstance(seq, (set, dict)):
        raise TypeError("{} types are always unique".format(type(seq)))

    return _unique_generator(seq)


def _unique_generator(seq):
    """See unique_generator function documentation."""
    seen = set()
    seen_add = seen.add  # Skips __getattribute__ on seen.
    for element in seq:
        if element not in seen:
            yield element
            seen_add(element)
