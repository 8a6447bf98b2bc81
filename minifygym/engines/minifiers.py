"""Minifier engines that we test with."""

from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping, Optional

import rjsmin
from calmjs.parse import es5
from calmjs.parse.unparsers.es5 import minify_print

from .base import MultiPassMinifier, keep_license_comments

_IDENTIFIER = re.compile(r"[A-Za-z0-9_$\\]+")
_REGEX_FLAGS = re.compile(r"[A-Za-z]*")

# A "/" after one of these starts a regular expression literal, not a division.
_REGEX_AFTER_PUNCT = set("(,=:[!&|?{};+-*%<>~^")
_REGEX_AFTER_WORD = {
    "return", "typeof", "case", "do", "else", "in", "instanceof",
    "new", "delete", "void", "throw", "yield", "await",
}


class RJSMinMinifier(MultiPassMinifier):
    name = "rjsmin"

    def minify_once(self, source: str, options: Dict[str, Any]) -> str:
        return rjsmin.jsmin(source, keep_bang_comments=keep_license_comments(options))


class CalmJSMinifier(MultiPassMinifier):
    """ES5 parse + minifying printer; ``mangle`` enables identifier renaming.

    The printer drops every comment, so license comments heading the source
    are put back in front of the output when ``comments`` keeps them.
    """

    name = "calmjs"

    def minify_once(self, source: str, options: Dict[str, Any]) -> str:
        mangle = options.get("mangle", False)
        toplevel = isinstance(mangle, Mapping) and bool(mangle.get("toplevel"))
        code = minify_print(es5(source), obfuscate=bool(mangle), obfuscate_globals=toplevel)
        if keep_license_comments(options):
            licenses = leading_license_comments(source)
            if licenses:
                code = "\n".join(licenses) + "\n" + code
        return code


class StripMinifier(MultiPassMinifier):
    """Conservative comment and whitespace stripper; keeps line breaks.

    String, template and regular expression literals are copied verbatim.
    """

    name = "strip"

    def minify_once(self, source: str, options: Dict[str, Any]) -> str:
        return strip_source(source, keep_license_comments(options))


def leading_license_comments(source: str) -> List[str]:
    """Return the ``/*! ... */`` comments found before the first token."""
    licenses = []
    i, n = 0, len(source)
    while i < n:
        if source[i].isspace():
            i += 1
        elif source.startswith("/*", i):
            end = _block_comment_end(source, i)
            if source.startswith("/*!", i):
                licenses.append(source[i:end])
            i = end
        elif source.startswith("//", i):
            i = _line_end(source, i)
        else:
            break
    return licenses


def strip_source(source: str, keep_bang: bool) -> str:
    out: List[str] = []
    pending = ""
    last = ""
    i, n = 0, len(source)

    def emit(token: str) -> None:
        nonlocal pending
        if pending and out and not out[-1].endswith("\n"):
            out.append(pending)
        pending = ""
        out.append(token)

    def gap(text: str) -> None:
        nonlocal pending
        if "\n" in text or "\r" in text:
            pending = "\n"
        elif not pending:
            pending = " "

    while i < n:
        ch = source[i]
        if ch.isspace():
            start = i
            while i < n and source[i].isspace():
                i += 1
            gap(source[start:i])
        elif source.startswith("/*", i):
            end = _block_comment_end(source, i)
            comment = source[i:end]
            if keep_bang and comment.startswith("/*!"):
                emit(comment)
            else:
                gap(comment)
            i = end
        elif source.startswith("//", i):
            i = _line_end(source, i)
        elif ch in "\"'":
            end = _quoted_end(source, i)
            emit(source[i:end])
            last = "literal"
            i = end
        elif ch == "`":
            end = _template_end(source, i)
            emit(source[i:end])
            last = "literal"
            i = end
        elif ch == "/" and _regex_allowed(last):
            end = _regex_end(source, i)
            if end is None:
                emit(ch)
                last = ch
                i += 1
            else:
                emit(source[i:end])
                last = "literal"
                i = end
        elif _IDENTIFIER.match(ch):
            word = _IDENTIFIER.match(source, i).group(0)
            emit(word)
            last = word
            i += len(word)
        elif ch in "+-" and source.startswith(ch * 2, i):
            emit(ch * 2)
            last = ch * 2
            i += 2
        else:
            emit(ch)
            last = ch
            i += 1
    return "".join(out)


def _regex_allowed(last: str) -> bool:
    return not last or last in _REGEX_AFTER_PUNCT or last in _REGEX_AFTER_WORD


def _block_comment_end(source: str, i: int) -> int:
    end = source.find("*/", i + 2)
    return len(source) if end < 0 else end + 2


def _line_end(source: str, i: int) -> int:
    end = source.find("\n", i)
    return len(source) if end < 0 else end


def _quoted_end(source: str, i: int) -> int:
    quote = source[i]
    i += 1
    n = len(source)
    while i < n:
        ch = source[i]
        if ch == "\\":
            i += 2
        elif ch == quote:
            return i + 1
        elif ch == "\n":
            return i
        else:
            i += 1
    return n


def _template_end(source: str, i: int) -> int:
    i += 1
    n = len(source)
    while i < n:
        ch = source[i]
        if ch == "\\":
            i += 2
        elif ch == "`":
            return i + 1
        elif source.startswith("${", i):
            i = _substitution_end(source, i + 2)
        else:
            i += 1
    return n


def _substitution_end(source: str, i: int) -> int:
    depth = 1
    n = len(source)
    while i < n:
        ch = source[i]
        if ch in "\"'":
            i = _quoted_end(source, i)
            continue
        if ch == "`":
            i = _template_end(source, i)
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i + 1
        i += 1
    return n


def _regex_end(source: str, i: int) -> Optional[int]:
    """End of the regex literal starting at ``i``, or None if there is none."""
    in_class = False
    i += 1
    n = len(source)
    while i < n:
        ch = source[i]
        if ch == "\n":
            return None
        if ch == "\\":
            i += 2
            continue
        if ch == "[":
            in_class = True
        elif ch == "]":
            in_class = False
        elif ch == "/" and not in_class:
            return _REGEX_FLAGS.match(source, i + 1).end()
        i += 1
    return None
