import gzip

import brotli
import pytest

from minifygym.engines import (
    EngineRegistry,
    FunctionMeasurer,
    FunctionMinifier,
    MinifyOutput,
    MultiPassMinifier,
    default_registry,
    get_measurer,
    get_minifier,
    list_measurers,
    list_minifiers,
)
from minifygym.engines.base import keep_license_comments

JS_SOURCE = """/*! keep me */
// line comment
function add(firstValue, secondValue) {
    /* block comment */
    return firstValue + secondValue;
}
"""


# ============================================================================
# Default registry
# ============================================================================


def test_default_registry_is_frozen_and_complete():
    registry = default_registry()
    assert registry.frozen
    assert registry is default_registry()
    assert set(list_minifiers()) == {"rjsmin", "calmjs", "strip"}
    assert set(list_measurers()) == {"gzip", "brotli", "none"}
    with pytest.raises(RuntimeError):
        registry.register_minifier(FunctionMinifier("late", lambda s, o: s))


def test_lookup_is_case_insensitive():
    assert get_minifier("RJSMIN") is get_minifier("rjsmin")
    assert default_registry().measurer("Gzip") is get_measurer("gzip")
    assert default_registry().minifier("uglify") is None
    with pytest.raises(KeyError):
        get_measurer("zstd")


def test_unknown_kind_is_rejected():
    with pytest.raises(ValueError):
        EngineRegistry().resolve("packer", "x")


# ============================================================================
# Minifiers
# ============================================================================


@pytest.mark.parametrize("name", ["rjsmin", "calmjs", "strip"])
def test_minifiers_shrink_source(name):
    output = get_minifier(name).transform(JS_SOURCE, {"comments": "none"})
    assert output.succeeded
    assert len(output.code) < len(JS_SOURCE)
    assert "line comment" not in output.code
    assert "block comment" not in output.code


@pytest.mark.parametrize("name", ["rjsmin", "calmjs", "strip"])
def test_license_comments_follow_comments_option(name):
    minifier = get_minifier(name)
    assert "keep me" in minifier.transform(JS_SOURCE, {"comments": "some"}).code
    assert "keep me" in minifier.transform(JS_SOURCE, {}).code
    assert "keep me" not in minifier.transform(JS_SOURCE, {"comments": False}).code


def test_calmjs_mangle_renames_locals():
    minifier = get_minifier("calmjs")
    plain = minifier.transform(JS_SOURCE, {})
    mangled = minifier.transform(JS_SOURCE, {"mangle": True})
    assert "firstValue" in plain.code
    assert "firstValue" not in mangled.code
    assert len(mangled.code) < len(plain.code)


def test_calmjs_license_comment_survives_repeated_passes():
    source = "/*! keep me */\nfunction add(a, b) { return a + b; }\n"
    output = get_minifier("calmjs").transform(source, {"comments": "some", "compress": {"passes": 3}})
    assert output.code == "/*! keep me */\nfunction add(a,b){return a+b;}"


def test_strip_leaves_string_literals_alone():
    source = 'var s = "a    b";\nvar u = "http://x/*y*/z";\nvar q = \'it\\\'s  // here\';\n'
    output = get_minifier("strip").transform(source, {"comments": "none"})
    assert output.code == 'var s = "a    b";\nvar u = "http://x/*y*/z";\nvar q = \'it\\\'s  // here\';'


def test_strip_leaves_regex_and_template_literals_alone():
    source = 'var r = /a\\/*b/g;   // note\nvar t = `x  ${ "y  }" }  /* w */`;\nvar half = total  /  2;\n'
    output = get_minifier("strip").transform(source, {"comments": "none"})
    assert output.code == 'var r = /a\\/*b/g;\nvar t = `x  ${ "y  }" }  /* w */`;\nvar half = total / 2;'


def test_calmjs_reports_syntax_errors_as_values():
    output = get_minifier("calmjs").transform("function (", {})
    assert not output.succeeded
    assert output.error


@pytest.mark.parametrize(
    "value, expected",
    [("some", True), ("all", True), (True, True), ("none", False), (None, False), (False, False), ("off", False)],
)
def test_keep_license_comments(value, expected):
    assert keep_license_comments({"comments": value}) is expected


class CountingMinifier(MultiPassMinifier):
    name = "counting"

    def __init__(self):
        self.calls = 0

    def minify_once(self, source, options):
        self.calls += 1
        return source[1:] if len(source) > 3 else source


def test_multipass_applies_passes_until_fixed_point():
    minifier = CountingMinifier()
    assert minifier.transform("abcdef", {"compress": {"passes": 2}}).code == "cdef"
    assert minifier.calls == 2

    minifier = CountingMinifier()
    assert minifier.transform("abcdef", {"compress": {"passes": 10}}).code == "def"
    assert minifier.calls == 4

    assert CountingMinifier().transform("abcdef", {}).code == "bcdef"


def test_function_adapters():
    minifier = FunctionMinifier("upper", lambda source, options: source.upper())
    assert minifier.transform("ab", {}) == MinifyOutput.ok("AB")
    failing = FunctionMinifier("nope", lambda source, options: MinifyOutput.failed(""))
    assert failing.transform("ab", {}).error == "unknown error"
    measurer = FunctionMeasurer("len", lambda code, options: len(code))
    assert measurer.measure("abc", {}) == 3


# ============================================================================
# Measurers
# ============================================================================


def test_raw_size_counts_utf8_bytes():
    assert get_measurer("none").measure("héllo", {}) == 6


def test_gzip_size_is_deterministic_and_honours_level():
    code = "var a = 1;" * 50
    measurer = get_measurer("gzip")
    expected = len(gzip.compress(code.encode("utf-8"), compresslevel=9, mtime=0))
    assert measurer.measure(code, {}) == expected
    assert measurer.measure(code, {}) == measurer.measure(code, {"level": 9})
    assert measurer.measure(code, {"level": 0}) > measurer.measure(code, {"level": 9})


def test_brotli_size_honours_quality():
    code = "var a = 1;" * 50
    measurer = get_measurer("brotli")
    assert measurer.measure(code, {}) == len(brotli.compress(code.encode("utf-8"), quality=11))
    assert measurer.measure(code, {"quality": 1}) > 0
