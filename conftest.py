"""Shared fixtures: a private engine registry populated with stub engines."""

import pytest

from minifygym.engines import EngineRegistry, FunctionMeasurer, FunctionMinifier, MinifyOutput

FIXED_A = "x" * 20
FIXED_B = "y" * 15


def _mutating_minifier(source, options):
    # Edits its options bag in place; other trials must not observe this.
    options.setdefault("compress", {})["passes"] = 99
    options["mutated"] = True
    return source.strip()


def _failing_minifier(source, options):
    return MinifyOutput.failed("Unexpected token: punc ())")


def _raising_minifier(source, options):
    raise RuntimeError("engine crashed")


def _echo_minifier(source, options):
    return source


def _raising_measurer(code, options):
    raise ValueError("cannot measure")


def build_stub_registry() -> EngineRegistry:
    registry = EngineRegistry()
    registry.register_minifier(FunctionMinifier("a", lambda source, options: FIXED_A))
    registry.register_minifier(FunctionMinifier("b", lambda source, options: FIXED_B))
    registry.register_minifier(FunctionMinifier("echo", _echo_minifier))
    registry.register_minifier(FunctionMinifier("mutating", _mutating_minifier))
    registry.register_minifier(FunctionMinifier("failing", _failing_minifier))
    registry.register_minifier(FunctionMinifier("raising", _raising_minifier))
    registry.register_measurer(FunctionMeasurer("rawlength", lambda code, options: len(code)))
    registry.register_measurer(FunctionMeasurer("fakecompressed", lambda code, options: len(code) // 2))
    registry.register_measurer(FunctionMeasurer("broken", _raising_measurer))
    return registry.freeze()


@pytest.fixture
def stub_registry() -> EngineRegistry:
    return build_stub_registry()


@pytest.fixture
def source_code() -> str:
    return "function foo(a,a){return a+a}"
