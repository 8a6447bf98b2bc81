import io
import json

import pytest

from minifygym import __version__
from minifygym.cli import main

JS_SOURCE = "/*! license */\nfunction add(first, second) {\n  // sum\n  return first + second;\n}\n"


@pytest.fixture
def js_file(tmp_path):
    path = tmp_path / "input.js"
    path.write_text(JS_SOURCE, encoding="utf-8")
    return path


def test_prints_best_output(js_file, capsys):
    assert main([str(js_file), "-m", "rjsmin,strip", "-p", "1"]) == 0
    out, err = capsys.readouterr()
    assert "return" in out
    assert "// sum" not in out
    assert "->" not in err


def test_reads_stdin_when_no_file(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("var  a = 1 ;\n"))
    assert main(["-m", "rjsmin", "-c", "none", "-p", "1"]) == 0
    assert capsys.readouterr().out.strip() == "var a=1;"


def test_writes_output_file(js_file, tmp_path, capsys):
    target = tmp_path / "out.js"
    assert main([str(js_file), "-m", "rjsmin", "-o", str(target)]) == 0
    assert capsys.readouterr().out == ""
    assert "return first+second" in target.read_text(encoding="utf-8")


def test_no_output_implies_verbose(js_file, tmp_path, capsys):
    target = tmp_path / "out.js"
    assert main([str(js_file), "-m", "rjsmin", "-m", "strip", "-c", "gzip,none", "--no-output", "-o", str(target)]) == 0
    out, err = capsys.readouterr()
    assert out == ""
    assert not target.exists()
    lines = [line for line in err.splitlines() if line.startswith(("->", "   "))]
    assert len(lines) == 8
    assert lines[0].startswith("-> ") and lines[0].endswith(" <-")
    assert "Finished in:" in err


def test_json_output(js_file, capsys):
    assert main([str(js_file), "-m", "calmjs", "-p", "2", "--comments", "none", "--json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["winner"]["minifier"] == "calmjs"
    assert len(payload["results"]) == 2
    assert payload["results"][0]["options"]["comments"] == "none"


def test_config_file_runs(js_file, tmp_path, capsys):
    runs = tmp_path / "runs.json"
    runs.write_text(json.dumps([{"minifier": "strip", "measurements": ["none"], "options": {"comments": "all"}}]))
    assert main([str(js_file), "--config", str(runs)]) == 0
    assert "/*! license */" in capsys.readouterr().out


def test_unknown_minifier_fails(js_file, capsys):
    assert main([str(js_file), "-m", "uglify"]) == 1
    assert "INVALID_INTENT" in capsys.readouterr().err


def test_failing_run_respects_lenient(js_file, tmp_path, capsys):
    runs = tmp_path / "runs.yaml"
    runs.write_text(
        "- minifier: rjsmin\n  measurements: [none]\n- minifier: nope\n  measurements: [none]\n",
        encoding="utf-8",
    )
    assert main([str(js_file), "--config", str(runs)]) == 1
    assert "TRIALS_FAILED" in capsys.readouterr().err

    assert main([str(js_file), "--config", str(runs), "--lenient", "-V"]) == 0
    out, err = capsys.readouterr()
    assert "return first+second" in out
    assert "!! Run #1 nope [UNKNOWN_MINIFIER]" in err


def test_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "absent.js")]) == 1
    assert "Failed to read" in capsys.readouterr().err


def test_version(capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(["--version"])
    assert exc_info.value.code == 0
    assert capsys.readouterr().out.strip() == f"minifygym v{__version__}"


def test_json_with_output_file_writes_both(js_file, tmp_path, capsys):
    target = tmp_path / "out.js"
    assert main([str(js_file), "-m", "rjsmin", "-p", "1", "--json", "-o", str(target)]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert target.read_text(encoding="utf-8") == payload["winner"]["code"]


def test_broken_python_config_exits_cleanly(js_file, tmp_path, capsys):
    runs = tmp_path / "runs.py"
    runs.write_text("raise RuntimeError('boom')\n")
    assert main([str(js_file), "--config", str(runs)]) == 1
    assert "INVALID_INTENT" in capsys.readouterr().err
