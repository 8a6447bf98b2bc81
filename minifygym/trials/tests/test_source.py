import pytest

from minifygym.errors import InvalidIntent
from minifygym.trials import load_descriptor_source

RUN = {"minifier": "rjsmin", "measurements": ["gzip"], "options": {"comments": "some"}}


def test_load_json_list(tmp_path):
    path = tmp_path / "runs.json"
    path.write_text('[{"minifier": "rjsmin", "measurements": ["gzip"], "options": {"comments": "some"}}]')
    assert load_descriptor_source(path) == [RUN]


def test_load_yaml_mapping_with_runs_key(tmp_path):
    path = tmp_path / "runs.yaml"
    path.write_text(
        "runs:\n"
        "  - minifier: rjsmin\n"
        "    measurements: [gzip]\n"
        "    options:\n"
        "      comments: some\n"
        "  - minifier: calmjs\n"
        "    compressors: brotli\n"
    )
    runs = load_descriptor_source(str(path))
    assert runs[0] == RUN
    assert runs[1] == {"minifier": "calmjs", "compressors": "brotli"}


def test_load_python_module(tmp_path):
    path = tmp_path / "runs.py"
    path.write_text(
        "RUNS = [\n"
        "    {'minifier': name, 'measurements': ['gzip'], 'passes': passes}\n"
        "    for name in ('rjsmin', 'calmjs')\n"
        "    for passes in (1, 2)\n"
        "]\n"
    )
    runs = load_descriptor_source(path)
    assert [(r["minifier"], r["passes"]) for r in runs] == [
        ("rjsmin", 1),
        ("rjsmin", 2),
        ("calmjs", 1),
        ("calmjs", 2),
    ]


@pytest.mark.parametrize(
    "name, content",
    [
        ("runs.json", "{not json"),
        ("runs.json", '{"minifier": "rjsmin"}'),
        ("runs.yaml", "runs: 3\n"),
        ("runs.toml", "runs = []\n"),
        ("runs.py", "OTHER = []\n"),
        ("runs.py", "def broken(:\n"),
    ],
)
def test_bad_sources_raise_invalid_intent(tmp_path, name, content):
    path = tmp_path / name
    path.write_text(content)
    with pytest.raises(InvalidIntent):
        load_descriptor_source(path)


def test_missing_source(tmp_path):
    with pytest.raises(InvalidIntent):
        load_descriptor_source(tmp_path / "absent.json")


@pytest.mark.parametrize(
    "content",
    ["raise RuntimeError('boom')\n", "RUNS = [undefined_name]\n", "import minifygym_no_such_module\n"],
)
def test_python_source_import_errors_raise_invalid_intent(tmp_path, content):
    path = tmp_path / "runs.py"
    path.write_text(content)
    with pytest.raises(InvalidIntent) as exc_info:
        load_descriptor_source(path)
    assert isinstance(exc_info.value.__cause__, Exception)
