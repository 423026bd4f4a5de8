import json

from qexplore.cli import build_parser, main

NYC_ARGS = ["--lat", "40.7128", "--lng", "-74.0060"]


def test_generate_json(capsys):
    code = main(["generate", *NYC_ARGS, "-r", "1000", "-p", "1000", "--grid-resolution", "20", "--seed", "42", "--json"])
    assert code == 0

    data = json.loads(capsys.readouterr().out)
    assert data["request"]["points"] == 1000
    assert data["request"]["mode"] == "standard"
    assert [c["id"] for c in data["circles"]] == ["center"]


def test_generate_text_summary(capsys):
    code = main(["generate", *NYC_ARGS, "-r", "3000", "-p", "300", "-m", "flower_power", "--seed", "1", "-t", "power"])
    assert code == 0

    out = capsys.readouterr().out
    assert "mode=flower_power" in out
    assert "power:" in out
    assert "(attractor)" in out or "(void)" in out


def test_generate_default_type_is_attractor(capsys):
    assert main(["generate", *NYC_ARGS, "-r", "1000", "-p", "500", "--seed", "3"]) == 0
    assert "attractor:" in capsys.readouterr().out


def test_generate_invalid_input_exits_with_2(capsys):
    assert main(["generate", "--lat", "120", "--lng", "0", "-r", "1000", "--seed", "1"]) == 2
    assert "Latitude" in capsys.readouterr().err

    assert main(["generate", *NYC_ARGS, "-r", "1000", "-m", "flower_power", "--seed", "1"]) == 2
    assert main(["generate", *NYC_ARGS, "-r", "1000", "-t", "sparkle", "--seed", "1"]) == 2


def test_types_and_backends(capsys):
    assert main(["types"]) == 0
    out = capsys.readouterr().out
    for name in ("blind_spot", "attractor", "void", "power"):
        assert name in out

    assert main(["backends"]) == 0
    out = capsys.readouterr().out
    assert "pseudo" in out and "anu" in out


def test_parser_defaults_defer_to_settings():
    args = build_parser().parse_args(["generate", *NYC_ARGS])
    assert args.radius is None
    assert args.points is None
    assert args.mode is None
    assert args.func.__name__ == "_cmd_generate"
