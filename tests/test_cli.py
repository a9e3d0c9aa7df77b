"""
Tests for the command line interface

- convert to JSON on stdout and to a file
- --toc output
- Missing file handling
- Summaries wire in the Groq caller
"""

import json

from unittest.mock import MagicMock, patch

from mdindex.cli import build_parser, main

SAMPLE = "# A\ntext1\n## B\ntext2\n## C\ntext3"


def test_parser_defaults() -> None:
    args = build_parser().parse_args(["convert", "doc.md"])
    assert args.thinning is False
    assert args.summary is False
    assert args.thinning_threshold == 5000
    assert args.summary_threshold == 200


def test_convert_prints_json(tmp_path, capsys) -> None:
    path = tmp_path / "sample.md"
    path.write_text(SAMPLE, encoding="utf-8")

    assert main(["convert", str(path)]) == 0

    data = json.loads(capsys.readouterr().out)
    assert data["doc_name"] == "sample"
    assert data["structure"][0]["title"] == "A"
    assert [c["node_id"] for c in data["structure"][0]["children"]] == ["0001", "0002"]


def test_convert_toc(tmp_path, capsys) -> None:
    path = tmp_path / "sample.md"
    path.write_text(SAMPLE, encoding="utf-8")

    assert main(["convert", str(path), "--toc"]) == 0
    assert capsys.readouterr().out == "A\n  B\n  C\n"


def test_convert_writes_output_file(tmp_path) -> None:
    path = tmp_path / "sample.md"
    path.write_text(SAMPLE, encoding="utf-8")
    out = tmp_path / "tree.json"

    assert main(["convert", str(path), "--thinning", "--text", "-o", str(out)]) == 0

    data = json.loads(out.read_text(encoding="utf-8"))
    root = data["structure"][0]
    assert "children" not in root
    assert root["text"] == "# A\ntext1\n\n## B\ntext2\n\n## C\ntext3"


def test_convert_missing_file(tmp_path, capsys) -> None:
    assert main(["convert", str(tmp_path / "nope.md")]) == 1
    assert "File not found" in capsys.readouterr().err


def test_summary_uses_groq_client(tmp_path, capsys) -> None:
    path = tmp_path / "sample.md"
    path.write_text(SAMPLE, encoding="utf-8")

    async def fake_llm(prompt: str) -> str:
        return "unused"

    with patch("mdindex.llm.groq_client.GroqClient") as mock_client_cls:
        mock_client_cls.return_value.as_llm_function = MagicMock(return_value=fake_llm)
        assert main(["convert", str(path), "--summary", "--model", "tiny"]) == 0

    mock_client_cls.return_value.as_llm_function.assert_called_once_with(model="tiny")
    data = json.loads(capsys.readouterr().out)
    assert data["structure"][0]["prefix_summary"] == "# A\ntext1"


def test_no_command_prints_help(capsys) -> None:
    assert main([]) == 0
    assert "convert" in capsys.readouterr().out
