import json
from typing import Any

from fhir_definitions import application
from fhir_definitions.config import reset_config
from tests.utils import load_fixture, write_json


def test_parse_should_report_entries(tmp_path: Any, capsys: Any) -> None:
    path = write_json(tmp_path / "search-parameters.json", load_fixture("bundle"))

    assert application.run(["parse", path]) == application.EXIT_OK

    captured = capsys.readouterr()
    assert "entries" in captured.out
    assert captured.err == ""


def test_parse_should_print_errors_as_json_lines(tmp_path: Any, capsys: Any) -> None:
    bundle = {
        "resourceType": "Bundle",
        "entry": [{"resource": {"resourceType": "Patient", "id": "p"}}],
    }
    path = write_json(tmp_path / "bundle.json", bundle)

    assert application.run(["parse", path]) == application.EXIT_DECODE_ERROR

    lines = capsys.readouterr().err.strip().splitlines()
    assert len(lines) == 1
    error = json.loads(lines[0])
    assert error["code"] == "unknown_resource"
    assert error["entry_index"] == 0


def test_permissive_parse_should_succeed(tmp_path: Any, capsys: Any) -> None:
    bundle = {
        "resourceType": "Bundle",
        "entry": [{"resource": {"resourceType": "Patient", "id": "p"}}],
    }
    path = write_json(tmp_path / "bundle.json", bundle)

    assert application.run(["parse", path, "--permissive"]) == application.EXIT_OK

    captured = capsys.readouterr()
    assert "0 entries" in captured.out
    assert "unknown_resource" in captured.err


def test_missing_file_should_exit_with_io_error(tmp_path: Any, capsys: Any) -> None:
    path = str(tmp_path / "missing.json")

    assert application.run(["parse", path]) == application.EXIT_IO_ERROR
    assert "file_not_found" in capsys.readouterr().err


def test_parse_should_read_version_info(tmp_path: Any, capsys: Any) -> None:
    path = write_json(tmp_path / "version.info", load_fixture("version_info"))

    assert application.run(["parse", path]) == application.EXIT_OK
    assert "VersionInfo" in capsys.readouterr().out


def test_missing_config_file_should_exit_with_io_error(tmp_path: Any) -> None:
    path = write_json(tmp_path / "bundle.json", load_fixture("bundle"))

    code = application.run(["--config", str(tmp_path / "missing.conf"), "parse", path])

    assert code == application.EXIT_IO_ERROR
    reset_config()


def test_config_option_should_be_accepted_after_the_path(tmp_path: Any) -> None:
    args = application.build_parser().parse_args(["parse", "x.json", "--config", "a.conf"])

    assert args.config == "a.conf"
    assert application.build_parser().parse_args(["parse", "x.json"]).config is None


def test_skeleton_should_write_one_module_per_definition(tmp_path: Any, capsys: Any) -> None:
    bundle = load_fixture("bundle")
    bundle["entry"].append({"resource": load_fixture("structure_definition")})
    path = write_json(tmp_path / "profiles-types.json", bundle)
    out_dir = tmp_path / "out"

    code = application.run(["skeleton", path, "--out", str(out_dir)])

    assert code == application.EXIT_OK
    assert capsys.readouterr().out.strip() == str(out_dir / "period.py")
    assert (out_dir / "period.py").read_text(encoding="utf-8").startswith('"""\nPeriod\n')


def test_skeleton_should_write_nothing_for_a_failing_bundle(tmp_path: Any, capsys: Any) -> None:
    bundle = {
        "resourceType": "Bundle",
        "entry": [{"resource": {"resourceType": "Quokka"}}],
    }
    path = write_json(tmp_path / "profiles-types.json", bundle)
    out_dir = tmp_path / "out"

    assert application.run(["skeleton", path, "--out", str(out_dir)]) == application.EXIT_DECODE_ERROR
    assert not out_dir.exists()
    assert "unknown_resource" in capsys.readouterr().err
