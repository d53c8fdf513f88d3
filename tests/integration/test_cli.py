import json
import re

from typer.testing import CliRunner

from sysscan.cache import cache_file
from sysscan.cli import app
from sysscan.config import CONFIG_FILENAME

ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


def strip_ansi(text: str) -> str:
    return ANSI_RE.sub("", text)


def test_discover_porcelain_lists_registrations(crate):
    runner = CliRunner()
    result = runner.invoke(
        app,
        ["discover", "--project", str(crate), "--format", "porcelain"],
    )
    assert result.exit_code == 0, result.output
    assert result.stdout.splitlines() == [
        "crate::startup\t-",
        "crate::ui::draw_hud\tstage::POST_UPDATE",
        "crate::physics::integrate\t-",
        "crate::physics::resolve_collisions\tLate",
        "crate::net::client::poll\t-",
    ]


def test_discover_rich_outputs_table_and_summary(crate):
    runner = CliRunner()
    result = runner.invoke(app, ["discover", "--project", str(crate)])
    output = strip_ansi(result.stdout)
    assert result.exit_code == 0, output
    assert "crate::physics::integrate" in output
    assert "5 registrations" in output
    assert "scanned 4, reused 0" in output

    again = runner.invoke(app, ["discover", "--project", str(crate)])
    assert "scanned 0, reused 4" in strip_ansi(again.stdout)


def test_discover_rust_format_renders_plugin(crate):
    runner = CliRunner()
    result = runner.invoke(
        app,
        [
            "discover",
            "--project",
            str(crate),
            "--format",
            "rust",
            "--plugin-name",
            "GamePlugin",
        ],
    )
    assert result.exit_code == 0, result.output
    assert "impl Plugin for GamePlugin {" in result.stdout
    assert ".add_system_to_stage(Late, crate::physics::resolve_collisions.system())" in result.stdout


def test_discover_respects_root_and_marker_options(crate, write_source):
    write_source(crate / "src" / "jobs.rs", "#[job(Nightly)]\nfn rebuild() {}\n")
    runner = CliRunner()
    result = runner.invoke(
        app,
        [
            "discover",
            "-p",
            str(crate),
            "--root",
            "src/jobs.rs",
            "--marker",
            "job",
            "--root-module",
            "jobs",
            "-f",
            "porcelain",
        ],
    )
    assert result.exit_code == 0, result.output
    assert result.stdout.splitlines() == ["jobs::rebuild\tNightly"]


def test_discover_reports_syntax_error(crate, write_source):
    write_source(crate / "src" / "physics.rs", "fn broken( {\n", 1_800_000_000_000_000_000)
    runner = CliRunner()
    result = runner.invoke(app, ["discover", "--project", str(crate)])
    assert result.exit_code == 1
    assert "physics.rs" in strip_ansi(result.stdout).replace("\n", "")


def test_discover_rejects_invalid_marker(crate):
    runner = CliRunner()
    result = runner.invoke(app, ["discover", "--project", str(crate), "--marker", "a b"])
    assert result.exit_code != 0


def test_cache_show_and_clear(crate):
    runner = CliRunner()
    cache_dir = crate.resolve() / "cache"
    runner.invoke(app, ["discover", "-p", str(crate), "--cache-dir", str(cache_dir)])
    artifact = cache_file(cache_dir, crate.resolve() / "src" / "main.rs")
    assert artifact.exists()

    shown = runner.invoke(app, ["cache", "-p", str(crate), "--cache-dir", str(cache_dir), "--show"])
    assert shown.exit_code == 0, shown.output
    output = strip_ansi(shown.stdout)
    assert "crate::physics" in output
    assert "crate::net::client" in output

    cleared = runner.invoke(app, ["cache", "-p", str(crate), "--cache-dir", str(cache_dir), "--clear"])
    assert cleared.exit_code == 0
    assert not artifact.exists()

    again = runner.invoke(app, ["cache", "-p", str(crate), "--cache-dir", str(cache_dir), "--clear"])
    assert "No cache artifact" in strip_ansi(again.stdout)


def test_cache_show_uses_the_artifact_for_the_given_marker(crate):
    runner = CliRunner()
    cache_dir = crate.resolve() / "cache"
    runner.invoke(
        app,
        ["discover", "-p", str(crate), "--cache-dir", str(cache_dir), "--marker", "job"],
    )
    assert cache_file(cache_dir, crate.resolve() / "src" / "main.rs", marker="job").exists()

    default = runner.invoke(app, ["cache", "-p", str(crate), "--cache-dir", str(cache_dir), "--show"])
    assert default.exit_code == 0, default.output
    assert "No cached entries" in strip_ansi(default.stdout)

    tagged = runner.invoke(
        app,
        ["cache", "-p", str(crate), "--cache-dir", str(cache_dir), "--show", "--marker", "job"],
    )
    assert tagged.exit_code == 0, tagged.output
    assert "crate::physics" in strip_ansi(tagged.stdout)


def test_cache_rejects_conflicting_flags(crate):
    runner = CliRunner()
    result = runner.invoke(app, ["cache", "-p", str(crate), "--show", "--clear"])
    assert result.exit_code != 0


def test_config_set_and_show(crate):
    runner = CliRunner()
    result = runner.invoke(
        app,
        ["config", "-p", str(crate), "--set-marker", "job", "--set-root", "src/lib.rs"],
    )
    assert result.exit_code == 0, result.output
    stored = json.loads((crate / CONFIG_FILENAME).read_text())
    assert stored["marker"] == "job"
    assert stored["root_file"] == "src/lib.rs"

    shown = runner.invoke(app, ["config", "-p", str(crate), "--show"])
    output = strip_ansi(shown.stdout)
    assert "Marker: job" in output
    assert "Root file: src/lib.rs" in output


def test_config_rejects_invalid_root_module(crate):
    runner = CliRunner()
    result = runner.invoke(app, ["config", "-p", str(crate), "--set-root-module", "a::b"])
    assert result.exit_code != 0


def test_discover_reports_non_string_config_value(crate):
    (crate / CONFIG_FILENAME).write_text(json.dumps({"marker": 5}))
    runner = CliRunner()
    result = runner.invoke(app, ["discover", "-p", str(crate)])
    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
