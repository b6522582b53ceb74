"""Tests for the build/convert/upload pipeline."""

from unittest.mock import patch, MagicMock

import pytest

from cargo_teensy.config import ProjectConfig, BuildConfig, BoardConfig
from cargo_teensy.errors import CommandFailed, ManifestError
from cargo_teensy.pipeline import (
    UploadOptions,
    build_command,
    hex_command,
    upload_command,
    run_upload,
)


@pytest.fixture
def config():
    return ProjectConfig()


@pytest.fixture
def project(tmp_path):
    (tmp_path / "Cargo.toml").write_text('[package]\nname = "blinky"\nversion = "0.1.0"\n')
    return tmp_path


class TestCommands:
    def test_build_command(self, config):
        assert build_command(config) == [
            "cargo", "build", "--verbose", "--release",
            "--target=thumbv7em-none-eabi", "--features", "mcu_k20",
        ]

    def test_build_command_debug_profile(self):
        config = ProjectConfig(build=BuildConfig(profile="debug", features=[]))
        cmd = build_command(config)
        assert "--release" not in cmd
        assert "--features" not in cmd

    @pytest.mark.parametrize("profile", ["dev", "debug"])
    def test_dev_profile_uses_debug_dir(self, profile):
        config = ProjectConfig(build=BuildConfig(profile=profile))
        assert "--profile" not in build_command(config)
        cmd, hexfile = hex_command(config, "blinky")
        assert hexfile == "target/thumbv7em-none-eabi/debug/blinky.hex"

    def test_custom_profile(self):
        config = ProjectConfig(build=BuildConfig(profile="flash-small"))
        build = build_command(config)
        assert build[build.index("--profile") + 1] == "flash-small"
        assert "--release" not in build
        cmd, hexfile = hex_command(config, "blinky")
        assert hexfile == "target/thumbv7em-none-eabi/flash-small/blinky.hex"

    def test_hex_command(self, config):
        cmd, hexfile = hex_command(config, "blinky")
        assert hexfile == "target/thumbv7em-none-eabi/release/blinky.hex"
        assert cmd == [
            "arm-none-eabi-objcopy", "-O", "ihex", "-R", ".eeprom",
            "target/thumbv7em-none-eabi/release/blinky",
            "target/thumbv7em-none-eabi/release/blinky.hex",
        ]

    def test_upload_command_default(self, config):
        cmd = upload_command(config, UploadOptions(), "fw.hex")
        assert cmd == ["teensy_loader_cli", "-w", "--mcu", "mk20dx256", "fw.hex"]

    def test_upload_command_flags(self, config):
        options = UploadOptions(hard_reboot=True, soft_reboot=True, no_reboot=True)
        cmd = upload_command(config, options, "fw.hex")
        assert cmd == ["teensy_loader_cli", "-w", "--mcu", "mk20dx256", "-n", "-r", "-s", "fw.hex"]

    def test_upload_command_custom_mcu(self):
        config = ProjectConfig(board=BoardConfig(mcu="mk20dx128"))
        cmd = upload_command(config, UploadOptions(), "fw.hex")
        assert "mk20dx128" in cmd


class TestRunUpload:
    @patch("cargo_teensy.process.subprocess.run")
    def test_runs_three_stages(self, mock_run, config, project, capsys):
        mock_run.return_value = MagicMock(returncode=0)
        hexfile = run_upload(config, UploadOptions(), project_dir=project)
        assert hexfile.endswith("blinky.hex")
        programs = [c[0][0][0] for c in mock_run.call_args_list]
        assert programs == ["cargo", "arm-none-eabi-objcopy", "teensy_loader_cli"]
        out = capsys.readouterr().out
        assert "UPLOAD (waiting for reset)" in out
        assert "Upload successful" in out

    @patch("cargo_teensy.process.subprocess.run")
    def test_first_stage_failure_stops_pipeline(self, mock_run, config, project, capsys):
        mock_run.return_value = MagicMock(returncode=101)
        with pytest.raises(CommandFailed) as exc_info:
            run_upload(config, UploadOptions(), project_dir=project)
        assert exc_info.value.exit_code == 101
        assert exc_info.value.command.startswith("cargo build")
        assert mock_run.call_count == 1
        assert "Upload successful" not in capsys.readouterr().out

    @patch("cargo_teensy.process.subprocess.run")
    def test_second_stage_failure_skips_upload(self, mock_run, config, project):
        mock_run.side_effect = [MagicMock(returncode=0), MagicMock(returncode=3)]
        with pytest.raises(CommandFailed) as exc_info:
            run_upload(config, UploadOptions(), project_dir=project)
        assert exc_info.value.exit_code == 3
        assert mock_run.call_count == 2

    @patch("cargo_teensy.process.subprocess.run")
    def test_upload_failure(self, mock_run, config, project, capsys):
        mock_run.side_effect = [MagicMock(returncode=0), MagicMock(returncode=0), MagicMock(returncode=1)]
        with pytest.raises(CommandFailed) as exc_info:
            run_upload(config, UploadOptions(), project_dir=project)
        assert exc_info.value.command.startswith("teensy_loader_cli")
        assert "Upload successful" not in capsys.readouterr().out

    @patch("cargo_teensy.process.subprocess.run")
    def test_verbose_echoes_each_stage(self, mock_run, config, project, capsys):
        mock_run.return_value = MagicMock(returncode=0)
        run_upload(config, UploadOptions(verbose=True), project_dir=project)
        out = capsys.readouterr().out
        assert ">> cargo build" in out
        assert ">> arm-none-eabi-objcopy" in out
        assert ">> teensy_loader_cli" in out

    @patch("cargo_teensy.process.subprocess.run")
    def test_missing_manifest_runs_nothing(self, mock_run, config, tmp_path):
        with pytest.raises(ManifestError):
            run_upload(config, UploadOptions(), project_dir=tmp_path)
        mock_run.assert_not_called()
