"""CLI entry point for cargo-teensy."""

import shutil
import sys
from pathlib import Path

import click

from cargo_teensy import __version__
from cargo_teensy.config import (
    KNOWN_KEYS, default_value, get_config_value, list_config, load_project_config, set_config_value,
)
from cargo_teensy.errors import CommandFailed, TeensyError
from cargo_teensy.pipeline import UploadOptions, run_upload
from cargo_teensy.ports import list_teensy_ports
from cargo_teensy.scaffold import scaffold_project
from cargo_teensy.version import check_version


class TeensyGroup(click.Group):
    """Command group that turns TeensyError into an exit status."""

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except CommandFailed as e:
            click.echo(e.message, err=True)
            raise SystemExit(e.exit_code)
        except TeensyError as e:
            click.echo(f"Error: {e.message}", err=True)
            raise SystemExit(e.exit_code)


@click.group(cls=TeensyGroup)
@click.version_option(__version__, prog_name="cargo-teensy")
def main():
    """Teensy in one command."""
    pass


def run():
    """Console script entry point.

    cargo runs ``cargo-teensy teensy <args>`` for ``cargo teensy <args>``,
    so a leading ``teensy`` is dropped.
    """
    args = sys.argv[1:]
    if args and args[0] == "teensy":
        args = args[1:]
    main(args=args, prog_name="cargo teensy")


@main.command()
@click.argument("name")
@click.option("--ignore-version", is_flag=True, help="Continue even if the installed Rust differs from the one zinc requires.")
@click.option("-v", "--verbose", is_flag=True, help="Show commands before executing.")
def new(name, ignore_version, verbose):
    """Create a new Teensy project NAME."""
    config = load_project_config(Path.cwd())
    check_version(config.toolchain, ignore=ignore_version, verbose=verbose)
    scaffold_project(name, verbose=verbose)
    click.echo(f"Created Teensy project {name}")


@main.command()
@click.option("-r", "--hard-reboot", is_flag=True, help="teensy_loader_cli: Use hard reboot if device not online.")
@click.option("-s", "--soft-reboot", is_flag=True, help="teensy_loader_cli: Use soft reboot if device not online (Teensy3.x only).")
@click.option("-n", "--no-reboot", is_flag=True, help="teensy_loader_cli: No reboot after programming.")
@click.option("-v", "--verbose", is_flag=True, help="Show commands before executing.")
def upload(hard_reboot, soft_reboot, no_reboot, verbose):
    """Build the project and flash it to the Teensy."""
    config = load_project_config(Path.cwd())
    options = UploadOptions(
        hard_reboot=hard_reboot,
        soft_reboot=soft_reboot,
        no_reboot=no_reboot,
        verbose=verbose,
    )
    run_upload(config, options)


_REQUIRED_TOOLS = [
    ("cargo", "Install Rust: https://rustup.rs"),
    ("rustup", "Install Rust: https://rustup.rs"),
    ("arm-none-eabi-objcopy", "Install the GNU Arm Embedded Toolchain (arm-none-eabi-gcc)"),
    ("teensy_loader_cli", "Install: https://www.pjrc.com/teensy/loader_cli.html"),
]


@main.command()
def doctor():
    """Check your environment for Teensy development."""
    ok = True

    for tool, hint in _REQUIRED_TOOLS:
        path = shutil.which(tool)
        if path:
            click.echo(f"[OK] {tool} found at {path}")
        else:
            click.echo(f"[!!] {tool} not found. {hint}")
            ok = False

    # Teensy boards only show up as serial ports when running USB serial firmware
    ports = list_teensy_ports()
    if ports:
        click.echo("[OK] Teensy serial ports found:")
        for p in ports:
            click.echo(f"     {p.device:<25} {p.description}")
    else:
        click.echo("[--] No Teensy serial ports detected (normal for a board in bootloader mode)")

    if ok:
        click.echo("\nAll checks passed. Ready for Teensy development.")
    else:
        click.echo("\nSome checks failed. Fix the issues above.")
        raise SystemExit(1)


@main.command("config")
@click.argument("key", required=False)
@click.argument("value", required=False)
@click.option("--list", "show_list", is_flag=True, help="Show every setting and where its value comes from.")
def config_cmd(key, value, show_list):
    """Get or set teensy.toml values (board.mcu, build.target, ...)."""
    project_dir = Path.cwd()

    if show_list:
        stored = list_config(project_dir)
        for section, keys in KNOWN_KEYS.items():
            for k in keys:
                dotted = f"{section}.{k}"
                if dotted in stored:
                    click.echo(f"  {dotted} = {stored[dotted]}")
                else:
                    click.echo(f"  {dotted} = {default_value(dotted)} (default)")
        return

    if key and value:
        set_config_value(project_dir, key, value)
        click.echo(f"Set {key} = {value}")
        return

    if key:
        default = default_value(key)
        val = get_config_value(project_dir, key)
        if val is None:
            click.echo(f"{key} is not set (default: {default}).")
        else:
            click.echo(f"{key} = {val}")
        return

    click.echo("Usage: cargo teensy config <KEY> [VALUE] or cargo teensy config --list")
    click.echo("Keys: " + ", ".join(f"{s}.{k}" for s, keys in KNOWN_KEYS.items() for k in keys))
