import argparse
import logging
import sys

from toolprov import Dependencies, ToolprovConfig, ToolprovLogger


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="toolprov",
        description="Install the CLI and its runtime if needed, then run the CLI.",
    )
    parser.add_argument("--latest", required=True, help="Latest released CLI version")
    parser.add_argument("--config-dir", default=".", help="Directory holding toolprov.toml")
    parser.add_argument("-v", "--verbose", action="store_true")
    parser.add_argument("cli_args", nargs=argparse.REMAINDER, help="Arguments for the CLI")
    args = parser.parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(level=level)

    deps = Dependencies(ToolprovConfig.load(args.config_dir), ToolprovLogger(level=level))
    status = deps.ensure_installed(args.latest)
    if not status.ready:
        for error in status.errors or ["No usable runtime found"]:
            print(error, file=sys.stderr)
        return 1

    cli_args = list(args.cli_args)
    if cli_args[:1] == ["--"]:
        cli_args = cli_args[1:]
    result = deps.run_cli(cli_args)
    if result.output:
        print(result.output)
    if result.error:
        print(result.error, file=sys.stderr)
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
