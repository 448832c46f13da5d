"""IniConf command line parser module."""

import argparse
import logging
import sys
from typing import List, Optional

from .config import DEFAULT_SECTION, Config
from .exceptions import IniConfError
from .loader import parse_overwrite
from .utils import dump_yaml

logger = logging.getLogger(__name__)


class IniConfParser:
    """Builds a configuration store from command line arguments."""

    def __init__(self, default_section: str = DEFAULT_SECTION):
        """Initialize IniConf parser.

        Args:
            default_section: Name of the fallback section of the built store
        """
        self.default_section = default_section

    def parse_args(self, args: Optional[List[str]] = None) -> Config:
        """Parse arguments and return the configuration store.

        Args:
            args: Command line arguments (defaults to sys.argv[1:])

        Returns:
            Configuration built from the given files and overwrites
        """
        if args is None:
            args = sys.argv[1:]

        parsed_args = self._parse_command_line(args)
        return self._build_config(parsed_args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """Parse arguments, then print what was asked for.

        Args:
            args: Command line arguments (defaults to sys.argv[1:])

        Returns:
            Exit status
        """
        if args is None:
            args = sys.argv[1:]

        parsed_args = self._parse_command_line(args)
        package_logger = logging.getLogger("iniconf")
        previous_level = package_logger.level
        handler = _setup_logging(package_logger, parsed_args.verbose)

        try:
            config = self._build_config(parsed_args)
            if parsed_args.get:
                self._print_option(config, parsed_args.get, parsed_args.raw)
            if parsed_args.print_config or not parsed_args.get:
                self._print_config(config, parsed_args.raw)
        except IniConfError as e:
            logger.error("%s", e)
            return 1
        finally:
            package_logger.removeHandler(handler)
            package_logger.setLevel(previous_level)
        return 0

    def _parse_command_line(self, args: List[str]) -> argparse.Namespace:
        """Parse command line arguments.

        Args:
            args: Command line arguments

        Returns:
            Parsed arguments namespace
        """
        parser = argparse.ArgumentParser(prog="iniconf", description="IniConf Configuration Parser")
        parser.add_argument(
            "configs",
            nargs="*",
            help="INI or YAML configuration file, or option overwrite in format <section>.<option>=<value>.",
        )
        parser.add_argument("--print", dest="print_config", action="store_true", help="Print final configuration")
        parser.add_argument("--get", metavar="SECTION.OPTION", help="Print the value of a single option")
        parser.add_argument("--raw", action="store_true", help="Print values without resolving references")
        parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
        return parser.parse_args(args)

    def _build_config(self, args: argparse.Namespace) -> Config:
        """Build the store from files and overwrites, applied in order.

        Args:
            args: Parsed command line arguments  # (namespace with config sources)

        Returns:
            Built configuration store
        """
        return Config.from_files(*args.configs, default_section=self.default_section)

    def _print_option(self, config: Config, key: str, raw: bool) -> None:
        """Print one option.

        Args:
            config: Configuration store
            key: ``section.option``, or ``option`` for the default section
            raw: Skip reference resolution
        """
        section, name, _ = parse_overwrite(f"{key}=", self.default_section)
        value = config.get_raw_string(section, name) if raw else config.get_string(section, name)
        print(value)

    def _print_config(self, config: Config, raw: bool) -> None:
        """Print configuration in YAML format.

        Args:
            config: Configuration to print
            raw: Skip reference resolution
        """
        print(dump_yaml(config.to_dict(resolved=not raw)), end="")


def _setup_logging(package_logger: logging.Logger, verbose: bool) -> logging.Handler:
    package_logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    package_logger.addHandler(handler)
    return handler


def main(argv: Optional[List[str]] = None) -> int:
    """Console entry point."""
    return IniConfParser().run(argv)


if __name__ == "__main__":
    sys.exit(main())
