"""
REPL - Interactive command shell for DeviceDB

Provides a command-line interface for inserting and looking up devices
and inspecting the shape of the B-tree.
"""

import argparse
import sys
from dataclasses import replace
from typing import List, Optional, TextIO

from ..parser.parser import ParseError
from .config import DatabaseConfig
from .database import Database
from .executor import CommandResult
from .log import configure_logging


class REPL:
    """
    Interactive REPL (Read-Eval-Print Loop) for DeviceDB.

    Features:
    - One command per line (a trailing ';' is optional)
    - Special commands (.count, .stats, .tree, .valid, .quit, etc.)
    - Pretty-printed results
    """

    BANNER = """
DeviceDB - an in-memory B-tree index of IoT devices

Type .help for commands, or enter a command such as:
  INSERT (1, '10.0.0.1', '/floor1/lamp');
"""

    HELP = """
Special Commands:
  .help             Show this help message
  .count            Show number of devices
  .stats            Show index statistics
  .tree             Show the tree level by level
  .valid            Check the B-tree invariants
  .quit / .exit     Exit the REPL

Commands:
  INSERT (id, 'address' [, 'path']) [, ...]   Add devices
  FIND id                                     Look up a device
  WALK                                        List devices in id order
  COUNT                                       Number of devices
  VALIDATE                                    Check the B-tree invariants
  SHOW TREE                                   Show the tree level by level
  SHOW STATS                                  Show index statistics
"""

    def __init__(self, db: Optional[Database] = None, out: TextIO = None):
        """Initialize REPL with a database."""
        self.db = db if db is not None else Database()
        self.out = out if out is not None else sys.stdout
        self.running = False

    def _print(self, text: str = "") -> None:
        print(text, file=self.out)

    def run(self) -> None:
        """Start the REPL loop."""
        self.running = True
        self._print(self.BANNER)

        while self.running:
            try:
                self._process_input()
            except KeyboardInterrupt:
                self._print("\n(Use .quit to exit)")
            except EOFError:
                self._print()
                self._quit()

    def _process_input(self) -> None:
        line = input("devicedb> ").strip()
        if not line:
            return
        self.handle_line(line)

    def handle_line(self, line: str) -> None:
        """Process one line of input (a dot command or a statement)."""
        if line.startswith('.'):
            self._handle_command(line)
        else:
            self._execute_statement(line)

    def _handle_command(self, cmd: str) -> None:
        """Handle special dot commands."""
        command = cmd.split(None, 1)[0].lower()

        if command in ('.quit', '.exit', '.q'):
            self._quit()
        elif command == '.help':
            self._print(self.HELP)
        elif command == '.count':
            self._print(f"{self.db.count()} device(s)")
        elif command == '.stats':
            for key, value in self.db.stats().items():
                self._print(f"  {key:8} {value}")
        elif command == '.tree':
            self._print(self.db.index.dump_structure())
        elif command == '.valid':
            self._print("valid" if self.db.is_valid() else "invalid")
        else:
            self._print(f"Unknown command: {command}")
            self._print("Type .help for available commands.")

    def _quit(self) -> None:
        self._print("Goodbye!")
        self.running = False
        self.db.close()

    def _execute_statement(self, command: str) -> None:
        """Execute a command and display results."""
        try:
            result = self.db.execute(command)
        except (ParseError, ValueError) as e:
            self._print(f"Error: {e}")
            return

        if result.rows:
            self._print_results(result)
        elif result.message:
            self._print(result.message)

    def _print_results(self, result: CommandResult) -> None:
        """Pretty-print results as a table."""
        columns = result.columns
        widths = {col: len(col) for col in columns}
        for row in result.rows:
            for col in columns:
                widths[col] = max(widths[col], len(str(row.get(col, ''))))

        # Limit column width for readability
        max_width = 40
        widths = {col: min(w, max_width) for col, w in widths.items()}

        header = " | ".join(col.ljust(widths[col])[:widths[col]] for col in columns)
        separator = "-+-".join("-" * widths[col] for col in columns)

        self._print()
        self._print(header)
        self._print(separator)
        for row in result.rows:
            values = [str(row.get(col, '')).ljust(widths[col])[:widths[col]] for col in columns]
            self._print(" | ".join(values))
        self._print(f"\n({len(result.rows)} row(s))")


def _print_result(result: CommandResult) -> None:
    for row in result.rows:
        print(row)
    if result.message and not result.rows:
        print(result.message)


def build_arg_parser() -> argparse.ArgumentParser:
    """Command-line options for the devicedb shell"""
    parser = argparse.ArgumentParser(
        prog="devicedb",
        description="DeviceDB - an in-memory B-tree index of IoT devices"
    )
    parser.add_argument(
        '-o', '--order', type=int,
        help='Maximum children per B-tree node (default: $DEVICEDB_ORDER or 5)'
    )
    parser.add_argument(
        '--unique', action='store_true', default=None,
        help='Reject duplicate device ids'
    )
    parser.add_argument(
        '-e', '--execute',
        help='Execute commands (separated by ;) and exit'
    )
    parser.add_argument(
        '-f', '--file',
        help='Execute commands from file and exit'
    )
    parser.add_argument(
        '--log-level',
        help='Log level for messages on stderr (default: $DEVICEDB_LOG_LEVEL or WARNING)'
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the CLI."""
    args = build_arg_parser().parse_args(argv)

    try:
        config = DatabaseConfig.from_env()
        if args.log_level:
            config = replace(config, log_level=args.log_level.upper())
        configure_logging(config.log_level)
        db = Database(order=args.order, unique=args.unique, config=config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    script = None
    if args.execute:
        script = args.execute
    elif args.file:
        try:
            with open(args.file, 'r') as f:
                script = f.read()
        except OSError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    if script is not None:
        try:
            for result in db.execute_many(script):
                _print_result(result)
        except (ParseError, ValueError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        return 0

    REPL(db).run()
    return 0


if __name__ == '__main__':
    sys.exit(main())
