"""
Command-line interface for flowcube.

Subcommands load a layout into an interactive text session, list and render
layouts, and create or validate YAML configuration files.
"""

import argparse
import os
import re
import sys
from typing import Any, Dict, List, Optional

from flowcube.core.config import Config, create_default_config, load_config, validate_config
from flowcube.environment import FlowEnvironment
from flowcube.layouts import available_layouts, load_layout
from flowcube.core.level import Level
from flowcube.render.visualizer import render_image
from flowcube.utils.display import StatusDisplay


HELP_TEXT = """
Available commands:
  help                    - Show this help
  layouts                 - List available layouts
  load <name>             - Load a layout (e.g., load medium)
  state                   - Show current session state
  view [layer|all]        - Show the active layer, a given layer, or all layers
  press x y z             - Press on a cell (START or drawn segment)
  drag x y z [x y z ...]  - Drag the pointer over one or more cells
  release                 - Release and commit the drag
  scroll in|out [x y z]   - Change layer; with a cell, carry the drag along
  flow <color>            - Show a color's flow
  clear <color>           - Erase a color's flow
  reset                   - Clear every flow
  render <file.png>       - Save an image of the current state
  quit/exit               - Exit the game
"""


def _parse_cells(tokens: List[str]) -> List[List[int]]:
    numbers = [int(n) for n in re.split(r"[\s,()]+", " ".join(tokens)) if n]
    if not numbers or len(numbers) % 3:
        raise ValueError("Cells need three integers each: x y z")
    return [numbers[i:i + 3] for i in range(0, len(numbers), 3)]


class FlowGame:
    """Interactive text front end over a FlowEnvironment."""

    def __init__(self, config: Optional[Config] = None):
        self.env = FlowEnvironment(config)

    def load(self, layout: str) -> bool:
        result = self.env.execute_tool_call("load", {"layout": layout})
        if result["status"] != "success":
            print(f"✗ {result['message']}")
            return False
        state = result["state"]
        print(f"\n=== Loaded layout: {state['layout']} ===")
        print(f"Grid: {state['size']}x{state['size']}x{state['layers']}")
        print(f"Colors: {', '.join(state['colors'])}")
        self.show_view()
        return True

    def show_state(self):
        result = self.env.execute_tool_call("state")
        if result["status"] != "success":
            print(result["message"])
            return
        state = result["state"]
        StatusDisplay.print_results({
            "Layout": state["layout"],
            "Active layer": state["layer"],
            "Occupied": f"{state['occupied']}/{state['drawable']} cells",
            "Connected": ", ".join(state["connected"]) or "-",
            "Dragging": state["dragging"],
            "Won": state["won"],
        }, "Current State")
        if state["won"]:
            print("\n🎉 PUZZLE COMPLETE! 🎉")

    def show_view(self, which: Optional[str] = None):
        if self.env.session is None:
            print("No puzzle loaded")
            return
        if which == "all":
            print(self.env.describe())
        elif which is not None:
            print(self.env.describe(int(which)))
        else:
            print(self.env.describe(self.env.session.layer))

    def _report(self, result: Dict[str, Any]) -> None:
        mark = "✓" if result["status"] == "success" else "✗"
        print(f"{mark} {result['message']}")

    def handle_command(self, line: str) -> bool:
        """Run one command line. Returns False when the user asked to quit."""
        parts = line.strip().split()
        if not parts:
            return True
        command, args = parts[0].lower(), parts[1:]

        if command == "help":
            print(HELP_TEXT)
        elif command in ("quit", "exit"):
            print("Goodbye!")
            return False
        elif command == "layouts":
            result = self.env.execute_tool_call("layouts")
            print("\n".join(f"  - {name}" for name in result["layouts"]))
        elif command == "load":
            if not args:
                print("Usage: load <name>")
            else:
                self.load(args[0])
        elif command == "state":
            self.show_state()
        elif command == "view":
            self.show_view(args[0] if args else None)
        elif command == "press":
            cells = _parse_cells(args)
            self._report(self.env.execute_tool_call("press", {"cell": cells[0]}))
            self.show_view()
        elif command == "drag":
            self._report(self.env.execute_tool_call("drag", {"cells": _parse_cells(args)}))
            self.show_view()
        elif command == "release":
            result = self.env.execute_tool_call("release")
            self._report(result)
            self.show_view()
            if result.get("won"):
                StatusDisplay.print_status("Puzzle solved!", "win")
        elif command == "scroll":
            if not args:
                print("Usage: scroll in|out [x y z]")
            else:
                arguments = {"direction": args[0]}
                if len(args) > 1:
                    arguments["cell"] = _parse_cells(args[1:])[0]
                self._report(self.env.execute_tool_call("scroll", arguments))
                self.show_view()
        elif command == "flow":
            if not args:
                print("Usage: flow <color>")
            else:
                result = self.env.execute_tool_call("flow", {"color": args[0]})
                self._report(result)
                if result.get("flow"):
                    print("  " + " -> ".join(str(tuple(c)) for c in result["flow"]))
        elif command == "clear":
            if not args:
                print("Usage: clear <color>")
            else:
                self._report(self.env.execute_tool_call("clear", {"color": args[0]}))
                self.show_view()
        elif command == "reset":
            self._report(self.env.execute_tool_call("reset"))
        elif command == "render":
            if not args:
                print("Usage: render <file.png>")
            else:
                self.env.render().save(args[0])
                print(f"✓ Saved {args[0]}")
        else:
            print(f"Unknown command: {command}")
            print("Type 'help' for commands")
        return True

    def run_cli(self):
        """Run the interactive loop."""
        print("=== flowcube ===")
        print("Type 'help' for commands")

        while True:
            try:
                line = input("\n> ")
            except EOFError:
                break
            except KeyboardInterrupt:
                print("\nUse 'quit' to exit")
                continue
            try:
                if not self.handle_command(line):
                    break
            except ValueError as e:
                print(f"Error: {e}")
        self.env.close()


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser."""
    parser = argparse.ArgumentParser(
        description="flowcube: connect-the-dots flows on a layered cube",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  flowcube play --layout medium
  flowcube list-layouts --puzzle-dir puzzles/
  flowcube render --layout hard --output hard.png
  flowcube create-config --output flowcube.yaml
  flowcube validate-config flowcube.yaml
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    play_parser = subparsers.add_parser("play", help="Play a layout interactively")
    play_parser.add_argument("--config", "-c", help="Path to configuration file")
    play_parser.add_argument("--layout", "-l", help="Override layout name")
    play_parser.add_argument("--puzzle-dir", help="Directory of JSON layouts")
    play_parser.add_argument("--log", action="store_true", help="Record session events to the log directory")
    play_parser.add_argument("--verbose", "-v", action="store_true", help="Print every session event")

    list_parser = subparsers.add_parser("list-layouts", help="List available layouts")
    list_parser.add_argument("--puzzle-dir", help="Directory of JSON layouts")

    render_parser = subparsers.add_parser("render", help="Render a layout to a PNG file")
    render_parser.add_argument("--layout", "-l", required=True, help="Layout name")
    render_parser.add_argument("--output", "-o", default="layout.png", help="Output image path")
    render_parser.add_argument("--config", "-c", help="Path to configuration file")
    render_parser.add_argument("--puzzle-dir", help="Directory of JSON layouts")

    config_parser = subparsers.add_parser("create-config", help="Create default configuration file")
    config_parser.add_argument("--output", "-o", default="flowcube.yaml", help="Output configuration file")
    config_parser.add_argument("--layout", default="easy", help="Default layout")

    validate_parser = subparsers.add_parser("validate-config", help="Validate configuration file")
    validate_parser.add_argument("config", help="Configuration file to validate")
    validate_parser.add_argument("--strict", action="store_true", help="Treat warnings as errors")

    return parser


def _load_config(args) -> Optional[Config]:
    """Load the configuration named on the command line, or the defaults."""
    if not getattr(args, "config", None):
        config = Config()
    else:
        try:
            config = load_config(args.config)
        except FileNotFoundError:
            StatusDisplay.print_status(f"Configuration file not found: {args.config}", "error")
            StatusDisplay.print_status("Use 'flowcube create-config' to create a default configuration", "info")
            return None
        except ValueError as e:
            StatusDisplay.print_status(f"Configuration error: {e}", "error")
            return None

    if getattr(args, "puzzle_dir", None):
        config.puzzle.puzzle_dir = os.path.abspath(args.puzzle_dir)
    if getattr(args, "layout", None):
        config.puzzle.layout = args.layout
    return config


def play_command(args) -> int:
    config = _load_config(args)
    if config is None:
        return 1
    if args.log:
        config.session.log_events = True
    if args.verbose:
        config.session.verbose = True

    game = FlowGame(config)
    if not game.load(config.puzzle.layout):
        return 1
    game.run_cli()
    return 0


def list_layouts_command(args) -> int:
    names = available_layouts(args.puzzle_dir)
    StatusDisplay.print_section(f"{len(names)} layouts")
    for name in names:
        layout = load_layout(name, args.puzzle_dir)
        print(f"  {name:<16} {layout.size}x{layout.size}x{layout.layers}  "
              f"{len(layout.starts)} colors  ({layout.difficulty})")
    return 0


def render_command(args) -> int:
    config = _load_config(args)
    if config is None:
        return 1
    try:
        layout = load_layout(config.puzzle.layout, config.puzzle.puzzle_dir)
    except ValueError as e:
        StatusDisplay.print_status(str(e), "error")
        return 1
    image = render_image(Level(layout), title=layout.name, config=config.render)
    image.save(args.output)
    StatusDisplay.print_status(f"Saved {args.output}", "success")
    return 0


def create_config_command(args) -> int:
    config = create_default_config(args.output, layout=args.layout)
    StatusDisplay.print_status(f"Configuration written to {args.output}", "success")
    StatusDisplay.print_config(config.to_dict())
    return 0


def validate_config_command(args) -> int:
    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        StatusDisplay.print_status(str(e), "error")
        return 1

    issues = validate_config(config)
    errors = [issue for issue in issues if issue.startswith("ERROR")]
    warnings = [issue for issue in issues if not issue.startswith("ERROR")]

    for error in errors:
        StatusDisplay.print_status(error.replace("ERROR: ", ""), "error")
    for warning in warnings:
        StatusDisplay.print_status(warning.replace("WARNING: ", ""), "warning")

    if errors or (args.strict and warnings):
        return 1
    StatusDisplay.print_status("Configuration is valid", "success")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    command_handlers = {
        "play": play_command,
        "list-layouts": list_layouts_command,
        "render": render_command,
        "create-config": create_config_command,
        "validate-config": validate_config_command,
    }

    handler = command_handlers.get(args.command)
    if handler is None:
        parser.print_help()
        return 1
    try:
        return handler(args)
    except KeyboardInterrupt:
        print("\n⚠️  Interrupted by user")
        return 1


if __name__ == "__main__":
    sys.exit(main())
