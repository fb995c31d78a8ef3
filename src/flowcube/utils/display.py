"""
User-friendly display utilities for flowcube.
"""

from typing import Any, Dict
from datetime import datetime


class StatusDisplay:
    """Handles status display for the CLI."""

    @staticmethod
    def print_header(title: str, width: int = 60):
        """Print a formatted header."""
        print("\n" + "=" * width)
        print(f"{title:^{width}}")
        print("=" * width)

    @staticmethod
    def print_section(title: str, width: int = 60):
        """Print a section header."""
        print(f"\n📋 {title}")
        print("-" * width)

    @staticmethod
    def print_config(config_dict: Dict[str, Any], title: str = "Configuration"):
        """Print a nested configuration dictionary."""
        StatusDisplay.print_section(title)
        for section, values in config_dict.items():
            if isinstance(values, dict):
                print(f"  [{section}]")
                for key, value in values.items():
                    print(f"    {key:<22} : {value}")
            else:
                print(f"  {section:<24} : {values}")

    @staticmethod
    def print_status(message: str, status: str = "info"):
        """Print a status message with appropriate emoji."""
        icons = {
            "info": "ℹ️",
            "success": "✅",
            "warning": "⚠️",
            "error": "❌",
            "win": "🎉",
        }
        icon = icons.get(status, "ℹ️")
        timestamp = datetime.now().strftime("%H:%M:%S")
        print(f"{icon} [{timestamp}] {message}")

    @staticmethod
    def print_results(results: Dict[str, Any], title: str = "State"):
        """Print key/value results."""
        StatusDisplay.print_section(title)
        for key, value in results.items():
            if isinstance(value, bool):
                icon = "✅" if value else "❌"
                print(f"  {key:<20} : {icon} {value}")
            else:
                print(f"  {key:<20} : {value}")
