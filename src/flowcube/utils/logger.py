import os
import json
from datetime import datetime
from typing import Any, Dict, List


class SessionLogger:
    def __init__(self, log_dir: str, session_name: str):
        """
        Initializes the event logger for one puzzle session.

        Args:
            log_dir (str): The base directory for logs.
            session_name (str): A name for the session, usually the layout name.
        """
        self.timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.session_name = f"{session_name}_{self.timestamp}"
        self.run_dir = os.path.join(log_dir, self.session_name)
        self.logs: List[Dict[str, Any]] = []

        os.makedirs(self.run_dir, exist_ok=True)

    def log_step(self, step: int, data: Dict[str, Any], verbose: bool = True):
        """
        Logs a single session event.

        Args:
            step (int): The event counter of the session.
            data (Dict[str, Any]): Event data; ``step_type`` names the event.
            verbose (bool): Whether to print the event to console.
        """
        log_entry = {"step": step, "timestamp": datetime.now().isoformat(), **data}

        if verbose:
            step_type = data.get("step_type", "unknown")
            if step_type == "press":
                print(f"👆 Step {step}: Press at {data.get('cell')}")
            elif step_type == "drag":
                print(f"➰ Step {step}: Drag to {data.get('cell')} (gesture length {data.get('length')})")
            elif step_type == "release":
                print(f"✋ Step {step}: Release after {data.get('length')} cells")
            elif step_type == "scroll":
                print(f"🔀 Step {step}: Layer {data.get('layer')}")
            elif step_type == "commit":
                print(f"⚡ Step {step}: {data.get('message', 'Committed')}")
            elif step_type == "win":
                print(f"🎉 Step {step}: Puzzle solved")
            elif step_type == "error":
                print(f"❌ Step {step}: Error occurred")
                print(f"  🔍 Details: {data.get('error', 'Unknown error')}")

        self.logs.append(log_entry)

    def count(self, step_type: str) -> int:
        return len([log for log in self.logs if log.get("step_type") == step_type])

    def save_logs(self):
        """Saves all collected events to a JSON file plus a text summary."""
        log_file = os.path.join(self.run_dir, "session_log.json")
        with open(log_file, "w") as f:
            json.dump(self.logs, f, indent=2, default=str)

        summary_file = os.path.join(self.run_dir, "summary.txt")
        self._create_summary_file(summary_file)

        print(f"📁 Logs saved to: {log_file}")
        print(f"📋 Summary saved to: {summary_file}")
        return log_file

    def _create_summary_file(self, summary_file: str):
        """Create a human-readable summary file."""
        with open(summary_file, "w") as f:
            f.write(f"Session Summary: {self.session_name}\n")
            f.write("=" * 60 + "\n")
            f.write(f"Presses: {self.count('press')}\n")
            f.write(f"Commits: {self.count('commit')}\n")
            f.write(f"Errors Occurred: {self.count('error')}\n")
            f.write(f"Solved: {'yes' if self.count('win') else 'no'}\n")
            f.write("\nCommit history:\n")
            f.write("-" * 30 + "\n")

            for log in self.logs:
                step = log.get("step", "?")
                step_type = log.get("step_type", "unknown")
                if step_type == "commit":
                    f.write(f"Step {step}: {log.get('message', '')}\n")
                elif step_type == "win":
                    f.write(f"Step {step}: SOLVED\n")
                elif step_type == "error":
                    f.write(f"Step {step}: ERROR - {log.get('error', 'Unknown')}\n")
