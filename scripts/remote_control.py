#!/usr/bin/env python3
"""
Remote Control Script

Send commands to the booth service remotely (via SSH or locally).

Usage:
    python scripts/remote_control.py record                 # Start a video
    python scripts/remote_control.py stop                   # Stop recording
    python scripts/remote_control.py photo                  # Start a photo burst
    python scripts/remote_control.py mode photo             # Switch mode (idle only)
    python scripts/remote_control.py email guest@example.com
    python scripts/remote_control.py send                   # Send the photos
    python scripts/remote_control.py settings 60 8          # Durations (idle only)
    python scripts/remote_control.py status                 # Log status

Or directly from SSH:
    ssh pi@booth "echo RECORD > /tmp/booth_control.cmd"

How it works:
- Writes one command line to the control file
- Service checks this file every ~100ms and deletes it after reading
"""

import argparse
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from config.settings import CONTROL_FILE

# Command -> number of arguments it takes (None = optional single argument)
COMMANDS = {
    "record": 0,
    "stop": 0,
    "photo": 0,
    "mode": None,
    "email": 1,
    "tap": 0,
    "send": 0,
    "retry": 0,
    "cancel": 0,
    "close": 0,
    "ack": 0,
    "settings": 2,
    "status": 0,
}


def build_command(command: str, arguments: list) -> str:
    """
    Build the control-file line for a command.

    Raises:
        ValueError: If the argument count does not fit the command
    """
    command = command.lower()
    if command not in COMMANDS:
        raise ValueError(f"Invalid command: {command}")

    expected = COMMANDS[command]
    if expected is None:
        if len(arguments) > 1:
            raise ValueError(f"{command} takes at most one argument")
    elif len(arguments) != expected:
        raise ValueError(f"{command} takes {expected} argument(s), got {len(arguments)}")

    return " ".join([command.upper()] + list(arguments))


def send_command(line: str, control_file: Path = Path(CONTROL_FILE)) -> bool:
    """
    Send a command line to the booth service.

    Returns:
        True if the command was written, False otherwise
    """
    try:
        control_file.write_text(line)
    except OSError as e:
        print(f"❌ Failed to send command: {e}")
        return False

    print(f"✅ Command sent: {line}")
    print("Service will process it within ~1 second")
    return True


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Send commands to the booth service remotely",
        epilog="""
Examples:
  %(prog)s record                  # Start a video
  %(prog)s mode photo              # Switch to photo mode
  %(prog)s email guest@example.com # Fill in the email dialog
  %(prog)s settings 60 8           # 60s videos, 8s shot countdown
  %(prog)s status                  # Show current status in service logs
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "command",
        choices=sorted(COMMANDS),
        help="Command to send to the booth service",
    )
    parser.add_argument("arguments", nargs="*", help="Command arguments")

    args = parser.parse_args()

    try:
        line = build_command(args.command, args.arguments)
    except ValueError as e:
        parser.error(str(e))

    success = send_command(line)
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
