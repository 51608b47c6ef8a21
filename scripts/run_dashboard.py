#!/usr/bin/env python3
"""
Dashboard entrypoint - launches the pending-approval TUI.
"""

import sys
from pathlib import Path

# Load environment variables from .env file first
import dotenv
dotenv.load_dotenv()

# Project root holds crm/, tui/ and util/
sys.path.insert(0, str(Path(__file__).parent.parent))

from crm.core.config import dashboard_enabled  # noqa: E402


def main():
    """Validate configuration and launch the TUI dashboard."""
    if not dashboard_enabled():
        print("Operations dashboard is disabled.")
        print("   Set DASHBOARD_ENABLED=true to enable.")
        return 0

    try:
        from tui.main import main as tui_main
        tui_main()
    except KeyboardInterrupt:
        print("\nDashboard interrupted")
    return 0


if __name__ == "__main__":
    sys.exit(main())
