"""
Test suite for Frame Studio.

Unit tests for preview geometry, compositing, catalog and pricing, and
integration tests for the HTTP API.
"""

import sys
from pathlib import Path

# Add the project root to the Python path for imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))
