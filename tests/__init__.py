"""
Kai Test Suite

Unit tests for the orchestrator, UI block mapper, extraction pipelines and
supporting clients. Model calls are always mocked.
Run tests with: pytest tests/
"""

import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))
