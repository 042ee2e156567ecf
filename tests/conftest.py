"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import sys
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local lcovkit package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of lcovkit modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("lcovkit"):
        del sys.modules[module_name]


SAMPLE_TRACE = """\
TN:unit
SF:lib/src/calculator.dart
FN:3,add
FN:8,subtract
FNDA:4,add
FNDA:0,subtract
FNF:2
FNH:1
DA:3,4
DA:4,4
DA:8,0
DA:9,0
LF:4
LH:2
BRDA:4,0,0,3
BRDA:4,0,1,-
BRF:2
BRH:1
end_of_record
TN:unit
SF:lib/src/parser.dart
FN:1,parse
FNDA:2,parse
FNF:1
FNH:1
DA:1,2
DA:2,2
LF:2
LH:2
end_of_record
"""


@pytest.fixture
def sample_trace() -> str:
    """Two-file trace with lines, functions and branches."""
    return SAMPLE_TRACE


@pytest.fixture
def sample_trace_file(tmp_path: Path) -> Path:
    """The sample trace written to lcov.info."""
    path = tmp_path / "lcov.info"
    path.write_text(SAMPLE_TRACE)
    return path
