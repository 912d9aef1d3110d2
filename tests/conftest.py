import sys
from pathlib import Path

# Make path_utils importable when running tests from a source checkout
_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))
