from __future__ import annotations

import sys
from pathlib import Path

# Make the package and the shared fakes importable without installing.
_TESTS = Path(__file__).resolve().parent
for p in (_TESTS.parent, _TESTS):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))
