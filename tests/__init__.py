"""Test package.

Being a package lets test modules share helpers from ``conftest`` and puts
the repository root on ``sys.path`` so ``import notifications`` resolves when
pytest is run from anywhere.
"""

from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))
