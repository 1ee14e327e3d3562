# Services and the shared library are plain module directories, not packages.
# Put them on the path so tests (and IDEs) resolve `main`, `database`, etc.
import sys
from pathlib import Path

project_root = Path(__file__).parent
sys.path.insert(0, str(project_root / "shared"))
sys.path.insert(0, str(project_root / "services" / "product-service"))
