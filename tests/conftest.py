import os
import sys
from pathlib import Path

# Keep the real preferences file out of test runs
os.environ.setdefault("FUNGUS_PREFS_FILE_PATH", str(Path(__file__).resolve().parent / ".prefs.json"))

sys.path.append(str(Path(__file__).resolve().parents[1]))
