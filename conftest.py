from pathlib import Path
import sys

# put "src" on sys.path so `import swiftchain` works without an editable install
src_dir = Path(__file__).resolve().parent / "src"
if str(src_dir) not in sys.path:
    sys.path.insert(0, str(src_dir))
