from pathlib import Path

# VERSION.txt sits beside the package, at the repository root
__version__ = (Path(__file__).parent.parent / "VERSION.txt").read_text(encoding="utf8").strip()
