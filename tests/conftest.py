# tests/conftest.py
import os

# Qt widgets are created without a display.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
