"""``python -m omniapp``."""

from omniapp.cli import main

main()
