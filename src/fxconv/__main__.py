# src/fxconv/__main__.py
"""Module entry point: python -m fxconv"""

from fxconv.app import main

if __name__ == "__main__":
    main()
