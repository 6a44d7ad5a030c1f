"""
Entry point for running wclang as a module.

Usage: python -m wclang [args]

The target still comes from argv[0], so this form mostly serves tests and
debugging with a symlinked interpreter wrapper.
"""

from wclang.cli.main import run

if __name__ == "__main__":
    run()
