"""
Entry point for running noggin as a module.

Usage:
    python -m noggin.cli due
    python -m noggin.cli library list
    python -m noggin.cli --help
"""
from .main import main

if __name__ == "__main__":
    main()
