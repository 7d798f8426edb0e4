"""
Link Fixer entry point.

Usage:
    python main.py
"""
import sys
import os

# Ensure the linkfixer package is importable when running from project root
sys.path.insert(0, os.path.dirname(__file__))


def main():
    from linkfixer.app import main as run
    run()


if __name__ == '__main__':
    main()
