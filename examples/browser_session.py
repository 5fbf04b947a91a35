#!/usr/bin/env python3
"""
Browser-style session history built on DazzleHistory.

This example demonstrates:
- Recording visits with a custom equality test (URLs compared without
  their fragment, so the stored payload picks up the latest fragment)
- Going back and branching without losing the abandoned branch
- Rendering the whole history as an indented outline
"""

import logging
import sys
from pathlib import Path
from urllib.parse import urldefrag

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent))

from dazzlehistory import HistoryConfig, HistoryTree


def same_page(new_url, existing_url):
    """Two URLs name the same page if they differ only in their fragment."""
    return urldefrag(new_url)[0] == urldefrag(existing_url)[0]


def print_outline(outline, indent=0):
    """Print a nested [data, *children] outline."""
    data, *children = outline
    print("  " * indent + str(data))
    for child in children:
        print_outline(child, indent + 1)


def main():
    """Walk through a short browsing session."""
    if "-v" in sys.argv:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    history = HistoryTree(HistoryConfig(test=same_page))

    for url in ("https://example.org/",
                "https://example.org/docs",
                "https://example.org/docs/install"):
        history.add_child(url)

    # Back to /docs, then somewhere else: /docs/install is kept as a branch
    history.back()
    history.add_child("https://example.org/docs/api")

    # Revisiting a page with a fragment refreshes the stored URL in place
    history.back()
    history.add_child("https://example.org/docs/install#linux")

    print(f"Current page: {history.current_data()}")
    print(f"Depth: {history.depth()}  Size: {history.size()}")
    print(f"Back stack: {history.parent_data()}")
    print("-" * 50)
    print_outline(history.outline())

    stats = history.get_stats()
    print("-" * 50)
    print(f"Branch points: {stats['branch_points']}, leaves: {stats['leaf_nodes']}")


if __name__ == "__main__":
    main()
