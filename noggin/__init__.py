"""
Noggin - local-first spaced repetition over folders of study material.

Libraries are plain directories; modules are their subfolders. Everything
noggin knows lives in JSON files next to the material.
"""

__version__ = "0.3.0"
