"""qblock: Blockudoku-style block puzzle engine.

Subpackages:
- game: grid, shapes, scoring rules, game-over detection and the session
- env: Gymnasium environment over the session
- rl: simple agents driving the environment
"""

__version__ = "0.1.0"
