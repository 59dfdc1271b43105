"""
Game Center repository tooling.

- tracker: records merged pull requests in each game's game-info.yaml
- validator: checks games.json and the game directories it references
- smoke: serves the site locally and checks that every game loads
"""

__version__ = "0.1.0"
