"""lifeplan: daily tasks, hierarchical goals and habit tracking."""

__version__ = "0.1.0"
