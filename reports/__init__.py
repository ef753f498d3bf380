"""Reports module - Leaderboard rendering.

This module contains the rendering side of the project:
- leaderboard/ - snapshot loading, column layout, metrics, sorting, renderers
"""
