"""
Web application package for the chess opponent.

Provides a FastAPI-based REST API so a browser board can ask the opponent
for a move at a chosen difficulty.
"""
