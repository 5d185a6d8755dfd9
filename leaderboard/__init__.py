"""Leaderboard of player winnings with an admin review workflow for applications."""
