"""Ape Gym API: workouts, challenges and leaderboard for gym staff and students."""

__version__ = "0.1.0"
