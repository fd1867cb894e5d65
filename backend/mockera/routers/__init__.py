from mockera.routers import admin, attempts, health, leaderboard, percentile_bands, profile, rank_shield, tests

__all__ = [
    "admin",
    "attempts",
    "health",
    "leaderboard",
    "percentile_bands",
    "profile",
    "rank_shield",
    "tests",
]
