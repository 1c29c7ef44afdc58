"""Storage for saved games and the append-only pitching history."""
