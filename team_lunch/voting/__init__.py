"""
Weekly lunch voting.

Responsibilities:
- Validate and store each user's ranked ballot.
- Count only the votes of attending users.
- Score, rank and pick a single winner deterministically.
"""
