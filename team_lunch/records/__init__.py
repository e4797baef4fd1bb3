"""
Record store.

Responsibilities:
- Define the shared records: suggestions, votes, attendance, week plans.
- Keep them in memory keyed by week, with upsert on the natural keys
  (user + suggestion for votes, user + week for attendance).
- Return authoritative post-write state from every mutation.
"""
