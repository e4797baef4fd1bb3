"""
Week planning.

Responsibilities:
- Map calendar dates onto week identifiers (ISO date of the Monday).
- Confirm a week's destination from the vote outcome or an admin override.
- Undo a confirmation to re-open voting.
"""
