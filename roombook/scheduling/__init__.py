"""
Scheduling core

- Interval overlap (overlap.py)
- Business-day slot grid (slots.py)
- Per-slot availability projection (availability.py)
- Conflict gate for reservation writes (conflicts.py)
"""
