"""
Top‑level package for the Skill Events API.

The service keeps wallet credits, the event catalog and event
admissions for the Ball Skill mobile app.  All functionality lives in
submodules under ``app``.
"""

__all__ = []
