"""
Student Affairs - referral and escalation workflow engine

Guarded state transitions for student referrals, occurrence-driven
disciplinary procedure selection, and a graduated ladder of mandatory
follow-up actions for accumulated absences.

Ground rules:
- Guards fail before anything is written
- Every committed transition leaves exactly one audit entry
- Side effects run after the commit and never roll it back
- Escalation never moves backwards within a case
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
