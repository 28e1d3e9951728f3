"""
CertPath - Learning-progression engine for certification training.

Computes lesson and module availability, quiz grades, course progress and
certification eligibility from a course definition and a trainee's
lesson activity.
"""

__version__ = "0.1.0"
