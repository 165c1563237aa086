"""
payprep - seeded practice engine for payroll certification exams.
"""

__version__ = "0.1.0"
