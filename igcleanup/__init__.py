"""
Instagram activity cleanup: background unlike / comment deletion jobs.
"""

__version__ = "0.1.0"
