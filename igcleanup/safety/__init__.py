"""
Safety modules: speed-scaled delays, response error detection.
"""

from igcleanup.safety.error_detector import ErrorDetector
from igcleanup.safety.rate_limiter import RateLimiter

__all__ = ["RateLimiter", "ErrorDetector"]
