# src/fxconv/shared/rate_limiter.py
"""
Rate Limiter - Command Throttling and API Quota Protection

This module implements a sliding-window rate limiter. Chat commands are
throttled per user, and manual rate refreshes get a much tighter window
because every refresh spends one request of the ExchangeRate-API quota.

Files that USE this module:
- fxconv.adapters.telegram.handlers (uses rate_limiter and RATE_LIMITS for commands)

Files that this module USES:
- None (pure utility implementation)
"""
import time
from typing import Callable, Dict
from collections import defaultdict, deque
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitConfig:
    """Configuration for rate limiting."""
    max_requests: int
    time_window: int  # in seconds
    block_duration: int = 0  # extra seconds blocked after exceeding, 0 = none


class RateLimiter:
    """Simple in-memory rate limiter."""
    
    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._requests: Dict[str, deque] = defaultdict(deque)
        self._blocked: Dict[str, float] = {}
    
    def _prune(self, identifier: str, config: RateLimitConfig, now: float) -> deque:
        requests = self._requests[identifier]
        cutoff = now - config.time_window
        while requests and requests[0] <= cutoff:
            requests.popleft()
        return requests
    
    def is_allowed(self, identifier: str, config: RateLimitConfig) -> bool:
        """
        Check if a request is allowed for the given identifier and record it.
        
        Args:
            identifier: Namespaced identifier (e.g., "refresh:user:42")
            config: Rate limit configuration
            
        Returns:
            True if request is allowed, False if rate limited
        """
        now = self._clock()
        
        blocked_until = self._blocked.get(identifier)
        if blocked_until is not None:
            if now < blocked_until:
                return False
            del self._blocked[identifier]
        
        requests = self._prune(identifier, config, now)
        if len(requests) >= config.max_requests:
            if config.block_duration:
                self._blocked[identifier] = now + config.block_duration
            return False
        
        requests.append(now)
        return True
    
    def retry_after(self, identifier: str, config: RateLimitConfig) -> int:
        """
        Seconds until the next request for `identifier` would be allowed.
        
        Returns:
            0 if a request is allowed right now
        """
        now = self._clock()
        waits = [0.0]
        
        blocked_until = self._blocked.get(identifier)
        if blocked_until is not None:
            waits.append(blocked_until - now)
        
        requests = self._prune(identifier, config, now)
        if len(requests) >= config.max_requests:
            waits.append(requests[0] + config.time_window - now)
        
        return max(0, int(round(max(waits))))


# Global rate limiter instance
rate_limiter = RateLimiter()

# Predefined rate limit configurations
RATE_LIMITS = {
    "user_command": RateLimitConfig(max_requests=30, time_window=60),  # 30 commands per minute
    "refresh": RateLimitConfig(max_requests=3, time_window=600),  # 3 provider calls per 10 minutes
}
