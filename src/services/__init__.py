"""Business logic services used by handlers.

Handlers import services lazily so that a cold start without database
credentials can still answer health checks.
"""

# Do NOT import services here - use lazy loading in handlers instead
