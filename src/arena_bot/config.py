"""
Configuration constants for the arena circler bot.

All fixed values in one place. Runtime-tunable values live in params.py.
"""

# =============================================================================
# GAME SERVER
# =============================================================================

SERVER_URL = "ws://localhost:8889"
HEARTBEAT = 0.0  # seconds between WebSocket pings, 0 = disabled

# =============================================================================
# ARENA GEOMETRY (game units)
# =============================================================================

CIRCLE_CENTER = (200.0, 200.0)  # Patrol circle center (x, y)
PATROL_RADIUS = 100.0

# =============================================================================
# NAVIGATION
# =============================================================================

ARRIVAL_TOLERANCE = 5.0  # Per-axis distance to count a point as reached
PATROL_STEP = 1.0  # Degrees advanced around the circle per patrol cycle

# =============================================================================
# MESSAGE LOG
# =============================================================================

LOG_DIR = "."
MESSAGE_LOG_SUFFIX = "-messages.log"
