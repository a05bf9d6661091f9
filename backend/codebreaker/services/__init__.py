"""Game domain services: presence, sessions, challenges and scoring.

These modules hold the core mechanics and never touch the transport. The
Socket.IO handlers call into them and relay the resulting notifications.
"""

from typing import NewType

# Opaque handle for one live connection; only compared for equality.
ConnectionId = NewType('ConnectionId', str)
