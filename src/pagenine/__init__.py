"""pagenine: follow a catalog thread and get pinged before it falls off.

The core package holds the refresh policy, matching, and notification
state machine; adapters hold the HTTP and desktop integrations.
"""

__version__ = "1.2.1"
