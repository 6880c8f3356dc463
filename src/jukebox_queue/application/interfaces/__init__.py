"""
Application Interfaces (Ports)

Abstract interfaces for collaborators the core depends on but does not own.
"""

from jukebox_queue.application.interfaces.join_codes import JoinCodeRegistry

__all__ = [
    "JoinCodeRegistry",
]
