"""
planecrazy – event-sourced aircraft comments, favourites and tracking.

Import path convention::

    from planecrazy.kernel.errors import InvalidStateError
    from planecrazy.domain.commands import AddComment
    from planecrazy.application.event_sourcing import EventDispatcher
    from planecrazy.bootstrap import build_application
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
