"""Transport layer: moves request and reply frames, nothing more."""

from ..errors import TransportError, TransportConnectionError

from . import session
from .session import Session
