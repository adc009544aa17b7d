"""Transports: SDK and REST paths to the Gemini generateContent endpoint."""

from gemini_consistency.transport.base import Transport
from gemini_consistency.transport.rest import RestTransport
from gemini_consistency.transport.sdk import SdkTransport

__all__ = ["Transport", "SdkTransport", "RestTransport"]
