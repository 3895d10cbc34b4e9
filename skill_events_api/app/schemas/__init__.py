"""
Pydantic schema definitions for API payloads.

Each domain (credits, events, registrations, submissions) defines its
own models for request and response bodies.  Schemas are separated
from the internal records to decouple API representation from storage.
"""
