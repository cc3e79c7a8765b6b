"""
Shared Kernel

Base entity and value-object classes, typed domain errors, the unit of
work and the message bus used by the booking engine.
"""
