"""
Generic utilities shared across modules.

Includes the canonical timestamp format and the logger factory.
"""
