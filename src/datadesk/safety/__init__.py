"""Safety layer - the gate every user-supplied query passes through.

See ``classifier`` for what the read-only check does not catch.
"""

from .classifier import is_select_only

__all__ = ["is_select_only"]
