"""eventcraft - template-driven event planning core.

Clones event templates into live events and governs the task
dependency state machine that runs them.
"""

__version__ = "0.1.0"
