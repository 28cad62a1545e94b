"""
llmcat - bundle files into one annotated text blob for LLM chat windows.

Each file is wrapped in ``\\\\ <name>`` / ``\\\\End of file <name>`` markers so
its origin stays traceable once pasted. The payload is printed or copied to
the system clipboard.
"""

__version__ = "0.1.0"
__author__ = "llmcat Team"
