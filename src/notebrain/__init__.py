"""notebrain - a personal voice-notes memory.

notebrain stores dictated or typed notes and answers questions about them:
- Speech-to-text (faster-whisper)
- Entity extraction (Ollama)
- Grounded answers (Claude)
- Project and task tracking (MongoDB)

Usage:
    python -m notebrain record --text "Work: call Sarah about the budget"
    python -m notebrain ask "What did I promise Sarah?"
"""

__version__ = "0.1.0"

from .config import NoteBrainConfig
from .config.loader import load_config

__all__ = [
    "NoteBrainConfig",
    "__version__",
    "load_config",
]
