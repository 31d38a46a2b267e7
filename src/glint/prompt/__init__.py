"""Interactive prompts: the file checklist and the message editor."""

from glint.prompt.base import Cancelled, Prompt, Terminated
from glint.prompt.files_prompt import Candidate, Confirmed, FilesPrompt, FilesPromptResult
from glint.prompt.message_prompt import MessagePrompt, MessagePromptResult, Submitted

__all__ = [
    "Cancelled",
    "Candidate",
    "Confirmed",
    "FilesPrompt",
    "FilesPromptResult",
    "MessagePrompt",
    "MessagePromptResult",
    "Prompt",
    "Submitted",
    "Terminated",
]
