"""Output generation: answer key PDFs."""

from .answer_key import answer_key_lines, render_answer_key

__all__ = ["answer_key_lines", "render_answer_key"]
