"""
AI-assisted paper summarization.
"""

from .summarizer import PaperSummarizer, SummarizerError, InvalidCredentialError

__all__ = ['PaperSummarizer', 'SummarizerError', 'InvalidCredentialError']
