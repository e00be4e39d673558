class ResumeAnalysisError(RuntimeError):
    """Base class for failures surfaced to the user during an analysis run"""


class AnalysisParseError(ResumeAnalysisError):
    """Raised when the AI response cannot be turned into an analysis result"""

    def __init__(self, message: str = "Failed to parse AI analysis results") -> None:
        super().__init__(message)


class AnalysisServiceError(ResumeAnalysisError):
    """Raised when the generative-AI service call fails.

    The message is generic; the underlying cause stays on
    ``__cause__`` for logging.
    """

    def __init__(
        self,
        message: str = "Failed to analyze resume with AI. Please check your connection and try again.",
    ) -> None:
        super().__init__(message)


class UnsupportedResumeFormat(ValueError):
    """Raised by the text intake for files it refuses to read"""
