"""Draft generation error hierarchy.

Only these exceptions leave the draft pipeline. Field-level problems inside a
parsed item are absorbed by normalization and never raised.
"""


class DraftGenerationError(Exception):
    """Base exception for a failed draft generation."""

    def __init__(self, message: str, kind: str | None = None):
        super().__init__(message)
        self.kind = kind

    def __str__(self) -> str:
        message = super().__str__()
        if self.kind:
            return f"{message} kind={self.kind}"
        return message


class GenerationUnavailableError(DraftGenerationError):
    """The text completion backend failed or timed out.

    Not retried inside the pipeline.
    """

    pass


class ParseFailure(DraftGenerationError):
    """No top-level draft list could be recovered from the response text."""

    pass
