from enum import Enum


class ErrorKind(Enum):
    MISSING_CREDENTIAL = "MissingCredential"
    NETWORK_FAILURE = "NetworkFailure"
    HTTP_ERROR = "HttpError"
    EMPTY_RESPONSE = "EmptyResponse"
    PARSE_FAILURE = "ParseFailure"
    INVALID_SHAPE = "InvalidShape"


# The model answered but nothing usable came back.
EMPTY_RESULT_KINDS = frozenset(
    {ErrorKind.EMPTY_RESPONSE, ErrorKind.PARSE_FAILURE, ErrorKind.INVALID_SHAPE}
)


class GenerationError(Exception):
    """Raised when a generation request yields no recipes.

    `kind` says which stage failed. `status` is only set for `HttpError`.
    """

    def __init__(
        self,
        kind: ErrorKind,
        detail: str = "",
        *,
        status: int | None = None,
    ) -> None:
        self.kind = kind
        self.detail = detail
        self.status = status
        super().__init__(str(self))

    def __str__(self) -> str:
        kind = self.kind.value
        if self.status is not None:
            kind = f"{kind}({self.status})"
        return f"{kind}: {self.detail}" if self.detail else kind

    def __repr__(self) -> str:
        return f"<GenerationError(kind={self.kind.value}, status={self.status})>"

    @property
    def is_empty_result(self) -> bool:
        return self.kind in EMPTY_RESULT_KINDS
