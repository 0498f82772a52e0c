"""Problem Details (RFC 9457) responses for mongopager."""

from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field


PROBLEM_JSON = "application/problem+json"


class ProblemDetail(BaseModel):
    """Problem Details as defined in RFC 9457."""

    type: str = Field(default="about:blank", description="URI identifying the problem type")
    title: str = Field(description="Short summary of the problem type")
    status: int = Field(description="HTTP status code")
    detail: Optional[str] = Field(default=None, description="Explanation of this occurrence")
    instance: Optional[str] = Field(default=None, description="Request path of this occurrence")

    # Extension members such as error_code
    model_config = {"extra": "allow"}


def create_problem_response(
    status: int,
    title: str,
    detail: Optional[str] = None,
    type_uri: str = "about:blank",
    instance: Optional[str] = None,
    request: Optional[Request] = None,
    **extensions: Any
) -> JSONResponse:
    """Create a Problem Details response."""
    if instance is None and request:
        instance = str(request.url.path)

    problem = ProblemDetail(
        type=type_uri,
        title=title,
        status=status,
        detail=detail,
        instance=instance,
        **extensions
    )
    return JSONResponse(
        status_code=status,
        content=problem.model_dump(exclude_none=True),
        headers={"Content-Type": PROBLEM_JSON}
    )


class ProblemDetailException(Exception):
    """Base exception rendered as a Problem Details response."""

    def __init__(
        self,
        status: int,
        title: str,
        detail: Optional[str] = None,
        type_uri: str = "about:blank",
        instance: Optional[str] = None,
        **extensions: Any
    ):
        self.status = status
        self.title = title
        self.detail = detail
        self.type_uri = type_uri
        self.instance = instance
        self.extensions: Dict[str, Any] = extensions
        super().__init__(detail or title)

    def to_problem_detail(self, request: Optional[Request] = None) -> ProblemDetail:
        instance = self.instance
        if instance is None and request:
            instance = str(request.url.path)
        return ProblemDetail(
            type=self.type_uri,
            title=self.title,
            status=self.status,
            detail=self.detail,
            instance=instance,
            **self.extensions
        )

    def to_response(self, request: Optional[Request] = None) -> JSONResponse:
        return create_problem_response(
            status=self.status,
            title=self.title,
            detail=self.detail,
            type_uri=self.type_uri,
            instance=self.instance,
            request=request,
            **self.extensions
        )


class BadRequestError(ProblemDetailException):
    """400 Bad Request."""

    def __init__(self, detail: str, **extensions: Any):
        super().__init__(status=400, title="Bad Request", detail=detail, **extensions)


class ServiceUnavailableError(ProblemDetailException):
    """503 Service Unavailable."""

    def __init__(self, detail: str = "Service temporarily unavailable", **extensions: Any):
        super().__init__(status=503, title="Service Unavailable", detail=detail, **extensions)
