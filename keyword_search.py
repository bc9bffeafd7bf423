"""
Keyword search operation
Searches a single text file for a keyword and reports matching lines.
"""

import logging
import os
from enum import Enum
from typing import Any, Dict, List, Optional, Union

import aiofiles
from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

TOOL_NAME = "search_keyword"
REQUIRED_FIELDS_MESSAGE = "file_path and keyword are required"


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    NOT_A_FILE = "not_a_file"
    IO = "io"
    UNKNOWN_TOOL = "unknown_tool"


class SearchRequest(BaseModel):
    file_path: Optional[str] = Field(default=None, description="Path to the file to search in")
    keyword: Optional[str] = Field(default=None, description="Keyword to search for")
    case_sensitive: bool = Field(default=False, description="Whether the search should be case-sensitive")

    @field_validator("case_sensitive", mode="before")
    @classmethod
    def _default_case_sensitive(cls, value: Any) -> Any:
        if value is None:
            return False
        return value


class LineMatch(BaseModel):
    line_number: int = Field(..., ge=1)
    line_content: str


class SearchResult(BaseModel):
    file_path: str
    keyword: str
    case_sensitive: bool
    total_matches: int
    matches: List[LineMatch]


class ErrorResult(BaseModel):
    error: str
    kind: ErrorKind = Field(default=ErrorKind.IO, exclude=True)


SearchOutcome = Union[SearchResult, ErrorResult]


def parse_request(arguments: Optional[Dict[str, Any]]) -> Union[SearchRequest, ErrorResult]:
    """Turn a loosely-typed argument bundle into a SearchRequest."""
    arguments = arguments or {}
    if not arguments.get("file_path") or not arguments.get("keyword"):
        return ErrorResult(error=REQUIRED_FIELDS_MESSAGE, kind=ErrorKind.VALIDATION)

    try:
        return SearchRequest.model_validate(arguments)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        return ErrorResult(error=f"{location}: {first['msg']}", kind=ErrorKind.VALIDATION)


def find_matching_lines(content: str, keyword: str, case_sensitive: bool) -> List[LineMatch]:
    """Scan content line by line for a plain substring match.

    Lines are split on "\\n" only, so a trailing "\\r" stays part of the raw
    line and a trailing newline yields one final empty line.
    """
    search_keyword = keyword if case_sensitive else keyword.lower()
    matches = []

    for line_num, line in enumerate(content.split("\n"), 1):
        search_line = line if case_sensitive else line.lower()
        if search_keyword in search_line:
            matches.append(LineMatch(line_number=line_num, line_content=_trim(line)))

    return matches


def _trim(line: str) -> str:
    """Strip surrounding whitespace, treating a byte-order mark as whitespace."""
    stripped = line.strip()
    while stripped[:1] == "\ufeff" or stripped[-1:] == "\ufeff":
        stripped = stripped.strip("\ufeff").strip()
    return stripped


async def search_keyword(request: SearchRequest) -> SearchOutcome:
    """Search the requested file and return a result or an error, never raising."""
    if not request.file_path or not request.keyword:
        return ErrorResult(error=REQUIRED_FIELDS_MESSAGE, kind=ErrorKind.VALIDATION)

    try:
        full_path = os.path.abspath(request.file_path)

        if not os.path.exists(full_path):
            return ErrorResult(error=f"File not found: {full_path}", kind=ErrorKind.NOT_FOUND)

        if not os.path.isfile(full_path):
            return ErrorResult(error=f"Path is not a file: {full_path}", kind=ErrorKind.NOT_A_FILE)

        # newline="" keeps "\r" so splitting matches the raw file content
        async with aiofiles.open(full_path, "r", encoding="utf-8", newline="") as file:
            content = await file.read()

    except Exception as e:
        logger.warning("Failed to read %s: %s", request.file_path, e)
        return ErrorResult(error=str(e), kind=ErrorKind.IO)

    matches = find_matching_lines(content, request.keyword, request.case_sensitive)
    logger.debug(
        "Found %d matches for %r in %s", len(matches), request.keyword, full_path
    )

    return SearchResult(
        file_path=full_path,
        keyword=request.keyword,
        case_sensitive=request.case_sensitive,
        total_matches=len(matches),
        matches=matches,
    )


async def run_search(arguments: Optional[Dict[str, Any]]) -> SearchOutcome:
    """Validate raw tool arguments and run the search."""
    request = parse_request(arguments)
    if isinstance(request, ErrorResult):
        return request
    return await search_keyword(request)


def unknown_tool(name: str) -> ErrorResult:
    return ErrorResult(error=f"Unknown tool: {name}", kind=ErrorKind.UNKNOWN_TOOL)


def render_outcome(outcome: SearchOutcome) -> str:
    """Serialize an outcome to the JSON text returned to the caller."""
    if isinstance(outcome, SearchResult):
        return outcome.model_dump_json(indent=2)
    return outcome.model_dump_json()
