"""Split a multi-document YAML buffer into individual documents.

Documents are separated by a ``---`` line. The separator is built from
the line ending actually present in the buffer, so files written with
Windows line endings split the same way as Unix ones.
"""

from kubeschema.logger import get_logger
from kubeschema.types import Document

logger = get_logger(__name__)

_CRLF = b"\r\n"
_LF = b"\n"
_MARKER = b"---"


def detect_separator(data: bytes) -> bytes:
    """Return the document separator matching the buffer's line endings.

    Args:
        data: Raw manifest bytes

    Returns:
        ``b"\\r\\n---\\r\\n"`` when the buffer contains CRLF line endings,
        ``b"\\n---\\n"`` otherwise

    """
    line_break = _CRLF if _CRLF in data else _LF
    return line_break + _MARKER + line_break


def split_documents(data: bytes, file_name: str) -> list[Document]:
    """Split raw manifest bytes into documents.

    An empty buffer yields a single empty document. Empty spans (for
    example after a trailing separator) are kept as empty documents so
    they can be reported as empty slots.

    Args:
        data: Raw manifest bytes
        file_name: Name of the file the bytes were read from

    Returns:
        Documents in input order

    """
    if not data:
        return [Document(b"", file_name)]

    separator = detect_separator(data)
    documents = [
        Document(chunk, file_name) for chunk in data.split(separator)
    ]
    logger.debug(
        "Split %s into %d document(s) on %r",
        file_name,
        len(documents),
        separator,
    )
    return documents
