"""Document codec - YAML metadata block followed by a free-text body.

A document looks like::

    ---
    id: TICKET-mgw1x2k3-9f1c2ab4
    title: Fix login bug
    ...
    ---

    Body text.

Decoding is strict: the very first line must be the ``---`` delimiter, so
a document with leading text is malformed rather than searched for a
metadata block. Bodies are stripped of surrounding whitespace on decode.
"""

from __future__ import annotations

from typing import Any

import yaml

from ticketctl.store.exceptions import MalformedDocumentError

DELIMITER = "---"


def encode(metadata: dict[str, Any], body: str = "") -> str:
    """Serialize a metadata mapping and body into document text.

    Args:
        metadata: Metadata mapping. Key order is preserved.
        body: Free-text body.

    Returns:
        The document text.
    """
    block = yaml.safe_dump(
        metadata,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
        width=float("inf"),
    )
    return f"{DELIMITER}\n{block}{DELIMITER}\n\n{body}"


def decode(text: str) -> tuple[dict[str, Any], str]:
    """Split document text into its metadata mapping and body.

    Args:
        text: Document text.

    Returns:
        Tuple of (metadata, stripped body).

    Raises:
        MalformedDocumentError: If the delimiters are missing or the metadata
            block is not a valid YAML mapping.
    """
    lines = text.split("\n")
    if lines[0].rstrip("\r") != DELIMITER:
        raise MalformedDocumentError(f"Document must start with a '{DELIMITER}' line")

    for index in range(1, len(lines)):
        if lines[index].rstrip("\r") == DELIMITER:
            break
    else:
        raise MalformedDocumentError(f"Document is missing the closing '{DELIMITER}' line")

    block = "\n".join(lines[1:index])
    body = "\n".join(lines[index + 1 :]).strip()

    try:
        metadata = yaml.safe_load(block)
    except yaml.YAMLError as e:
        raise MalformedDocumentError(f"Invalid YAML metadata: {e}") from e

    if not isinstance(metadata, dict):
        raise MalformedDocumentError(
            f"Metadata must be a YAML mapping, got {type(metadata).__name__}"
        )

    return metadata, body
