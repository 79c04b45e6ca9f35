"""Turn uploaded files into generator inputs.

Images become base64 :class:`ImagePart` records; plain-text files are folded
into the notes under a ``[File: name]`` header. Other file types are skipped.
"""

from __future__ import annotations

import base64
import binascii
import logging
import mimetypes
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Union

from .models import ImagePart

__all__ = [
    "UploadBatch",
    "guess_mime_type",
    "image_part_from_bytes",
    "image_part_from_data_url",
    "append_text_upload",
    "load_uploads",
]

logger = logging.getLogger(__name__)


@dataclass
class UploadBatch:
    """Accumulated notes text and images from a set of uploads."""

    text: str = ""
    images: List[ImagePart] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)


def guess_mime_type(path: Path) -> Optional[str]:
    mime, _ = mimetypes.guess_type(path.name)
    return mime


def image_part_from_bytes(
    data: bytes, mime_type: str, name: str = ""
) -> ImagePart:
    encoded = base64.b64encode(data).decode("ascii")
    return ImagePart(data=encoded, mime_type=mime_type, name=name)


def image_part_from_data_url(url: str, name: str = "") -> ImagePart:
    """Split a ``data:<mime>;base64,<payload>`` URL into an ImagePart."""

    header, sep, payload = url.partition(",")
    if not (sep and header.startswith("data:") and header.endswith(";base64")):
        raise ValueError("Expected a base64 data URL.")
    mime_type = header[len("data:") : -len(";base64")]
    if not mime_type.startswith("image/"):
        raise ValueError(f"Data URL is not an image: {mime_type or 'unknown'}")
    try:
        base64.b64decode(payload, validate=True)
    except binascii.Error as exc:
        raise ValueError("Data URL payload is not valid base64.") from exc
    return ImagePart(data=payload, mime_type=mime_type, name=name)


def append_text_upload(content: str, name: str, text: str) -> str:
    """Append a text upload to the notes, separated by a blank line."""

    block = f"[File: {name}]\n{text}"
    return f"{content}\n\n{block}" if content else block


def load_uploads(
    paths: Sequence[Union[str, Path]], *, content: str = ""
) -> UploadBatch:
    """Read files in order, appending text ones to ``content``."""

    batch = UploadBatch(text=content)
    for raw in paths:
        path = Path(raw)
        mime = guess_mime_type(path)
        if mime and mime.startswith("image/"):
            batch.images.append(
                image_part_from_bytes(path.read_bytes(), mime, path.name)
            )
        elif mime == "text/plain":
            text = path.read_text(encoding="utf-8", errors="replace")
            batch.text = append_text_upload(batch.text, path.name, text)
        else:
            batch.skipped.append(path)
            logger.info(
                "Skipped unsupported upload",
                extra={"path": path, "mime_type": mime},
            )
    return batch
