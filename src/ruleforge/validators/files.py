"""File validators: size, mimes, ext, image, dimensions.

These operate on a single UploadedFile or a sequence of them. `dimensions`
is asynchronous because it has to inspect image bytes; the inspection itself
is delegated to an image probe, an async callable returning (width, height).
The default probe opens the image with Pillow in a worker thread. Hosts (and
tests) can install their own with `set_image_probe`.
"""

import asyncio
import io
import re
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from PIL import Image

IMAGE_NAME_PATTERN = re.compile(r"\.(jpg|svg|jpeg|png|bmp|gif)$", re.IGNORECASE)


@dataclass(frozen=True)
class UploadedFile:
    """A file value as handed to the file validators.

    Attributes:
        name: Client-side file name, including extension
        mime_type: Declared MIME type, e.g. "image/jpeg"
        size: Size in bytes
        path: Location on disk, if the file was stored
        content: Raw bytes, if the file is held in memory
    """

    name: str
    mime_type: str = ""
    size: int = 0
    path: Path | None = None
    content: bytes | None = None


ImageProbe = Callable[[UploadedFile], Awaitable[tuple[int, int]]]


async def pillow_probe(file: UploadedFile) -> tuple[int, int]:
    """Read an image's (width, height) with Pillow, off the event loop."""

    def read_size() -> tuple[int, int]:
        if file.path is not None:
            source: Any = file.path
        elif file.content is not None:
            source = io.BytesIO(file.content)
        else:
            raise ValueError(f"File '{file.name}' has neither a path nor content")
        with Image.open(source) as image:
            return image.size

    return await asyncio.to_thread(read_size)


_image_probe: ImageProbe = pillow_probe


def set_image_probe(probe: ImageProbe) -> ImageProbe:
    """Install the probe used by `dimensions`. Returns the previous one."""
    global _image_probe
    previous = _image_probe
    _image_probe = probe
    return previous


def as_files(value: Any) -> list[UploadedFile]:
    if value is None:
        return []
    if isinstance(value, UploadedFile):
        return [value]
    if isinstance(value, (list, tuple)):
        return [f for f in value if isinstance(f, UploadedFile)]
    return []


def _is_image(file: UploadedFile) -> bool:
    return bool(IMAGE_NAME_PATTERN.search(file.name))


# =============================================================================
# Validators
# =============================================================================


def size(value: Any, params: Sequence[Any]) -> bool:
    """size:kilobytes"""
    limit = float(params[0]) * 1024
    return all(f.size <= limit for f in as_files(value))


def mimes(value: Any, params: Sequence[Any]) -> bool:
    """mimes:image/*,application/pdf"""
    alternatives = "|".join(re.escape(str(p)).replace(r"\*", ".+") for p in params)
    pattern = re.compile(f"^({alternatives})$", re.IGNORECASE)
    return all(pattern.match(f.mime_type) for f in as_files(value))


def ext(value: Any, params: Sequence[Any]) -> bool:
    """ext:jpg,png"""
    alternatives = "|".join(re.escape(str(p)) for p in params)
    pattern = re.compile(f"\\.({alternatives})$", re.IGNORECASE)
    return all(pattern.search(f.name) for f in as_files(value))


def image(value: Any, params: Sequence[Any]) -> bool:
    return all(_is_image(f) for f in as_files(value))


async def dimensions(value: Any, params: Sequence[Any]) -> bool:
    """dimensions:width,height

    Every file must be an image of exactly width x height pixels. A probe
    failure propagates, and the engine counts it as a failed rule.
    """
    width, height = int(params[0]), int(params[1])
    files = as_files(value)
    if not all(_is_image(f) for f in files):
        return False

    sizes = await asyncio.gather(*(_image_probe(f) for f in files))
    return all(tuple(s) == (width, height) for s in sizes)
