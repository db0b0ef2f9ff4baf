"""
Pricolor Imaging Utilities
Handles image decoding, size checks and preprocessing ahead of histogramming.
"""
import io
import os
from typing import Optional, Tuple

import cv2
import numpy as np
from PIL import Image

from pricolor.config import config, PickerSettings
from pricolor.errors import ImageDecodeError


def get_filesize(path: str) -> int:
    """
    Size of a file in bytes.

    Raises:
        ImageDecodeError: If the file cannot be stat'ed
    """
    try:
        return os.stat(path).st_size
    except OSError as e:
        raise ImageDecodeError(f"File Error: {path}: {e.strerror}")


def check_filesize(size: int, max_bytes: Optional[int] = None) -> None:
    """Reject empty or oversize inputs."""
    if max_bytes is None:
        max_bytes = config.MAX_FILE_BYTES
    if size <= 0:
        raise ImageDecodeError("Empty image data")
    if size > max_bytes:
        raise ImageDecodeError(f"File size({size}) over (MAX: {max_bytes} byte)")


def decode_image_bytes(data: bytes) -> np.ndarray:
    """
    Decode encoded image bytes into an RGB pixel buffer.

    Args:
        data: Raw bytes in any format Pillow can read

    Returns:
        numpy array (H, W, 3) uint8 in RGB order

    Raises:
        ImageDecodeError: For empty, oversize or undecodable input
    """
    check_filesize(len(data))

    try:
        pil_image = Image.open(io.BytesIO(data))
        pil_image.load()
    except Exception as e:
        raise ImageDecodeError(f"Failed to decode image: {str(e)}")

    # High bit-depth modes are scaled down; Pillow's convert() clips them
    if pil_image.mode == 'I' or pil_image.mode.startswith('I;16'):
        samples = np.array(pil_image).astype(np.int64) >> 8
        return as_pixel_buffer(np.clip(samples, 0, 255).astype(np.uint8))
    if pil_image.mode == 'F':
        samples = np.round(np.array(pil_image, dtype=np.float32) * 255)
        return as_pixel_buffer(np.clip(samples, 0, 255).astype(np.uint8))

    # Convert to RGB if necessary
    if pil_image.mode != 'RGB':
        pil_image = pil_image.convert('RGB')

    return as_pixel_buffer(np.array(pil_image))


def load_image_file(path: str) -> np.ndarray:
    """Read an image file from disk after checking its size."""
    check_filesize(get_filesize(path))
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise ImageDecodeError(f"Cannot open image file: {path}: {e.strerror}")
    return decode_image_bytes(data)


def as_pixel_buffer(array: np.ndarray) -> np.ndarray:
    """
    Normalize a caller-supplied array into a private RGB uint8 buffer.

    Grayscale input is promoted to three channels and an alpha channel is
    dropped. The returned array never aliases the input.
    """
    if not isinstance(array, np.ndarray):
        raise ImageDecodeError(f"Expected a numpy array, got {type(array).__name__}")

    if array.ndim == 2:
        array = np.repeat(array[:, :, None], 3, axis=2)
    elif array.ndim == 3 and array.shape[2] == 4:
        array = array[:, :, :3]
    elif array.ndim != 3 or array.shape[2] != 3:
        raise ImageDecodeError(f"Unsupported pixel buffer shape {array.shape}")

    if array.shape[0] == 0 or array.shape[1] == 0:
        raise ImageDecodeError("Pixel buffer is empty")

    if array.dtype != np.uint8:
        array = np.clip(array, 0, 255).astype(np.uint8)

    return np.ascontiguousarray(array).copy()


def crop_center(rgb: np.ndarray, clip_ratio: float) -> np.ndarray:
    """
    Keep the center of the image, discarding a border on every side.

    Args:
        rgb: Input image (H, W, 3)
        clip_ratio: Fraction of each dimension removed, half from each side

    Returns:
        Cropped copy of the center region

    Raises:
        ImageDecodeError: If nothing remains after cropping
    """
    height, width = rgb.shape[:2]
    border_x = int(clip_ratio * width / 2)
    border_y = int(clip_ratio * height / 2)

    cropped = rgb[border_y:height - border_y, border_x:width - border_x]
    if cropped.shape[0] == 0 or cropped.shape[1] == 0:
        raise ImageDecodeError(f"Empty region after crop (ratio={clip_ratio}, size={width}x{height})")

    return cropped.copy()


def resize_to(rgb: np.ndarray, size: Optional[Tuple[int, int]]) -> np.ndarray:
    """Scale to a fixed working resolution (width, height); None leaves the size alone."""
    if size is None:
        return rgb
    width, height = size
    if rgb.shape[1] == width and rgb.shape[0] == height:
        return rgb
    return cv2.resize(rgb, (width, height), interpolation=cv2.INTER_LINEAR)


def median_smooth(rgb: np.ndarray, kernel: int) -> np.ndarray:
    """Median filter to suppress single-pixel noise; kernel 0 disables."""
    if kernel <= 1:
        return rgb
    return cv2.medianBlur(rgb, kernel)


def preprocess(rgb: np.ndarray, settings: PickerSettings) -> np.ndarray:
    """
    Crop, resize and optionally smooth a pixel buffer.

    Args:
        rgb: RGB pixel buffer (H, W, 3) uint8
        settings: Validated picker settings

    Returns:
        New buffer ready for histogramming
    """
    image = as_pixel_buffer(rgb)
    if settings.clip_ratio > 0.0:
        image = crop_center(image, settings.clip_ratio)
    image = resize_to(image, settings.resize)
    image = median_smooth(image, settings.median_kernel)
    return image


def get_image_dimensions(rgb: np.ndarray) -> Tuple[int, int]:
    """
    Get image width and height.

    Returns:
        Tuple of (width, height)
    """
    height, width = rgb.shape[:2]
    return width, height
