"""
ThumbnailGenerator - Resizes an original image to a registered size.
"""

import io
import logging
import math
import os
from typing import Optional, Tuple

from PIL import Image

from .image_size import ImageSize


def _round(value: float) -> int:
    return int(math.floor(value + 0.5))


def constrain_dimensions(
    current_w: int,
    current_h: int,
    max_w: int = 0,
    max_h: int = 0
) -> Tuple[int, int]:
    """Scale (current_w, current_h) down to fit inside max_w x max_h. 0 = no limit."""
    if not max_w and not max_h:
        return current_w, current_h

    width_ratio = height_ratio = 1.0
    if max_w > 0 and current_w > max_w:
        width_ratio = max_w / current_w
    if max_h > 0 and current_h > max_h:
        height_ratio = max_h / current_h

    ratio = min(width_ratio, height_ratio)
    return max(1, _round(current_w * ratio)), max(1, _round(current_h * ratio))


def resize_dimensions(
    orig_w: int,
    orig_h: int,
    dest_w: int,
    dest_h: int,
    crop: bool = False
) -> Optional[Tuple[int, int, int, int, int, int]]:
    """
    Work out the source region and output size for one derivative.

    Returns:
        (src_x, src_y, src_w, src_h, dst_w, dst_h), or None when no derivative
        should be made (no target dimensions, or the original is not larger
        than the target)
    """
    if orig_w <= 0 or orig_h <= 0:
        return None
    if dest_w <= 0 and dest_h <= 0:
        return None

    if crop:
        aspect_ratio = orig_w / orig_h
        new_w = min(dest_w, orig_w)
        new_h = min(dest_h, orig_h)

        if not new_w:
            new_w = _round(new_h * aspect_ratio)
        if not new_h:
            new_h = _round(new_w / aspect_ratio)

        size_ratio = max(new_w / orig_w, new_h / orig_h)
        crop_w = _round(new_w / size_ratio)
        crop_h = _round(new_h / size_ratio)
        src_x = (orig_w - crop_w) // 2
        src_y = (orig_h - crop_h) // 2
    else:
        crop_w, crop_h = orig_w, orig_h
        src_x = src_y = 0
        new_w, new_h = constrain_dimensions(orig_w, orig_h, dest_w, dest_h)

    # never upscale, and never duplicate the original
    if new_w >= orig_w and new_h >= orig_h:
        return None

    return src_x, src_y, crop_w, crop_h, new_w, new_h


class ThumbnailGenerator:
    """
    Generates derivative images from originals using Pillow.
    """

    def __init__(
        self,
        quality: int = 82,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize thumbnail generator.

        Args:
            quality: JPEG/WEBP quality for output (default: 82)
            logger: Optional logger instance
        """
        self.quality = quality
        self.logger = logger or logging.getLogger(__name__)

    def resize(self, img: Image.Image, size: ImageSize) -> Optional[Image.Image]:
        """Return img resized (and cropped) to size, or None if not needed."""
        dims = resize_dimensions(img.width, img.height, size.width, size.height, size.crop)
        if dims is None:
            return None

        src_x, src_y, src_w, src_h, dst_w, dst_h = dims
        if size.crop:
            img = img.crop((src_x, src_y, src_x + src_w, src_y + src_h))
        return img.resize((dst_w, dst_h), Image.Resampling.LANCZOS)

    def make_subsize(
        self,
        img: Image.Image,
        size: ImageSize,
        root: str,
        ext: str,
        dest_dir: str
    ) -> Optional[dict]:
        """
        Write one derivative of img next to the other thumbnails.

        Args:
            img: Opened original image
            size: Target size
            root: Original file name without extension
            ext: Original extension (e.g., '.jpg')
            dest_dir: Directory for the derivative file

        Returns:
            {'file', 'width', 'height', 'mime-type'} or None if skipped
        """
        resized = self.resize(img, size)
        if resized is None:
            self.logger.debug(f"{root}{ext}: no {size.name} derivative needed")
            return None

        data, content_type = self.encode(resized, ext)
        filename = f"{root}-{resized.width}x{resized.height}{ext}"
        os.makedirs(dest_dir, exist_ok=True)
        with open(os.path.join(dest_dir, filename), 'wb') as f:
            f.write(data)

        self.logger.debug(f"Wrote {filename} ({len(data)} bytes)")
        return {
            'file': filename,
            'width': resized.width,
            'height': resized.height,
            'mime-type': content_type,
        }

    def encode(self, img: Image.Image, extension: str) -> Tuple[bytes, str]:
        """
        Encode an image in the format matching the original extension.

        Returns:
            Tuple of (image_bytes, content_type)
        """
        output = io.BytesIO()
        output_format, content_type = self._get_output_format(extension)

        try:
            if output_format == 'JPEG':
                self._convert_color_mode(img).save(output, format='JPEG', quality=self.quality, optimize=True)
            elif output_format == 'PNG':
                img.save(output, format='PNG', optimize=True)
            elif output_format == 'GIF':
                img.save(output, format='GIF')
            else:
                img.save(output, format='WEBP', quality=self.quality)
        except Exception as e:
            self.logger.error(f"Error encoding {output_format} derivative: {e}")
            raise

        return output.getvalue(), content_type

    def _convert_color_mode(self, img: Image.Image) -> Image.Image:
        """Flatten transparency onto white for formats without alpha."""
        if img.mode in ('RGBA', 'LA'):
            background = Image.new('RGB', img.size, (255, 255, 255))
            if img.mode == 'LA':
                img = img.convert('RGBA')
            background.paste(img, mask=img.split()[-1])
            return background
        elif img.mode == 'P':
            img = img.convert('RGBA')
            background = Image.new('RGB', img.size, (255, 255, 255))
            background.paste(img, mask=img.split()[-1])
            return background
        elif img.mode != 'RGB':
            return img.convert('RGB')
        return img

    def _get_output_format(self, extension: str) -> Tuple[str, str]:
        """Determine output format based on original extension."""
        ext_lower = extension.lower()

        if ext_lower in ('.jpg', '.jpeg'):
            return 'JPEG', 'image/jpeg'
        elif ext_lower == '.png':
            return 'PNG', 'image/png'
        elif ext_lower == '.gif':
            return 'GIF', 'image/gif'
        elif ext_lower == '.webp':
            return 'WEBP', 'image/webp'
        else:
            return 'JPEG', 'image/jpeg'
