# 📄 File: adoptd/shared/infrastructure/storage/supabase_storage.py

# 🧭 Purpose (Layman Explanation):
# Uploads photos (forum pictures and profile avatars) to cloud storage after shrinking
# them to a sensible size, and gives back a link anyone can open.

# 🧪 Purpose (Technical Summary):
# Supabase Storage wrapper over the session's async client: Pillow-based image
# optimization, per-user path generation, upload to a named bucket and public URL
# resolution, with storage failures mapped to FileStorageError.

# 🔗 Dependencies:
# - supabase: async storage client
# - PIL (Pillow): Image processing and optimization
# - asyncio: off-loop image re-encoding

# 🔄 Connected Modules / Calls From:
# Called by: forum post creation (forum-photos bucket), profile avatar upload (avatars bucket)

import asyncio
import io
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Tuple
from uuid import uuid4

from PIL import Image, ImageOps, UnidentifiedImageError
from supabase import AsyncClient

from adoptd.shared.config.settings import Settings, get_settings
from adoptd.shared.core.exceptions import FileStorageError, InvalidFileTypeError
from adoptd.shared.utils.logging import get_logger
from adoptd.shared.utils.validators import sanitize_filename

logger = get_logger(__name__)

EXTENSIONS = {
    'image/jpeg': '.jpg',
    'image/png': '.png',
    'image/webp': '.webp',
}


class SupabaseStorageClient:
    """
    Supabase Storage client bound to one user session.

    Handles image optimization, path organization and public URL generation.
    """

    def __init__(self, client: AsyncClient, settings: Optional[Settings] = None):
        self.client = client
        self.settings = settings or get_settings()
        self.image_quality = self.settings.IMAGE_QUALITY
        self.max_image_size = (self.settings.IMAGE_MAX_DIMENSION, self.settings.IMAGE_MAX_DIMENSION)

    def _generate_file_path(self, user_id: str, filename: str, content_type: str) -> str:
        """Per-user folder, timestamped unique name."""
        timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
        file_ext = EXTENSIONS.get(content_type) or Path(sanitize_filename(filename)).suffix.lower() or '.jpg'
        return f"{user_id}/{timestamp}_{uuid4().hex[:8]}{file_ext}"

    def _optimize_image(self, image_data: bytes) -> Tuple[bytes, Dict[str, Any]]:
        """
        Resize and re-encode an image as progressive JPEG.

        Returns:
            Tuple of (optimized_bytes, metadata)
        """
        try:
            with Image.open(io.BytesIO(image_data)) as img:
                img = ImageOps.exif_transpose(img)
                if img.mode in ('RGBA', 'P', 'LA'):
                    img = img.convert('RGB')

                original_size = img.size
                if img.size[0] > self.max_image_size[0] or img.size[1] > self.max_image_size[1]:
                    img.thumbnail(self.max_image_size, Image.Resampling.LANCZOS)

                output = io.BytesIO()
                img.save(output, format='JPEG', quality=self.image_quality, optimize=True, progressive=True)
                optimized_data = output.getvalue()
        except (UnidentifiedImageError, OSError) as e:
            raise InvalidFileTypeError(message=f"Invalid image file: {e}") from e

        return optimized_data, {
            'original_size': original_size,
            'optimized_size': img.size,
            'original_bytes': len(image_data),
            'optimized_bytes': len(optimized_data),
        }

    async def upload_image(
        self,
        bucket: str,
        user_id: str,
        file_data: bytes,
        filename: str,
        content_type: str,
        optimize: bool = True,
    ) -> str:
        """
        Upload an already-validated image and return its public URL.

        Args:
            bucket: Storage bucket name
            user_id: Owner, used as the top-level folder
            file_data: Raw image bytes
            filename: Original filename
            content_type: Validated media type
            optimize: Re-encode as JPEG before upload
        """
        if optimize:
            file_data, metadata = await asyncio.to_thread(self._optimize_image, file_data)
            content_type = 'image/jpeg'
            logger.debug("Image optimized", **{k: str(v) for k, v in metadata.items()})

        storage_path = self._generate_file_path(user_id, filename, content_type)

        try:
            bucket_api = self.client.storage.from_(bucket)
            await bucket_api.upload(
                path=storage_path,
                file=file_data,
                file_options={"content-type": content_type, "cache-control": "3600", "upsert": "false"},
            )
            public_url = await bucket_api.get_public_url(storage_path)
        except Exception as e:
            logger.error(f"Upload to {bucket} failed: {e}", bucket=bucket, path=storage_path)
            raise FileStorageError(
                message=f"Upload to {bucket} failed",
                details={"bucket": bucket, "reason": str(e)},
            ) from e

        logger.info("Image uploaded", bucket=bucket, path=storage_path, size=len(file_data))
        return public_url
