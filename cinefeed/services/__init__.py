from .image_compression import ImageCompressor, compress_image, compress_multiple_images
from .image_upload import ImageUploadService, delete_image, upload_image, upload_multiple_images
from .pipeline import prepare_images
from .storage import ObjectStorage, SupabaseStorage

__all__ = [
    "ImageCompressor",
    "ImageUploadService",
    "ObjectStorage",
    "SupabaseStorage",
    "compress_image",
    "compress_multiple_images",
    "delete_image",
    "prepare_images",
    "upload_image",
    "upload_multiple_images",
]
