from .image import CompressionPolicy, CompressionResult, FileInfo, ResizedImage
from .upload import UploadTarget

__all__ = [
    "CompressionPolicy",
    "CompressionResult",
    "FileInfo",
    "ResizedImage",
    "UploadTarget",
]
