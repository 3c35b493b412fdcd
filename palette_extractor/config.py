"""
Palette Extractor Configuration
Manages environment variables and defaults for the extraction service.
"""
import os
from typing import Optional


class Config:
    """Configuration class for the palette extraction service."""
    
    # Cluster count
    DEFAULT_K: int = int(os.environ.get("PALETTE_DEFAULT_K", "6"))
    MIN_K: int = int(os.environ.get("PALETTE_MIN_K", "1"))
    MAX_K: int = int(os.environ.get("PALETTE_MAX_K", "20"))
    
    # Sampling stride
    DEFAULT_STRIDE: int = int(os.environ.get("PALETTE_DEFAULT_STRIDE", "8"))
    MIN_STRIDE: int = int(os.environ.get("PALETTE_MIN_STRIDE", "1"))
    MAX_STRIDE: int = int(os.environ.get("PALETTE_MAX_STRIDE", "50"))
    
    # Clustering policy
    MAX_ITERATIONS: int = int(os.environ.get("PALETTE_MAX_ITERATIONS", "12"))
    
    # Image handling
    MAX_DIM: int = int(os.environ.get("PALETTE_MAX_DIM", "1024"))
    MAX_FILE_MB: int = int(os.environ.get("PALETTE_MAX_FILE_MB", "10"))
    SWATCH_CHIP_SIZE: int = int(os.environ.get("PALETTE_SWATCH_CHIP_SIZE", "40"))
    
    # CORS
    ALLOWED_ORIGINS: str = os.environ.get("PALETTE_ALLOWED_ORIGINS", "*")
    
    # Logging
    LOG_LEVEL: str = os.environ.get("PALETTE_LOG_LEVEL", "INFO")
    
    # Export
    EXPORT_FILENAME: str = "palette.json"
    
    @classmethod
    def clamp_k(cls, value: Optional[int]) -> int:
        """Clamp cluster count into range; missing or zero falls back to the default."""
        if not value:
            value = cls.DEFAULT_K
        return max(cls.MIN_K, min(cls.MAX_K, int(value)))
    
    @classmethod
    def clamp_stride(cls, value: Optional[int]) -> int:
        """Clamp sample stride into range; missing or zero falls back to the default."""
        if not value:
            value = cls.DEFAULT_STRIDE
        return max(cls.MIN_STRIDE, min(cls.MAX_STRIDE, int(value)))


# Global config instance
config = Config()
