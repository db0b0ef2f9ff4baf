"""
Pricolor Configuration
Manages environment variables, defaults and option validation for the picker.
"""
import os
from dataclasses import dataclass, asdict
from typing import Literal, Optional, Tuple

from dotenv import load_dotenv

from pricolor.errors import ConfigurationError

load_dotenv()


def _parse_pair(raw: str) -> Tuple[int, int]:
    start, end = raw.split(",")
    return int(start), int(end)


def _parse_size(raw: str) -> Optional[Tuple[int, int]]:
    if raw.strip() in ("", "0"):
        return None
    width, height = raw.lower().split("x")
    return int(width), int(height)


class Config:
    """Configuration class for pricolor services."""

    # Logging
    LOG_LEVEL: str = os.environ.get("PRICOLOR_LOG_LEVEL", "INFO")

    # Input limits
    MAX_FILE_BYTES: int = int(os.environ.get("PRICOLOR_MAX_FILE_BYTES", "1000000000"))

    # Policy defaults
    POLICY: Literal["rgb", "hsv"] = os.environ.get("PRICOLOR_POLICY", "rgb")
    COLOR_DEPTH: int = int(os.environ.get("PRICOLOR_COLOR_DEPTH", "4"))
    UPPER_CHROMA: float = float(os.environ.get("PRICOLOR_UPPER_CHROMA", "0.5"))
    LOWER_CHROMA: float = float(os.environ.get("PRICOLOR_LOWER_CHROMA", "0.2"))
    CHROMA_MODEL: Literal["conic", "columnar"] = os.environ.get("PRICOLOR_CHROMA_MODEL", "conic")
    HBINS: int = int(os.environ.get("PRICOLOR_HBINS", "2"))
    SBINS: int = int(os.environ.get("PRICOLOR_SBINS", "5"))

    # HSV filters (hue in half-degree units)
    HUE_WINDOW: Tuple[int, int] = _parse_pair(os.environ.get("PRICOLOR_HUE_WINDOW", "-3,24"))
    SATURATION_WINDOW: Tuple[int, int] = _parse_pair(os.environ.get("PRICOLOR_SATURATION_WINDOW", "40,180"))
    IGNORE_MONOTONE_SATURATION: int = int(os.environ.get("PRICOLOR_IGNORE_MONOTONE", "16"))

    # Preprocessing
    CLIP_RATIO: float = float(os.environ.get("PRICOLOR_CLIP_RATIO", "0.0"))
    RESIZE: Optional[Tuple[int, int]] = _parse_size(os.environ.get("PRICOLOR_RESIZE", "200x200"))
    MEDIAN_KERNEL: int = int(os.environ.get("PRICOLOR_MEDIAN_KERNEL", "0"))

    # Rows per histogram band, 0 builds the histogram in a single pass
    BAND_ROWS: int = int(os.environ.get("PRICOLOR_BAND_ROWS", "0"))

    SUPPORTED_POLICIES = ("rgb", "hsv")
    SUPPORTED_CHROMA_MODELS = ("conic", "columnar")

    @classmethod
    def validate_policy(cls, policy: str) -> bool:
        """Validate policy parameter."""
        return policy in cls.SUPPORTED_POLICIES

    @classmethod
    def validate_chroma_model(cls, model: str) -> bool:
        """Validate chroma model parameter."""
        return model in cls.SUPPORTED_CHROMA_MODELS

    @classmethod
    def validate_chroma_threshold(cls, threshold: float) -> bool:
        """Chroma thresholds are open-interval fractions."""
        return 0.0 < threshold < 1.0

    @classmethod
    def validate_color_depth(cls, depth: int) -> bool:
        return 0 <= depth <= 8

    @classmethod
    def validate_hbins(cls, hbins: int) -> bool:
        return 0 <= hbins <= 5

    @classmethod
    def validate_sbins(cls, sbins: int) -> bool:
        return 0 <= sbins <= 7

    @classmethod
    def validate_hue_window(cls, start: int, end: int) -> bool:
        """Validate hue exclusion window (half-degree units, negative start wraps)."""
        return -179 <= start <= 180 and -179 <= end <= 180 and start <= end

    @classmethod
    def validate_saturation_window(cls, start: int, end: int) -> bool:
        return 0 <= start <= end <= 255

    @classmethod
    def validate_clip_ratio(cls, ratio: float) -> bool:
        return 0.0 <= ratio <= 0.9

    @classmethod
    def validate_resize(cls, size: Optional[Tuple[int, int]]) -> bool:
        if size is None:
            return True
        width, height = size
        return 1 <= width <= 4096 and 1 <= height <= 4096

    @classmethod
    def validate_median_kernel(cls, kernel: int) -> bool:
        """Validate median blur size."""
        return kernel == 0 or (3 <= kernel <= 9 and kernel % 2 == 1)

    @classmethod
    def validate_whitening_factor(cls, factor: Optional[float]) -> bool:
        return factor is None or factor > 0.0


# Global config instance
config = Config()


@dataclass(frozen=True)
class PickerSettings:
    """Option bundle for a single primary color pick."""
    policy: str = "rgb"
    color_depth: int = 4
    upper_chroma: float = 0.5
    lower_chroma: float = 0.2
    chroma_model: str = "conic"
    hbins: int = 2
    sbins: int = 5
    peak_only: bool = False
    hue_window: Tuple[int, int] = (-3, 24)
    saturation_window: Tuple[int, int] = (40, 180)
    ignore_monotone: int = 16
    clip_ratio: float = 0.0
    resize: Optional[Tuple[int, int]] = (200, 200)
    median_kernel: int = 0
    whitening_factor: Optional[float] = None

    @classmethod
    def from_config(cls, cfg: Config = config) -> "PickerSettings":
        """Build settings from the environment-backed configuration."""
        return cls(
            policy=cfg.POLICY,
            color_depth=cfg.COLOR_DEPTH,
            upper_chroma=cfg.UPPER_CHROMA,
            lower_chroma=cfg.LOWER_CHROMA,
            chroma_model=cfg.CHROMA_MODEL,
            hbins=cfg.HBINS,
            sbins=cfg.SBINS,
            hue_window=tuple(cfg.HUE_WINDOW),
            saturation_window=tuple(cfg.SATURATION_WINDOW),
            ignore_monotone=cfg.IGNORE_MONOTONE_SATURATION,
            clip_ratio=cfg.CLIP_RATIO,
            resize=cfg.RESIZE,
            median_kernel=cfg.MEDIAN_KERNEL,
        )

    def validate(self) -> "PickerSettings":
        """
        Check every option against its documented range.

        Returns:
            self, so calls can be chained

        Raises:
            ConfigurationError: On the first invalid option
        """
        if not Config.validate_policy(self.policy):
            raise ConfigurationError(f"Invalid policy '{self.policy}'. Supported: {', '.join(Config.SUPPORTED_POLICIES)}")
        if not Config.validate_color_depth(self.color_depth):
            raise ConfigurationError(f"Color depth must be 0..8, got {self.color_depth}")
        if not Config.validate_chroma_threshold(self.upper_chroma):
            raise ConfigurationError("Chroma border parameter must be 0.0 < n < 1.0.")
        if not Config.validate_chroma_threshold(self.lower_chroma):
            raise ConfigurationError("Chroma(2nd) border parameter must be 0.0 < n < 1.0.")
        if self.lower_chroma >= self.upper_chroma:
            raise ConfigurationError(
                f"Second chroma border ({self.lower_chroma}) must be lower than the first ({self.upper_chroma})"
            )
        if not Config.validate_chroma_model(self.chroma_model):
            raise ConfigurationError(
                f"Invalid chroma model '{self.chroma_model}'. Supported: {', '.join(Config.SUPPORTED_CHROMA_MODELS)}"
            )
        if not Config.validate_hbins(self.hbins):
            raise ConfigurationError(f"Hue shift must be 0..5, got {self.hbins}")
        if not Config.validate_sbins(self.sbins):
            raise ConfigurationError(f"Saturation/value shift must be 0..7, got {self.sbins}")
        if not Config.validate_hue_window(*self.hue_window):
            raise ConfigurationError(f"Hue window must lie in [-179, 180] with start <= end, got {self.hue_window}")
        if not Config.validate_saturation_window(*self.saturation_window):
            raise ConfigurationError(f"Saturation window must lie in [0, 255] with start <= end, got {self.saturation_window}")
        if not 0 <= self.ignore_monotone <= 255:
            raise ConfigurationError(f"Monotone saturation floor must be 0..255, got {self.ignore_monotone}")
        if not Config.validate_clip_ratio(self.clip_ratio):
            raise ConfigurationError(f"Clip ratio must be 0.0 <= r <= 0.9, got {self.clip_ratio}")
        if not Config.validate_resize(self.resize):
            raise ConfigurationError(f"Resize dimensions must be 1..4096, got {self.resize}")
        if not Config.validate_median_kernel(self.median_kernel):
            raise ConfigurationError(f"Median kernel must be 0 or an odd number in 3..9, got {self.median_kernel}")
        if not Config.validate_whitening_factor(self.whitening_factor):
            raise ConfigurationError(f"Whitening factor must be > 0.0, got {self.whitening_factor}")
        return self

    def to_dict(self):
        return asdict(self)
