"""Configuration management for patternforge.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the PATTERNFORGE_ prefix,
allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (PATTERNFORGE_* prefix)
2. .env file in the project root
3. Default values defined in PatternforgeConfig

Example .env file:
    PATTERNFORGE_DEFAULT_PATTERN=galaxy
    PATTERNFORGE_DEFAULT_RESOLUTION=4MP
    PATTERNFORGE_COLOR_MODE=true
    PATTERNFORGE_OUTPUTS_DIR=outputs

Usage Example
-------------
    from patternforge.core.config import config

    print(config.default_pattern)
    print(config.resolve_size())

Resolution Presets
------------------
Named presets cover the large output sizes. When ``default_resolution`` is
set it takes precedence over ``default_width`` / ``default_height``:

- 4MP: 2048 x 1952
- 8MP: 2896 x 2760
- 12MP: 3456 x 3456

See Also
--------
- .env.example: Template with all available configuration options
"""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ResolutionPreset = Literal["4MP", "8MP", "12MP"]

RESOLUTIONS: dict[str, tuple[int, int]] = {
    "4MP": (2048, 1952),
    "8MP": (2896, 2760),
    "12MP": (3456, 3456),
}


class PatternforgeConfig(BaseSettings):
    """Main configuration for patternforge.

    Values are loaded from environment variables with the PATTERNFORGE_
    prefix, with fallback to the defaults defined here. ``outputs_dir`` is
    created if it does not exist.

    Attributes
    ----------
    Generation Settings:
        default_pattern : str
            Pattern id rendered when none is given
        default_width : int
            Default image width in pixels (1-4096)
        default_height : int
            Default image height in pixels (1-4096)
        default_resolution : ResolutionPreset | None
            Named preset overriding width/height when set
        color_mode : bool
            Map grayscale output through a color palette
        max_pixels : int
            Largest width * height accepted by the generator facade

    Output:
        outputs_dir : Path
            Directory to save rendered images
        filename_prefix : str
            Prefix for auto-generated file names

    Logging:
        log_level : Literal["DEBUG", "INFO", "WARNING", "ERROR"]
            Level passed to logging.basicConfig by the CLI

    Examples
    --------
        >>> custom_config = PatternforgeConfig(
        ...     default_pattern="nebula",
        ...     default_resolution="8MP",
        ... )
        >>> custom_config.resolve_size()
        (2896, 2760)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PATTERNFORGE_",
        case_sensitive=False,
    )

    # Generation settings
    default_pattern: str = Field(
        default="noise",
        description="Pattern id rendered when none is given",
    )
    default_width: int = Field(default=1024, ge=1, le=4096)
    default_height: int = Field(default=1024, ge=1, le=4096)
    default_resolution: ResolutionPreset | None = Field(
        default=None,
        description="Named resolution preset (overrides default_width/default_height)",
    )
    color_mode: bool = Field(
        default=False,
        description="Map grayscale output through a color palette",
    )
    max_pixels: int = Field(
        default=12_000_000,
        description="Largest width * height accepted before allocating a buffer",
        ge=1,
    )

    # Output
    outputs_dir: Path = Field(
        default=Path("outputs"),
        description="Directory to save rendered images",
    )
    filename_prefix: str = Field(
        default="patternforge",
        description="Prefix for auto-generated file names",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level used by the command line interface",
    )

    def __init__(self, **kwargs):
        """Initialize configuration and create the output directory.

        Args:
            **kwargs: Configuration overrides (typically from environment variables)
        """
        super().__init__(**kwargs)

        self.outputs_dir.mkdir(parents=True, exist_ok=True)

    def resolve_size(
        self,
        width: int | None = None,
        height: int | None = None,
        resolution: str | None = None,
    ) -> tuple[int, int]:
        """Resolve the output size from explicit values, a preset, or defaults.

        Explicit ``width`` / ``height`` win, then ``resolution``, then
        ``default_resolution``, then ``default_width`` / ``default_height``.

        Raises:
            KeyError: If ``resolution`` is not a known preset
        """
        preset = resolution or self.default_resolution
        if preset is not None:
            if preset not in RESOLUTIONS:
                available = ", ".join(RESOLUTIONS)
                raise KeyError(f"Resolution '{preset}' not found. Available resolutions: {available}")
            preset_width, preset_height = RESOLUTIONS[preset]
        else:
            preset_width, preset_height = self.default_width, self.default_height

        return (
            preset_width if width is None else width,
            preset_height if height is None else height,
        )


# Global configuration instance, loaded from PATTERNFORGE_* variables and .env
config = PatternforgeConfig()
