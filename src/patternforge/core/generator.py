"""Engine facade: render a registered pattern to a PIL image or a PNG file."""

import logging
from datetime import datetime
from pathlib import Path

from PIL import Image

from .. import patterns  # noqa: F401  # registers every pattern family
from .buffer import PixelBuffer
from .colors import colorize
from .config import PatternforgeConfig, config as default_config
from .random_source import make_rng
from .registry import PatternRegistry, pattern_registry
from .validation import validate_pixel_budget

logger = logging.getLogger(__name__)


class PatternGenerator:
    """Render patterns from the registry into images."""

    def __init__(
        self,
        config: PatternforgeConfig | None = None,
        registry: PatternRegistry | None = None,
    ):
        """
        Initialize the pattern generator.

        Args:
            config: Configuration object. If None, uses global default config.
            registry: Pattern registry. If None, uses the global registry.
        """
        self.config = config or default_config
        self.registry = registry or pattern_registry

        logger.info(f"Initialized PatternGenerator with {len(self.registry)} patterns")

    def render(
        self,
        pattern: str | None = None,
        width: int | None = None,
        height: int | None = None,
        seed: int | None = None,
        color_mode: bool | None = None,
        resolution: str | None = None,
    ) -> PixelBuffer:
        """
        Fill a fresh buffer with a pattern.

        Args:
            pattern: Pattern id (default from config)
            width: Image width (default from resolution or config)
            height: Image height (default from resolution or config)
            seed: Random seed for reproducibility (None for random)
            color_mode: Apply color mode (default from config)
            resolution: Named resolution preset (4MP, 8MP, 12MP)

        Returns:
            The filled PixelBuffer

        Raises:
            KeyError: If the pattern or resolution is unknown
            ValidationError: If the size is invalid or exceeds max_pixels
        """
        pattern = pattern or self.config.default_pattern
        width, height = self.config.resolve_size(width, height, resolution)
        color_mode = self.config.color_mode if color_mode is None else color_mode

        # Fail on unknown names before allocating anything
        self.registry.get_pattern_info(pattern)
        validate_pixel_budget(width, height, self.config.max_pixels)

        logger.info(f"Generating pattern: {pattern} {width}x{height}, seed={seed}, color={color_mode}")

        rng = make_rng(seed)
        buffer = PixelBuffer.allocate(width, height)

        try:
            self.registry.generate(pattern, buffer, rng=rng)
            if color_mode:
                colorize(buffer, pattern, registry=self.registry, rng=rng)
        except Exception as e:
            logger.error(f"Failed to generate pattern {pattern}: {e}")
            raise

        logger.info("Pattern generated successfully!")
        return buffer

    def generate(
        self,
        pattern: str | None = None,
        width: int | None = None,
        height: int | None = None,
        seed: int | None = None,
        color_mode: bool | None = None,
        resolution: str | None = None,
    ) -> Image.Image:
        """
        Generate a pattern image.

        Takes the same arguments as ``render()``.

        Returns:
            Generated PIL Image (RGBA)
        """
        buffer = self.render(
            pattern=pattern,
            width=width,
            height=height,
            seed=seed,
            color_mode=color_mode,
            resolution=resolution,
        )
        return buffer.to_image()

    def generate_and_save(
        self,
        pattern: str | None = None,
        width: int | None = None,
        height: int | None = None,
        seed: int | None = None,
        color_mode: bool | None = None,
        resolution: str | None = None,
        output_path: Path | None = None,
    ) -> tuple[Image.Image, Path]:
        """
        Generate a pattern image and save it to disk.

        Args:
            pattern: Pattern id
            width: Image width
            height: Image height
            seed: Random seed for reproducibility
            color_mode: Apply color mode
            resolution: Named resolution preset
            output_path: Custom output path (if None, auto-generates in outputs_dir)

        Returns:
            Tuple of (generated image, save path)
        """
        pattern = pattern or self.config.default_pattern
        image = self.generate(
            pattern=pattern,
            width=width,
            height=height,
            seed=seed,
            color_mode=color_mode,
            resolution=resolution,
        )

        # Generate output filename if not provided
        if output_path is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            seed_suffix = f"_seed{seed}" if seed is not None else ""
            filename = f"{self.config.filename_prefix}_{timestamp}_{pattern}{seed_suffix}.png"
            output_path = self.config.outputs_dir / filename

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        image.save(output_path)
        logger.info(f"Image saved to: {output_path}")

        return image, output_path
