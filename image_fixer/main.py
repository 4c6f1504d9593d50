# Application entry point
import argparse
import os
import sys
from typing import List, Optional

import numpy as np

from image_fixer.config import settings
from image_fixer.io import load_image, save_image, suggest_output_name
from image_fixer.processing import AdjustmentParameters, AdjustmentPipeline
from image_fixer.utils.errors import AppError, format_user_error
from image_fixer.utils.logger import get_logger, set_log_level

logger = get_logger(__name__)


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="image-fixer",
        description="Apply white balance, noise, colour and blur adjustments to an image",
    )
    g_io = p.add_argument_group("I/O")
    g_io.add_argument("input", help="Path to the source image")
    g_io.add_argument("-o", "--output", default=None,
                      help="Output path (default: <input>_edited.png next to the input)")
    g_io.add_argument("--max-dim", type=int, default=settings.IO_DEFAULTS["max_dimension"],
                      help="Downscale so the longest side is at most this many pixels (0 = keep size)")
    g_io.add_argument("--quality", type=int, default=settings.IO_DEFAULTS["jpeg_quality"],
                      help="JPEG/WebP quality for lossy outputs")

    g_adj = p.add_argument_group("Adjustments")
    g_adj.add_argument("--auto-wb", action="store_true", help="Auto white balance (per-channel auto levels)")
    g_adj.add_argument("--noise", type=float, default=0.0, help="Gaussian noise sigma, 0-50")
    g_adj.add_argument("--blur", type=float, default=0.0, help="Gaussian blur sigma in pixels, 0-10")
    g_adj.add_argument("--brightness", type=float, default=0.0, help="Brightness %%, -100 to 100")
    g_adj.add_argument("--contrast", type=float, default=0.0, help="Contrast %%, -100 to 100")
    g_adj.add_argument("--saturation", type=float, default=0.0, help="Saturation %%, -100 to 100")
    g_adj.add_argument("--seed", type=int, default=None, help="Seed for repeatable noise")

    p.add_argument("--log-level", default=settings.LOGGING_LEVEL,
                   choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    return p


def params_from_args(args: argparse.Namespace) -> AdjustmentParameters:
    """Out-of-range values are clamped, the way the editor's sliders bound them."""
    return AdjustmentParameters.clamped(
        auto_white_balance=bool(args.auto_wb),
        noise_sigma=args.noise,
        blur_radius_px=args.blur,
        brightness_pct=args.brightness,
        contrast_pct=args.contrast,
        saturation_pct=args.saturation,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main function to run the command-line tool. Returns the exit code."""
    args = build_argparser().parse_args(argv)
    set_log_level(args.log_level)

    output = args.output or suggest_output_name(args.input)
    try:
        params = params_from_args(args)
        if params.is_identity:
            logger.info("No adjustments requested, writing an unchanged copy")
        source = load_image(args.input, max_dimension=args.max_dim)

        rng = np.random.default_rng(args.seed)
        result = AdjustmentPipeline(rng).configure(params).execute(source)
        logger.info(
            "Applied %s in %.3fs",
            ", ".join(result.stages_executed) or "no adjustments",
            result.total_time,
        )

        if not save_image(result.buffer, output, quality=args.quality):
            logger.error("Could not write '%s'", output)
            return 1
    except AppError as e:
        logger.error(format_user_error(e, context=f"processing {os.path.basename(args.input)}"))
        return 1

    logger.info("Wrote %s", output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
