# Adjustment pipeline
"""
Runs the adjustment stages over a raster buffer in a fixed order.

Order: auto levels -> noise -> brightness/contrast -> saturation -> blur.
Levels are corrected on the cleanest signal before noise is added, colour
grading sees the noisy but balanced image, and blur comes last so it smooths
noise and grading together.
"""

from typing import Any, Callable, Dict, List, Optional
from dataclasses import dataclass, field
import time

import numpy as np

from ..config import settings
from ..utils.errors import ProcessingError
from ..utils.logger import get_logger
from .adjustments import (
    apply_auto_levels,
    apply_brightness_contrast,
    apply_gaussian_noise,
    apply_saturation,
)
from .blur import apply_gaussian_blur
from .params import STAGE_ORDER, AdjustmentParameters
from .raster import RasterBuffer

logger = get_logger(__name__)


@dataclass
class PipelineStage:
    """A stage in the processing pipeline."""
    name: str
    enabled: bool = True
    params: Dict[str, Any] = field(default_factory=dict)


@dataclass
class PipelineResult:
    """Result of pipeline execution."""
    buffer: RasterBuffer
    stages_executed: List[str]
    total_time: float
    stage_times: Dict[str, float]


class AdjustmentPipeline:
    """
    Image adjustment pipeline.

    configure() turns an AdjustmentParameters record into the ordered stage
    list, execute() threads a buffer through the enabled stages. The input
    buffer is never modified and the result is always a new buffer with the
    same dimensions.
    """

    def __init__(self, rng: Optional[np.random.Generator] = None):
        self._stages: List[PipelineStage] = []
        self._rng = rng
        self._handlers: Dict[str, Callable[[RasterBuffer, Dict[str, Any]], RasterBuffer]] = {
            "auto_levels": lambda buf, p: apply_auto_levels(buf, p.get("clip_fraction")),
            "noise": lambda buf, p: apply_gaussian_noise(buf, p["sigma"], self._rng),
            "brightness_contrast": lambda buf, p: apply_brightness_contrast(buf, p["brightness_pct"], p["contrast_pct"]),
            "saturation": lambda buf, p: apply_saturation(buf, p["saturation_pct"]),
            "blur": lambda buf, p: apply_gaussian_blur(buf, p["sigma_px"]),
        }

    @property
    def stages(self) -> List[PipelineStage]:
        return list(self._stages)

    def configure(self, params: AdjustmentParameters) -> 'AdjustmentPipeline':
        """
        Configure pipeline stages from adjustment parameters.

        Every stage is listed in order; only those whose parameters have a
        visible effect are enabled.
        """
        flags = params.stage_flags()
        stage_params = {
            "auto_levels": {"clip_fraction": settings.PIPELINE_DEFAULTS["auto_level_clip_fraction"]},
            "noise": {"sigma": params.noise_sigma},
            "brightness_contrast": {"brightness_pct": params.brightness_pct, "contrast_pct": params.contrast_pct},
            "saturation": {"saturation_pct": params.saturation_pct},
            "blur": {"sigma_px": params.blur_radius_px},
        }
        self._stages = [
            PipelineStage(name, enabled=flags[name], params=stage_params[name])
            for name in STAGE_ORDER
        ]
        return self

    def execute(
        self,
        buffer: RasterBuffer,
        progress_callback: Optional[Callable[[str, float], None]] = None,
    ) -> PipelineResult:
        """
        Execute the pipeline on a buffer.

        Args:
            buffer: Input RGBA buffer. Never modified.
            progress_callback: Optional callback(stage_name, percent).

        Returns:
            PipelineResult with the output buffer and timing info.

        Raises:
            ProcessingError: if a stage changes the buffer dimensions.
        """
        result = buffer
        stages_executed = []
        stage_times = {}
        total_start = time.perf_counter()

        for i, stage in enumerate(self._stages):
            if not stage.enabled:
                continue

            if progress_callback:
                progress_callback(stage.name, (i / len(self._stages)) * 100)

            stage_start = time.perf_counter()
            output = self._handlers[stage.name](result, stage.params)
            if not output.same_dimensions(result):
                raise ProcessingError(
                    f"Stage {stage.name} changed dimensions from {result.dimensions} to {output.dimensions}",
                    step=stage.name,
                )
            result = output
            stages_executed.append(stage.name)
            stage_times[stage.name] = time.perf_counter() - stage_start
            logger.debug("Stage %s done in %.4fs", stage.name, stage_times[stage.name])

        # Stages may hand back their input unchanged; the caller always gets a fresh buffer
        if result is buffer:
            result = buffer.copy()

        if progress_callback:
            progress_callback("complete", 100)

        total_time = time.perf_counter() - total_start
        logger.debug(
            "Pipeline complete: %d stages on %dx%d in %.4fs",
            len(stages_executed), buffer.width, buffer.height, total_time,
        )
        return PipelineResult(
            buffer=result,
            stages_executed=stages_executed,
            total_time=total_time,
            stage_times=stage_times,
        )


def run_pipeline(
    buffer: RasterBuffer,
    params: AdjustmentParameters,
    rng: Optional[np.random.Generator] = None,
) -> RasterBuffer:
    """
    Apply the adjustment pipeline to a buffer.

    This is the main entry point of the processing core.

    Args:
        buffer: Input RGBA buffer.
        params: Adjustment parameters for this run.
        rng: Random generator for the noise stage; seed it for repeatable output.

    Returns:
        New RasterBuffer with the same width and height as the input.
    """
    return AdjustmentPipeline(rng).configure(params).execute(buffer).buffer
