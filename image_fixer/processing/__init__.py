# Processing package initialization
from .raster import RasterBuffer
from .params import AdjustmentParameters, DEFAULT_PARAMETERS, STAGE_ORDER
from .adjustments import (
    apply_auto_levels, compute_channel_levels,
    apply_gaussian_noise, box_muller,
    apply_brightness_contrast, contrast_factor,
    apply_saturation,
)
from .blur import GaussianKernel, make_gaussian_kernel, apply_gaussian_blur
from .pipeline import AdjustmentPipeline, PipelineStage, PipelineResult, run_pipeline
