# Application settings

# --- Pipeline Parameters ---
PIPELINE_DEFAULTS = {
    # Auto-Level: fraction of pixels clipped at each end of a channel histogram
    "auto_level_clip_fraction": 0.005,

    # Blur: sigmas at or below this are treated as "no visible blur"
    "blur_min_sigma": 0.1,
    "blur_radius_scale": 3.0, # radius = ceil(sigma * scale)
    "blur_max_radius": 20,

    # Brightness/Contrast: floor for (1 - c) in the contrast factor, keeps
    # contrast_pct == 100 finite
    "contrast_min_denominator": 1e-3,
}

# --- Adjustment Parameter Ranges ---
# (min, max) for every numeric AdjustmentParameters field
PARAMETER_RANGES = {
    "noise_sigma": (0.0, 50.0),
    "blur_radius_px": (0.0, 10.0),
    "brightness_pct": (-100.0, 100.0),
    "contrast_pct": (-100.0, 100.0),
    "saturation_pct": (-100.0, 100.0),
}

# --- I/O Defaults ---
IO_DEFAULTS = {
    "max_dimension": 1600, # Loaded images are downscaled so the longest side fits
    "jpeg_quality": 95,
    "png_compression": 6, # Typical default
    "default_output_format": "PNG",
    "output_suffix": "_edited",
}

# --- Logging ---
LOGGING_LEVEL = "INFO" # Options: DEBUG, INFO, WARNING, ERROR
