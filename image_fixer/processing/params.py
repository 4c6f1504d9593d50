# Adjustment parameters for the processing pipeline
"""
Immutable parameter record consumed by the adjustment pipeline.
"""

import math
import numbers
from dataclasses import dataclass, fields, asdict
from typing import Any, Dict, Mapping

from ..config import settings
from ..utils.errors import ParameterRangeError

# Order in which the pipeline applies its stages
STAGE_ORDER = ("auto_levels", "noise", "brightness_contrast", "saturation", "blur")

# camelCase field names used by the web editor, mapped to ours
CAMEL_CASE_ALIASES = {
    'autoWhiteBalance': 'auto_white_balance',
    'noiseSigma': 'noise_sigma',
    'blurPx': 'blur_radius_px',
    'blurRadiusPx': 'blur_radius_px',
    'brightness': 'brightness_pct',
    'brightnessPct': 'brightness_pct',
    'contrast': 'contrast_pct',
    'contrastPct': 'contrast_pct',
    'saturation': 'saturation_pct',
    'saturationPct': 'saturation_pct',
}


@dataclass(frozen=True)
class AdjustmentParameters:
    """Settings for one pipeline run. Zero values disable their stage."""
    auto_white_balance: bool = False
    noise_sigma: float = 0.0      # 0..50
    blur_radius_px: float = 0.0   # 0..10, Gaussian sigma in pixels
    brightness_pct: float = 0.0   # -100..100
    contrast_pct: float = 0.0     # -100..100
    saturation_pct: float = 0.0   # -100..100

    def __post_init__(self):
        if not isinstance(self.auto_white_balance, bool):
            raise ParameterRangeError(
                f"auto_white_balance must be a bool, got {type(self.auto_white_balance).__name__}",
                setting_name='auto_white_balance',
                value=self.auto_white_balance,
            )
        for name, (low, high) in settings.PARAMETER_RANGES.items():
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise ParameterRangeError(
                    f"{name} must be a number, got {type(value).__name__}",
                    setting_name=name,
                    value=value,
                )
            if math.isnan(value) or value < low or value > high:
                raise ParameterRangeError(
                    f"{name}={value} is outside [{low}, {high}]",
                    setting_name=name,
                    value=value,
                )
            # NumPy scalars are stored as plain floats
            object.__setattr__(self, name, float(value))

    @classmethod
    def clamped(cls, **values: Any) -> 'AdjustmentParameters':
        """Build parameters after clamping each numeric value into its range."""
        bounded = {}
        for name, value in values.items():
            if name in settings.PARAMETER_RANGES and isinstance(value, numbers.Real) and not isinstance(value, bool):
                low, high = settings.PARAMETER_RANGES[name]
                if not math.isnan(value):
                    value = min(max(float(value), low), high)
            bounded[name] = value
        return cls(**bounded)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], clamp: bool = False) -> 'AdjustmentParameters':
        """
        Build parameters from a mapping.

        Accepts our snake_case names and the camelCase names of the web
        editor (e.g. ``blurPx``, ``saturation``). Unknown keys are rejected.
        """
        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in data.items():
            name = CAMEL_CASE_ALIASES.get(key, key)
            if name not in known:
                raise ParameterRangeError(f"Unknown adjustment parameter '{key}'", setting_name=key, value=value)
            values[name] = value
        if clamp:
            return cls.clamped(**values)
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def stage_flags(self) -> Dict[str, bool]:
        """Which pipeline stages these settings enable, in STAGE_ORDER."""
        blur_min = settings.PIPELINE_DEFAULTS["blur_min_sigma"]
        enabled = {
            "auto_levels": self.auto_white_balance,
            "noise": self.noise_sigma > 0,
            "brightness_contrast": self.brightness_pct != 0 or self.contrast_pct != 0,
            "saturation": self.saturation_pct != 0,
            "blur": self.blur_radius_px > blur_min,
        }
        return {name: enabled[name] for name in STAGE_ORDER}

    @property
    def is_identity(self) -> bool:
        """True when no pipeline stage would change the image."""
        return not any(self.stage_flags().values())


DEFAULT_PARAMETERS = AdjustmentParameters()
