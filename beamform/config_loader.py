from __future__ import annotations

import copy
import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Mapping

from .dynamic.config import ArrayConfig, DynamicBeamformingConfig, ScanningConfig
from .dynamic.generators import PointSourceParams
from .profile import ProfileConfig

logger = logging.getLogger(__name__)

PROFILES_FILE = "profiles.json"
DYNAMIC_FILE = "dynamic.json"

_MISSING = object()

BUILTIN_PROFILE_PRESETS: Dict[str, Dict[str, Any]] = {
    "default": {
        "description": "64-element half-wavelength array, Hamming apodization",
        "elements": 64,
        "spacing": 0.5,
        "spacingUnit": "wavelength",
        "frequencyHz": 5e6,
        "waveSpeed": 1540.0,
        "steerAngleDeg": 0.0,
        "windowType": "hamming",
    },
    "rectangular_small": {
        "description": "4 elements, no apodization",
        "elements": 4,
        "spacing": 0.5,
        "spacingUnit": "wavelength",
        "frequencyHz": 5e6,
        "waveSpeed": 1540.0,
        "windowType": "rectangular",
    },
    "chebyshev_focused": {
        "description": "32 elements, 40 dB Chebyshev, steered 20 deg, 30 mm focus",
        "elements": 32,
        "spacing": 0.5,
        "spacingUnit": "wavelength",
        "frequencyHz": 5e6,
        "waveSpeed": 1540.0,
        "steerAngleDeg": 20.0,
        "windowType": "chebyshev",
        "chebyshevSidelobeDb": 40.0,
        "focusDepth": 0.03,
    },
}

BUILTIN_DYNAMIC_PRESETS: Dict[str, Dict[str, Any]] = {
    "default": {
        "description": "Phased sector scan, 40 lines over +-10 deg",
        "timeStep": 1e-7,
        "propagationSpeed": 1540.0,
        "scanning": {"numScanLines": 40, "type": "phased", "range": [-10.0, 10.0], "samples": 256},
        # 0.25 wavelength at 5 MHz in water-like tissue
        "array": {"elements": 32, "elementSpacing": 0.25 * 1540.0 / 5e6},
        "source": {"offset": 0.0, "speed": 0.5, "frequencyHz": 5e6},
    },
    "linear_small": {
        "description": "Linear scan, 16 lines over +-5 mm",
        "timeStep": 1e-7,
        "propagationSpeed": 1540.0,
        "scanning": {"numScanLines": 16, "type": "linear", "range": [-0.005, 0.005], "samples": 128},
        "array": {"elements": 16, "elementSpacing": 3e-4},
        "source": {"offset": 0.0, "speed": 0.5, "frequencyHz": 5e6},
    },
}


def _pick(d: Mapping[str, Any], *keys: str, default: Any = _MISSING) -> Any:
    for k in keys:
        if k in d and d[k] is not None:
            return d[k]
    if default is _MISSING:
        raise ValueError(f"missing config key: {keys[0]}")
    return default


def _optional_float(v: Any):
    if v is None or v == "":
        return None
    return float(v)


def profile_config_from_dict(d: Mapping[str, Any]) -> ProfileConfig:
    """Build a ProfileConfig from camelCase (CSV header names) or snake_case keys.

    Missing optional keys take the ProfileConfig defaults; missing `elements`
    or `spacing` raises ValueError.
    """
    custom = _pick(d, "customWeights", "custom_weights", default=None)
    if isinstance(custom, str):
        # "present" marker in the CSV header carries no values
        custom = None
    return ProfileConfig(
        elements=int(_pick(d, "elements")),
        spacing=float(_pick(d, "spacing")),
        spacing_unit=_pick(d, "spacingUnit", "spacing_unit", default="wavelength"),
        frequency_hz=float(_pick(d, "frequencyHz", "frequency_hz", default=1.0)),
        wave_speed=float(_pick(d, "waveSpeed", "wave_speed", default=1540.0)),
        steer_angle_deg=float(_pick(d, "steerAngleDeg", "steer_angle_deg", default=0.0)),
        window_type=_pick(d, "windowType", "window_type", default="rectangular"),
        chebyshev_sidelobe_db=_optional_float(_pick(d, "chebyshevSidelobeDb", "chebyshev_sidelobe_db", default=None)),
        focus_depth=_optional_float(_pick(d, "focusDepth", "focus_depth", default=None)),
        custom_weights=custom,
    )


def dynamic_config_from_dict(d: Mapping[str, Any]) -> DynamicBeamformingConfig:
    """Build a DynamicBeamformingConfig from a nested mapping.

    Accepts both the camelCase layout used by the JSON presets
    (timeStep, propagationSpeed, scanning{numScanLines, type, range, samples},
    array{elements, elementSpacing}) and the snake_case layout produced by
    `dataclasses.asdict`.
    """
    scan = _pick(d, "scanning")
    arr = _pick(d, "array")
    scanning = ScanningConfig(
        num_scan_lines=int(_pick(scan, "numScanLines", "num_scan_lines")),
        scan_type=_pick(scan, "type", "scan_type"),
        scan_range=tuple(_pick(scan, "range", "scan_range")),
        samples=int(_pick(scan, "samples")),
    )
    array = ArrayConfig(
        elements=int(_pick(arr, "elements")),
        element_spacing=float(_pick(arr, "elementSpacing", "element_spacing")),
    )
    return DynamicBeamformingConfig(
        time_step=float(_pick(d, "timeStep", "time_step")),
        propagation_speed=float(_pick(d, "propagationSpeed", "propagation_speed")),
        scanning=scanning,
        array=array,
    )


def point_source_params_from_dict(d: Mapping[str, Any]) -> PointSourceParams:
    return PointSourceParams(
        offset=float(_pick(d, "offset", default=0.0)),
        speed=float(_pick(d, "speed", default=0.0)),
        frequency_hz=float(_pick(d, "frequencyHz", "frequency_hz")),
        amplitude=float(_pick(d, "amplitude", default=1.0)),
        phase0=float(_pick(d, "phase0", default=0.0)),
    )


class ConfigManager:
    """Named profile and dynamic presets from JSON files in `config_dir`.

    Files
    - profiles.json: {name: profile mapping}
    - dynamic.json: {name: dynamic mapping, optionally with a "source" section}

    Both files may contain // and /* */ comments and trailing commas. Presets
    from the files extend (and override by name) the built-in ones; an absent
    or unreadable file leaves the built-ins in place.
    """

    def __init__(self, config_dir: str | Path = "config"):
        self.config_dir = Path(config_dir)
        self.profile_configs = copy.deepcopy(BUILTIN_PROFILE_PRESETS)
        self.profile_configs.update(self._load_any(PROFILES_FILE))
        self.dynamic_configs = copy.deepcopy(BUILTIN_DYNAMIC_PRESETS)
        self.dynamic_configs.update(self._load_any(DYNAMIC_FILE))

    # -------- comment-tolerant JSON helpers --------
    @staticmethod
    def _parse_json_with_comments(path: Path) -> Any:
        text = path.read_text(encoding="utf-8")
        # remove /* ... */
        text = re.sub(r"/\*.*?\*/", "", text, flags=re.S)
        # strip // comments per line
        text = "\n".join(line.split("//", 1)[0] for line in text.splitlines())
        # remove trailing commas before ] or }
        text = re.sub(r",(\s*[\]}])", r"\1", text)
        return json.loads(text)

    def _load_any(self, filename: str) -> Dict[str, Dict[str, Any]]:
        path = self.config_dir / filename
        try:
            data = self._parse_json_with_comments(path)
        except FileNotFoundError:
            logger.info("%s not found, using built-in presets", path)
            return {}
        except (OSError, ValueError) as e:
            logger.warning("failed to parse %s: %s; using built-in presets", path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("%s must hold a JSON object of named presets; ignoring it", path)
            return {}
        return data

    def get_profile_config(self, config_name: str) -> ProfileConfig:
        if config_name not in self.profile_configs:
            raise ValueError(f"Unknown profile config: {config_name}")
        return profile_config_from_dict(self.profile_configs[config_name])

    def get_dynamic_config(self, config_name: str) -> DynamicBeamformingConfig:
        if config_name not in self.dynamic_configs:
            raise ValueError(f"Unknown dynamic config: {config_name}")
        return dynamic_config_from_dict(self.dynamic_configs[config_name])

    def get_point_source_params(self, config_name: str) -> PointSourceParams:
        """Reflector parameters of a dynamic preset (defaults: on axis, 5 MHz, static)."""
        if config_name not in self.dynamic_configs:
            raise ValueError(f"Unknown dynamic config: {config_name}")
        source = self.dynamic_configs[config_name].get("source") or {"frequencyHz": 5e6}
        return point_source_params_from_dict(source)

    def list_available_configs(self) -> Dict[str, List[str]]:
        return {
            "profiles": sorted(self.profile_configs),
            "dynamic": sorted(self.dynamic_configs),
        }
