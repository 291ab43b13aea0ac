from __future__ import annotations

import json
import math
from dataclasses import asdict
from typing import Any, List, NamedTuple

import h5py
import numpy as np

from .config_loader import dynamic_config_from_dict
from .dynamic.config import DynamicBeamformingConfig
from .profile import BeamformFullProfile, ProfileConfig

DATA_HEADER = "index,weight,phaseRadians,timeDelaySeconds"


class ParsedProfile(NamedTuple):
    config: ProfileConfig
    weights: List[float]


def _fmt(v: float) -> str:
    # Integral floats are written without a trailing ".0"
    v = float(v)
    if math.isfinite(v) and v.is_integer() and abs(v) < 1e16:
        return str(int(v))
    return repr(v)


def _fmt_optional(v) -> str:
    return "" if v is None else _fmt(v)


def to_csv(profile: BeamformFullProfile) -> str:
    """Serialize config and per-element weights/phases/delays to the profile CSV text.

    Layout
    - "# BeamformerConfig" comment, then key,value rows for every config field
      (empty value for absent optionals; customWeights is "present" or empty).
    - Blank line, the data header row, then one row per element:
      index,weight,phaseRadians,timeDelaySeconds
    """
    cfg = profile.config
    weights = np.asarray(profile.snapshot.weights, dtype=np.float64)
    phases = np.asarray(profile.snapshot.delays.phase_radians, dtype=np.float64)
    delays = np.asarray(profile.snapshot.delays.time_delays, dtype=np.float64)

    header = [
        "# BeamformerConfig",
        f"elements,{cfg.elements}",
        f"spacing,{_fmt(cfg.spacing)}",
        f"spacingUnit,{cfg.spacing_unit}",
        f"frequencyHz,{_fmt(cfg.frequency_hz)}",
        f"waveSpeed,{_fmt(cfg.wave_speed)}",
        f"steerAngleDeg,{_fmt(cfg.steer_angle_deg)}",
        f"windowType,{cfg.window_type}",
        f"focusDepth,{_fmt_optional(cfg.focus_depth)}",
        f"chebyshevSidelobeDb,{_fmt_optional(cfg.chebyshev_sidelobe_db)}",
        f"customWeights,{'present' if cfg.custom_weights else ''}",
        "",
        DATA_HEADER,
    ]
    rows = [
        f"{i},{_fmt(w)},{_fmt(phi)},{_fmt(tau)}"
        for i, (w, phi, tau) in enumerate(zip(weights, phases, delays))
    ]
    return "\n".join(header) + "\n" + "\n".join(rows) + "\n"


def parse_csv_config(text: str) -> ParsedProfile:
    """Parse text written by `to_csv` back into a ProfileConfig and the weights column.

    Only the index and weight columns are read back. The weights become
    `custom_weights` of the returned config when their count equals `elements`.

    Raises
    - ValueError if the data header row is missing, or if the recovered values
      do not form a valid ProfileConfig.
    """
    lines = text.splitlines()
    values = {}
    data_start = -1
    for i, raw in enumerate(lines):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith(DATA_HEADER):
            data_start = i + 1
            break
        parts = line.split(",")
        if len(parts) >= 2:
            values[parts[0]] = ",".join(parts[1:])
    if data_start < 0:
        raise ValueError("CSV missing data header row.")

    weights: List[float] = []
    for raw in lines[data_start:]:
        line = raw.strip()
        if not line:
            continue
        parts = line.split(",", 3)
        if len(parts) < 2:
            continue
        weights.append(float(parts[1]))

    elements = int(float(values.get("elements", 0)))
    focus = values.get("focusDepth")
    sll = values.get("chebyshevSidelobeDb")
    config = ProfileConfig(
        elements=elements,
        spacing=float(values.get("spacing", 0)),
        spacing_unit=values.get("spacingUnit", "wavelength"),
        frequency_hz=float(values.get("frequencyHz", 1)),
        wave_speed=float(values.get("waveSpeed", 1540)),
        steer_angle_deg=float(values.get("steerAngleDeg", 0)),
        window_type=values.get("windowType", "rectangular"),
        chebyshev_sidelobe_db=float(sll) if sll else None,
        focus_depth=float(focus) if focus else None,
        custom_weights=tuple(weights) if len(weights) == elements else None,
    )
    return ParsedProfile(config=config, weights=weights)


def save_frame_h5(
    path: str,
    beamformed: np.ndarray,
    scan_params: np.ndarray,
    config: DynamicBeamformingConfig,
    attrs: dict | None = None,
) -> None:
    """Save a beamformed frame and its dynamic config to HDF5.

    Datasets
    - beamformed: (L, S) float64
    - scan_params: (L,) float64
    Attributes
    - config: JSON of the DynamicBeamformingConfig
    - Any additional attrs items are saved on the file root.
    """
    frame = np.asarray(beamformed, dtype=np.float64)
    params = np.asarray(scan_params, dtype=np.float64).ravel()
    if frame.ndim != 2 or frame.shape[0] != params.size:
        raise ValueError("beamformed must be (L,S) with L == len(scan_params)")
    with h5py.File(path, "w") as f:
        f.create_dataset("beamformed", data=frame)
        f.create_dataset("scan_params", data=params)
        f.attrs["config"] = json.dumps(asdict(config))
        if attrs is not None:
            for k, v in attrs.items():
                try:
                    f.attrs[k] = v
                except TypeError:
                    f.attrs[k] = json.dumps(v)


def load_frame_h5(path: str) -> dict[str, Any]:
    """Load an HDF5 frame; returns dict with beamformed, scan_params, config, attrs."""
    with h5py.File(path, "r") as f:
        frame = np.array(f["beamformed"], dtype=np.float64)
        params = np.array(f["scan_params"], dtype=np.float64)
        raw = f.attrs["config"] if "config" in f.attrs else None
        attrs = {k: f.attrs[k] for k in f.attrs.keys() if k != "config"}
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8")
    config = dynamic_config_from_dict(json.loads(raw)) if raw is not None else None
    return {"beamformed": frame, "scan_params": params, "config": config, "attrs": attrs}
