from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from joblib import Parallel, delayed

from .config import DynamicBeamformer, DynamicBeamformingConfig, ScanlineGenerator, scanline_params


@dataclass(frozen=True)
class FrameResult:
    beamformed: np.ndarray  # (num_scan_lines, samples)
    scan_params: np.ndarray  # (num_scan_lines,), deg for phased, m for linear


def _process_scanline(
    index: int,
    config: DynamicBeamformingConfig,
    generator: ScanlineGenerator,
    beamformer: DynamicBeamformer,
) -> np.ndarray:
    matrix = generator.generate_scanline(index, config)
    return np.asarray(beamformer.beamform(matrix, index, config), dtype=np.float64)


def run_frame(
    config: DynamicBeamformingConfig,
    generator: ScanlineGenerator,
    beamformer: DynamicBeamformer,
    n_jobs: int = 1,
) -> FrameResult:
    """Generate and beamform every scanline of one frame.

    Parameters
    - config: dynamic beamforming configuration.
    - generator: produces the (samples, elements) matrix for a scanline.
    - beamformer: reduces the matrix to a (samples,) scanline.
    - n_jobs: 1 runs sequentially; otherwise scanlines are dispatched with
      joblib (-1 uses all CPUs). Row i of the result is always scanline i.

    Returns
    - FrameResult with beamformed (L, S) and scan_params (L,).
    """
    n_lines = config.scanning.num_scan_lines
    params = scanline_params(config)

    if n_jobs == 1:
        rows = [_process_scanline(i, config, generator, beamformer) for i in range(n_lines)]
    else:
        # Threads keep injected loggers in-process; numpy releases the GIL in the heavy ops
        rows = Parallel(n_jobs=n_jobs, prefer="threads")(
            delayed(_process_scanline)(i, config, generator, beamformer) for i in range(n_lines)
        )

    beamformed = np.empty((n_lines, config.scanning.samples), dtype=np.float64)
    for i, row in enumerate(rows):
        beamformed[i] = row
    return FrameResult(beamformed=beamformed, scan_params=params)
