"""Linear-array ultrasound beamforming utilities.

Static beam profiles (apodization windows, steering/focusing delays,
far-field patterns and their statistics) and a dynamic time-domain
simulation (point-source echoes, delay-and-sum beamformers, Hilbert
envelope detection). Public API intentionally functional; see module
docstrings for equations and units.
"""

from .windows import (
    make_window,
    rectangular_window,
    hamming_window,
    triangular_window,
    chebyshev_window,
)
from .geometry import ula_positions
from .profile import (
    ProfileConfig,
    PerElementDelays,
    ProfileSnapshot,
    PatternPoint,
    BeamformFullProfile,
    spacing_meters,
    compute_weights,
    compute_delays,
    compute_profile,
)
from .pattern import (
    default_angles,
    compute_pattern,
    pattern_arrays,
    compute_full_profile,
)
from .metrics import PatternStats, compute_pattern_stats
from .profile_io import (
    to_csv,
    parse_csv_config,
    save_frame_h5,
    load_frame_h5,
)
from .storage import StoragePort, FileStorage
from .hilbert import (
    AnalyticSignal,
    fft_radix2,
    hilbert_analytic,
    envelope,
    frame_envelope,
)
from .config_loader import (
    ConfigManager,
    profile_config_from_dict,
    dynamic_config_from_dict,
)
from .dynamic import (
    ArrayConfig,
    ScanningConfig,
    DynamicBeamformingConfig,
    PointSourceParams,
    scanline_param,
    create_point_source_generator,
    create_txrx_point_source_generator,
    create_sum_beamformer,
    create_delay_and_sum_beamformer,
    create_delay_and_sum_apodized_beamformer,
    sample_row_linear,
    FrameResult,
    run_frame,
)

__all__ = [
    "make_window",
    "rectangular_window",
    "hamming_window",
    "triangular_window",
    "chebyshev_window",
    "ula_positions",
    "ProfileConfig",
    "PerElementDelays",
    "ProfileSnapshot",
    "PatternPoint",
    "BeamformFullProfile",
    "spacing_meters",
    "compute_weights",
    "compute_delays",
    "compute_profile",
    "default_angles",
    "compute_pattern",
    "pattern_arrays",
    "compute_full_profile",
    "PatternStats",
    "compute_pattern_stats",
    "to_csv",
    "parse_csv_config",
    "save_frame_h5",
    "load_frame_h5",
    "StoragePort",
    "FileStorage",
    "AnalyticSignal",
    "fft_radix2",
    "hilbert_analytic",
    "envelope",
    "frame_envelope",
    "ConfigManager",
    "profile_config_from_dict",
    "dynamic_config_from_dict",
    "ArrayConfig",
    "ScanningConfig",
    "DynamicBeamformingConfig",
    "PointSourceParams",
    "scanline_param",
    "create_point_source_generator",
    "create_txrx_point_source_generator",
    "create_sum_beamformer",
    "create_delay_and_sum_beamformer",
    "create_delay_and_sum_apodized_beamformer",
    "sample_row_linear",
    "FrameResult",
    "run_frame",
]
