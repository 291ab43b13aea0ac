"""Dynamic (time-domain) scanline simulation: config, echo generators,
delay-and-sum beamformers and the frame runner."""

from .config import (
    ArrayConfig,
    DynamicBeamformer,
    DynamicBeamformingConfig,
    ScanlineGenerator,
    ScanningConfig,
    element_position_meters,
    element_positions,
    scanline_param,
    scanline_params,
)
from .generators import (
    PointSourceGenerator,
    PointSourceParams,
    TxRxPointSourceGenerator,
    create_point_source_generator,
    create_txrx_point_source_generator,
)
from .beamformers import (
    DelayAndSumApodizedBeamformer,
    DelayAndSumBeamformer,
    SumBeamformer,
    create_delay_and_sum_apodized_beamformer,
    create_delay_and_sum_beamformer,
    create_sum_beamformer,
    sample_row_linear,
)
from .runner import FrameResult, run_frame

__all__ = [
    "ArrayConfig",
    "DynamicBeamformer",
    "DynamicBeamformingConfig",
    "ScanlineGenerator",
    "ScanningConfig",
    "element_position_meters",
    "element_positions",
    "scanline_param",
    "scanline_params",
    "PointSourceGenerator",
    "PointSourceParams",
    "TxRxPointSourceGenerator",
    "create_point_source_generator",
    "create_txrx_point_source_generator",
    "DelayAndSumApodizedBeamformer",
    "DelayAndSumBeamformer",
    "SumBeamformer",
    "create_delay_and_sum_apodized_beamformer",
    "create_delay_and_sum_beamformer",
    "create_sum_beamformer",
    "sample_row_linear",
    "FrameResult",
    "run_frame",
]
