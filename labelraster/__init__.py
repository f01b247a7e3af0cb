from .errors import (
    DecodeError,
    DeviceError,
    DeviceNotFound,
    InterfaceClaimError,
    LabelRasterError,
    TransmissionError,
)
from .protocol import DEFAULT_GEOMETRY, PrintGeometry
from .rendering import decode_image, rasterize
from .transport import UsbTransport, transmit

__version__ = "0.1.0"

__all__ = [
    "decode_image",
    "DecodeError",
    "DEFAULT_GEOMETRY",
    "DeviceError",
    "DeviceNotFound",
    "InterfaceClaimError",
    "LabelRasterError",
    "PrintGeometry",
    "rasterize",
    "TransmissionError",
    "transmit",
    "UsbTransport",
]
