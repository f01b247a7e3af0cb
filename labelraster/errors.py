from __future__ import annotations


class LabelRasterError(RuntimeError):
    """Base class for every failure surfaced to the CLI or HTTP caller."""


class DecodeError(LabelRasterError):
    """Payload is not an image Pillow can decode."""


class DeviceError(LabelRasterError):
    """Printer could not be reached or written to."""


class DeviceNotFound(DeviceError):
    def __init__(self, vendor_id: int, product_id: int) -> None:
        super().__init__(f"No printer found with id {vendor_id:04x}:{product_id:04x}")
        self.vendor_id = vendor_id
        self.product_id = product_id


class InterfaceClaimError(DeviceError):
    pass


class TransmissionError(DeviceError):
    pass
