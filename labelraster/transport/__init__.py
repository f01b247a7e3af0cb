from .usb import DEFAULT_TIMEOUT_MS, UsbTransport, device_lock, transmit

__all__ = ["DEFAULT_TIMEOUT_MS", "device_lock", "transmit", "UsbTransport"]
