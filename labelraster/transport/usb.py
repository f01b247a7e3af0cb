from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, Optional, Tuple

import usb.core
import usb.util

from ..errors import DeviceNotFound, InterfaceClaimError, TransmissionError
from ..protocol import reset_cmd

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 5000
INTERFACE = (0, 0)

_device_locks: Dict[Tuple[int, int], threading.Lock] = {}
_registry_lock = threading.Lock()


def device_lock(vendor_id: int, product_id: int) -> threading.Lock:
    """Return the lock serializing transmissions to one physical printer."""
    key = (vendor_id, product_id)
    with _registry_lock:
        lock = _device_locks.get(key)
        if lock is None:
            lock = threading.Lock()
            _device_locks[key] = lock
        return lock


def _is_bulk_out(endpoint) -> bool:
    return (
        usb.util.endpoint_direction(endpoint.bEndpointAddress) == usb.util.ENDPOINT_OUT
        and usb.util.endpoint_type(endpoint.bmAttributes) == usb.util.ENDPOINT_TYPE_BULK
    )


class UsbTransport:
    """One-shot USB bulk writer for a printer identified by vendor/product id."""

    def __init__(
        self,
        vendor_id: int,
        product_id: int,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        backend=None,
    ) -> None:
        if timeout_ms <= 0:
            raise ValueError("USB write timeout must be a positive number of milliseconds")
        self._vendor_id = vendor_id
        self._product_id = product_id
        self._timeout_ms = timeout_ms
        self._backend = backend

    @property
    def device_id(self) -> str:
        return f"{self._vendor_id:04x}:{self._product_id:04x}"

    def transmit(self, data: bytes) -> int:
        """Send a reset command followed by ``data``; return bytes written."""
        with device_lock(self._vendor_id, self._product_id):
            with self._open_endpoint() as endpoint:
                written = self._write(endpoint, reset_cmd())
                written += self._write(endpoint, data)
        logger.info("Sent %d bytes to printer %s", written, self.device_id)
        return written

    @contextmanager
    def _open_endpoint(self) -> Iterator[object]:
        device = usb.core.find(idVendor=self._vendor_id, idProduct=self._product_id, backend=self._backend)
        if device is None:
            raise DeviceNotFound(self._vendor_id, self._product_id)
        logger.debug("Printer %s connected", self.device_id)
        interface = None
        detached = False
        try:
            detached = self._detach_kernel_driver(device)
            interface = self._claim_interface(device)
            endpoint = usb.util.find_descriptor(interface, custom_match=_is_bulk_out)
            if endpoint is None:
                raise InterfaceClaimError(f"Printer {self.device_id} has no bulk OUT endpoint")
            yield endpoint
        finally:
            if interface is not None:
                self._release(device, interface)
            if detached:
                self._reattach_kernel_driver(device)
            usb.util.dispose_resources(device)

    def _detach_kernel_driver(self, device) -> bool:
        number = INTERFACE[0]
        try:
            if not device.is_kernel_driver_active(number):
                return False
            device.detach_kernel_driver(number)
        except NotImplementedError:
            # backend without kernel driver control (Windows, macOS)
            logger.debug("Kernel driver check not supported for %s", self.device_id)
            return False
        except usb.core.USBError as exc:
            raise InterfaceClaimError(f"Failed to detach kernel driver: {exc}") from exc
        return True

    def _reattach_kernel_driver(self, device) -> None:
        try:
            device.attach_kernel_driver(INTERFACE[0])
        except usb.core.USBError as exc:
            logger.warning("Failed to reattach kernel driver on %s: %s", self.device_id, exc)

    def _claim_interface(self, device):
        try:
            device.set_configuration()
            interface = device.get_active_configuration()[INTERFACE]
            usb.util.claim_interface(device, interface)
        except (usb.core.USBError, LookupError) as exc:
            raise InterfaceClaimError(f"Failed to claim interface on {self.device_id}: {exc}") from exc
        return interface

    def _release(self, device, interface) -> None:
        try:
            usb.util.release_interface(device, interface)
        except usb.core.USBError as exc:
            logger.warning("Failed to release interface on %s: %s", self.device_id, exc)

    def _write(self, endpoint, data: bytes) -> int:
        try:
            written = endpoint.write(data, timeout=self._timeout_ms)
        except usb.core.USBError as exc:
            raise TransmissionError(f"Write to printer {self.device_id} failed: {exc}") from exc
        if written != len(data):
            raise TransmissionError(f"Short write to printer {self.device_id}: {written} of {len(data)} bytes")
        return written


def transmit(
    data: bytes,
    vendor_id: int,
    product_id: int,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    backend: Optional[object] = None,
) -> int:
    return UsbTransport(vendor_id, product_id, timeout_ms, backend).transmit(data)
