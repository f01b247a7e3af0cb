from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

from ..config import Settings, load_settings, parse_int
from ..errors import LabelRasterError
from ..protocol import DEFAULT_GEOMETRY, parse_raster_job
from ..rendering import load_image, rasterize
from ..transport import UsbTransport


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="labelraster: print images on a USB ESC/POS label printer."
    )
    parser.add_argument("path", nargs="?", help="Image to print (.png/.jpg/.gif/.bmp)")
    parser.add_argument("--output", metavar="FILE", help="Write the raster command stream to FILE instead of the printer")
    parser.add_argument("--inspect", action="store_true", help="Show the raster header of the generated command stream")
    parser.add_argument("--host", help="Address the HTTP agent listens on")
    parser.add_argument("--port", type=int, help="Port the HTTP agent listens on (default: 9000)")
    parser.add_argument("--vendor-id", help="USB vendor id, decimal or 0x hex")
    parser.add_argument("--product-id", help="USB product id, decimal or 0x hex")
    parser.add_argument("--timeout-ms", type=int, help="USB write timeout in milliseconds")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.epilog = "Without a path the HTTP print agent is started."
    return parser.parse_args(argv)


def resolve_settings(args: argparse.Namespace) -> Settings:
    settings = load_settings()
    if args.host:
        settings.host = args.host
    if args.port is not None:
        settings.port = args.port
    if args.vendor_id:
        settings.vendor_id = parse_int(args.vendor_id, "--vendor-id")
    if args.product_id:
        settings.product_id = parse_int(args.product_id, "--product-id")
    if args.timeout_ms is not None:
        settings.write_timeout_ms = args.timeout_ms
    return settings


def describe_job(data: bytes) -> str:
    job = parse_raster_job(data)
    return (
        f"width: {job.width_bytes} bytes ({job.width_bytes * 8} dots), "
        f"height: {job.height} dots, payload: {len(job.payload)} bytes, total: {len(data)} bytes"
    )


def print_file(args: argparse.Namespace, settings: Settings) -> int:
    data = rasterize(load_image(args.path), DEFAULT_GEOMETRY)
    if args.inspect:
        print(describe_job(data))
    if args.output:
        with open(args.output, "wb") as handle:
            handle.write(data)
        return 0
    transport = UsbTransport(settings.vendor_id, settings.product_id, settings.write_timeout_ms)
    transport.transmit(data)
    return 0


def serve(settings: Settings) -> int:
    from .server import serve as run_server

    run_server(settings)
    return 0


def main(argv: Optional[list] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        settings = resolve_settings(args)
        if args.path:
            return print_file(args, settings)
        return serve(settings)
    except (LabelRasterError, ValueError, OSError) as exc:
        print(str(exc), file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
