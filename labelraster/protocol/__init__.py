from .commands import line_feed_cmd, raster_header_cmd, reset_cmd
from .encoding import pack_line, pack_raster, threshold_row
from .job import HEADER_SIZE, TRAILER_FEEDS, build_job, parse_raster_job
from .types import DEFAULT_GEOMETRY, PrintGeometry, RasterJob

__all__ = [
    "build_job",
    "DEFAULT_GEOMETRY",
    "HEADER_SIZE",
    "line_feed_cmd",
    "pack_line",
    "pack_raster",
    "parse_raster_job",
    "PrintGeometry",
    "raster_header_cmd",
    "RasterJob",
    "reset_cmd",
    "threshold_row",
    "TRAILER_FEEDS",
]
