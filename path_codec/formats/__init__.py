"""
Path file formats.

Each format converts a ``PathFileData`` document to file text and back.
Only LemLib v0.4 is implemented; the registry accepts more.
"""

from path_codec.formats.base import Format, PathFileData, PointSampler, format_number
from path_codec.formats.document import dump_path_file_data, load_path_file_data
from path_codec.formats.lemlib_v0_4 import LemLibFormatV0_4
from path_codec.formats.registry import (
    get_all_formats,
    get_format,
    import_path_file,
    recover_path_file_data,
    register_format,
)

__all__ = [
    "Format",
    "LemLibFormatV0_4",
    "PathFileData",
    "PointSampler",
    "dump_path_file_data",
    "format_number",
    "get_all_formats",
    "get_format",
    "import_path_file",
    "load_path_file_data",
    "recover_path_file_data",
    "register_format",
]
