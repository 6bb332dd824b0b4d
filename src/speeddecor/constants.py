from enum import Enum


class Unit(Enum):
    NONE = 0
    KIB = 1
    KB = 2


PER_SECOND = "/s"
DEFAULT_FORMAT = "%.0f"

ONE_KIBIBYTE = 1024
ONE_MEBIBYTE = 1024 * ONE_KIBIBYTE
ONE_GIBIBYTE = 1024 * ONE_MEBIBYTE
ONE_TEBIBYTE = 1024 * ONE_GIBIBYTE

ONE_KILOBYTE = 1000
ONE_MEGABYTE = 1000 * ONE_KILOBYTE
ONE_GIGABYTE = 1000 * ONE_MEGABYTE
ONE_TERABYTE = 1000 * ONE_GIGABYTE

CHUNK_SIZE = 64 * ONE_KIBIBYTE
