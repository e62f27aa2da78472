"""
Line-oriented record store backed by Spark text files.

Locations are whatever Spark's textFile()/saveAsTextFile() accept: local
paths, file:// URIs or any Hadoop-compatible filesystem. A location written
by saveAsTextFile() is a directory of part files; reading it back yields the
lines of all parts.
"""

from pathlib import Path
from urllib.parse import urlparse

from pyspark import SparkContext
from pyspark.rdd import RDD


def is_remote(location: str) -> bool:
    """Return True when the location carries a URI scheme other than file://."""
    scheme = urlparse(location).scheme
    # Single-letter schemes are Windows drive letters
    return len(scheme) > 1 and scheme != "file"


def local_path(location: str) -> Path:
    """Resolve a non-remote location to a local Path."""
    parsed = urlparse(location)
    if parsed.scheme == "file":
        return Path(parsed.path)
    return Path(location)


class TextRecordStore:
    """Reads and writes text records through a SparkContext."""

    def __init__(self, sc: SparkContext) -> None:
        self.sc = sc

    def read(self, location: str) -> RDD:
        return self.sc.textFile(location)

    def write(self, rdd: RDD, location: str) -> None:
        """Write one line per element; fails if the location already exists."""
        rdd.saveAsTextFile(location)

    def collect(self, location: str) -> list[str]:
        """Bring every line stored at location back to the driver."""
        return self.read(location).collect()
