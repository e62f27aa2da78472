"""
Grouped map/reduce engine on top of Spark RDDs.

A job declares one or more input sources, each with its own map function,
a reducer factory and an output location. Execution follows the classic
MapReduce shape:

  Map:     every line of every source is tagged with its origin, the
           sources are unioned and each tagged record is dispatched to the
           map function of its origin -> (key, value) pairs
  Shuffle: groupByKey - a full barrier; a key's values are delivered only
           once every map task has finished
  Reduce:  one Reducer instance per reduce partition processes each of its
           keys in turn and is finalized once after its last key

With num_reducers=1 every key is funneled into a single serial Reducer
whose state persists across keys, which is what a global fold needs.
"""

import logging
from collections.abc import Callable, Iterable, Iterator
from functools import partial
from typing import Any, NamedTuple

from pyspark import SparkContext
from pyspark.rdd import RDD

from src.common.record_store import TextRecordStore
from src.motif_search.errors import ConfigurationError, StageExecutionError

logger = logging.getLogger(__name__)

MapFunction = Callable[[int, str], Iterable[tuple[Any, Any]]]


class InputSource(NamedTuple):
    """An input location read through its own map function."""

    origin: str
    location: str
    map_fn: MapFunction


class TaggedRecord(NamedTuple):
    """An input line tagged with the source it came from."""

    origin: str
    record_id: int
    payload: str


class Reducer:
    """
    Base reducer.

    reduce() is called once per key with a one-shot iterator over all values
    emitted for that key, in unspecified order. finalize() is called once
    after the last key of the partition. Both return the output records.
    """

    def reduce(self, key: Any, values: Iterator[Any]) -> Iterable[Any]:
        return ()

    def finalize(self) -> Iterable[Any]:
        return ()


class MapReduceJob(NamedTuple):
    name: str
    inputs: list[InputSource]
    reducer_factory: Callable[[], Reducer]
    output_location: str
    encode: Callable[[Any], str]
    num_reducers: int | None = None


# ---------------------------------------------------------------------------
# Task-side functions (shipped to Spark workers, so they must not capture
# the engine or its SparkContext)
# ---------------------------------------------------------------------------


def tag_record(origin: str, pair: tuple[str, int]) -> TaggedRecord:
    """Wrap a (line, index) pair from zipWithIndex() with its origin."""
    line, record_id = pair
    return TaggedRecord(origin, record_id, line)


def dispatch_map(mappers: dict[str, MapFunction], record: TaggedRecord) -> Iterable[tuple]:
    """Route a tagged record to the map function of its origin."""
    return mappers[record.origin](record.record_id, record.payload)


def run_reducer(reducer_factory: Callable[[], Reducer], partition: Iterable[tuple]) -> Iterator:
    """Drive one reducer instance over every group of a reduce partition."""
    reducer = reducer_factory()
    for key, values in partition:
        yield from reducer.reduce(key, iter(values))
    yield from reducer.finalize()


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


class MapReduceEngine:
    """Runs MapReduceJobs against a SparkContext and a text record store."""

    def __init__(self, sc: SparkContext, store: TextRecordStore | None = None) -> None:
        self.sc = sc
        self.store = store or TextRecordStore(sc)

    def _validate(self, job: MapReduceJob) -> None:
        if not job.inputs:
            raise ConfigurationError(f"Job {job.name} declares no inputs")

        origins = [source.origin for source in job.inputs]
        if len(set(origins)) != len(origins):
            raise ConfigurationError(f"Job {job.name} declares duplicate origins: {origins}")

        if job.num_reducers is not None and job.num_reducers < 1:
            raise ConfigurationError(
                f"Job {job.name} needs at least one reducer, got {job.num_reducers}"
            )

    def _read_tagged(self, source: InputSource) -> RDD:
        lines = self.store.read(source.location)
        return lines.zipWithIndex().map(partial(tag_record, source.origin))

    def build(self, job: MapReduceJob) -> RDD:
        """
        Build the lazy RDD of reduce output records for a job.

        Nothing runs until an action is applied, except the index pass of
        zipWithIndex() over multi-partition inputs.
        """
        self._validate(job)

        mappers = {source.origin: source.map_fn for source in job.inputs}
        tagged = [self._read_tagged(source) for source in job.inputs]
        records = tagged[0] if len(tagged) == 1 else self.sc.union(tagged)

        pairs = records.flatMap(partial(dispatch_map, mappers))
        grouped = pairs.groupByKey(numPartitions=job.num_reducers)

        return grouped.mapPartitions(partial(run_reducer, job.reducer_factory))

    def run(self, job: MapReduceJob) -> str:
        """
        Execute a job and write its encoded output to the record store.

        Returns:
            The output location

        Raises:
            ConfigurationError: If the job declaration is invalid
            StageExecutionError: If any map, reduce or write task fails
        """
        sources = ", ".join(f"{s.origin}={s.location}" for s in job.inputs)
        logger.info("Starting job %s (inputs: %s)", job.name, sources)

        self._validate(job)
        try:
            outputs = self.build(job)
            self.store.write(outputs.map(job.encode), job.output_location)
        except Exception as exc:
            logger.error("Job %s failed: %s", job.name, exc)
            raise StageExecutionError(job.name, f"Job {job.name} failed: {exc}") from exc

        logger.info("Finished job %s -> %s", job.name, job.output_location)
        return job.output_location
