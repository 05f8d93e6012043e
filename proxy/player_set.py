"""
Players-set fan-out.

Fetches the participants of several tournaments concurrently on a bounded
thread pool and folds them into one PlayerAggregate in request order.
"""
import logging
from concurrent.futures import ThreadPoolExecutor, wait, FIRST_EXCEPTION, ALL_COMPLETED
from typing import List, Optional, Sequence, Tuple

from shared.aggregation import Participant, PlayerAggregate, aggregate
from shared.errors import UpstreamFailure

logger = logging.getLogger(__name__)

ABORT = 'abort'
PARTIAL = 'partial'
FAILURE_POLICIES = (ABORT, PARTIAL)


def parse_tournament_ids(raw: Optional[str]) -> List[str]:
    """Split a comma-separated id list, dropping blank entries."""
    if not raw or not isinstance(raw, str):
        return []
    return [part.strip() for part in raw.split(',') if part.strip()]


class PlayerSetService:
    """
    Builds the cross-tournament player set.

    With the ``abort`` policy the first failed fetch fails the whole
    request. With ``partial`` failed tournaments are left out and
    reported alongside the aggregate.
    """

    def __init__(
        self,
        client,
        max_workers: int = 8,
        deadline: float = 30,
        failure_policy: str = ABORT
    ):
        if failure_policy not in FAILURE_POLICIES:
            raise ValueError(
                f"Unknown failure policy '{failure_policy}', expected one of {FAILURE_POLICIES}"
            )
        self.client = client
        self.max_workers = max(1, max_workers)
        self.deadline = deadline
        self.failure_policy = failure_policy

    def fetch_batches(
        self,
        tournament_ids: Sequence[str],
        api_key: str
    ) -> Tuple[List[List[Participant]], List[UpstreamFailure]]:
        """
        Fetch one participant batch per id.

        Returns:
            (batches, failures), both in request order. ``failures`` is
            always empty under the abort policy.
        """
        if not tournament_ids:
            return [], []

        workers = min(len(tournament_ids), self.max_workers)
        logger.debug(f"Fetching participants for {len(tournament_ids)} tournaments on {workers} workers")

        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix='players-set')
        try:
            futures = [
                executor.submit(self.client.get_participants, tid, api_key)
                for tid in tournament_ids
            ]
            return_when = FIRST_EXCEPTION if self.failure_policy == ABORT else ALL_COMPLETED
            done, pending = wait(futures, timeout=self.deadline, return_when=return_when)

            if self.failure_policy == ABORT:
                for future in futures:
                    if future in done and future.exception() is not None:
                        raise future.exception()

            batches = []
            failures = []
            for tid, future in zip(tournament_ids, futures):
                if future in pending:
                    failure = UpstreamFailure(tid, f"no response within {self.deadline}s")
                elif future.exception() is not None:
                    failure = future.exception()
                    if not isinstance(failure, UpstreamFailure):
                        raise failure
                else:
                    batches.append(future.result())
                    continue

                if self.failure_policy == ABORT:
                    raise failure
                logger.warning(f"Skipping tournament {tid}: {failure}")
                failures.append(failure)

            return batches, failures
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

    def build(
        self,
        tournament_ids: Sequence[str],
        api_key: str
    ) -> Tuple[PlayerAggregate, List[UpstreamFailure]]:
        batches, failures = self.fetch_batches(tournament_ids, api_key)
        return aggregate(batches), failures
