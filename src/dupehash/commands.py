"""
Unified command orchestrator for a duplicate scan.
This is the single place where the pipeline stages are wired together;
the CLI and library callers both go through it.
"""
import logging
import time
from typing import Optional

from dupehash.core.dispatcher import ParallelDispatcher
from dupehash.core.filter import EligibilityFilterImpl
from dupehash.core.grouper import DigestGrouperImpl, verify_groups
from dupehash.core.hasher import HasherImpl
from dupehash.core.interfaces import ProgressCallback
from dupehash.core.models import ScanParams, ScanResult, ScanStats, Stage
from dupehash.core.scanner import FileScannerImpl

logger = logging.getLogger(__name__)


class DuplicateScanCommand:
    """
    Orchestrates the whole workflow:
    1. Enumerate regular files under the root (scanner)
    2. Keep eligible entries (filter)
    3. Fingerprint them in parallel (dispatcher + hasher)
    4. Group by digest, optionally confirming groups byte by byte

    Usage:
        params = ScanParams.from_human_readable("/data", min_size_str="1K")
        result = DuplicateScanCommand().execute(params, progress_callback=printer)
        for group in result.groups: ...
        for failed in result.failures: ...
    """

    def __init__(self, grouper: Optional[DigestGrouperImpl] = None):
        self._grouper = grouper or DigestGrouperImpl()

    def execute(
            self,
            params: ScanParams,
            progress_callback: Optional[ProgressCallback] = None
    ) -> ScanResult:
        """
        Run a scan with the given parameters.

        Args:
            params: Validated scan parameters
            progress_callback: (stage: str, current: int, total: Optional[int]) -> None

        Returns:
            ScanResult with duplicate groups, failures and statistics

        Raises:
            RuntimeError: If the root directory cannot be scanned
        """
        stats = ScanStats()
        total_start = time.time()

        start = time.time()
        scanner = FileScannerImpl(root_dir=params.root_dir, excluded_dirs=params.excluded_dirs)
        entries = scanner.scan(progress_callback=progress_callback)
        stats.update_stage(Stage.SCAN.value, len(entries), time.time() - start)

        start = time.time()
        eligible = EligibilityFilterImpl(params.criteria).filter(entries)
        stats.update_stage(Stage.FILTER.value, len(entries), time.time() - start)
        logger.info(f"{len(eligible)} of {len(entries)} files eligible for comparison")

        start = time.time()
        hasher = HasherImpl(params.algorithm, seed=params.xxhash_seed)
        dispatcher = ParallelDispatcher(workers=params.workers)
        records = dispatcher.process_all(eligible, hasher.compute_digest, progress_callback=progress_callback)
        stats.update_stage(Stage.HASH.value, len(records), time.time() - start)

        start = time.time()
        groups, unique, failures = self._grouper.partition(records)
        stats.update_stage(Stage.GROUP.value, len(records), time.time() - start)

        if not params.algorithm.is_cryptographic and not params.verify and groups:
            logger.info(f"{params.algorithm.display_name} matches are not byte-verified; "
                        f"enable verify to confirm them")

        if params.verify and groups:
            start = time.time()
            checked = sum(len(g.files) for g in groups)
            groups, split_off, unreadable = verify_groups(groups)
            unique.extend(split_off)
            failures.extend(unreadable)
            stats.update_stage(Stage.VERIFY.value, checked, time.time() - start)

        stats.total_time = time.time() - total_start

        return ScanResult(
            algorithm=params.algorithm,
            groups=groups,
            failures=sorted(failures, key=lambda r: r.path),
            unique_count=len(unique),
            scanned_count=len(entries),
            eligible_count=len(eligible),
            stats=stats,
        )
