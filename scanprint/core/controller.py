# scanprint/core/controller.py
from __future__ import annotations
import asyncio
from typing import Any, Dict, List, Optional, Set

from loguru import logger

from scanprint.core import config
from scanprint.core.lookup_client import LookupClient, LookupFailed
from scanprint.core.models import ProductRecord, SubmitResult, STATUS_PRINTING
from scanprint.core.print_client import PrintClient
from scanprint.core.scan_input import extract_code, is_blank, normalize_input
from scanprint.core.table_store import KeyValueStorage, ProductTable


class ScanController:
    """
    Owns the scan table and runs one scan at a time:
      input -> lookup -> append -> print -> patch status
    HTTP clients are blocking (requests); they run in the default executor so
    the event loop keeps serving the UI while a call is pending.
    A scan arriving while another is in flight, or a reprint of a row that is
    still printing, is rejected with outcome "busy".
    """
    def __init__(
        self,
        table: ProductTable,
        lookup: LookupClient,
        printer: Optional[PrintClient] = None,
    ) -> None:
        self.table = table
        self.lookup = lookup
        self.printer = printer
        self._busy: bool = False
        self._printing: Set[int] = set()  # row indexes with a print in flight
        self._tasks: Set[asyncio.Task] = set()

    @classmethod
    def from_config(cls) -> "ScanController":
        table = ProductTable(KeyValueStorage(config.STORAGE_FILE), key=config.STORAGE_KEY)
        printer = PrintClient(config.PRINT_URL) if config.PRINT_ENABLED else None
        return cls(table, LookupClient(config.LOOKUP_BASE_URL), printer)

    # ---------- state ----------
    @property
    def print_enabled(self) -> bool:
        return self.printer is not None

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def records(self) -> List[ProductRecord]:
        return self.table.records

    def status(self) -> Dict[str, Any]:
        return {
            "records": len(self.table),
            "print_enabled": self.print_enabled,
            "busy": self._busy,
            "printing": sorted(self._printing),
        }

    # ---------- transitions ----------
    async def submit(self, raw: Optional[str], wait_print: bool = True) -> SubmitResult:
        """
        wait_print=False returns right after the row is appended; the print then
        runs as a background task and the scan stays busy until it finishes.
        """
        if is_blank(raw):
            return SubmitResult(outcome="ignored")
        qrcode = normalize_input(raw)
        code = extract_code(qrcode)
        if not code:
            return SubmitResult(outcome="ignored")

        if self._busy:
            logger.warning(f"Scan rejected, previous scan still running: {qrcode!r}")
            return SubmitResult(outcome="busy", error="Previous scan is still in progress")

        self._busy = True
        release = True
        try:
            loop = asyncio.get_running_loop()
            try:
                record = await loop.run_in_executor(None, self.lookup.fetch, code, qrcode)
            except LookupFailed as e:
                return SubmitResult(outcome="lookup_failed", error=e.reason)

            if self.print_enabled:
                record.status = STATUS_PRINTING
            index = self.table.append(record)
            logger.info(f"Row {index} added uniq={record.uniq}")

            if self.print_enabled:
                task = self._start_print(index, record)
                if not wait_print:
                    release = False
                    task.add_done_callback(self._release)
                    return SubmitResult(outcome="ok", record=record, index=index)
                await task
            return SubmitResult(outcome="ok", record=record, index=index)
        finally:
            if release:
                self._busy = False

    async def reprint(self, index: int) -> SubmitResult:
        if not self.print_enabled:
            return SubmitResult(outcome="print_disabled", error="Printing is disabled")
        record = self.table.get(index)
        if record is None:
            return SubmitResult(outcome="not_found", error=f"No row {index}")
        if index in self._printing:
            logger.warning(f"Reprint rejected, row {index} is already printing")
            return SubmitResult(outcome="busy", index=index, error=f"Row {index + 1} is already printing")

        await self._start_print(index, record)
        return SubmitResult(outcome="ok", record=record, index=index)

    def clear(self) -> None:
        self.table.clear()
        logger.info("Table cleared")

    async def stop(self) -> None:
        # let pending prints patch their rows before shutdown
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    # ---------- internals ----------
    def _release(self, _task: asyncio.Task) -> None:
        self._busy = False

    def _start_print(self, index: int, record: ProductRecord) -> asyncio.Task:
        self._printing.add(index)
        self.table.patch_status(index, STATUS_PRINTING)
        task = asyncio.create_task(self._print_row(index, record), name=f"print_row_{index}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _print_row(self, index: int, record: ProductRecord) -> None:
        try:
            loop = asyncio.get_running_loop()
            status = await loop.run_in_executor(None, self.printer.print_record, record)
            # table may have been cleared while the print was pending
            if self.table.get(index) is record:
                self.table.patch_status(index, status)
            else:
                record.status = status
        finally:
            self._printing.discard(index)
