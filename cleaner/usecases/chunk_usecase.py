from __future__ import annotations

import logging
from pathlib import Path

from cleaner.domain.chunking.chunker import ChunkOptions, chunk_file_name, chunk_lines
from cleaner.domain.reporting.collector import STATUS_FAILED, STATUS_OK, ReportCollector
from cleaner.infra.artifacts.translation_writer import writeTranslationFile
from cleaner.infra.logging.setup import logEvent
from cleaner.infra.sources.translation_reader import TranslationLineSource, list_translation_files


class ChunkUseCase:
    """
    Назначение/ответственность:
        Делит очищенные файлы на чанки по типу метаданных (для поиска ошибок импорта).
    """

    def __init__(self, input_dir: str, output_dir: str, extension: str, options: ChunkOptions) -> None:
        self.input_dir = input_dir
        self.output_dir = output_dir
        self.extension = extension
        self.options = options

    def chunk_file(self, file: str) -> int:
        chunked = chunk_lines(TranslationLineSource(str(Path(self.input_dir) / file)), self.options)
        for key in chunked.chunks:
            writeTranslationFile(self.output_dir, chunk_file_name(file, key), chunked.content(key))
        return len(chunked.chunks)

    def run(self, logger: logging.Logger, report: ReportCollector, run_id: str) -> int:
        try:
            files = list_translation_files(self.input_dir, self.extension)
        except FileNotFoundError as exc:
            logEvent(logger, logging.ERROR, run_id, "chunk", f"Chunk input not available: {exc}")
            return 2

        failed = 0
        chunks_total = 0
        for file in files:
            try:
                count = self.chunk_file(file)
            except (OSError, UnicodeDecodeError) as exc:
                failed += 1
                logEvent(logger, logging.ERROR, run_id, "chunk", f"Failed to chunk {file}: {exc}")
                report.add_file(file=file, status=STATUS_FAILED, message=str(exc))
                continue
            chunks_total += count
            logEvent(logger, logging.INFO, run_id, "chunk", f"{file}: {count} chunks written")
            report.add_file(file=file, status=STATUS_OK, meta={"chunks": count})

        report.add_op("chunks", ok=chunks_total, count=chunks_total)
        return 1 if failed else 0
