from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path

from cleaner.config.config import Settings
from cleaner.domain.exceptions import FileProcessingError
from cleaner.domain.processing.file_processor import FileOutcome, FileProcessor
from cleaner.domain.reporting.collector import STATUS_FAILED, STATUS_OK, ReportCollector
from cleaner.domain.validation.classifier import RecordClassifier
from cleaner.domain.validation.object_resolver import ObjectNameResolver
from cleaner.domain.validation.registry import ValidationRegistry
from cleaner.domain.validation.rules import ValidationContext
from cleaner.infra.artifacts.file_report_io import writeFileReport
from cleaner.infra.artifacts.translation_writer import writeTranslationFile
from cleaner.infra.exclusions.harvester import build_exclusion_set
from cleaner.infra.logging.setup import logEvent
from cleaner.infra.metadata.content_cache import ContentCache
from cleaner.infra.metadata.flow_structure import FlowStructureReader
from cleaner.infra.metadata.layout import MetadataLayout
from cleaner.infra.metadata.reference_indexes import build_reference_indexes
from cleaner.infra.sources.translation_reader import TranslationLineSource, list_translation_files

METADATA_PREFIX = "metadata_"
DATA_PREFIX = "data_"


@dataclass(frozen=True)
class FileResult:
    file: str
    outcome: FileOutcome | None = None
    error: FileProcessingError | None = None


class CleanUseCase:
    """
    Назначение/ответственность:
        Очистка всех файлов перевода каталога source_dir.

    Взаимодействия:
        - Справочники, кэш и ExclusionSet строятся один раз и разделяются между файлами.
        - Файлы обрабатываются конкурентно (asyncio.gather + to_thread), внутри файла
          строки идут последовательно.

    Ограничения:
        - Падение одного файла не отменяет остальные: файл считается failed.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def build_processor(self, logger: logging.Logger, run_id: str) -> tuple[FileProcessor, ContentCache]:
        settings = self.settings
        layout = MetadataLayout(settings.org_data_dir)
        cache = ContentCache(layout, logger, run_id)
        references = build_reference_indexes(layout, logger, run_id)
        exclusions = build_exclusion_set(settings.error_logs_dir, settings.exclusion_list_path, logger, run_id)

        context = ValidationContext(
            store=layout,
            cache=cache,
            references=references,
            flow_reader=FlowStructureReader(),
            force_include_unverifiable=settings.force_include_types_with_missing_check,
            check_flow_structure=settings.check_flow_structure,
        )
        classifier = RecordClassifier(
            ValidationRegistry(context),
            ObjectNameResolver(layout, logger, run_id),
            is_type_enabled=settings.is_type_enabled,
            metadata_import_types=settings.metadata_import_types,
            force_exclude=settings.force_exclude,
            exclusions=exclusions,
        )
        processor = FileProcessor(
            classifier,
            logger,
            run_id,
            abort_on_untranslated=settings.abort_on_untranslated,
        )
        return processor, cache

    def clean_file(self, processor: FileProcessor, file: str) -> FileOutcome:
        """
        Назначение:
            Обрабатывает один файл и записывает его артефакты.

        Поведение:
            - Любая ошибка ввода/вывода оборачивается в FileProcessingError.
        """
        settings = self.settings
        try:
            source = TranslationLineSource(str(Path(settings.source_dir) / file))
            outcome = processor.process(file, source, settings.source_dir, settings.dest_dir)
            metadata_content = outcome.metadata_content()
            if metadata_content:
                writeTranslationFile(settings.dest_dir, f"{METADATA_PREFIX}{file}", metadata_content)
            data_content = outcome.data_content()
            if data_content:
                writeTranslationFile(settings.dest_dir, f"{DATA_PREFIX}{file}", data_content)
            writeTranslationFile(settings.removed_dir, file, outcome.bad_lines)
            writeFileReport(outcome.report, settings.translation_logs_dir)
        except (OSError, UnicodeDecodeError, ValueError) as exc:
            raise FileProcessingError(file=file, cause=exc) from exc
        return outcome

    async def clean_all(self, processor: FileProcessor, files: list[str]) -> list[FileResult]:
        async def clean_one(file: str) -> FileResult:
            try:
                outcome = await asyncio.to_thread(self.clean_file, processor, file)
            except FileProcessingError as exc:
                return FileResult(file=file, error=exc)
            except Exception as exc:
                return FileResult(file=file, error=FileProcessingError(file=file, cause=exc))
            return FileResult(file=file, outcome=outcome)

        return list(await asyncio.gather(*(clean_one(file) for file in files)))

    def run(self, logger: logging.Logger, report: ReportCollector, run_id: str) -> int:
        settings = self.settings
        if not Path(settings.org_data_dir).is_dir():
            logEvent(logger, logging.ERROR, run_id, "config", f"Metadata directory not found: {settings.org_data_dir}")
            return 2
        try:
            files = list_translation_files(settings.source_dir, settings.source_file_ext)
        except FileNotFoundError as exc:
            logEvent(logger, logging.ERROR, run_id, "config", f"Source directory not available: {exc}")
            return 2

        logEvent(
            logger,
            logging.INFO,
            run_id,
            "clean",
            f"Cleaning {len(files)} {settings.source_file_ext} files from {settings.source_dir}",
        )
        processor, cache = self.build_processor(logger, run_id)
        results = asyncio.run(self.clean_all(processor, files))

        failed = 0
        for result in results:
            if result.error is not None:
                failed += 1
                logEvent(logger, logging.ERROR, run_id, "clean", str(result.error))
                report.add_file(file=result.file, status=STATUS_FAILED, message=str(result.error))
                continue
            outcome = result.outcome
            file_report = outcome.report
            report.add_file(
                file=result.file,
                status=STATUS_OK,
                total=file_report.total,
                valid=file_report.valid,
                invalid=file_report.invalid,
                rejections=outcome.rejections,
                meta={
                    "language": file_report.language,
                    "language_code": file_report.language_code,
                    "state": outcome.state.value,
                },
            )

        report.add_op("clean_files", ok=len(results) - failed, failed=failed, count=len(results))
        report.set_context("cache", cache.stats())
        report.set_context(
            "paths",
            {
                "source_dir": settings.source_dir,
                "dest_dir": settings.dest_dir,
                "removed_dir": settings.removed_dir,
                "translation_logs_dir": settings.translation_logs_dir,
            },
        )
        return 1 if failed else 0
