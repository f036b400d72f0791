from __future__ import annotations

import dataclasses
import logging
import time
from pathlib import Path

import typer

from cleaner.common.run_id import generate_run_id
from cleaner.common.time import getDurationMs, getFileStamp
from cleaner.config.config import Settings, loadSettings
from cleaner.domain.chunking.chunker import ChunkOptions
from cleaner.infra.archive.zipper import zipDirectory
from cleaner.infra.artifacts.report_writer import createEmptyReport, finalizeReport, writeReportJson
from cleaner.infra.logging.setup import closeCommandLogger, createCommandLogger, logEvent, teeStdStreams
from cleaner.usecases.chunk_usecase import ChunkUseCase
from cleaner.usecases.clean_usecase import CleanUseCase
from cleaner.usecases.exclusions_usecase import ExclusionsUseCase
from cleaner.usecases.report_usecase import ReportUseCase

app = typer.Typer(no_args_is_help=True, add_completion=False)


def ensureDir(path: str) -> None:
    """
    Назначение:
        Создаёт каталог, если он отсутствует.
    """
    Path(path).mkdir(parents=True, exist_ok=True)


def requireDir(path: str, optionName: str) -> None:
    """
    Назначение:
        Проверка наличия входного каталога.

    Поведение:
        - Каталога нет -> сообщение в stderr и exit code 2.
    """
    p = Path(path)
    if not p.exists() or not p.is_dir():
        typer.echo(f"ERROR: {optionName} directory not found: {path}", err=True)
        raise typer.Exit(code=2)


def printRunHeader(runId: str, command: str, settings: Settings, sources: list[str]) -> None:
    typer.echo(
        f"run_id={runId} command={command} "
        f"org_data_dir={settings.org_data_dir} source_dir={settings.source_dir} dest_dir={settings.dest_dir} "
        f"sources={sources} log_level={settings.log_level}"
    )


def checkRequiredDirs(logger, runId: str, requiredDirs: list[tuple[str, str]]) -> bool:
    for path, optionName in requiredDirs:
        try:
            requireDir(path, optionName)
        except typer.Exit:
            logEvent(logger, logging.ERROR, runId, "config", f"{optionName} directory is missing: {path}")
            return False
    return True


def runWithReport(
    ctx: typer.Context,
    commandName: str,
    requiredDirs: list[tuple[str, str]],
    runner,
) -> None:
    """
    Назначение:
        Общая обвязка команд: лог-файл команды, дублирование stdout/stderr в лог,
        проверка входных каталогов и run report, который пишется всегда.

    Входные данные:
        requiredDirs: list[tuple[str, str]]
            (путь, имя опции) каталогов, без которых команда не запускается.
        runner: Callable[[logger, report], int]
            Тело команды; возвращает exit code.

    Поведение:
        - Нет обязательного каталога -> runner не вызывается, exit code 2.
        - Исключение runner пробрасывается, но report_<command>_<runId>.json всё равно пишется.
    """
    runId = ctx.obj["runId"]
    settings: Settings = ctx.obj["settings"]
    sources = ctx.obj["sources"]

    startMonotonic = time.monotonic()
    logger, logFilePath = createCommandLogger(commandName, settings.log_dir, runId, settings.log_level)
    report = createEmptyReport(runId=runId, command=commandName, configSources=sources)
    exitCode: int | None = None

    try:
        with teeStdStreams(logger, runId):
            try:
                logEvent(logger, logging.INFO, runId, "core", "Command started")
                printRunHeader(runId, commandName, settings, sources)
                exitCode = runner(logger, report) if checkRequiredDirs(logger, runId, requiredDirs) else 2
                if exitCode == 2:
                    report.status = "FAILED"
                    typer.echo("ERROR: command failed on input/configuration (see logs/report)", err=True)
                elif exitCode == 1:
                    typer.echo("WARNING: some files failed (see logs/report)", err=True)
            finally:
                finalizeReport(
                    report=report,
                    durationMs=getDurationMs(startMonotonic, time.monotonic()),
                    logFile=logFilePath,
                    reportDir=settings.report_dir,
                )
                reportPath = writeReportJson(report, settings.report_dir, f"report_{commandName}_{runId}")
                logEvent(logger, logging.INFO, runId, "report", f"Report written: {reportPath}")
    finally:
        closeCommandLogger(logger)

    if exitCode is not None:
        raise typer.Exit(code=exitCode)


def withOverrides(settings: Settings, **overrides) -> Settings:
    """
    Назначение:
        Накладывает параметры конкретной команды (None = не задано).
    """
    values = {k: v for k, v in overrides.items() if v is not None}
    return dataclasses.replace(settings, **values) if values else settings


def runCleanCommand(ctx: typer.Context, settings: Settings, writeSummary: bool) -> None:
    runId = ctx.obj["runId"]

    def execute(logger, report) -> int:
        exitCode = CleanUseCase(settings).run(logger, report, runId)
        if exitCode == 2:
            return exitCode

        if writeSummary:
            summaryCode = ReportUseCase(settings.translation_logs_dir, settings.summary_report_path).run(
                logger, report, runId
            )
            exitCode = max(exitCode, summaryCode)

        if settings.auto_zip:
            try:
                archivePath = zipDirectory(settings.dest_dir, settings.zip_dir, getFileStamp())
            except OSError as exc:
                logEvent(logger, logging.ERROR, runId, "zip", f"Failed to zip {settings.dest_dir}: {exc}")
                return max(exitCode, 1)
            logEvent(logger, logging.INFO, runId, "zip", f"Archive written: {archivePath}")
            report.set_context("archive", {"path": archivePath})

        typer.echo("All translation files processed. Import the metadata_ files from the destination directory.")
        return exitCode

    runWithReport(
        ctx=ctx,
        commandName="clean",
        requiredDirs=[(settings.source_dir, "source"), (settings.org_data_dir, "org-data")],
        runner=execute,
    )


@app.callback()
def main(
    ctx: typer.Context,
    config: str | None = typer.Option(None, "--config", help="Path to config.yml"),
    runId: str | None = typer.Option(None, "--run-id", help="Run identifier (UUID). If omitted, generated."),
    logLevel: str | None = typer.Option(None, "--log-level", help="Log level: ERROR|WARN|INFO|DEBUG"),
    logDir: str | None = typer.Option(None, "--log-dir", help="Directory for logs."),
    reportDir: str | None = typer.Option(None, "--report-dir", help="Directory for run reports."),
    orgDataDir: str | None = typer.Option(None, "--org-data-dir", help="Metadata retrieve tree (orgData)."),
    sourceDir: str | None = typer.Option(None, "--source-dir", help="Directory with .stf translation files."),
    destDir: str | None = typer.Option(None, "--dest-dir", help="Directory for cleaned translation files."),
):
    """
    Назначение:
        Глобальная инициализация CLI:
        - генерирует/принимает run_id
        - загружает настройки (CLI > ENV > config > defaults)
        - создаёт каталоги log/report
        - сохраняет всё в ctx.obj для подкоманд
    """
    if not runId:
        runId = generate_run_id()

    cliOverrides = {
        "log_level": logLevel,
        "log_dir": logDir,
        "report_dir": reportDir,
        "org_data_dir": orgDataDir,
        "source_dir": sourceDir,
        "dest_dir": destDir,
    }
    try:
        loaded = loadSettings(config_path=config, cli_overrides=cliOverrides)
    except ValueError as exc:
        typer.echo(f"ERROR: invalid configuration: {exc}", err=True)
        raise typer.Exit(code=2)

    ensureDir(loaded.settings.log_dir)
    ensureDir(loaded.settings.report_dir)

    ctx.obj = {
        "runId": runId,
        "settings": loaded.settings,
        "sources": loaded.sources_used,
        "configPath": config,
    }


@app.command("clean")
def clean(
    ctx: typer.Context,
    abortOnUntranslated: bool | None = typer.Option(
        None,
        "--abort-on-untranslated/--no-abort-on-untranslated",
        help="Stop reading a file at the OUTDATED AND UNTRANSLATED section",
        show_default=True,
    ),
    checkFlowStructure: bool | None = typer.Option(
        None,
        "--check-flow-structure/--no-check-flow-structure",
        help="Verify flow screens and screen fields, not only the flow file",
        show_default=True,
    ),
    forceIncludeUnverifiable: bool | None = typer.Option(
        None,
        "--force-include-unverifiable/--no-force-include-unverifiable",
        help="Keep entries of types that cannot be checked locally",
        show_default=True,
    ),
    autoZip: bool | None = typer.Option(None, "--auto-zip/--no-auto-zip", help="Zip the destination directory"),
    summary: bool = typer.Option(True, "--summary/--no-summary", help="Write the per-language CSV summary"),
):
    settings = withOverrides(
        ctx.obj["settings"],
        abort_on_untranslated=abortOnUntranslated,
        check_flow_structure=checkFlowStructure,
        force_include_types_with_missing_check=forceIncludeUnverifiable,
        auto_zip=autoZip,
    )
    runCleanCommand(ctx, settings, writeSummary=summary)


@app.command("report")
def reportCommand(
    ctx: typer.Context,
    translationLogsDir: str | None = typer.Option(None, "--translation-logs-dir", help="Directory with per-file reports"),
    summaryPath: str | None = typer.Option(None, "--summary-path", help="Output CSV path"),
):
    settings = withOverrides(
        ctx.obj["settings"],
        translation_logs_dir=translationLogsDir,
        summary_report_path=summaryPath,
    )
    runId = ctx.obj["runId"]
    useCase = ReportUseCase(settings.translation_logs_dir, settings.summary_report_path)
    runWithReport(
        ctx=ctx,
        commandName="report",
        requiredDirs=[(settings.translation_logs_dir, "translation-logs")],
        runner=lambda logger, report: useCase.run(logger, report, runId),
    )


@app.command("chunk")
def chunk(
    ctx: typer.Context,
    inputDir: str | None = typer.Option(None, "--input-dir", help="Directory with cleaned files"),
    outputDir: str | None = typer.Option(None, "--output-dir", help="Directory for chunk files"),
    bySubType: bool | None = typer.Option(
        None,
        "--by-sub-type/--no-by-sub-type",
        help="One chunk per type and object",
        show_default=True,
    ),
    linesPerChunk: int | None = typer.Option(None, "--lines-per-chunk", help="Max payload lines per chunk (0 = no limit)"),
):
    if linesPerChunk is not None and linesPerChunk < 0:
        typer.echo("ERROR: --lines-per-chunk must be >= 0", err=True)
        raise typer.Exit(code=2)
    settings = withOverrides(
        ctx.obj["settings"],
        chunks_input_dir=inputDir,
        chunks_output_dir=outputDir,
        break_chunks_on_sub_types=bySubType,
        lines_per_chunk=linesPerChunk,
    )
    runId = ctx.obj["runId"]
    useCase = ChunkUseCase(
        settings.chunks_input_dir,
        settings.chunks_output_dir,
        settings.source_file_ext,
        ChunkOptions(
            break_on_sub_types=settings.break_chunks_on_sub_types,
            lines_per_chunk=settings.lines_per_chunk,
            abort_on_untranslated=settings.abort_on_untranslated,
        ),
    )
    runWithReport(
        ctx=ctx,
        commandName="chunk",
        requiredDirs=[(settings.chunks_input_dir, "chunks-input")],
        runner=lambda logger, report: useCase.run(logger, report, runId),
    )


@app.command("exclusions")
def exclusions(
    ctx: typer.Context,
    errorLogsDir: str | None = typer.Option(None, "--error-logs-dir", help="Directory with import error logs"),
    output: str | None = typer.Option(None, "--output", help="Path of the exclusion list JSON"),
):
    settings = withOverrides(
        ctx.obj["settings"],
        error_logs_dir=errorLogsDir,
        exclusion_list_path=output,
    )
    runId = ctx.obj["runId"]
    useCase = ExclusionsUseCase(settings.error_logs_dir, settings.exclusion_list_path)
    runWithReport(
        ctx=ctx,
        commandName="exclusions",
        requiredDirs=[(settings.error_logs_dir, "error-logs")],
        runner=lambda logger, report: useCase.run(logger, report, runId),
    )


if __name__ == "__main__":
    app()
